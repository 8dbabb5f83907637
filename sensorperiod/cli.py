"""Command-line interface for sensorperiod."""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click

from .codec import to_db_period, to_iso8601
from .config import load_config
from .errors import FormatError
from .fields import build_mappings
from .period import Period


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def main(verbose: bool) -> None:
    """sensorperiod: Convert periods between ISO-8601 and database range literals."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


@main.command("to-iso")
@click.argument("period")
def to_iso(period: str) -> None:
    """Convert a database range literal to an ISO-8601 interval."""
    _echo_converted(to_iso8601, period)


@main.command("to-db")
@click.argument("period")
def to_db(period: str) -> None:
    """Convert an ISO-8601 interval to a database range literal."""
    _echo_converted(to_db_period, period)


@main.command()
@click.argument("period")
def convert(period: str) -> None:
    """
    Convert a period to the other encoding.

    Input starting with '[' is read as a database range literal, anything
    else as an ISO-8601 interval.
    """
    if period.startswith("["):
        _echo_converted(to_iso8601, period)
    else:
        _echo_converted(to_db_period, period)


@main.command()
@click.argument("period")
def inspect(period: str) -> None:
    """Show the instants of a period in both encodings."""
    try:
        if period.startswith("["):
            parsed = Period.from_db_period(period)
        else:
            parsed = Period.from_iso8601(period)
    except FormatError as e:
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"  Start: {parsed.start.isoformat()}")
    click.echo(f"  End: {parsed.end.isoformat()}")
    click.echo(f"  Duration: {parsed.duration}")
    click.echo(f"  ISO-8601: {parsed.to_iso8601()}")
    click.echo(f"  Database: {parsed.to_db_period()}")


@main.command()
@click.option("--create", is_flag=True, help="Create default configuration template")
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    default="config.json",
    help="Output path",
)
def config(create: bool, output: Path) -> None:
    """
    Configuration management commands.

    Use --create to generate a default configuration template.
    """
    if create:
        from .config import create_default_config

        default_config = create_default_config()

        with open(output, "w") as f:
            json.dump(default_config, f, indent=2)

        click.echo(f"✅ Created default configuration: {output}")
        click.echo(f"📝 Edit {output} to match the column aliases of your store")
    else:
        click.echo("Use --create to generate default configuration")


@main.command()
@click.argument(
    "config_file", required=False, type=click.Path(exists=True, path_type=Path)
)
def validate(config_file: Optional[Path]) -> None:
    """Validate a configuration file and show its period columns."""
    click.echo("🔍 Validating configuration...")

    config_path = config_file or _discover_config_file()
    if not config_path:
        click.echo("❌ No configuration file found")
        click.echo("💡 Run 'sensorperiod config --create' to generate one")
        return

    try:
        config = load_config(config_path)
        mappings = build_mappings(config)
    except Exception as e:
        click.echo(f"❌ Configuration validation failed: {e}", err=True)
        sys.exit(1)

    click.echo(f"✅ Configuration is valid: {config_path}")
    click.echo(f"  Schema: {config.schema}")
    for entity_type, mapping in mappings.items():
        periods = ", ".join(mapping.period_fields) or "none"
        columns = len(mapping.bindings)
        click.echo(f"  {entity_type}: {columns} columns, periods: {periods}")


def _echo_converted(converter, period: str) -> None:
    try:
        click.echo(converter(period))
    except FormatError as e:
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)


def _discover_config_file() -> Optional[Path]:
    """Auto-discover configuration file in the working directory."""
    for name in ["config.json", "sensorperiod.json"]:
        path = Path(name)
        if path.exists():
            return path

    return None


if __name__ == "__main__":
    main()
