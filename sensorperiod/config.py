"""Configuration management for sensorperiod."""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Any


@dataclass
class SensorPeriodConfig:
    """Store schema and per-entity column alias mappings."""

    database: Dict[str, Any]
    mappings: Dict[str, Dict[str, str]]

    @property
    def schema(self) -> str:
        """Get database schema name."""
        schema = self.database["schema"]
        assert isinstance(schema, str)
        return schema

    def aliases_for(self, entity_type: str) -> Dict[str, str]:
        """Get field -> column alias mapping for an entity type."""
        if entity_type not in self.mappings:
            raise ValueError(f"No mappings configured for entity type: {entity_type}")
        return self.mappings[entity_type]


def load_config(config_path: Path) -> SensorPeriodConfig:
    """Load and validate configuration from JSON file."""
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "r") as f:
        data = json.load(f)

    return validate_config(data)


def validate_config(data: Dict[str, Any]) -> SensorPeriodConfig:
    """Validate configuration data and return SensorPeriodConfig instance."""
    if not isinstance(data, dict):
        raise ValueError("Configuration must be a JSON object")

    required_sections = ["database", "mappings"]
    for section in required_sections:
        if section not in data:
            raise ValueError(f"Missing required configuration section: {section}")

    _validate_database_section(data["database"])
    _validate_mappings_section(data["mappings"])

    return SensorPeriodConfig(database=data["database"], mappings=data["mappings"])


def _validate_database_section(database: Dict[str, Any]) -> None:
    """Validate database configuration section and set defaults."""
    if not isinstance(database, dict):
        raise ValueError("database section must be an object")
    if "schema" not in database:
        database["schema"] = "v1"
    if not isinstance(database["schema"], str) or not database["schema"]:
        raise ValueError("database.schema must be a non-empty string")


def _validate_mappings_section(mappings: Dict[str, Any]) -> None:
    """Validate that every entity maps field names to unique column aliases."""
    if not isinstance(mappings, dict) or not mappings:
        raise ValueError("mappings section must be a non-empty object")

    for entity_type, aliases in mappings.items():
        if not isinstance(aliases, dict) or not aliases:
            raise ValueError(f"mappings.{entity_type} must be a non-empty object")

        for field, alias in aliases.items():
            if not isinstance(alias, str) or not alias:
                raise ValueError(
                    f"mappings.{entity_type}.{field} must be a non-empty string"
                )

        if len(set(aliases.values())) != len(aliases):
            raise ValueError(f"mappings.{entity_type} contains duplicate aliases")


def create_default_config() -> Dict[str, Any]:
    """Create a default configuration template."""
    return {
        "database": {"schema": "v1"},
        "mappings": {
            "Datastream": {
                "id": "datastream_id",
                "name": "datastream_name",
                "description": "datastream_description",
                "observationType": "datastream_observationtype",
                "phenomenonTime": "datastream_phenomenontime",
                "resultTime": "datastream_resulttime",
            },
            "Observation": {
                "id": "observation_id",
                "phenomenonTime": "observation_phenomenontime",
                "resultTime": "observation_resulttime",
                "result": "observation_result",
                "validTime": "observation_validtime",
            },
            "ObservedProperty": {
                "id": "observedproperty_id",
                "name": "observedproperty_name",
                "definition": "observedproperty_definition",
                "description": "observedproperty_description",
            },
        },
    }
