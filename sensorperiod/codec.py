"""Conversion between ISO-8601 intervals and PostgreSQL range literals.

Two encodings of the same pair of UTC instants are supported:

- ISO-8601 interval, as exchanged with clients:
  ``2014-03-01T13:00:00.000Z/2015-05-11T15:30:00.000Z``
- Range literal, as persisted by the store:
  ``["2014-03-01 13:00:00+00","2015-05-11 15:30:00+00"]``

Each direction splits the input into two boundary tokens, parses each
token into an aware UTC datetime and renders it in the target grammar.
Encoding drops sub-second precision since the stored literal has none;
decoding always renders milliseconds.
"""

import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Tuple

from .errors import FormatError

logger = logging.getLogger(__name__)

ISO_SEPARATOR = "/"
DB_SEPARATOR = ","

# DIGIT is ASCII only; patterns are applied with fullmatch
_DB_TIMESTAMP = re.compile(
    r"(?P<body>[0-9]{4}-[0-9]{2}-[0-9]{2} [0-9]{2}:[0-9]{2}:[0-9]{2})"
    r"(?P<sign>[+-])(?P<hours>[0-9]{2})(?::(?P<minutes>[0-9]{2}))?"
)

_ISO_TIMESTAMP = re.compile(
    r"(?P<date>[0-9]{4}-[0-9]{2}-[0-9]{2})[Tt](?P<time>[0-9]{2}:[0-9]{2}:[0-9]{2})"
    r"(?:\.(?P<fraction>[0-9]+))?"
    r"(?P<offset>[Zz]|(?P<sign>[+-])(?P<hours>[0-9]{2}):(?P<minutes>[0-9]{2}))"
)


def to_iso8601(db_period: str) -> str:
    """
    Convert a stored range literal into an ISO-8601 interval.

    Args:
        db_period: Literal such as ``["2014-03-01 13:00:00+00","2015-05-11 15:30:00+00"]``

    Returns:
        Interval such as ``2014-03-01T13:00:00.000Z/2015-05-11T15:30:00.000Z``

    Raises:
        FormatError: If the literal or one of its timestamps is malformed
    """
    try:
        start_token, end_token = split_db_period(db_period)
        start = parse_db_timestamp(start_token)
        end = parse_db_timestamp(end_token)
    except FormatError as e:
        logger.debug(f"Rejected database period: {e}")
        raise

    return format_iso_timestamp(start) + ISO_SEPARATOR + format_iso_timestamp(end)


def to_db_period(iso_period: str) -> str:
    """
    Convert an ISO-8601 interval into a range literal for the store.

    Args:
        iso_period: Interval such as ``2014-03-01T13:00:00Z/2015-05-11T15:30:00Z``

    Returns:
        Literal such as ``["2014-03-01 13:00:00+00","2015-05-11 15:30:00+00"]``

    Raises:
        FormatError: If the interval or one of its timestamps is malformed
    """
    try:
        start_token, end_token = split_iso_interval(iso_period)
        start = parse_iso_timestamp(start_token)
        end = parse_iso_timestamp(end_token)
    except FormatError as e:
        logger.debug(f"Rejected ISO-8601 period: {e}")
        raise

    return f'["{format_db_timestamp(start)}","{format_db_timestamp(end)}"]'


def split_db_period(db_period: str) -> Tuple[str, str]:
    """Split a range literal into its two unquoted timestamp tokens."""
    _require_str(db_period)

    if len(db_period) < 2 or db_period[0] != "[" or db_period[-1] != "]":
        raise FormatError(db_period, "period must be enclosed in '[' and ']'")

    tokens = db_period[1:-1].split(DB_SEPARATOR)
    if len(tokens) != 2:
        raise FormatError(
            db_period, f"expected 2 comma separated timestamps, got {len(tokens)}"
        )

    start, end = (_unquote(db_period, token) for token in tokens)
    return start, end


def split_iso_interval(iso_period: str) -> Tuple[str, str]:
    """Split an ISO-8601 interval into its start and end tokens."""
    _require_str(iso_period)

    tokens = iso_period.split(ISO_SEPARATOR)
    if len(tokens) != 2:
        raise FormatError(
            iso_period, f"expected exactly one '/' separator, got {len(tokens) - 1}"
        )

    start, end = tokens
    if not start or not end:
        raise FormatError(iso_period, "interval must have both a start and an end")
    return start, end


def parse_db_timestamp(token: str) -> datetime:
    """Parse a stored timestamp such as ``2014-03-01 13:00:00+00`` into UTC."""
    match = _DB_TIMESTAMP.fullmatch(token)
    if not match:
        raise FormatError(token, "unparsable database timestamp")

    try:
        local = datetime.strptime(match.group("body"), "%Y-%m-%d %H:%M:%S")
    except ValueError as e:
        raise FormatError(token, f"invalid date or time ({e})") from e

    offset = _offset(
        token, match.group("sign"), match.group("hours"), match.group("minutes")
    )
    return _to_utc(token, local.replace(tzinfo=offset))


def parse_iso_timestamp(token: str) -> datetime:
    """Parse an RFC 3339 timestamp such as ``2014-03-01T13:00:00.000Z`` into UTC."""
    match = _ISO_TIMESTAMP.fullmatch(token)
    if not match:
        raise FormatError(token, "unparsable RFC 3339 timestamp")

    try:
        local = datetime.strptime(
            f"{match.group('date')}T{match.group('time')}", "%Y-%m-%dT%H:%M:%S"
        )
    except ValueError as e:
        raise FormatError(token, f"invalid date or time ({e})") from e

    fraction = match.group("fraction")
    if fraction:
        # datetime keeps microseconds, anything finer is truncated
        local = local.replace(microsecond=int(fraction[:6].ljust(6, "0")))

    if match.group("offset") in ("Z", "z"):
        offset = timezone.utc
    else:
        offset = _offset(
            token, match.group("sign"), match.group("hours"), match.group("minutes")
        )
    return _to_utc(token, local.replace(tzinfo=offset))


def format_iso_timestamp(instant: datetime) -> str:
    """Render an instant as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` in UTC."""
    instant = as_utc(instant)
    return f"{_clock(instant, 'T')}.{instant.microsecond // 1000:03d}Z"


def format_db_timestamp(instant: datetime) -> str:
    """Render an instant as ``YYYY-MM-DD HH:MM:SS+00``, dropping sub-seconds."""
    return f"{_clock(as_utc(instant), ' ')}+00"


def as_utc(instant: datetime) -> datetime:
    """Return the instant in UTC, treating naive datetimes as UTC."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def _clock(instant: datetime, separator: str) -> str:
    # strftime does not zero-pad years below 1000 on every platform
    return (
        f"{instant.year:04d}-{instant.month:02d}-{instant.day:02d}"
        f"{separator}{instant.hour:02d}:{instant.minute:02d}:{instant.second:02d}"
    )


def _offset(token: str, sign: str, hours: str, minutes: str) -> timezone:
    hours_value = int(hours)
    minutes_value = int(minutes) if minutes else 0
    if hours_value > 23 or minutes_value > 59:
        raise FormatError(token, "UTC offset out of range")

    delta = timedelta(hours=hours_value, minutes=minutes_value)
    return timezone(-delta if sign == "-" else delta)


def _to_utc(token: str, local: datetime) -> datetime:
    try:
        return local.astimezone(timezone.utc)
    except OverflowError as e:
        raise FormatError(token, "instant is out of range in UTC") from e


def _unquote(db_period: str, token: str) -> str:
    if len(token) < 2 or token[0] != '"' or token[-1] != '"':
        raise FormatError(db_period, "timestamps must be enclosed in double quotes")
    return token[1:-1]


def _require_str(value: object) -> None:
    if not isinstance(value, str):
        raise FormatError(repr(value), "period must be a string")
