"""Period value model for sensorperiod."""

from dataclasses import dataclass
from datetime import datetime, timedelta

from .codec import (
    ISO_SEPARATOR,
    as_utc,
    format_db_timestamp,
    format_iso_timestamp,
    parse_db_timestamp,
    parse_iso_timestamp,
    split_db_period,
    split_iso_interval,
)


@dataclass(frozen=True)
class Period:
    """An ordered pair of UTC instants, such as a phenomenon or result time."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        object.__setattr__(self, "start", as_utc(self.start))
        object.__setattr__(self, "end", as_utc(self.end))

    @classmethod
    def from_iso8601(cls, iso_period: str) -> "Period":
        """Parse an ISO-8601 interval (``start/end``)."""
        start, end = split_iso_interval(iso_period)
        return cls(parse_iso_timestamp(start), parse_iso_timestamp(end))

    @classmethod
    def from_db_period(cls, db_period: str) -> "Period":
        """Parse a stored range literal (``["start","end"]``)."""
        start, end = split_db_period(db_period)
        return cls(parse_db_timestamp(start), parse_db_timestamp(end))

    @property
    def duration(self) -> timedelta:
        """Time between start and end; negative when the pair is reversed."""
        return self.end - self.start

    def to_iso8601(self) -> str:
        """Render as ``YYYY-MM-DDTHH:MM:SS.mmmZ/YYYY-MM-DDTHH:MM:SS.mmmZ``."""
        return (
            format_iso_timestamp(self.start)
            + ISO_SEPARATOR
            + format_iso_timestamp(self.end)
        )

    def to_db_period(self) -> str:
        """Render as a range literal; sub-second precision is dropped."""
        start = format_db_timestamp(self.start)
        end = format_db_timestamp(self.end)
        return f'["{start}","{end}"]'
