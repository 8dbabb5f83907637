"""Entity models mapped to and from stored rows."""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class Datastream:
    """A series of observations of one observed property by one sensor."""

    id: Optional[int] = None
    name: str = ""
    description: str = ""
    observation_type: str = ""
    phenomenon_time: Optional[str] = None  # ISO-8601 interval
    result_time: Optional[str] = None  # ISO-8601 interval


@dataclass
class Observation:
    """A single measured value."""

    id: Optional[int] = None
    phenomenon_time: Optional[str] = None
    result_time: Optional[str] = None
    result: Any = None
    valid_time: Optional[str] = None  # ISO-8601 interval


@dataclass
class ObservedProperty:
    """The phenomenon a datastream observes, e.g. air temperature."""

    id: Optional[int] = None
    name: str = ""
    definition: str = ""
    description: str = ""


ENTITY_TYPES = {
    "Datastream": Datastream,
    "Observation": Observation,
    "ObservedProperty": ObservedProperty,
}
