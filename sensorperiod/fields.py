"""Column mappings between stored rows and entities.

Every entity type has a fixed table of fields, each bound to a typed
conversion. ``build_mappings`` joins that table with the configured column
aliases once; the resulting ``EntityMapping`` objects are read-only and are
handed to whatever materializes rows or builds statement parameters.

Request handlers coerce path ids with ``require_int_id``, which raises
``NotFoundError`` for ids that cannot exist.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from .codec import to_db_period, to_iso8601
from .config import SensorPeriodConfig
from .entities import ENTITY_TYPES
from .errors import BadRequestError, FormatError, NotFoundError

logger = logging.getLogger(__name__)


def to_int_id(value: Any) -> Optional[int]:
    """Coerce an entity id to int, returning None if it is not an integer id."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.isascii() and value.isdigit():
        return int(value)
    return None


def require_int_id(value: Any, entity_type: str) -> int:
    """Coerce an entity id, raising NotFoundError when it cannot exist."""
    int_id = to_int_id(value)
    if int_id is None:
        raise NotFoundError(f"{entity_type} does not exist")
    return int_id


def _identity(value: Any) -> Any:
    return value


def _decode_id(value: Any) -> int:
    int_id = to_int_id(value)
    if int_id is None:
        raise ValueError(f"Stored id is not an integer: {value!r}")
    return int_id


def _decode_text(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"Expected text column value, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class FieldType:
    """Conversion of one kind of field between store and entity."""

    name: str
    decode: Callable[[Any], Any]
    encode: Callable[[Any], Any]


ID = FieldType("id", _decode_id, _identity)
TEXT = FieldType("text", _decode_text, _identity)
PERIOD = FieldType("period", to_iso8601, to_db_period)
VALUE = FieldType("value", _identity, _identity)

# field name -> (entity attribute, field type)
ENTITY_FIELDS: Dict[str, Dict[str, Tuple[str, FieldType]]] = {
    "Datastream": {
        "id": ("id", ID),
        "name": ("name", TEXT),
        "description": ("description", TEXT),
        "observationType": ("observation_type", TEXT),
        "phenomenonTime": ("phenomenon_time", PERIOD),
        "resultTime": ("result_time", PERIOD),
    },
    "Observation": {
        "id": ("id", ID),
        "phenomenonTime": ("phenomenon_time", TEXT),
        "resultTime": ("result_time", TEXT),
        "result": ("result", VALUE),
        "validTime": ("valid_time", PERIOD),
    },
    "ObservedProperty": {
        "id": ("id", ID),
        "name": ("name", TEXT),
        "definition": ("definition", TEXT),
        "description": ("description", TEXT),
    },
}


@dataclass(frozen=True)
class ColumnBinding:
    """One field of an entity bound to its result alias and table column."""

    field: str
    alias: str
    attribute: str
    field_type: FieldType

    @property
    def column(self) -> str:
        """Table column name, e.g. ``phenomenontime``."""
        return self.field.lower()

    def assign(self, entity: Any, value: Any) -> None:
        setattr(entity, self.attribute, self.field_type.decode(value))


class EntityMapping:
    """Row materialization and statement parameters for one entity type."""

    def __init__(
        self,
        entity_type: str,
        factory: Callable[[], Any],
        bindings: Iterable[ColumnBinding],
    ):
        self.entity_type = entity_type
        self.factory = factory
        self._by_alias: Dict[str, ColumnBinding] = {b.alias: b for b in bindings}

    @property
    def bindings(self) -> List[ColumnBinding]:
        return list(self._by_alias.values())

    @property
    def period_fields(self) -> List[str]:
        """Names of the fields stored as range literals."""
        return [b.field for b in self._by_alias.values() if b.field_type is PERIOD]

    def from_row(self, row: Mapping[str, Any]) -> Any:
        """
        Build an entity from a result row keyed by column alias.

        NULL values and aliases belonging to other entities are skipped.
        Stored range literals are converted to ISO-8601 intervals; a
        malformed literal raises FormatError.
        """
        entity = self.factory()
        for alias, value in row.items():
            if value is None:
                continue
            binding = self._by_alias.get(alias)
            if binding is not None:
                binding.assign(entity, value)
        return entity

    def to_params(self, entity: Any) -> Dict[str, Any]:
        """
        Build column -> value parameters for an INSERT or UPDATE.

        Unset fields and the id are omitted. Period fields are converted to
        range literals; a malformed interval raises BadRequestError.
        """
        params: Dict[str, Any] = {}
        for binding in self._by_alias.values():
            if binding.field_type is ID:
                continue

            value = getattr(entity, binding.attribute)
            if value is None or value == "":
                continue

            try:
                params[binding.column] = binding.field_type.encode(value)
            except FormatError as e:
                raise BadRequestError(
                    f"Invalid {binding.field} for {self.entity_type}: {e}",
                    field=binding.field,
                ) from e
        return params


def build_mappings(config: SensorPeriodConfig) -> Dict[str, EntityMapping]:
    """Build the entity mappings for every configured entity type."""
    mappings: Dict[str, EntityMapping] = {}

    for entity_type, aliases in config.mappings.items():
        if entity_type not in ENTITY_TYPES:
            raise ValueError(f"Unknown entity type in mappings: {entity_type}")

        known_fields = ENTITY_FIELDS[entity_type]
        bindings = []
        for field, alias in aliases.items():
            if field not in known_fields:
                raise ValueError(f"Unknown field for {entity_type}: {field}")
            attribute, field_type = known_fields[field]
            bindings.append(ColumnBinding(field, alias, attribute, field_type))

        mappings[entity_type] = EntityMapping(
            entity_type, ENTITY_TYPES[entity_type], bindings
        )
        logger.debug(f"Built mapping for {entity_type} with {len(bindings)} columns")

    return mappings
