"""Column name to record field mappings, built once per record type and shared between queries."""

import dataclasses
import logging
import threading
import types
import typing

from ormy.binding.errors import ShapeMismatchError
from ormy.binding.locks import ReadWriteLock

COLUMN_KEY = "db"


def column(name: str, **kwargs):
    """Declare a dataclass field that is populated from the result column with the given name.

    Example::

        @dataclass
        class Thing:
            col: str = column("col", default="")
            two: float = column("two_as_float", default=0.0)

    :param name: the result column mapped to the field
    :param kwargs: any other arguments accepted by ``dataclasses.field``
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[COLUMN_KEY] = name
    return dataclasses.field(metadata=metadata, **kwargs)


def is_record_type(record_type) -> bool:
    """Return True if the given object is a type that rows can be mapped to (a non frozen dataclass)."""
    if not isinstance(record_type, type) or not dataclasses.is_dataclass(record_type):
        return False
    return not record_type.__dataclass_params__.frozen


def _unwrap_optional(type_hint: typing.Any) -> typing.Any:
    """Extract the inner type from Optional[X] or X | None, any other hint is returned as is."""
    origin = typing.get_origin(type_hint)
    args = typing.get_args(type_hint)
    if origin not in (typing.Union, types.UnionType) or not args:
        return type_hint
    non_none_args = [a for a in args if a is not type(None)]
    return non_none_args[0] if len(non_none_args) == 1 else type_hint


def record_key(record_type: type) -> str:
    """Return the name the field map of a record type is cached under."""
    return f"{record_type.__module__}.{record_type.__qualname__}"


class FieldMap(typing.Mapping[str, int]):
    """An immutable mapping of column name to field index for one record type."""

    def __init__(self, record_type: type):
        """Build the field map for a record type.

        The column of a field is its ``db`` metadata entry (see ``column``) if present, otherwise its name.

        :param record_type: a non frozen dataclass
        :raises: ShapeMismatchError
        """
        if not is_record_type(record_type):
            raise ShapeMismatchError(f"Cannot map rows to {record_type!r}, expected a non frozen dataclass type")
        fields = dataclasses.fields(record_type)
        try:
            hints = typing.get_type_hints(record_type)
        except NameError:
            # Annotations referring to names local to a function cannot be resolved, use what is already a type
            hints = {f.name: f.type for f in fields if isinstance(f.type, type)}
        self._record_type = record_type
        self._field_names = tuple(f.name for f in fields)
        self._field_types = tuple(_unwrap_optional(hints.get(f.name)) for f in fields)
        self._columns = types.MappingProxyType({f.metadata.get(COLUMN_KEY, f.name): i for i, f in enumerate(fields)})

    @property
    def record_type(self) -> type:
        """Return the record type this map was built from."""
        return self._record_type

    @property
    def field_names(self) -> typing.Tuple[str, ...]:
        """Return the field names of the record type in declaration order."""
        return self._field_names

    @property
    def field_types(self) -> typing.Tuple[typing.Any, ...]:
        """Return the resolved type hints of the fields in declaration order."""
        return self._field_types

    def __getitem__(self, column_name: str) -> int:
        return self._columns[column_name]

    def __iter__(self):
        return iter(self._columns)

    def __len__(self) -> int:
        return len(self._columns)

    def __repr__(self) -> str:
        return f"FieldMap({record_key(self._record_type)}, {dict(self._columns)})"


class FieldMapCache:
    """A thread safe cache of field maps keyed by record type name.

    .. note::
        Types are keyed by module and qualified name, so distinct types sharing both (e.g. classes created by the same
        factory function) share one entry.
    """

    def __init__(self):  # noqa: D107
        self.logger = logging.getLogger(__name__)
        self._lock = ReadWriteLock()
        self._maps: typing.Dict[str, FieldMap] = {}
        self._counter_lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def field_map_for(self, record_type: type) -> FieldMap:
        """Return the field map of a record type, building and caching it on first use.

        :param record_type: a non frozen dataclass
        :raises: ShapeMismatchError
        """
        if not is_record_type(record_type):
            raise ShapeMismatchError(f"Cannot map rows to {record_type!r}, expected a non frozen dataclass type")
        key = record_key(record_type)
        with self._lock.read():
            field_map = self._maps.get(key)
        with self._counter_lock:
            if field_map is not None:
                self.hits += 1
                return field_map
            self.misses += 1
        # Concurrent first uses may each build a map, they are equivalent so the last one stored wins
        field_map = FieldMap(record_type)
        self.logger.debug(f"Built field map {field_map!r}")
        with self._lock.write():
            self._maps[key] = field_map
        return field_map

    def clear(self):
        """Forget every cached field map."""
        with self._lock.write():
            self._maps.clear()

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._maps)
