"""Materializes query results into a single record or a collection of records."""

import collections.abc
import dataclasses
import typing

from ormy.backend.base import ResultSet, Target
from ormy.binding.errors import ShapeMismatchError
from ormy.binding.fieldmaps import FieldMap, FieldMapCache, is_record_type


class FieldTarget(Target):
    """Writes a column value to a field of a record."""

    def __init__(self, record, field_name: str, field_type: typing.Any = None):
        """Construct a target for the field of a record.

        :param record: the record instance the value is written to
        :param field_name: the name of the field on the record
        :param field_type: the resolved type hint of the field, used by the driver for value conversion
        """
        self.record = record
        self.field_name = field_name
        self.field_type = field_type

    def assign(self, value: typing.Any):  # noqa: D102
        setattr(self.record, self.field_name, value)


class DiscardTarget(Target):
    """Accepts the value of a column no field is mapped to and drops it."""

    def assign(self, value: typing.Any):  # noqa: D102
        pass


DISCARD = DiscardTarget()


def blank_record(record_type: type):
    """Create a record without calling its initializer.

    Fields with a default or default factory get it, every other field is set to None.

    :param record_type: a non frozen dataclass
    """
    record = record_type.__new__(record_type)
    for field in dataclasses.fields(record_type):
        if field.default is not dataclasses.MISSING:
            value = field.default
        elif field.default_factory is not dataclasses.MISSING:
            value = field.default_factory()
        else:
            value = None
        setattr(record, field.name, value)
    return record


class ResultMapper:
    """Copies the rows of a result set into records using the cached field map of the record type.

    Columns that do not map to any field of the record are discarded, for single records and collections alike.
    """

    def __init__(self, field_maps: FieldMapCache):
        """Construct a result mapper.

        :param field_maps: the cache the field maps of record types are taken from
        """
        self._field_maps = field_maps

    @staticmethod
    def _targets(columns: typing.Sequence[str], record, field_map: FieldMap) -> typing.List[Target]:
        targets = []
        for name in columns:
            index = field_map.get(name)
            if index is None:
                targets.append(DISCARD)
                continue
            targets.append(FieldTarget(record, field_map.field_names[index], field_map.field_types[index]))
        return targets

    @staticmethod
    def check_single(destination):
        """Check the destination is a record instance that a row can be written to.

        :raises: ShapeMismatchError
        """
        if not is_record_type(type(destination)):
            raise ShapeMismatchError(f"Expected a single record to populate, got {type(destination).__name__}")

    @staticmethod
    def resolve_record_type(destination, record_type: type = None) -> type:
        """Check the destination is a collection of records and return the record type of its elements.

        :param destination: a mutable sequence (e.g. a list) of records
        :param record_type: the record type of the elements, defaults to the type of the destination's first element
        :raises: ShapeMismatchError
        """
        if not isinstance(destination, collections.abc.MutableSequence):
            raise ShapeMismatchError(f"Expected a collection of records to populate, got {type(destination).__name__}")
        if record_type is None:
            if not destination:
                raise ShapeMismatchError("Cannot resolve the record type of an empty collection, give a record_type")
            record_type = type(destination[0])
        if not is_record_type(record_type):
            raise ShapeMismatchError(f"Cannot map rows to {record_type!r}, expected a non frozen dataclass type")
        return record_type

    def one(self, results: ResultSet, destination) -> bool:
        """Populate a single record from the results.

        Every row is written to the same record, so if several rows are returned the last one wins.

        :param results: the result set of an executed query
        :param destination: the record instance to populate
        :returns: True if at least one row was mapped, False if the results were empty
        :raises: ShapeMismatchError, PopulateError
        """
        self.check_single(destination)
        field_map = self._field_maps.field_map_for(type(destination))
        targets = self._targets(results.column_names(), destination, field_map)
        found = False
        while results.next():
            results.populate(targets)
            found = True
        return found

    def many(self, results: ResultSet, destination: typing.MutableSequence, record_type: type = None) -> int:
        """Append one new record per row of the results to the destination.

        :param results: the result set of an executed query
        :param destination: a mutable sequence (e.g. a list) of records
        :param record_type: the record type of the elements, defaults to the type of the destination's first element
        :returns: the number of records appended
        :raises: ShapeMismatchError, PopulateError
        """
        record_type = self.resolve_record_type(destination, record_type)
        field_map = self._field_maps.field_map_for(record_type)
        columns = results.column_names()
        appended = 0
        while results.next():
            record = blank_record(record_type)
            results.populate(self._targets(columns, record, field_map))
            destination.append(record)
            appended += 1
        return appended
