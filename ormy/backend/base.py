"""Defines a basic and primitive database interface. It is basically a thin wrapper on DB API 2.0."""

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple
from urllib.parse import parse_qs, urlparse

from ormy.backend.errors import ConfigurationError, PopulateError

CONVERTIBLE_TYPES = (str, int, float, bool)
TRUTHY = ("true", "t", "yes", "y", "1")
FALSY = ("false", "f", "no", "n", "0")


@dataclass
class ColumnDescriptor:
    """Describes a column in a result set."""

    name: str
    type_code: int
    display_size: int = None
    internal_size: int = None
    precision: int = None
    scale: int = None
    null_ok: bool = None


class Target(ABC):
    """A place a single column value of a result row is written to."""

    field_type: Optional[type] = None

    @abstractmethod
    def assign(self, value: Any):
        """Write a column value to this target.

        :param value: the (possibly converted) value of the column
        """
        pass  # pragma: no cover


class ResultSet:
    """Basic interface definition for result sets (a.k.a rows) returned from Database queries."""

    def __init__(self, cursor):
        """Construct a result set.

        :param cursor: the underlying DB API 2.0 cursor being wrapped by this object.
        """
        self._cursor = cursor
        self._columns = None
        self._description = None
        self._row = None

    def column_names(self) -> Tuple[str, ...]:
        """Return the names of the result set's columns, in result order."""
        if self._columns is None:
            self._columns = tuple(d.name for d in self.description)
        return self._columns

    def next(self) -> bool:
        """Advance to the next row of the result set.

        :returns: True if there is a current row to populate from, False once results are exhausted
        """
        self._row = self._cursor.fetchone()
        return self._row is not None

    def populate(self, targets: Sequence[Target]):
        """Assign the values of the current row to the given targets.

        Targets are aligned with the column order of the result set. Values are converted to the target's
        ``field_type`` when it is one of ``str``, ``int``, ``float`` or ``bool``. The whole row is converted before any
        target is assigned, so a row that fails conversion leaves every target untouched.

        :param targets: one target per column of the result set
        :raises: PopulateError
        """
        if self._row is None:
            raise PopulateError("No current row to populate from, call next() first")
        if len(targets) != len(self._row):
            raise PopulateError(f"Expected {len(self._row)} targets for the row, got {len(targets)}")
        values = [self._convert(value, target.field_type) for target, value in zip(targets, self._row)]
        for target, value in zip(targets, values):
            target.assign(value)

    @staticmethod
    def _to_bool(value) -> bool:
        if isinstance(value, str) and value.lower() in TRUTHY + FALSY:
            return value.lower() in TRUTHY
        if isinstance(value, (int, float)) and value in (0, 1):
            return bool(value)
        raise ValueError(f"{value!r} is not a boolean")

    @staticmethod
    def _convert(value, field_type):
        if value is None or field_type not in CONVERTIBLE_TYPES or type(value) is field_type:
            return value
        try:
            if field_type is bool:
                return ResultSet._to_bool(value)
            if field_type is str and isinstance(value, (bytes, bytearray)):
                return value.decode()
            if field_type is int and not isinstance(value, (int, str)) and value != int(value):
                raise ValueError(f"{value!r} is not integral")
            return field_type(value)
        except (TypeError, ValueError) as x:
            raise PopulateError(f"Cannot convert {value!r} to {field_type.__name__}") from x

    @property
    def description(self) -> Tuple[ColumnDescriptor]:
        """Return a sequence of column descriptions representing the result set.

        :returns: a tuple of ColumnDescriptors
        """
        if not self._description:
            self._description = tuple([ColumnDescriptor(*(d[0:7])) for d in self._cursor.description or ()])
        return self._description


class Connection(ABC):
    """Basic interface definition for a database connection."""

    def __init__(self, cnx, auto_commit: bool = True):
        """Construct a Connection object.

        :param cnx: the inner DB API 2.0 connection this object wraps
        :param auto_commit: should calls to execute() be automatically committed, defaults to True
        """
        self.logger = logging.getLogger(__name__)
        self._cnx = cnx
        self._auto_commit = auto_commit

    @property
    def autocommit(self):
        """Whether commit is called after every call to execute(...)."""
        return self._auto_commit

    @autocommit.setter
    def autocommit(self, value: bool):
        self._auto_commit = value

    def commit(self):
        """Commit changes for this connection / transaction to the database."""
        self._cnx.commit()

    def rollback(self):
        """Rollback changes for this connection / transaction to the database."""
        self._cnx.rollback()

    @abstractmethod
    def _execute(self, cursor, sql: str, params: tuple = None):
        pass  # pragma: no cover

    @contextmanager
    def query(self, sql: str, params: tuple = None) -> ResultSet:
        """Execute the given SQL as a statement with the given parameters. Provide the results as context.

        :param sql: the SQL statement(s) to execute
        :param params: the values to bind to the execution of the given SQL
        :returns: a result set representing the query's results
        """
        self.logger.debug(f"Query: {sql} {params or ()}")
        cursor = self._cnx.cursor()
        try:
            self._execute(cursor, sql, params)
            yield ResultSet(cursor)
        finally:
            cursor.close()

    def execute(self, sql: str, params: tuple = None, commit: bool = None) -> int:
        """Execute the given SQL as a statement with the given parameters and return the affected row count.

        :param sql: the SQL statement(s) to execute
        :param params: the values to bind to the execution of the given SQL
        :param commit: commit the changes to the database after execution, defaults to value given in constructor
        """
        commit = commit if commit is not None else self._auto_commit
        self.logger.debug(f"Execute: {sql} {params or ()}")
        cursor = self._cnx.cursor()
        try:
            self._execute(cursor, sql, params)
            affected = cursor.rowcount
        finally:
            cursor.close()
        if commit:
            self.commit()
        return affected


class ConnectionPool(ABC):
    """Basic interface definition for a pool of database connections."""

    def __init__(self, db_url: str):
        """Construct a connection pool for the given connection URL.

        The db_url is expected to be in the following format::

            "{dialect}+{driver}://{username}:{password}@{hostname}:{port}/{db_name}?{optional_args}"

        :param db_url: a url with the described format
        """
        self.logger = logging.getLogger(__name__)
        self._raw_db_url = db_url
        self._db_url = urlparse(self._raw_db_url)
        self._args = parse_qs(self._db_url.query, keep_blank_values=True)

    @staticmethod
    def _strict_bool(value: str):
        if value.lower() not in ["true", "false"]:
            raise ValueError(f"Cannot cast '{value}' to bool")
        return value.lower() == "true"

    def _raise_for_unexpected_args(self):
        unexpected = ",".join(self._args.keys())
        if unexpected:
            raise ConfigurationError(f"Unexpected argument(s): {unexpected}")

    def _get_arg(self, name: str, expected_type, default=None):
        if name not in self._args:
            self.logger.debug(f"No '{name}' specified, defaulting to {default}")
            return default
        caster = expected_type if expected_type is not bool else self._strict_bool
        try:
            if caster != list:
                if len(self._args.get(name)) != 1:
                    raise ConfigurationError(f"Invalid argument '{name}': only a single value must be specified")
                return caster(self._args.pop(name)[0])
            return self._args.pop(name)
        except ValueError as x:
            raise ConfigurationError(f"Invalid argument '{name}': must be {expected_type.__name__}") from x

    @property
    @abstractmethod
    def mung_symbol(self) -> str:
        """Return the symbol the driver expects in place of each native query parameter."""
        pass  # pragma: no cover

    @abstractmethod
    def lease(self) -> Connection:
        """Lease a connection from the underlying pool."""
        pass  # pragma: no cover

    @abstractmethod
    def release(self, cnx: Connection):
        """Release a connection back to the underlying pool."""
        pass  # pragma: no cover

    @abstractmethod
    def dispose(self):
        """Close the pool and clean up any resources it was using."""
        pass  # pragma: no cover
