"""The query facade: bind a statement, execute it and map its results in one fluent call."""

import logging
import typing
from contextlib import contextmanager

from ormy.backend.base import Connection, ConnectionPool
from ormy.binding.binders import BoundStatement, ParameterBinder
from ormy.binding.errors import BindingError, NoPoolSetError, PoolAlreadySetError
from ormy.binding.fieldmaps import FieldMapCache
from ormy.binding.mappers import ResultMapper
from ormy.binding.renderers import TypeBinder
from ormy.binding.templating import Template


class Fetch:
    """The deferred result of binding a query: either a bound statement or the error that stopped binding.

    Nothing is executed until ``one`` or ``all`` is called. If binding failed, both raise the binding error as is and
    the database is never touched. The same holds for a destination of the wrong shape.
    """

    def __init__(self, ormy: "Ormy", statement: BoundStatement = None, error: BindingError = None):
        """Construct a fetch from exactly one of a bound statement or a binding error.

        :param ormy: the facade whose pool and mapper are used
        :param statement: the statement to execute
        :param error: the error binding failed with
        """
        if (statement is None) == (error is None):
            raise ValueError("A fetch needs exactly one of a statement or an error")
        self._ormy = ormy
        self._statement = statement
        self._error = error

    @property
    def statement(self) -> typing.Optional[BoundStatement]:
        """Return the bound statement, None if binding failed."""
        return self._statement

    @property
    def error(self) -> typing.Optional[BindingError]:
        """Return the error binding failed with, None if binding succeeded."""
        return self._error

    def one(self, destination) -> bool:
        """Execute the query and populate a single record with its result.

        Example::

            thing = Thing()
            found = ormy.select("SELECT col, $1 two FROM tmp", "Two").one(thing)

        :param destination: the record instance to populate, if several rows are returned the last one wins
        :returns: True if a row was found
        :raises: BindingError, ShapeMismatchError, PopulateError, NoPoolSetError
        """
        if self._error is not None:
            raise self._error
        self._ormy.mapper.check_single(destination)
        with self._ormy.connection() as cnx:
            with cnx.query(self._statement.sql, self._statement.parameters) as results:
                return self._ormy.mapper.one(results, destination)

    def all(self, destination: typing.MutableSequence, record_type: type = None) -> int:
        """Execute the query and append one record per result row to the destination.

        Example::

            things = []
            ormy.select("SELECT col, $1 two FROM tmp", "Two").all(things, Thing)

        :param destination: a mutable sequence (e.g. a list) to append records to
        :param record_type: the record type, defaults to the type of the destination's first element
        :returns: the number of records appended
        :raises: BindingError, ShapeMismatchError, PopulateError, NoPoolSetError
        """
        if self._error is not None:
            raise self._error
        record_type = self._ormy.mapper.resolve_record_type(destination, record_type)
        with self._ormy.connection() as cnx:
            with cnx.query(self._statement.sql, self._statement.parameters) as results:
                return self._ormy.mapper.many(results, destination, record_type)


class Query:
    """A single query invocation: its statement template and the named parameters added to it."""

    def __init__(self, ormy: "Ormy", sql: str):
        """Construct a query.

        :param ormy: the facade the query is bound and executed with
        :param sql: the statement template, with ``$n`` and / or ``:name`` placeholders
        """
        self._ormy = ormy
        self._sql = sql
        self._named_params = {}

    def add_parameter(self, name: str, value) -> "Query":
        """Add the value of the ``:name`` placeholder.

        :param name: the name of the placeholder without its leading colon
        :param value: the value to bind
        :returns: this query, for chaining
        """
        self._named_params[name] = value
        return self

    def bind(self, *params) -> BoundStatement:
        """Bind the positional parameters and the added named parameters to the template.

        :param params: values for ``$1``, ``$2``, ... in order
        :raises: BindingError
        """
        template = Template(self._sql)
        return self._ormy.binder.bind(template, params, self._named_params, self._ormy.mung_symbol)

    def select(self, *params) -> Fetch:
        """Bind the query for fetching results. Binding errors are kept on the returned fetch.

        :param params: values for ``$1``, ``$2``, ... in order
        """
        try:
            statement = self.bind(*params)
        except BindingError as exc:
            self._ormy.logger.debug(f"Binding '{self._sql}' failed: {exc}")
            return Fetch(self._ormy, error=exc)
        return Fetch(self._ormy, statement=statement)

    def execute(self, *params) -> int:
        """Bind and execute the query as a statement without results.

        :param params: values for ``$1``, ``$2``, ... in order
        :returns: the number of affected rows as reported by the driver
        :raises: BindingError, NoPoolSetError
        """
        statement = self.bind(*params)
        with self._ormy.connection() as cnx:
            return cnx.execute(statement.sql, statement.parameters)


class Ormy:
    """Binds parameters into SQL templates and maps results onto records.

    One instance may be shared between threads; each call creates its own query and statement. The type binder and
    field map cache can be passed in to share them between several instances.
    """

    def __init__(
        self,
        pool: ConnectionPool = None,
        type_binder: TypeBinder = None,
        field_maps: FieldMapCache = None,
        native_parameters: bool = False,
    ):
        """Construct the facade.

        :param pool: the connection pool queries are executed with, can also be set later through ``pool``
        :param type_binder: the renderer registry to use, a new one with the built-in renderers by default
        :param field_maps: the field map cache to use, a new empty one by default
        :param native_parameters: pass values to the driver as query parameters instead of writing them into the
                                  statement as literals
        """
        self.logger = logging.getLogger(__name__)
        self._cnx_pool = None
        self._native_parameters = native_parameters
        self.type_binder = type_binder if type_binder is not None else TypeBinder()
        self.field_maps = field_maps if field_maps is not None else FieldMapCache()
        self.binder = ParameterBinder(self.type_binder)
        self.mapper = ResultMapper(self.field_maps)
        if pool is not None:
            self.pool = pool

    @property
    def pool(self) -> ConnectionPool:
        """Get the connection pool used by this facade."""
        return self._cnx_pool

    @pool.setter
    def pool(self, pool: ConnectionPool):
        """Set the connection pool used by this facade.

        :raises PoolAlreadySetError
        """
        if self._cnx_pool is not None:
            raise PoolAlreadySetError("The connection pool can only be set once")
        self._cnx_pool = pool

    @property
    def mung_symbol(self) -> typing.Optional[str]:
        """Return the symbol native parameters are written as, None when values are written as literals."""
        if not self._native_parameters:
            return None
        if self._cnx_pool is None:
            raise NoPoolSetError("No connection pool has been set, native parameters need one")
        return self._cnx_pool.mung_symbol

    @contextmanager
    def connection(self) -> typing.Iterator[Connection]:
        """Lease a connection for the duration of the context.

        The connection is committed when the context exits normally, rolled back if it exits with an exception, and
        released back to the pool in both cases.
        """
        if self._cnx_pool is None:
            raise NoPoolSetError("No connection pool has been set")
        cnx = self._cnx_pool.lease()
        try:
            yield cnx
            cnx.commit()
        except BaseException:
            cnx.rollback()
            raise
        finally:
            self._cnx_pool.release(cnx)

    def query(self, sql: str) -> Query:
        """Start a query, use ``Query.add_parameter`` to bind named placeholders.

        Example::

            ormy.query("SELECT col FROM tmp WHERE col = :col").add_parameter("col", "1").select().one(thing)

        :param sql: the statement template
        """
        return Query(self, sql)

    def select(self, sql: str, *params) -> Fetch:
        """Bind positional parameters to a statement template for fetching results.

        :param sql: the statement template
        :param params: values for ``$1``, ``$2``, ... in order
        """
        return Query(self, sql).select(*params)

    def execute(self, sql: str, *params) -> int:
        """Bind positional parameters to a statement template and execute it.

        :param sql: the statement template
        :param params: values for ``$1``, ``$2``, ... in order
        :returns: the number of affected rows as reported by the driver
        """
        return Query(self, sql).execute(*params)
