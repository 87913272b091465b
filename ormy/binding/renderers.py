"""Renders parameter values as SQL literals, dispatched on the value's runtime type."""

import typing

from ormy.binding.errors import UnsupportedTypeError
from ormy.binding.locks import ReadWriteLock

RenderFunction = typing.Callable[[typing.Any], str]


def render_integer(value) -> str:  # noqa: D103
    return "%d" % value


def render_float(value) -> str:  # noqa: D103
    return "%f" % value


def render_string(value) -> str:
    """Wrap the value in single quotes.

    .. warning::
        Embedded quotes are not escaped, so untrusted strings can alter the statement. Use native parameters on the
        facade when values come from outside the application.
    """
    return "'%s'" % value


def render_boolean(value) -> str:  # noqa: D103
    return "true" if value else "false"


BUILTIN_RENDERERS = {
    "int": render_integer,
    "float": render_float,
    "str": render_string,
    "bool": render_boolean,
}


class TypeBinder:
    """A registry of literal renderers keyed by runtime type name.

    One binder is meant to be shared by every query of a facade (or several facades); reads take the shared side of
    the lock and registration takes the exclusive side.
    """

    def __init__(self):
        """Construct a type binder with the built-in renderers for ``int``, ``float``, ``str`` and ``bool``."""
        self._lock = ReadWriteLock()
        self._renderers: typing.Dict[str, RenderFunction] = {}
        with self._lock.write():
            self._renderers.update(BUILTIN_RENDERERS)

    def register(self, type_name: str, render_fn: RenderFunction):
        """Register (or replace) the renderer used for values whose runtime type has the given name.

        :param type_name: the ``__name__`` of the runtime type, e.g. ``"Decimal"``
        :param render_fn: a callable returning the SQL literal for a value of that type
        """
        with self._lock.write():
            self._renderers[type_name] = render_fn

    def _lookup(self, value) -> typing.Optional[RenderFunction]:
        with self._lock.read():
            return self._renderers.get(type(value).__name__)

    def supports(self, value) -> bool:
        """Return True if the runtime type of the value has a renderer."""
        return self._lookup(value) is not None

    def render(self, value) -> str:
        """Render the value as a SQL literal.

        :param value: the parameter value to render
        :returns: the literal text to substitute for the value's placeholder
        :raises: UnsupportedTypeError
        """
        render_fn = self._lookup(value)
        if render_fn is None:
            raise UnsupportedTypeError(f"Unsupported type: {type(value).__name__}")
        return render_fn(value)
