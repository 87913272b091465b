"""Implements binding of parameter values to the placeholders of a statement template."""

import typing
from dataclasses import dataclass

from ormy.binding.errors import UnboundPlaceholderError, UnresolvedPlaceholderError
from ormy.binding.renderers import TypeBinder
from ormy.binding.templating import Placeholder, Template


@dataclass(frozen=True)
class BoundStatement:
    """A statement ready for the driver: SQL text and, in native parameter mode, the values for its mung symbols."""

    sql: str
    parameters: tuple = ()


class ParameterBinder:
    """Matches parameters to placeholders and substitutes their rendered values into the statement."""

    def __init__(self, type_binder: TypeBinder):
        """Construct a parameter binder.

        :param type_binder: the registry used to validate and render parameter values
        """
        self._type_binder = type_binder

    def _resolve(self, value, mung_symbol: typing.Optional[str]):
        # Rendering validates the runtime type even when the raw value is what goes to the driver
        rendered = self._type_binder.render(value)
        return rendered if mung_symbol is None else value

    def bind(
        self,
        template: Template,
        ordered_params: typing.Sequence = (),
        named_params: typing.Mapping[str, typing.Any] = None,
        mung_symbol: str = None,
    ) -> BoundStatement:
        """Bind positional and named parameters to the placeholders of a template.

        Positional parameters are bound first, ``ordered_params[0]`` to every ``$1``, and so on; then named parameters
        in insertion order. Binding stops at the first parameter that fails.

        :param template: the parsed statement template
        :param ordered_params: values for ``$1``, ``$2``, ... in order
        :param named_params: values for ``:name`` placeholders keyed by name
        :param mung_symbol: when given, values are passed through as driver parameters behind this symbol instead of
                            being written into the statement as literals
        :returns: the bound statement
        :raises: UnresolvedPlaceholderError, UnsupportedTypeError, UnboundPlaceholderError
        """
        values = {}
        for ordinal, value in enumerate(ordered_params, start=1):
            placeholder = Placeholder(ordinal=ordinal)
            if placeholder not in template.placeholders:
                raise UnresolvedPlaceholderError(f"could not resolve ordinal parameter {placeholder}")
            values[placeholder] = self._resolve(value, mung_symbol)
        for name, value in (named_params or {}).items():
            placeholder = Placeholder(name=name)
            if placeholder not in template.placeholders:
                raise UnresolvedPlaceholderError(f"could not resolve named parameter {placeholder}")
            values[placeholder] = self._resolve(value, mung_symbol)
        unbound = [str(p) for p in template.placeholders if p not in values]
        if unbound:
            raise UnboundPlaceholderError(f"unbound parameter present: {', '.join(unbound)}")
        sql, parameters = template.render(values, mung_symbol)
        return BoundStatement(sql, parameters)
