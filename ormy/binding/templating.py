"""Implements a simple placeholder grammar / parser for SQL statement templates."""

import re
from typing import Any, List, Mapping, NamedTuple, Optional, Tuple, Union

from ormy.binding.errors import TemplateError

# fmt: off
from pyparsing import (  # noqa: I101
    alphanums, alphas, nums, c_style_comment,
    Combine, PrecededBy, QuotedString, Regex, Suppress, Word, WordEnd
)
# fmt: on


class Placeholder(NamedTuple):
    """A positional (``$1``) or named (``:name``) placeholder in a template."""

    ordinal: Optional[int] = None
    name: Optional[str] = None

    def __str__(self) -> str:
        """Return the placeholder as it is written in a template."""
        return f"${self.ordinal}" if self.name is None else f":{self.name}"


class Template:
    """Implements templating supporting only placeholder replacement.

    Placeholders are matched as whole tokens: ``$1`` is never found inside ``$10`` or ``$1a``, a ``::`` cast is not a
    named placeholder, and nothing inside a quoted literal, a quoted identifier or a comment is a placeholder. Escape
    string constants (``E'it\\'s'``) honour their backslash escapes.
    """

    # fmt: off
    WORD_CHARS    = alphanums + "_"                                                             # noqa: E221
    IDENTIFIER    = Word(alphas + "_", WORD_CHARS)                                              # noqa: E221
    ORDINAL       = Combine(Suppress("$") + Word(nums) + WordEnd(WORD_CHARS))("ordinal")        # noqa: E221
    NAMED         = Combine(~PrecededBy(":") + Suppress(":") + IDENTIFIER)("name")              # noqa: E221
    LINE_COMMENT  = Regex(r"--[^\n]*")                                                          # noqa: E221
    BLOCK_COMMENT = c_style_comment                                                             # noqa: E221
    ESCAPED       = Regex(r"(?<![\w$])[eE]'(?:[^'\\]|\\.|'')*'", flags=re.DOTALL)             # noqa: E221
    QUOTED        = (QuotedString("'", esc_quote="''", multiline=True, unquote_results=False) |   # noqa: E221
                     QuotedString('"', esc_quote='""', multiline=True, unquote_results=False))  # noqa: E221
    VERBATIM      = (LINE_COMMENT | BLOCK_COMMENT | ESCAPED | QUOTED)("verbatim")               # noqa: E221
    GRAMMAR       = VERBATIM | ORDINAL | NAMED                                                  # noqa: E221
    # fmt: on

    def __init__(self, sql_template: str):
        """Construct a placeholder replacement template.

        :param sql_template: the raw SQL template before parsing as a plain string.
        :raises: TemplateError
        """
        self._sql_template = sql_template
        self._parsed_template: List[Union[str, Placeholder]] = []
        placeholders = []
        position = 0
        for tokens, start, end in self.GRAMMAR.scan_string(sql_template):
            self._append_text(sql_template[position:start])
            position = end
            if "verbatim" in tokens:
                self._append_text(sql_template[start:end])
                continue
            if "ordinal" in tokens:
                placeholder = Placeholder(ordinal=int(tokens["ordinal"]))
                if placeholder.ordinal < 1:
                    line = sql_template.splitlines()[sql_template.count("\n", 0, start)]
                    col = start - (sql_template.rfind("\n", 0, start) + 1)
                    raise TemplateError(f"Ordinal placeholders start at $1:\n{line}\n{(' ' * col)}^")
            else:
                placeholder = Placeholder(name=tokens["name"])
            self._parsed_template.append(placeholder)
            if placeholder not in placeholders:
                placeholders.append(placeholder)
        self._append_text(sql_template[position:])
        self._placeholders = tuple(placeholders)

    def _append_text(self, text: str):
        if not text:
            return
        # If the previous element was a string, concat it with the new text otherwise append it
        if self._parsed_template and isinstance(self._parsed_template[-1], str):
            self._parsed_template[-1] += text
            return
        self._parsed_template.append(text)

    @property
    def placeholders(self) -> Tuple[Placeholder, ...]:
        """Return the distinct placeholders of the template in order of first appearance."""
        return self._placeholders

    @property
    def ordinals(self) -> Tuple[int, ...]:
        """Return the distinct positional ordinals used by the template, sorted."""
        return tuple(sorted(p.ordinal for p in self._placeholders if p.name is None))

    @property
    def names(self) -> Tuple[str, ...]:
        """Return the distinct names of named placeholders in order of first appearance."""
        return tuple(p.name for p in self._placeholders if p.name is not None)

    def __str__(self) -> str:
        """Return a simple representation of the template."""
        return self._sql_template

    def render(self, values: Mapping[Placeholder, Any], mung_symbol: str = None) -> Tuple[str, tuple]:
        """Render the template to SQL execution arguments.

        Every placeholder of the template must have an entry in ``values``.

        :param values: the literal text (or raw value when a mung symbol is given) for each placeholder
        :param mung_symbol: if given, placeholders are replaced by this symbol and their values are returned as
                            parameters for the driver instead of being written into the statement

        :returns: a tuple where the first element is a SQL statement and the second is a tuple of its parameters
        """
        munged = ""
        parameters = []
        for frag in self._parsed_template:
            if isinstance(frag, Placeholder):
                value = values[frag]
                if mung_symbol is not None:
                    parameters.append(value)
                    frag = mung_symbol
                else:
                    frag = str(value)
            munged += frag
        return munged, tuple(parameters)
