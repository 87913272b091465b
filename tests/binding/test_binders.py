"""Tests binding parameters to the placeholders of templates."""

from ormy.binding.binders import BoundStatement, ParameterBinder
from ormy.binding.errors import (
    BindingError,
    UnboundPlaceholderError,
    UnresolvedPlaceholderError,
    UnsupportedTypeError,
)
from ormy.binding.renderers import TypeBinder
from ormy.binding.templating import Template

import pytest


@pytest.fixture()
def binder() -> ParameterBinder:
    """Provide a parameter binder with the built-in renderers."""
    return ParameterBinder(TypeBinder())


def test_bind_string(binder: ParameterBinder):
    """Tests a string value is wrapped in single quotes."""
    bound = binder.bind(Template("SELECT col, $1 two FROM tmp"), ["Two"])
    assert bound == BoundStatement("SELECT col, 'Two' two FROM tmp", ())


@pytest.mark.parametrize(
    "sql, params, expected",
    (
        ("SELECT $1, $2", (2, 2.02), "SELECT 2, 2.020000"),
        ("SELECT $1, $2, $3, $4", ("a", 1, 1.5, False), "SELECT 'a', 1, 1.500000, false"),
        ("SELECT $2, $1, $2", ("a", "b"), "SELECT 'b', 'a', 'b'"),
        ("SELECT $10, $9, $8, $7, $6, $5, $4, $3, $2, $1", tuple(range(1, 11)), "SELECT 10, 9, 8, 7, 6, 5, 4, 3, 2, 1"),
        (
            "SELECT col -- don't care\nFROM tmp WHERE a = $1 AND b = 'x'",
            ("v",),
            "SELECT col -- don't care\nFROM tmp WHERE a = 'v' AND b = 'x'",
        ),
        ("SELECT E'it\\'s' AS q, $1 AS v, 'y' AS w", (1,), "SELECT E'it\\'s' AS q, 1 AS v, 'y' AS w"),
        ("SELECT 1", (), "SELECT 1"),
        ("", (), ""),
    ),
)
def test_bind_ordinal(binder: ParameterBinder, sql: str, params: tuple, expected: str):
    """Tests every placeholder is replaced when as many parameters as placeholders are given."""
    bound = binder.bind(Template(sql), params)
    assert bound.sql == expected
    assert bound.parameters == ()
    assert Template(bound.sql).placeholders == ()


def test_rendered_values_are_not_rebound(binder: ParameterBinder):
    """Tests a value that looks like a placeholder is not bound again by later parameters."""
    bound = binder.bind(Template("SELECT $1, $2"), ("$2", "x"))
    assert bound.sql == "SELECT '$2', 'x'"


@pytest.mark.parametrize(
    "sql, params, error, match",
    (
        ("SELECT $1, $2", ("a",), UnboundPlaceholderError, "unbound parameter present: \\$2"),
        ("SELECT $1, $2, :name", (), UnboundPlaceholderError, "\\$1, \\$2, :name"),
        ("SELECT $1", ("a", "b"), UnresolvedPlaceholderError, "could not resolve ordinal parameter \\$2"),
        ("SELECT $2", ("a", "b"), UnresolvedPlaceholderError, "could not resolve ordinal parameter \\$1"),
        ("SELECT 1", ("a",), UnresolvedPlaceholderError, "could not resolve ordinal parameter \\$1"),
        ("SELECT $1abc", ("a",), UnresolvedPlaceholderError, "could not resolve ordinal parameter \\$1"),
        ("SELECT $1, $2", (None, "b"), UnsupportedTypeError, "Unsupported type: NoneType"),
        ("SELECT $1, $2", ([1], object()), UnsupportedTypeError, "Unsupported type: list"),
        ("SELECT $1", (object(), "a"), UnsupportedTypeError, "Unsupported type: object"),
    ),
)
def test_bind_ordinal_errors(binder: ParameterBinder, sql: str, params: tuple, error, match: str):
    """Tests binding fails for missing placeholders, left over placeholders and unsupported values."""
    with pytest.raises(error, match=match) as exc_info:
        binder.bind(Template(sql), params)
    assert isinstance(exc_info.value, BindingError)


def test_bind_first_error_wins(binder: ParameterBinder):
    """Tests binding stops at the first failing parameter."""
    with pytest.raises(UnresolvedPlaceholderError, match="\\$2"):
        binder.bind(Template("SELECT $1, $3"), ("a", object(), "c"))


def test_bind_named(binder: ParameterBinder):
    """Tests binding named parameters, alone and mixed with positional ones."""
    template = Template("SELECT * FROM tmp WHERE id = :id AND name = :name OR id > :id")
    bound = binder.bind(template, named_params={"name": "bob", "id": 5})
    assert bound.sql == "SELECT * FROM tmp WHERE id = 5 AND name = 'bob' OR id > 5"

    bound = binder.bind(Template("SELECT $1 WHERE x = :x"), ["a"], {"x": True})
    assert bound.sql == "SELECT 'a' WHERE x = true"


@pytest.mark.parametrize(
    "sql, named, error, match",
    (
        ("SELECT :a", {"b": 1}, UnresolvedPlaceholderError, "could not resolve named parameter :b"),
        ("SELECT :a, :b", {"a": 1}, UnboundPlaceholderError, "unbound parameter present: :b"),
        ("SELECT :a", {"a": None}, UnsupportedTypeError, "NoneType"),
        ("SELECT 'x = :a'", {"a": 1}, UnresolvedPlaceholderError, ":a"),
    ),
)
def test_bind_named_errors(binder: ParameterBinder, sql: str, named: dict, error, match: str):
    """Tests named binding fails the same way positional binding does."""
    with pytest.raises(error, match=match):
        binder.bind(Template(sql), named_params=named)


def test_bind_native(binder: ParameterBinder):
    """Tests native binding passes raw values to the driver but still validates their types."""
    bound = binder.bind(Template("SELECT $1, $2, $1 WHERE x = :x"), ("it's", 2.5), {"x": 3}, mung_symbol="?")
    assert bound == BoundStatement("SELECT ?, ?, ? WHERE x = ?", ("it's", 2.5, "it's", 3))
    with pytest.raises(UnsupportedTypeError):
        binder.bind(Template("SELECT $1"), (b"raw",), mung_symbol="?")
