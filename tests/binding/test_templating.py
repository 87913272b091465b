"""Tests for the templating implementation of the binding module."""

from typing import Dict, Tuple

from ormy.binding.errors import TemplateError
from ormy.binding.templating import Placeholder, Template

import pytest

from tests.binding.template_cases import GOOD_CASES, INVALID_CASES


@pytest.mark.parametrize("sql, ex_placeholders, values, ex_render", GOOD_CASES)
def test_valid_templates(sql: str, ex_placeholders: Tuple[Placeholder], values: Dict, ex_render: str):
    """Tests functionality around well-formed SQL template strings."""
    template = Template(sql)
    assert template.placeholders == ex_placeholders
    assert str(template) == sql
    statement, parameters = template.render(values)
    assert statement == ex_render
    assert parameters == ()


@pytest.mark.parametrize("sql, error", INVALID_CASES)
def test_invalid_template(sql: str, error: str):
    """Tests an invalid template raises the appropriate error."""
    with pytest.raises(TemplateError, match=error):
        Template(sql)


def test_ordinals_and_names():
    """Tests the distinct ordinals and names reported by a template."""
    template = Template("SELECT $3, :b, $1, :a, $3, :b")
    assert template.ordinals == (1, 3)
    assert template.names == ("b", "a")


def test_render_with_mung_symbol():
    """Tests rendering with a mung symbol passes values through as parameters, once per occurrence."""
    template = Template("SELECT * FROM tmp WHERE a = $1 OR b = $1 AND c = :c")
    values = {Placeholder(ordinal=1): "one", Placeholder(name="c"): 3}
    statement, parameters = template.render(values, "%s")
    assert statement == "SELECT * FROM tmp WHERE a = %s OR b = %s AND c = %s"
    assert parameters == ("one", "one", 3)


def test_placeholder_str():
    """Tests placeholders print the way they are written in a template."""
    assert str(Placeholder(ordinal=12)) == "$12"
    assert str(Placeholder(name="some_name")) == ":some_name"
