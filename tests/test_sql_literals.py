"""Tests for SQL literal rendering (quoting, PARSE_JSON embedding, verbatim expressions)."""

from __future__ import annotations

import pytest

from src.sql.literals import (
    SqlExpression,
    embed_structured,
    named_call,
    positional_call,
    quote,
    render_value,
)


def test_quote_doubles_single_quotes() -> None:
    assert quote("O'Brien") == "'O''Brien'"
    assert quote("") == "''"


@pytest.mark.parametrize("text", ["'", "''", "it's", "a'b'c", "'; drop table t; --"])
def test_quote_round_trips(text: str) -> None:
    quoted = quote(text)
    assert quoted.startswith("'") and quoted.endswith("'")
    assert quoted[1:-1].replace("''", "'") == text


def test_embed_structured_is_compact_and_escaped() -> None:
    value = {"name": "O'Brien", "tags": ["a", "b"]}
    assert embed_structured(value) == """PARSE_JSON('{"name":"O''Brien","tags":["a","b"]}')"""


def test_embed_structured_keeps_non_ascii() -> None:
    assert embed_structured(["café"]) == """PARSE_JSON('["café"]')"""


def test_render_value_types() -> None:
    assert render_value("x") == "'x'"
    assert render_value(True) == "TRUE"
    assert render_value(False) == "FALSE"
    assert render_value([1, 2]) == "PARSE_JSON('[1,2]')"
    assert render_value(SqlExpression("TO_FILE('@s', 'a.pdf')")) == "TO_FILE('@s', 'a.pdf')"


def test_render_value_rejects_unknown_types() -> None:
    with pytest.raises(TypeError):
        render_value(object())


def test_calls_omit_missing_arguments() -> None:
    assert positional_call("AI_FILTER", ["p", None]) == "AI_FILTER('p')"
    assert named_call("AI_COMPLETE", [("model", "m"), ("show_details", None)]) == (
        "AI_COMPLETE(model => 'm')"
    )
