"""Tests for function name resolution (canonical names + qualified spellings)."""

from __future__ import annotations

import pytest

from src.aisql.errors import ArgsError, ErrorKind
from src.aisql.functions import (
    FUNCTION_SPELLINGS,
    LEGACY_COMPLETE,
    FunctionName,
    resolve_function,
    resolve_function_name,
)


@pytest.mark.parametrize("spelling", sorted(FUNCTION_SPELLINGS))
def test_every_spelling_resolves_case_insensitively_and_idempotently(spelling: str) -> None:
    resolved = resolve_function_name(f"  {spelling.lower()} ")
    assert resolved == resolve_function_name(spelling)
    assert resolve_function_name(resolved) == resolved


def test_qualified_alias_resolves_to_canonical_name() -> None:
    ref = resolve_function("snowflake.cortex.ai_sentiment")
    assert ref.name == FunctionName.ai_sentiment
    assert ref.sql_name == "AI_SENTIMENT"
    assert not ref.is_legacy_complete


def test_legacy_complete_keeps_its_sql_spelling() -> None:
    ref = resolve_function("Snowflake.Cortex.Complete")
    assert ref.name == FunctionName.ai_complete
    assert ref.sql_name == LEGACY_COMPLETE
    assert ref.is_legacy_complete


def test_nine_canonical_functions() -> None:
    assert len(FunctionName) == 9
    assert {ref.name for ref in FUNCTION_SPELLINGS.values()} == set(FunctionName)


@pytest.mark.parametrize("raw", [None, "", "   "])
def test_blank_function_name_is_rejected(raw: str | None) -> None:
    with pytest.raises(ArgsError) as exc_info:
        resolve_function(raw)
    assert exc_info.value.kind == ErrorKind.missing_function_name


@pytest.mark.parametrize("raw", ["AI_COMPLET", "COMPLETE", "snowflake.cortex", "AI_TRANSLATE"])
def test_unknown_function_is_rejected(raw: str) -> None:
    with pytest.raises(ArgsError) as exc_info:
        resolve_function(raw)
    assert exc_info.value.kind == ErrorKind.unsupported_function
    assert raw.upper() in str(exc_info.value)
