"""End-to-end tests for dispatch: name + raw JSON -> SQL, request echo and summary lines."""

from __future__ import annotations

import json

import pytest

from src.aisql.dispatcher import LogLevel, dispatch, normalize_log_level
from src.aisql.errors import ArgsError, ErrorKind
from src.aisql.functions import FunctionName


def test_complete_minimal_call() -> None:
    result = dispatch("ai_complete", '{"model":"snowflake-arctic","prompt":"Hi"}')

    assert result.function == FunctionName.ai_complete
    assert result.query_text == (
        "select AI_COMPLETE(model => 'snowflake-arctic', prompt => 'Hi') as response"
    )
    assert result.request == {"model": "snowflake-arctic", "prompt": "Hi"}
    assert result.summary_lines == (
        "Function: AI_COMPLETE",
        "Model: snowflake-arctic",
        "Prompt length: 2 chars",
    )


def test_similarity_two_literals() -> None:
    result = dispatch("AI_SIMILARITY", '{"input1":"a","input2":"b"}')
    assert result.query_text == "select AI_SIMILARITY('a', 'b') as response"
    assert result.request == {"input1": "a", "input2": "b"}


def test_quote_in_prompt_is_doubled() -> None:
    result = dispatch("AI_COMPLETE", json.dumps({"model": "m", "prompt": "Hello O'Brien"}))
    assert "'Hello O''Brien'" in result.query_text
    assert result.request["prompt"] == "Hello O'Brien"


def test_count_tokens_call() -> None:
    result = dispatch(
        "SNOWFLAKE.CORTEX.AI_COUNT_TOKENS",
        '{"function_name":"AI_COMPLETE","model_name":"llama3.1-8b","input_text":"hi"}',
    )
    assert result.sql_name == "AI_COUNT_TOKENS"
    assert result.query_text == "select AI_COUNT_TOKENS('ai_complete', 'llama3.1-8b', 'hi') as response"
    assert result.request["function_name"] == "ai_complete"


def test_echo_uses_canonical_field_names() -> None:
    result = dispatch(
        "AI_CLASSIFY",
        '{"input":"x","list_of_categories":["a","a","b"],"config":{"task_description":"t"}}',
    )
    assert result.request == {
        "input": "x",
        "categories": ["a", "b"],
        "config_object": {"task_description": "t"},
    }


def test_echo_of_file_references() -> None:
    result = dispatch(
        "AI_SIMILARITY",
        json.dumps(
            {
                "input1_file": "TO_FILE('@i', '1.png')",
                "input2_file": {"stage": "@i", "path": "2.png"},
            }
        ),
    )
    assert result.request == {
        "input1_file": "TO_FILE('@i', '1.png')",
        "input2_file": {"stage": "@i", "path": "2.png"},
    }


def test_verbose_lines_carry_sql_and_args() -> None:
    result = dispatch("AI_SENTIMENT", '{"text":"ok"}', LogLevel.verbose)
    assert result.summary_lines == (
        "SQL: select AI_SENTIMENT('ok') as response",
        'Args: {"text": "ok"}',
    )


def test_unsupported_function_fails_before_parsing_args() -> None:
    with pytest.raises(ArgsError) as exc_info:
        dispatch("AI_TRANSLATE", "not json")
    assert exc_info.value.kind == ErrorKind.unsupported_function


def test_first_violation_is_reported() -> None:
    with pytest.raises(ArgsError) as exc_info:
        dispatch("AI_EXTRACT", '{"response_format":{},"text":"a","file":"TO_FILE(\'@s\', \'a\')"}')
    assert exc_info.value.kind == ErrorKind.mutually_exclusive_violation
    assert str(exc_info.value).startswith("AI_EXTRACT:")


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(None, LogLevel.minimal), ("verbose", LogLevel.verbose), ("debug", LogLevel.minimal)],
)
def test_normalize_log_level(raw: str | None, expected: LogLevel) -> None:
    assert normalize_log_level(raw) == expected


def test_legacy_complete_accepts_options() -> None:
    result = dispatch(
        "SNOWFLAKE.CORTEX.COMPLETE",
        '{"model":"m","prompt":"p","options":{"temperature":0.2}}',
    )
    assert result.query_text == (
        """select SNOWFLAKE.CORTEX.COMPLETE('m', 'p', PARSE_JSON('{"temperature":0.2}')) as response"""
    )
    assert result.request == {"model": "m", "prompt": "p", "model_parameters": {"temperature": 0.2}}


def test_nan_never_reaches_sql() -> None:
    with pytest.raises(ArgsError) as exc_info:
        dispatch("AI_COMPLETE", '{"model":"m","prompt":"p","model_parameters":{"t":NaN}}')
    assert exc_info.value.kind == ErrorKind.invalid_json


def test_multi_statement_file_expression_is_rejected() -> None:
    with pytest.raises(ArgsError) as exc_info:
        dispatch(
            "AI_PARSE_DOCUMENT",
            json.dumps({"file": "TO_FILE('@s','a') as x; drop table t; select f()"}),
        )
    assert exc_info.value.kind == ErrorKind.type_mismatch
