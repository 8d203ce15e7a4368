"""Deterministic SQL builder.

The builder converts a validated payload into a single `select <call> as response` statement.
Function names come from the fixed allowlist in `src.aisql.functions`; every argument value is
rendered through `src.sql.literals`.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from src.aisql.functions import FunctionName, FunctionRef
from src.aisql.schema import (
    ArgsPayload,
    CategoryLabel,
    ClassifyArgs,
    CompleteArgs,
    CountTokensArgs,
    EmbedArgs,
    ExtractArgs,
    FileLocation,
    FilterArgs,
    ParseDocumentArgs,
    SentimentArgs,
    SimilarityArgs,
)
from src.sql.literals import SqlExpression, named_call, positional_call, quote, select_response


class SQLBuilderError(ValueError):
    """Raised when a payload cannot be converted into SQL."""


@dataclass(frozen=True)
class BuiltQuery:
    """SQL text ready for execution."""

    sql: str


def _file_reference(value: str | FileLocation | None) -> SqlExpression | None:
    if value is None:
        return None
    if isinstance(value, FileLocation):
        return SqlExpression(f"TO_FILE({quote(value.stage)}, {quote(value.path)})")
    return SqlExpression(value)


def _category_value(entry: str | CategoryLabel) -> str | dict[str, Any]:
    if isinstance(entry, CategoryLabel):
        return entry.model_dump(exclude_none=True)
    return entry


def _expect(payload: ArgsPayload, cls: type[Any]) -> Any:
    if not isinstance(payload, cls):
        raise SQLBuilderError(f"Expected {cls.__name__}, got {type(payload).__name__}")
    return payload


def _build_complete(ref: FunctionRef, payload: ArgsPayload) -> str:
    args: CompleteArgs = _expect(payload, CompleteArgs)

    if ref.is_legacy_complete:
        return positional_call(ref.sql_name, [args.model, args.prompt, args.legacy_options()])

    return named_call(
        ref.sql_name,
        [
            ("model", args.model),
            ("prompt", args.prompt),
            ("model_parameters", args.model_parameters),
            ("response_format", args.response_format),
            ("show_details", args.show_details),
        ],
    )


def _build_extract(ref: FunctionRef, payload: ArgsPayload) -> str:
    args: ExtractArgs = _expect(payload, ExtractArgs)
    return named_call(
        ref.sql_name,
        [
            ("text", args.text),
            ("file", _file_reference(args.file)),
            ("responseFormat", args.response_format),
        ],
    )


def _build_sentiment(ref: FunctionRef, payload: ArgsPayload) -> str:
    args: SentimentArgs = _expect(payload, SentimentArgs)
    return positional_call(ref.sql_name, [args.text, args.categories])


def _build_classify(ref: FunctionRef, payload: ArgsPayload) -> str:
    args: ClassifyArgs = _expect(payload, ClassifyArgs)
    return named_call(
        ref.sql_name,
        [
            ("input", args.input),
            ("list_of_categories", [_category_value(c) for c in args.categories]),
            ("config_object", args.config_object),
        ],
    )


def _build_count_tokens(ref: FunctionRef, payload: ArgsPayload) -> str:
    args: CountTokensArgs = _expect(payload, CountTokensArgs)
    if args.model_name is not None:
        return positional_call(ref.sql_name, [args.function_name, args.model_name, args.input_text])
    return positional_call(ref.sql_name, [args.function_name, args.input_text, args.categories])


def _build_embed(ref: FunctionRef, payload: ArgsPayload) -> str:
    args: EmbedArgs = _expect(payload, EmbedArgs)
    source = args.input if args.input is not None else _file_reference(args.input_file)
    return positional_call(ref.sql_name, [args.model, source])


def _build_similarity(ref: FunctionRef, payload: ArgsPayload) -> str:
    args: SimilarityArgs = _expect(payload, SimilarityArgs)
    if args.uses_files:
        first, second = _file_reference(args.input1_file), _file_reference(args.input2_file)
    else:
        first, second = args.input1, args.input2
    return positional_call(ref.sql_name, [first, second, args.config_object])


def _build_parse_document(ref: FunctionRef, payload: ArgsPayload) -> str:
    args: ParseDocumentArgs = _expect(payload, ParseDocumentArgs)
    return named_call(
        ref.sql_name,
        [
            ("file", _file_reference(args.file)),
            ("options", args.options),
        ],
    )


def _build_filter(ref: FunctionRef, payload: ArgsPayload) -> str:
    args: FilterArgs = _expect(payload, FilterArgs)
    return positional_call(ref.sql_name, [args.predicate, _file_reference(args.file)])


_BUILDERS: dict[FunctionName, Callable[[FunctionRef, ArgsPayload], str]] = {
    FunctionName.ai_complete: _build_complete,
    FunctionName.ai_extract: _build_extract,
    FunctionName.ai_sentiment: _build_sentiment,
    FunctionName.ai_classify: _build_classify,
    FunctionName.ai_count_tokens: _build_count_tokens,
    FunctionName.ai_embed: _build_embed,
    FunctionName.ai_similarity: _build_similarity,
    FunctionName.ai_parse_document: _build_parse_document,
    FunctionName.ai_filter: _build_filter,
}


def build_query(ref: FunctionRef, payload: ArgsPayload) -> BuiltQuery:
    """Build the SQL statement for a validated payload."""

    try:
        builder = _BUILDERS[ref.name]
    except KeyError as exc:
        raise SQLBuilderError(f"Unsupported function: {ref.name}") from exc

    return BuiltQuery(sql=select_response(builder(ref, payload)))
