"""Supported Cortex AI SQL functions and their accepted spellings.

Resolution is a pure, case-insensitive lookup: no partial or fuzzy matching. Every canonical name
also accepts its `SNOWFLAKE.CORTEX.`-qualified spelling. `SNOWFLAKE.CORTEX.COMPLETE` resolves to
`AI_COMPLETE` but keeps its own SQL spelling, which selects the legacy positional calling form.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from src.aisql.errors import ArgsError, ErrorKind


class FunctionName(StrEnum):
    """Canonical function identifiers."""

    ai_complete = "AI_COMPLETE"
    ai_extract = "AI_EXTRACT"
    ai_sentiment = "AI_SENTIMENT"
    ai_classify = "AI_CLASSIFY"
    ai_count_tokens = "AI_COUNT_TOKENS"
    ai_embed = "AI_EMBED"
    ai_similarity = "AI_SIMILARITY"
    ai_parse_document = "AI_PARSE_DOCUMENT"
    ai_filter = "AI_FILTER"


LEGACY_COMPLETE = "SNOWFLAKE.CORTEX.COMPLETE"
_QUALIFIED_PREFIX = "SNOWFLAKE.CORTEX."


@dataclass(frozen=True)
class FunctionRef:
    """A resolved function: canonical identity plus the SQL spelling to emit."""

    name: FunctionName
    sql_name: str

    @property
    def is_legacy_complete(self) -> bool:
        return self.sql_name == LEGACY_COMPLETE


def _build_spellings() -> dict[str, FunctionRef]:
    spellings: dict[str, FunctionRef] = {}
    for name in FunctionName:
        ref = FunctionRef(name=name, sql_name=name.value)
        spellings[name.value] = ref
        spellings[_QUALIFIED_PREFIX + name.value] = ref
    spellings[LEGACY_COMPLETE] = FunctionRef(name=FunctionName.ai_complete, sql_name=LEGACY_COMPLETE)
    return spellings


FUNCTION_SPELLINGS: dict[str, FunctionRef] = _build_spellings()


def resolve_function(raw: str | None) -> FunctionRef:
    """Resolve a raw function name into a `FunctionRef`.

    Raises:
        ArgsError: `MissingFunctionName` for blank input, `UnsupportedFunction` otherwise.
    """

    value = (raw or "").strip()
    if not value:
        raise ArgsError(
            ErrorKind.missing_function_name,
            "Missing function name - provide `function` input or set AI_FUNCTION.",
        )

    upper = value.upper()
    try:
        return FUNCTION_SPELLINGS[upper]
    except KeyError as exc:
        supported = ", ".join(FUNCTION_SPELLINGS)
        raise ArgsError(
            ErrorKind.unsupported_function,
            f"Unsupported function '{upper}'. Supported: {supported}.",
        ) from exc


def resolve_function_name(raw: str | None) -> FunctionName:
    """Resolve a raw function name into its canonical identifier."""

    return resolve_function(raw).name
