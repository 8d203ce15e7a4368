"""Function name + raw arguments -> SQL text and request echo.

The dispatcher is pure: it resolves the function, validates the arguments, builds the SQL and
returns everything the caller needs to log and execute the call. It never retries and never
returns a partial result.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from src.aisql.functions import FunctionName, resolve_function
from src.aisql.normalize import normalize_args
from src.sql.builder import build_query


class LogLevel(StrEnum):
    """How much detail the summary lines carry."""

    minimal = "MINIMAL"
    verbose = "VERBOSE"


def normalize_log_level(value: str | None) -> LogLevel:
    """Map any input to a `LogLevel`; unknown values fall back to MINIMAL."""

    upper = (value or LogLevel.minimal).strip().upper()
    return LogLevel.verbose if upper == LogLevel.verbose else LogLevel.minimal


@dataclass(frozen=True)
class DispatchResult:
    """Everything produced for one AI SQL call."""

    function: FunctionName
    sql_name: str
    query_text: str
    request: dict[str, Any]
    summary_lines: tuple[str, ...]


def dispatch(
        function: str | None,
        args_text: str | None,
        log_level: LogLevel = LogLevel.minimal,
) -> DispatchResult:
    """Translate a function name and JSON arguments into SQL.

    Raises:
        ArgsError: On the first violated constraint.
    """

    ref = resolve_function(function)
    payload = normalize_args(ref, args_text)
    built = build_query(ref, payload)
    request = payload.model_dump(mode="json", exclude_none=True)

    if log_level == LogLevel.verbose:
        lines = [f"SQL: {built.sql}", f"Args: {json.dumps(request, ensure_ascii=False)}"]
    else:
        lines = [f"Function: {ref.sql_name}", *payload.summary_lines()]

    return DispatchResult(
        function=ref.name,
        sql_name=ref.sql_name,
        query_text=built.sql,
        request=request,
        summary_lines=tuple(lines),
    )
