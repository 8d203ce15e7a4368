"""SQL literal rendering.

This module is the only place where argument values are turned into SQL text. Strings become
single-quoted literals, structured values are embedded as `PARSE_JSON('<json>')`, and file
references (`SqlExpression`) are inserted verbatim because they are nested calls, not literals.
"""

from __future__ import annotations

import json
from typing import Any


class SqlExpression(str):
    """A pre-formed SQL call expression (e.g. `TO_FILE('@stage', 'a.pdf')`) inserted unescaped."""

    __slots__ = ()


def quote(text: str) -> str:
    """Return `text` as a single-quoted SQL literal with embedded quotes doubled."""

    escaped = text.replace("'", "''")
    return f"'{escaped}'"


def to_json_text(value: Any) -> str:
    """Serialize a JSON-like value to compact text."""

    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, allow_nan=False)


def embed_structured(value: Any) -> str:
    """Return `PARSE_JSON('<compact json>')` for an object/array value."""

    return f"PARSE_JSON({quote(to_json_text(value))})"


def render_value(value: Any) -> str:
    """Render one argument value into SQL text."""

    if isinstance(value, SqlExpression):
        return str(value)
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, str):
        return quote(value)
    if isinstance(value, (dict, list, tuple)):
        return embed_structured(value)
    raise TypeError(f"Unsupported SQL argument value: {type(value).__name__}")


def positional_call(function_sql: str, args: list[Any]) -> str:
    """Render `FN(a, b, ...)`; `None` arguments are omitted."""

    rendered = ", ".join(render_value(arg) for arg in args if arg is not None)
    return f"{function_sql}({rendered})"


def named_call(function_sql: str, args: list[tuple[str, Any]]) -> str:
    """Render `FN(key => value, ...)`; `None` values are omitted."""

    rendered = ", ".join(
        f"{key} => {render_value(value)}" for key, value in args if value is not None
    )
    return f"{function_sql}({rendered})"


def select_response(call_sql: str) -> str:
    """Wrap a call expression into the scalar statement sent to Snowflake."""

    return f"select {call_sql} as response"
