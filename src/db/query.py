"""Query execution boundary.

Connecting to Snowflake and running statements is done by an external executor. This module only
defines the contract the runner relies on and the scalar extraction applied to the result.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

from src.config.settings import ConnectionConfig


class QueryExecutionError(RuntimeError):
    """Raised when the executor fails to run a statement."""


@dataclass(frozen=True)
class QueryResult:
    """Rows returned by the executor plus statement metadata."""

    rows: Sequence[Mapping[str, Any]] = field(default_factory=tuple)
    row_count: int = 0
    query_id: str | None = None


class QueryExecutor(Protocol):
    """Runs one SQL statement with the given connection configuration."""

    async def execute(self, sql: str, config: ConnectionConfig) -> QueryResult:
        ...


def extract_first_value(rows: Sequence[Mapping[str, Any]]) -> Any:
    """Return the first column of the first row, or `None` if there is nothing to return."""

    if not rows:
        return None

    row = rows[0]
    for key in row:
        return row[key]
    return None
