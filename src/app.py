"""Application composition root.

This module wires settings, the pure dispatcher, and an external query executor into one AI SQL
call and shapes the result record reported back to the caller.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

from src.aisql.dispatcher import DispatchResult, dispatch
from src.aisql.errors import ArgsError, ErrorKind
from src.config.settings import Settings
from src.db.query import QueryExecutionError, QueryExecutor, QueryResult, extract_first_value

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AiSqlResult:
    """Outcome of one executed AI SQL call."""

    dispatched: DispatchResult
    query: QueryResult
    value: Any

    def to_output(self) -> dict[str, Any]:
        """The JSON document reported for the call."""

        return {
            "function": self.dispatched.sql_name,
            "request": self.dispatched.request,
            "result": {
                "queryId": self.query.query_id,
                "rowCount": self.query.row_count,
                "rows": [dict(row) for row in self.query.rows],
                "value": self.value,
            },
        }

    @property
    def result_text(self) -> str:
        """Scalar value as text: strings as-is, other values as JSON, nothing as ``""``."""

        if self.value is None:
            return ""
        if isinstance(self.value, str):
            return self.value
        return json.dumps(self.value, ensure_ascii=False)


async def run_ai_sql(settings: Settings, executor: QueryExecutor) -> AiSqlResult:
    """Dispatch the configured call, execute it once, and build the result record.

    Raises:
        ArgsError: If the function name or arguments are invalid (nothing is executed).
        QueryExecutionError: If the executor fails; the error is not retried.
    """

    if settings.ai_args is None or not settings.ai_args.strip():
        raise ArgsError(
            ErrorKind.missing_input,
            "Missing args input - provide 'args' or set AI_ARGS.",
        )

    dispatched = dispatch(settings.ai_function, settings.ai_args, settings.log_level)
    for line in dispatched.summary_lines:
        logger.info(line)

    try:
        result = await executor.execute(dispatched.query_text, settings.connection_config())
    except QueryExecutionError:
        raise
    except Exception as exc:
        raise QueryExecutionError(f"{dispatched.sql_name} call failed: {exc}") from exc

    value = extract_first_value(result.rows)
    logger.info("Cortex AI SQL call succeeded query_id=%s rows=%d", result.query_id, result.row_count)
    return AiSqlResult(dispatched=dispatched, query=result, value=value)
