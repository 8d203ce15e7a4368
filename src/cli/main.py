"""Render an AI SQL call without executing it.

Usage:
    python -m src.cli.main --function AI_SENTIMENT --args '{"text": "Great service"}'

Values not given on the command line fall back to `AI_FUNCTION` / `AI_ARGS` from the environment.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from src.aisql.dispatcher import dispatch, normalize_log_level
from src.aisql.errors import ArgsError
from src.config.logging import configure_logging
from src.config.settings import load_settings

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Render a Snowflake Cortex AI SQL call.")
    parser.add_argument("--function", help="Function name, e.g. AI_COMPLETE (default: AI_FUNCTION).")
    parser.add_argument("--args", help="JSON object with the function arguments (default: AI_ARGS).")
    parser.add_argument(
        "--log-level",
        help="MINIMAL or VERBOSE (default: SNOWFLAKE_LOG_LEVEL).",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point; returns the process exit code."""

    args = _build_parser().parse_args(argv)
    configure_logging()

    try:
        settings = load_settings()
    except RuntimeError as exc:
        logger.error("%s", exc)
        return 2

    function = args.function if args.function is not None else settings.ai_function
    args_text = args.args if args.args is not None else settings.ai_args
    log_level = normalize_log_level(args.log_level) if args.log_level else settings.log_level

    try:
        result = dispatch(function, args_text, log_level)
    except ArgsError as exc:
        logger.error("AI SQL arguments rejected kind=%s: %s", exc.kind, exc)
        return 1

    for line in result.summary_lines:
        logger.info(line)

    output = {"function": result.sql_name, "sql": result.query_text, "request": result.request}
    print(json.dumps(output, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
