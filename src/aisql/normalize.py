"""Raw JSON arguments -> validated payload."""

from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError

from src.aisql.errors import ArgsError, ErrorKind, args_error_from_validation
from src.aisql.functions import FunctionRef
from src.aisql.schema import PAYLOAD_MODELS, ArgsPayload, CompleteArgs


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not a valid JSON value")


def parse_json_object(raw: str | None, label: str = "args") -> dict[str, Any]:
    """Decode `raw` and require a JSON object.

    Raises:
        ArgsError: `MissingInput`, `InvalidJson` or `WrongShape`.
    """

    trimmed = (raw or "").strip()
    if not trimmed:
        raise ArgsError(ErrorKind.missing_input, f"{label} cannot be empty.")

    try:
        parsed = json.loads(trimmed, parse_constant=_reject_constant)
    except ValueError as exc:
        raise ArgsError(ErrorKind.invalid_json, f"Invalid {label} JSON: {exc}") from exc

    if not isinstance(parsed, dict):
        raise ArgsError(ErrorKind.wrong_shape, f"{label} must be a JSON object.")
    return parsed


def collapse_aliases(
        obj: dict[str, Any],
        aliases: dict[str, tuple[str, ...]],
        *,
        function: str,
) -> dict[str, Any]:
    """Move alternate spellings into their canonical slot.

    JSON `null` values are dropped first, so they count as absent. Supplying more than one spelling
    of the same field is an `AliasConflict`.
    """

    values = {key: value for key, value in obj.items() if value is not None}

    for field, alternates in aliases.items():
        supplied = [name for name in (field, *alternates) if name in values]
        if len(supplied) > 1:
            raise ArgsError(
                ErrorKind.alias_conflict,
                f"{function}: provide only one of {', '.join(supplied)}.",
                field=field,
            )
        if supplied and supplied[0] != field:
            values[field] = values.pop(supplied[0])

    return values


def normalize_args(ref: FunctionRef, raw: str | None) -> ArgsPayload:
    """Parse raw argument text into the validated payload for `ref`."""

    model = PAYLOAD_MODELS[ref.name]
    obj = parse_json_object(raw)
    values = collapse_aliases(obj, model.FIELD_ALIASES, function=ref.sql_name)

    try:
        payload = model.model_validate(values)
    except ValidationError as exc:
        raise args_error_from_validation(exc, function=ref.sql_name) from exc

    # The positional SNOWFLAKE.CORTEX.COMPLETE form has no show_details argument.
    if (
            ref.is_legacy_complete
            and isinstance(payload, CompleteArgs)
            and payload.show_details is not None
    ):
        raise ArgsError(
            ErrorKind.unsupported_argument,
            f"{ref.sql_name}: show_details is only supported by AI_COMPLETE.",
            field="show_details",
        )

    return payload
