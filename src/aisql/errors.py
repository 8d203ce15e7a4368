"""Argument validation errors.

Every validation failure is raised where it is detected and carries a machine-readable `ErrorKind`.
Pydantic validation errors are translated into a single `ArgsError` (the first reported problem).
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import ValidationError


class ErrorKind(StrEnum):
    """Supported failure kinds."""

    missing_input = "MissingInput"
    invalid_json = "InvalidJson"
    wrong_shape = "WrongShape"
    missing_field = "MissingField"
    blank_field = "BlankField"
    type_mismatch = "TypeMismatch"
    alias_conflict = "AliasConflict"
    mutually_exclusive_violation = "MutuallyExclusiveViolation"
    bounds_violation = "BoundsViolation"
    unexpected_field = "UnexpectedField"
    unsupported_argument = "UnsupportedArgument"
    unsupported_function = "UnsupportedFunction"
    missing_function_name = "MissingFunctionName"


class ArgsError(ValueError):
    """Raised when a function name or its arguments cannot be turned into a valid payload."""

    def __init__(self, kind: ErrorKind, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.field = field


# Custom error types raised from schema validators (see `src.aisql.schema`).
_CUSTOM_ERROR_KINDS: dict[str, ErrorKind] = {
    "blank_field": ErrorKind.blank_field,
    "bounds_violation": ErrorKind.bounds_violation,
    "mutually_exclusive_violation": ErrorKind.mutually_exclusive_violation,
    "unsupported_argument": ErrorKind.unsupported_argument,
    "file_reference": ErrorKind.type_mismatch,
    "missing": ErrorKind.missing_field,
    "extra_forbidden": ErrorKind.unexpected_field,
}


def _format_loc(loc: tuple[int | str, ...]) -> str:
    # Union members append their type tags to `loc`; only the field name and list index matter.
    if not loc:
        return ""
    field = str(loc[0])
    if len(loc) > 1 and isinstance(loc[1], int):
        field += f"[{loc[1]}]"
    return field


def args_error_from_validation(exc: ValidationError, *, function: str) -> ArgsError:
    """Translate the first Pydantic error into an `ArgsError`.

    Any error type that is not one of the custom kinds (`string_type`, `dict_type`, `bool_type`,
    union mismatches, ...) is reported as a type mismatch.
    """

    errors = exc.errors(include_url=False)
    if not errors:
        return ArgsError(ErrorKind.wrong_shape, f"{function} arguments are invalid.")

    first = errors[0]
    kind = _CUSTOM_ERROR_KINDS.get(first["type"], ErrorKind.type_mismatch)
    field = _format_loc(tuple(first["loc"])) or None

    if kind == ErrorKind.missing_field:
        message = f"{function}: missing {field}."
    elif kind == ErrorKind.unexpected_field:
        message = f"{function}: unexpected field {field}."
    elif field:
        message = f"{function}: {field} - {first['msg']}"
    else:
        message = f"{function}: {first['msg']}"
    return ArgsError(kind, message, field=field)
