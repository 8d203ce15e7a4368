"""Per-function argument schema (Pydantic models).

This schema is the contract between the raw JSON arguments and the SQL builder. Each Cortex AI SQL
function has one payload model; the builder only ever sees validated instances.

Conventions shared by every payload:
    - unknown keys are rejected (`extra="forbid"`);
    - strings are never coerced from other JSON types;
    - alternate field spellings are declared once in `FIELD_ALIASES` and collapsed before
      validation (see `src.aisql.normalize.collapse_aliases`);
    - optional fields are `None` when absent and are dropped from the request echo.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from typing import Annotated, Any, ClassVar, TypeVar

from pydantic import AfterValidator, BaseModel, ConfigDict, Strict, field_validator, model_validator
from pydantic_core import PydanticCustomError

from src.aisql.functions import FunctionName
from src.sql.literals import SqlExpression

T = TypeVar("T")

AI_FUNCTION_PREFIX = "ai"
SENTIMENT_MAX_CATEGORIES = 10
SENTIMENT_MAX_CATEGORY_LENGTH = 30
CLASSIFY_MIN_CATEGORIES = 2

_CALL_NAME_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_$.]*\s*\(")


def _blank_error() -> PydanticCustomError:
    return PydanticCustomError("blank_field", "cannot be blank")


def _require_non_blank(value: str) -> str:
    if not value.strip():
        raise _blank_error()
    return value


def _require_trimmed(value: str) -> str:
    trimmed = value.strip()
    if not trimmed:
        raise _blank_error()
    return trimmed


def is_single_call(text: str) -> bool:
    """Whether `text` is exactly one `NAME(...)` call.

    Quoted literals (with `''` escapes) are skipped; the parenthesis opened after the name must
    close on the last character, and no unquoted `;` may appear.
    """

    match = _CALL_NAME_RE.match(text)
    if match is None:
        return False

    depth = 0
    in_literal = False
    i = match.end() - 1
    while i < len(text):
        ch = text[i]
        if in_literal:
            if ch == "'":
                if text[i + 1:i + 2] == "'":
                    i += 1
                else:
                    in_literal = False
        elif ch == "'":
            in_literal = True
        elif ch == ";":
            return False
        elif ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return i == len(text) - 1
        i += 1
    return False


def _require_file_expression(value: str) -> str:
    trimmed = _require_trimmed(value)
    if not is_single_call(trimmed):
        raise PydanticCustomError(
            "file_reference",
            "expected a file reference expression such as TO_FILE('@stage', 'path')",
        )
    return SqlExpression(trimmed)


# A non-blank string kept exactly as supplied (prompts, input text).
NonBlankStr = Annotated[str, Strict(), AfterValidator(_require_non_blank)]
# A non-blank string with surrounding whitespace removed (model names, labels).
TrimmedStr = Annotated[str, Strict(), AfterValidator(_require_trimmed)]
StrictBool = Annotated[bool, Strict()]
JsonObject = dict[str, Any]
FileExpression = Annotated[str, Strict(), AfterValidator(_require_file_expression)]


def _unique(items: Iterable[T], key: Callable[[T], str]) -> list[T]:
    """Drop later items whose key was already seen, keeping the first occurrence."""

    seen: set[str] = set()
    result: list[T] = []
    for item in items:
        k = key(item)
        if k in seen:
            continue
        seen.add(k)
        result.append(item)
    return result


def _bounds_error(message: str) -> PydanticCustomError:
    return PydanticCustomError("bounds_violation", message)


def _exclusive_error(message: str) -> PydanticCustomError:
    return PydanticCustomError("mutually_exclusive_violation", message)


def _require_exactly_one(**sides: Any) -> None:
    supplied = [name for name, value in sides.items() if value is not None]
    if len(supplied) != 1:
        names = " or ".join(sides)
        raise _exclusive_error(f"provide exactly one of {names}")


class ArgsPayload(BaseModel):
    """Base class for validated function arguments."""

    # `model_name` / `model_parameters` are real argument names, not Pydantic internals.
    model_config = ConfigDict(extra="forbid", frozen=True, protected_namespaces=())

    FIELD_ALIASES: ClassVar[dict[str, tuple[str, ...]]] = {}

    def summary_lines(self) -> list[str]:
        """Short, human-readable description of the payload (no argument values)."""

        return []


class FileLocation(BaseModel):
    """A staged file, rendered as `TO_FILE('<stage>', '<path>')`."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    stage: TrimmedStr
    path: TrimmedStr


FileRef = FileExpression | FileLocation


def _describe_input(text: str | None, file: object | None) -> str:
    if file is not None:
        return "Input: file"
    return f"Input length: {len(text or '')} chars"


class CompleteArgs(ArgsPayload):
    """AI_COMPLETE arguments.

    `options` is the legacy spelling of `model_parameters`.
    """

    FIELD_ALIASES: ClassVar[dict[str, tuple[str, ...]]] = {"model_parameters": ("options",)}

    model: TrimmedStr
    prompt: NonBlankStr
    model_parameters: JsonObject | None = None
    response_format: JsonObject | None = None
    show_details: StrictBool | None = None

    def legacy_options(self) -> JsonObject | None:
        """Options object for the positional `SNOWFLAKE.CORTEX.COMPLETE` form."""

        options: JsonObject = dict(self.model_parameters or {})
        if self.response_format is not None:
            options["response_format"] = self.response_format
        return options or None

    def summary_lines(self) -> list[str]:
        lines = [f"Model: {self.model}", f"Prompt length: {len(self.prompt)} chars"]
        if self.model_parameters:
            lines.append(f"Model parameters keys: {', '.join(self.model_parameters)}")
        if self.response_format is not None:
            lines.append("Response format: provided")
        if self.show_details is not None:
            lines.append(f"Show details: {str(self.show_details).lower()}")
        return lines


class ExtractArgs(ArgsPayload):
    """AI_EXTRACT arguments: `text` or `file`, plus a response format."""

    response_format: JsonObject | list[Any]
    text: NonBlankStr | None = None
    file: FileRef | None = None

    @model_validator(mode="after")
    def validate_source(self) -> ExtractArgs:
        _require_exactly_one(text=self.text, file=self.file)
        return self

    def summary_lines(self) -> list[str]:
        return [
            _describe_input(self.text, self.file),
            f"Response format entries: {len(self.response_format)}",
        ]


class SentimentArgs(ArgsPayload):
    """AI_SENTIMENT arguments with optional aspect categories."""

    text: NonBlankStr
    categories: list[TrimmedStr] | None = None

    @field_validator("categories")
    @classmethod
    def validate_categories(cls, value: list[str] | None) -> list[str] | None:
        if value is None:
            return None
        unique = _unique(value, key=lambda c: c)
        if not 1 <= len(unique) <= SENTIMENT_MAX_CATEGORIES:
            raise _bounds_error(
                f"expected 1 to {SENTIMENT_MAX_CATEGORIES} categories, got {len(unique)}"
            )
        for category in unique:
            if len(category) > SENTIMENT_MAX_CATEGORY_LENGTH:
                raise _bounds_error(
                    f"category '{category}' exceeds {SENTIMENT_MAX_CATEGORY_LENGTH} characters"
                )
        return unique

    def summary_lines(self) -> list[str]:
        lines = [f"Text length: {len(self.text)} chars"]
        if self.categories:
            lines.append(f"Categories: {', '.join(self.categories)}")
        return lines


class CategoryLabel(BaseModel):
    """A classification label with an optional description."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    label: TrimmedStr
    description: NonBlankStr | None = None


CategoryEntry = TrimmedStr | CategoryLabel


def _category_key(entry: str | CategoryLabel) -> str:
    return entry.label if isinstance(entry, CategoryLabel) else entry


class ClassifyArgs(ArgsPayload):
    """AI_CLASSIFY arguments."""

    FIELD_ALIASES: ClassVar[dict[str, tuple[str, ...]]] = {
        "categories": ("list_of_categories",),
        "config_object": ("config",),
    }

    input: NonBlankStr | JsonObject
    categories: list[CategoryEntry]
    config_object: JsonObject | None = None

    @field_validator("categories")
    @classmethod
    def validate_categories(cls, value: list[str | CategoryLabel]) -> list[str | CategoryLabel]:
        unique = _unique(value, key=_category_key)
        if len(unique) < CLASSIFY_MIN_CATEGORIES:
            raise _bounds_error(
                f"expected at least {CLASSIFY_MIN_CATEGORIES} unique categories, got {len(unique)}"
            )
        return unique

    def summary_lines(self) -> list[str]:
        if isinstance(self.input, str):
            lines = [f"Input length: {len(self.input)} chars"]
        else:
            lines = ["Input: object"]
        lines.append(f"Categories: {', '.join(_category_key(c) for c in self.categories)}")
        if self.config_object:
            lines.append(f"Config keys: {', '.join(self.config_object)}")
        return lines


class CountTokensArgs(ArgsPayload):
    """AI_COUNT_TOKENS arguments: a model name or a category list, never both."""

    FIELD_ALIASES: ClassVar[dict[str, tuple[str, ...]]] = {
        "function_name": ("function",),
        "input_text": ("text",),
        "model_name": ("modelName",),
    }

    function_name: TrimmedStr
    input_text: NonBlankStr
    model_name: TrimmedStr | None = None
    categories: list[TrimmedStr] | None = None

    @field_validator("function_name")
    @classmethod
    def validate_function_name(cls, value: str) -> str:
        lowered = value.lower()
        if not lowered.startswith(AI_FUNCTION_PREFIX):
            raise _bounds_error(f"must name an AI function (prefix '{AI_FUNCTION_PREFIX}')")
        return lowered

    @field_validator("categories")
    @classmethod
    def validate_categories(cls, value: list[str] | None) -> list[str] | None:
        if value is None:
            return None
        unique = _unique(value, key=lambda c: c)
        if not unique:
            raise _bounds_error("expected at least 1 category")
        return unique

    @model_validator(mode="after")
    def validate_target(self) -> CountTokensArgs:
        _require_exactly_one(model_name=self.model_name, categories=self.categories)
        return self

    def summary_lines(self) -> list[str]:
        lines = [f"Counted function: {self.function_name}"]
        if self.model_name is not None:
            lines.append(f"Model: {self.model_name}")
        else:
            lines.append(f"Categories: {len(self.categories or [])}")
        lines.append(f"Input length: {len(self.input_text)} chars")
        return lines


class EmbedArgs(ArgsPayload):
    """AI_EMBED arguments."""

    model: TrimmedStr
    input: NonBlankStr | None = None
    input_file: FileRef | None = None

    @model_validator(mode="after")
    def validate_source(self) -> EmbedArgs:
        _require_exactly_one(input=self.input, input_file=self.input_file)
        return self

    def summary_lines(self) -> list[str]:
        return [f"Model: {self.model}", _describe_input(self.input, self.input_file)]


class SimilarityArgs(ArgsPayload):
    """AI_SIMILARITY arguments: two texts or two files."""

    FIELD_ALIASES: ClassVar[dict[str, tuple[str, ...]]] = {"config_object": ("config",)}

    input1: NonBlankStr | None = None
    input2: NonBlankStr | None = None
    input1_file: FileRef | None = None
    input2_file: FileRef | None = None
    config_object: JsonObject | None = None

    @model_validator(mode="after")
    def validate_pairs(self) -> SimilarityArgs:
        texts = (self.input1, self.input2)
        files = (self.input1_file, self.input2_file)
        has_texts = any(v is not None for v in texts)
        has_files = any(v is not None for v in files)

        if has_texts == has_files:
            raise _exclusive_error(
                "provide exactly one of input1/input2 or input1_file/input2_file"
            )
        pair = texts if has_texts else files
        if any(v is None for v in pair):
            names = "input1 and input2" if has_texts else "input1_file and input2_file"
            raise _exclusive_error(f"{names} must be provided together")
        return self

    @property
    def uses_files(self) -> bool:
        return self.input1_file is not None

    def summary_lines(self) -> list[str]:
        lines = ["Inputs: files" if self.uses_files else "Inputs: text"]
        if self.config_object:
            lines.append(f"Config keys: {', '.join(self.config_object)}")
        return lines


class ParseDocumentArgs(ArgsPayload):
    """AI_PARSE_DOCUMENT arguments."""

    FIELD_ALIASES: ClassVar[dict[str, tuple[str, ...]]] = {"file": ("file_object",)}

    file: FileRef
    options: JsonObject | None = None

    def summary_lines(self) -> list[str]:
        lines = ["Input: file"]
        if self.options:
            lines.append(f"Options keys: {', '.join(self.options)}")
        return lines


class FilterArgs(ArgsPayload):
    """AI_FILTER arguments: a yes/no predicate, optionally applied to a file."""

    FIELD_ALIASES: ClassVar[dict[str, tuple[str, ...]]] = {"predicate": ("prompt",)}

    predicate: NonBlankStr
    file: FileRef | None = None

    def summary_lines(self) -> list[str]:
        lines = [f"Predicate length: {len(self.predicate)} chars"]
        if self.file is not None:
            lines.append("Input: file")
        return lines


PAYLOAD_MODELS: dict[FunctionName, type[ArgsPayload]] = {
    FunctionName.ai_complete: CompleteArgs,
    FunctionName.ai_extract: ExtractArgs,
    FunctionName.ai_sentiment: SentimentArgs,
    FunctionName.ai_classify: ClassifyArgs,
    FunctionName.ai_count_tokens: CountTokensArgs,
    FunctionName.ai_embed: EmbedArgs,
    FunctionName.ai_similarity: SimilarityArgs,
    FunctionName.ai_parse_document: ParseDocumentArgs,
    FunctionName.ai_filter: FilterArgs,
}
