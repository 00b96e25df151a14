"""Pydantic models for extraction results and classified errors."""

from __future__ import annotations

import math
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Tuple

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)


class FileType(str, Enum):
    """Formats the dispatcher knows how to extract from."""

    JSON = "json"
    YAML = "yaml"
    CSV = "csv"
    TOML = "toml"
    INI = "ini"
    ENV = "env"
    UNKNOWN = "unknown"


class SortMode(str, Enum):
    """Ordering applied by ``sort_numbers``."""

    OFF = "off"
    NUMERIC_ASC = "numeric-asc"
    NUMERIC_DESC = "numeric-desc"
    MAGNITUDE_ASC = "magnitude-asc"
    MAGNITUDE_DESC = "magnitude-desc"


class ErrorCategory(str, Enum):
    """Caller-chosen context an error is classified under."""

    PARSE = "parse"
    VALIDATION = "validation"
    SAFETY = "safety"
    OPERATIONAL = "operational"
    FILE_SYSTEM = "file-system"
    ANALYSIS = "analysis"
    CONFIGURATION = "configuration"


class ParseError(BaseModel):
    """Why a format-level parse failed."""

    model_config = ConfigDict(frozen=True)

    type: str
    message: str
    filepath: str


class ExtractionResult(BaseModel):
    """Immutable output of every format extractor."""

    model_config = ConfigDict(frozen=True)

    success: bool
    numbers: Tuple[float, ...] = ()
    errors: Tuple[ParseError, ...] = ()

    @field_validator("numbers")
    @classmethod
    def _finite_only(cls, value: Tuple[float, ...]) -> Tuple[float, ...]:
        for number in value:
            if not math.isfinite(number):
                raise ValueError(f"non-finite number in result: {number!r}")
        return value

    @model_validator(mode="after")
    def _success_matches_errors(self) -> "ExtractionResult":
        if self.success == bool(self.errors):
            raise ValueError("success must be True exactly when errors is empty")
        return self

    @classmethod
    def ok(cls, numbers) -> "ExtractionResult":
        return cls(success=True, numbers=tuple(numbers), errors=())

    @classmethod
    def failed(cls, error: ParseError) -> "ExtractionResult":
        return cls(success=False, numbers=(), errors=(error,))


class EnhancedError(BaseModel):
    """A ``ParseError`` or exception enriched for display and logging."""

    model_config = ConfigDict(frozen=True)

    category: str
    type: str
    message: str
    filepath: str
    line: int | None = None
    column: int | None = None
    context: Mapping[str, Any] = Field(default_factory=dict, validate_default=True)
    recoverable: bool
    user_message: str
    suggestion: str

    @field_validator("context", mode="after")
    @classmethod
    def _read_only_context(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(value))

    @field_serializer("context")
    def _context_as_dict(self, value: Mapping[str, Any]) -> dict[str, Any]:
        return dict(value)


class ErrorRecoveryOptions(BaseModel):
    """Retry policy a caller may apply to an ``EnhancedError``."""

    model_config = ConfigDict(frozen=True)

    retryable: bool
    max_retries: int
    retry_delay: int  # milliseconds
    fallback_action: Callable[[], None] | None = None


class ErrorSummary(BaseModel):
    """Counts over a batch of ``EnhancedError``s."""

    total: int
    by_category: Dict[str, int]
    by_severity: Dict[str, int]
    recoverable: int
    non_recoverable: int


class ExtractTextRequest(BaseModel):
    """Body of ``POST /api/extract/text``."""

    text: str
    filename: str = "untitled"
    file_type: str | None = None  # detected from filename when omitted
    sort: str = "off"
    dedupe: bool = False
    min_value: float | None = None
    max_value: float | None = None
    stream: bool = False


class ExtractResponse(BaseModel):
    """Extraction result after post-processing, as returned by the API."""

    success: bool
    file_type: str
    filename: str
    numbers: List[float] = Field(default_factory=list)
    extracted_count: int = 0
    errors: List[ParseError] = Field(default_factory=list)
    messages: List[str] = Field(default_factory=list)
