"""Classification, redaction and reporting of extraction errors.

Turns a ``ParseError`` or an exception into an ``EnhancedError`` carrying a
category-derived type, a recoverability flag, and a user message plus
suggestion rendered from a ``MessageCatalog``. Everything here is a pure
function of its arguments.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Iterable, Mapping

from .messages import DEFAULT_CATALOG, MessageCatalog
from .schema import (
    EnhancedError,
    ErrorCategory,
    ErrorRecoveryOptions,
    ErrorSummary,
    ParseError,
)

logger = logging.getLogger(__name__)

_DEFAULT_TYPES: dict[str, str] = {
    ErrorCategory.PARSE.value: "syntax-error",
    ErrorCategory.FILE_SYSTEM.value: "file-access-error",
    ErrorCategory.CONFIGURATION.value: "invalid-setting",
    ErrorCategory.VALIDATION.value: "validation-failed",
    ErrorCategory.SAFETY.value: "safety-threshold-exceeded",
    ErrorCategory.OPERATIONAL.value: "operation-failed",
    ErrorCategory.ANALYSIS.value: "analysis-failed",
}

_WARNING_CATEGORIES = frozenset({
    ErrorCategory.PARSE.value,
    ErrorCategory.CONFIGURATION.value,
    ErrorCategory.VALIDATION.value,
    ErrorCategory.ANALYSIS.value,
})

# (pattern, replacement), applied in order.
_REDACTIONS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"/Users/[^/]+/"), "~/"),
    (re.compile(r"/home/[^/]+/"), "~/"),
    (re.compile(r"C:\\Users\\[^\\]+\\"), r"C:\\Users\\***\\"),
    (re.compile(r"[a-f0-9]{32,}"), "***"),
    (re.compile(r"sk-[a-zA-Z0-9]+"), "sk-***"),
    (re.compile(r"AKIA[0-9A-Z]{16}"), "AKIA***"),
)


def _category_value(category: ErrorCategory | str) -> str:
    if isinstance(category, ErrorCategory):
        return category.value
    return str(category)


def _mentions(message: str, word: str) -> bool:
    return word in message.lower()


def _error_message(error: ParseError | BaseException) -> str:
    if isinstance(error, ParseError):
        return error.message
    message = getattr(error, "message", None)
    if isinstance(message, str) and message:
        return message
    return str(error) or type(error).__name__


def _error_filepath(error: ParseError | BaseException) -> str:
    if isinstance(error, ParseError):
        return error.filepath or "unknown"
    for attr in ("filepath", "filename"):
        value = getattr(error, attr, None)
        if value:
            return str(value)
    return "unknown"


def _error_position(error: ParseError | BaseException) -> tuple[int | None, int | None]:
    """Line/column (1-based) from exceptions that carry them."""
    if isinstance(error, ParseError):
        return None, None
    line = getattr(error, "lineno", None)
    column = getattr(error, "colno", None)
    mark = getattr(error, "problem_mark", None)  # PyYAML marks are 0-based
    if line is None and mark is not None:
        line, column = mark.line + 1, mark.column + 1
    return (
        line if isinstance(line, int) else None,
        column if isinstance(column, int) else None,
    )


def determine_error_type(category: ErrorCategory | str, error: ParseError | BaseException) -> str:
    category = _category_value(category)
    if category == ErrorCategory.PARSE.value and isinstance(error, ParseError):
        return error.type
    return _DEFAULT_TYPES.get(category, "unknown-error")


def is_error_recoverable(category: ErrorCategory | str, message: str) -> bool:
    category = _category_value(category)
    if category in (
        ErrorCategory.PARSE.value,
        ErrorCategory.CONFIGURATION.value,
        ErrorCategory.VALIDATION.value,
        ErrorCategory.ANALYSIS.value,
    ):
        return True
    if category == ErrorCategory.FILE_SYSTEM.value:
        return _mentions(message, "permission") or _mentions(message, "network")
    if category == ErrorCategory.OPERATIONAL.value:
        return not _mentions(message, "fatal")
    # safety and unlisted categories
    return False


def format_user_message(
    category: ErrorCategory | str,
    message: str,
    filepath: str,
    catalog: MessageCatalog = DEFAULT_CATALOG,
) -> str:
    category = _category_value(category)
    key = category if category in _DEFAULT_TYPES else "unknown"
    return catalog.render(f"error.{key}", message=message, filepath=filepath)


def generate_suggestion(
    category: ErrorCategory | str,
    message: str,
    catalog: MessageCatalog = DEFAULT_CATALOG,
) -> str:
    category = _category_value(category)
    if category == ErrorCategory.FILE_SYSTEM.value:
        if _mentions(message, "permission"):
            return catalog.render("suggestion.permission")
        if _mentions(message, "network"):
            return catalog.render("suggestion.network")
    key = category if category in _DEFAULT_TYPES else "unknown"
    return catalog.render(f"suggestion.{key}")


def create_enhanced_error(
    error: ParseError | BaseException,
    category: ErrorCategory | str,
    context: Mapping[str, Any] | None = None,
    catalog: MessageCatalog | None = None,
) -> EnhancedError:
    """Classify ``error`` under ``category``.

    The category is chosen by the caller; only a parse-category
    ``ParseError`` keeps its own ``type``. Safety errors are never
    recoverable, operational ones unless the message mentions "fatal",
    file-system ones only when it mentions "permission" or "network".
    """
    catalog = catalog or DEFAULT_CATALOG
    category_value = _category_value(category)
    message = _error_message(error)
    filepath = _error_filepath(error)
    line, column = _error_position(error)
    return EnhancedError(
        category=category_value,
        type=determine_error_type(category_value, error),
        message=message,
        filepath=filepath,
        line=line,
        column=column,
        context=dict(context or {}),
        recoverable=is_error_recoverable(category_value, message),
        user_message=format_user_message(category_value, message, filepath, catalog),
        suggestion=generate_suggestion(category_value, message, catalog),
    )


def classify_exception(
    exc: BaseException,
    context: Mapping[str, Any] | None = None,
    catalog: MessageCatalog | None = None,
) -> EnhancedError:
    """``create_enhanced_error`` with the category inferred from the exception class.

    ``ExtractionError`` subclasses carry their category; other ``OSError``s
    are file-system errors; anything else is operational.
    """
    category = getattr(exc, "category", None)
    if not isinstance(category, ErrorCategory):
        category = (
            ErrorCategory.FILE_SYSTEM if isinstance(exc, OSError) else ErrorCategory.OPERATIONAL
        )
    return create_enhanced_error(exc, category, context=context, catalog=catalog)


def _restore_default_configuration() -> None:
    logger.info("Falling back to default configuration")


def get_error_recovery_options(error: EnhancedError) -> ErrorRecoveryOptions:
    """Retry policy for ``error``; only file-system and operational errors retry."""
    if error.category == ErrorCategory.FILE_SYSTEM.value:
        return ErrorRecoveryOptions(retryable=True, max_retries=3, retry_delay=1000)
    if error.category == ErrorCategory.OPERATIONAL.value:
        return ErrorRecoveryOptions(retryable=True, max_retries=2, retry_delay=2000)
    if error.category == ErrorCategory.CONFIGURATION.value:
        return ErrorRecoveryOptions(
            retryable=False,
            max_retries=0,
            retry_delay=0,
            fallback_action=_restore_default_configuration,
        )
    return ErrorRecoveryOptions(retryable=False, max_retries=0, retry_delay=0)


def sanitize_error_message(message: str) -> str:
    """Redact home directories, long hex tokens and API-key-shaped strings."""
    for pattern, replacement in _REDACTIONS:
        message = pattern.sub(replacement, message)
    return message


def format_error_for_logging(error: EnhancedError) -> str:
    """``[CATEGORY] | type | message | File: .. | Line: .. | Column: .. | Context: {..}``."""
    parts = [f"[{error.category.upper()}]", error.type, error.message]
    if error.filepath:
        parts.append(f"File: {error.filepath}")
    if error.line:
        parts.append(f"Line: {error.line}")
    if error.column:
        parts.append(f"Column: {error.column}")
    if error.context:
        parts.append(f"Context: {json.dumps(dict(error.context), default=str)}")
    return " | ".join(parts)


def should_report_error(error: EnhancedError, notification_level: str) -> bool:
    if notification_level == "silent":
        return False
    if notification_level == "important":
        return (
            error.category in (ErrorCategory.SAFETY.value, ErrorCategory.OPERATIONAL.value)
            or not error.recoverable
        )
    return True


def get_error_severity(error: EnhancedError) -> str:
    """``"warning"`` for parse/configuration/validation/analysis, else ``"error"``."""
    return "warning" if error.category in _WARNING_CATEGORIES else "error"


def create_error_summary(errors: Iterable[EnhancedError]) -> ErrorSummary:
    by_category = {category.value: 0 for category in ErrorCategory}
    by_severity = {"info": 0, "warning": 0, "error": 0}
    total = recoverable = non_recoverable = 0

    for error in errors:
        total += 1
        by_category[error.category] = by_category.get(error.category, 0) + 1
        severity = get_error_severity(error)
        by_severity[severity] = by_severity.get(severity, 0) + 1
        if error.recoverable:
            recoverable += 1
        else:
            non_recoverable += 1

    return ErrorSummary(
        total=total,
        by_category=by_category,
        by_severity=by_severity,
        recoverable=recoverable,
        non_recoverable=non_recoverable,
    )


def log_enhanced_error(error: EnhancedError, log: logging.Logger | None = None) -> None:
    """Log the redacted one-line form at the level matching its severity."""
    level = logging.WARNING if get_error_severity(error) == "warning" else logging.ERROR
    (log or logger).log(level, sanitize_error_message(format_error_for_logging(error)))
