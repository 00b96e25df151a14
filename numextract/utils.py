"""Exceptions and input helpers shared by the CLI, API and commands."""

from __future__ import annotations

import os
from pathlib import Path

from .schema import ErrorCategory


class ExtractionError(Exception):
    """Base exception for extraction errors."""

    category: ErrorCategory = ErrorCategory.OPERATIONAL

    def __init__(self, message: str, filepath: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.filepath = filepath


class InputValidationError(ExtractionError):
    """Raised when caller-supplied input is unusable (empty, undecodable)."""

    category = ErrorCategory.VALIDATION


class InputTooLargeError(ExtractionError):
    """Raised when input exceeds the configured safety threshold."""

    category = ErrorCategory.SAFETY


class DocumentReadError(ExtractionError):
    """Raised when a document is missing or unreadable."""

    category = ErrorCategory.FILE_SYSTEM


class UnsupportedFileTypeError(ExtractionError):
    """Raised when an explicitly requested file type is not known."""

    category = ErrorCategory.CONFIGURATION


def guard_max_chars(text: str, max_chars: int | None, filepath: str | None = None) -> None:
    """Raise if text is longer than max_chars."""

    if max_chars is None:
        return
    if len(text) > max_chars:
        raise InputTooLargeError(
            f"Input has {len(text)} characters, exceeds limit of {max_chars}.",
            filepath=filepath,
        )


def validate_document_path(path: str | Path) -> Path:
    """Validate that the document exists and is readable."""

    doc_path = Path(path).expanduser().resolve()
    if not doc_path.exists():
        raise DocumentReadError(f"File not found: {doc_path}", filepath=str(doc_path))
    if not doc_path.is_file():
        raise DocumentReadError(f"Path is not a file: {doc_path}", filepath=str(doc_path))
    if not os.access(doc_path, os.R_OK):
        raise DocumentReadError(
            f"Read permission denied: {doc_path}", filepath=str(doc_path)
        )
    return doc_path


def read_document_text(path: str | Path, max_chars: int | None = None) -> str:
    """Read a UTF-8 document, enforcing the size guard."""

    doc_path = validate_document_path(path)
    try:
        text = doc_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise InputValidationError(
            f"File is not valid UTF-8 text: {exc}", filepath=str(doc_path)
        ) from exc
    except OSError as exc:
        raise DocumentReadError(
            f"Failed to read file: {exc}", filepath=str(doc_path)
        ) from exc
    guard_max_chars(text, max_chars, filepath=str(doc_path))
    return text
