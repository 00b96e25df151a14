"""Format detection and extraction dispatch."""

from __future__ import annotations

import logging
from pathlib import PurePath
from typing import Callable, Dict

from .formats import (
    extract_from_csv,
    extract_from_csv_async,
    extract_from_env,
    extract_from_fallback,
    extract_from_ini,
    extract_from_json,
    extract_from_toml,
    extract_from_yaml,
)
from .schema import ExtractionResult, FileType

logger = logging.getLogger(__name__)

Extractor = Callable[[str, str], ExtractionResult]

# Extension (lowercase, no dot) -> file type.
EXTENSION_TYPES: Dict[str, FileType] = {
    "json": FileType.JSON,
    "yaml": FileType.YAML,
    "yml": FileType.YAML,
    "csv": FileType.CSV,
    "toml": FileType.TOML,
    "ini": FileType.INI,
    "env": FileType.ENV,
}

EXTRACTORS: Dict[FileType, Extractor] = {
    FileType.JSON: extract_from_json,
    FileType.YAML: extract_from_yaml,
    FileType.CSV: extract_from_csv,
    FileType.TOML: extract_from_toml,
    FileType.INI: extract_from_ini,
    FileType.ENV: extract_from_env,
    FileType.UNKNOWN: extract_from_fallback,
}


def detect_file_type(filename: str) -> FileType:
    """Map a filename to a ``FileType`` using only its last extension.

    ``"a.YML"`` -> yaml, ``"data.tar.json"`` -> json, ``".env"`` -> env,
    ``"Makefile"`` -> unknown. The filesystem is never consulted.
    """
    name = PurePath(filename.replace("\\", "/")).name if filename else ""
    if "." not in name:
        return FileType.UNKNOWN
    extension = name.rsplit(".", 1)[1].lower()
    return EXTENSION_TYPES.get(extension, FileType.UNKNOWN)


def resolve_file_type(file_type: FileType | str | None) -> FileType:
    """Coerce a caller-supplied type (enum, name or extension) to a ``FileType``.

    Unrecognised values resolve to ``FileType.UNKNOWN``.
    """
    if isinstance(file_type, FileType):
        return file_type
    if not file_type:
        return FileType.UNKNOWN
    key = str(file_type).strip().lower().lstrip(".")
    if key in EXTENSION_TYPES:
        return EXTENSION_TYPES[key]
    try:
        return FileType(key)
    except ValueError:
        return FileType.UNKNOWN


def extract_numbers(
    text: str,
    file_type: FileType | str | None,
    filepath: str,
) -> ExtractionResult:
    """Run the extractor for ``file_type``; unknown types use the regex fallback."""
    resolved = resolve_file_type(file_type)
    logger.debug("Extracting %s numbers from %s", resolved.value, filepath)
    return EXTRACTORS[resolved](text, filepath)


async def extract_numbers_async(
    text: str,
    file_type: FileType | str | None,
    filepath: str,
    **stream_kwargs,
) -> ExtractionResult:
    """Like ``extract_numbers`` but CSV goes through the streaming parser.

    ``stream_kwargs`` (``cancel_token``, ``on_record``, ``chunk_rows``) are
    passed to ``extract_from_csv_async``.
    """
    resolved = resolve_file_type(file_type)
    if resolved is FileType.CSV:
        return await extract_from_csv_async(text, filepath, **stream_kwargs)
    return extract_numbers(text, resolved, filepath)


def extract_file_text(text: str, filename: str) -> ExtractionResult:
    """Detect the format from ``filename`` and extract."""
    return extract_numbers(text, detect_file_type(filename), filename)
