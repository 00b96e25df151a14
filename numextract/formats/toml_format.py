"""Extract numbers from TOML documents."""

from __future__ import annotations

import tomllib

from ..schema import ExtractionResult
from .base import parse_failure, walk_parsed


def extract_from_toml(text: str, filepath: str) -> ExtractionResult:
    """Return every finite integer/float value in a TOML document.

    Tables and arrays (including arrays of tables) are walked in document
    order. ``inf``/``nan`` floats, strings, booleans and date-times are
    skipped.
    """
    try:
        parsed = tomllib.loads(text)
    except Exception as exc:
        return parse_failure("TOML", exc, filepath)
    return walk_parsed("TOML", parsed, filepath)
