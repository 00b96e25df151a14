"""Extract numbers from JSON documents."""

from __future__ import annotations

import json

from ..schema import ExtractionResult
from .base import parse_failure, walk_parsed


def extract_from_json(text: str, filepath: str) -> ExtractionResult:
    """Return every finite number literal in a JSON document.

    String values are not coerced; ``NaN``/``Infinity`` literals, which the
    stdlib decoder accepts, are dropped by the numeric predicate.
    """
    try:
        parsed = json.loads(text)
    except Exception as exc:
        return parse_failure("JSON", exc, filepath)
    return walk_parsed("JSON", parsed, filepath)
