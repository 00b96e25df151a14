"""Extract numbers from YAML documents."""

from __future__ import annotations

import yaml

from ..schema import ExtractionResult
from .base import parse_failure, walk_parsed


def extract_from_yaml(text: str, filepath: str) -> ExtractionResult:
    """Return every finite int/float scalar of a single YAML document.

    Uses ``yaml.safe_load``, so no arbitrary objects are constructed.
    Quoted scalars, booleans, timestamps and ``.inf``/``.nan`` never count.
    """
    try:
        parsed = yaml.safe_load(text)
    except Exception as exc:
        return parse_failure("YAML", exc, filepath)
    return walk_parsed("YAML", parsed, filepath)
