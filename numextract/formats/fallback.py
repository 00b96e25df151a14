"""Regex number scraping for files of unknown format."""

from __future__ import annotations

import re

from ..numeric import to_finite_number
from ..schema import ExtractionResult

# Optional minus, digits, optional fraction. No exponents, no hex.
NUMBER_TOKEN_RE = re.compile(r"-?[0-9]+(?:\.[0-9]+)?")


def extract_from_fallback(text: str, filepath: str) -> ExtractionResult:  # noqa: ARG001
    """Scrape every numeric token from plain text, left to right. Never fails."""
    numbers = []
    for match in NUMBER_TOKEN_RE.finditer(text):
        number = to_finite_number(match.group(0))
        if number is not None:
            numbers.append(number)
    return ExtractionResult.ok(numbers)
