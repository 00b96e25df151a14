"""Extract numbers from dotenv files."""

from __future__ import annotations

import io
import logging

from dotenv import dotenv_values

from ..numeric import to_finite_number
from ..schema import ExtractionResult
from .base import parse_failure

logger = logging.getLogger(__name__)


def extract_from_env(text: str, filepath: str) -> ExtractionResult:
    """Return every ``KEY=VALUE`` value that is a complete finite number.

    python-dotenv handles ``export`` prefixes, quoting, multi-line values
    and comments; it skips malformed lines with a warning instead of
    failing. Variable expansion is disabled so ``${HOME}``-style values are
    read literally.
    """
    try:
        values = dotenv_values(stream=io.StringIO(text), interpolate=False)
    except Exception as exc:
        return parse_failure("ENV", exc, filepath)

    numbers: list[float] = []
    for value in values.values():
        if value is None:
            continue
        number = to_finite_number(value)
        if number is not None:
            numbers.append(number)
    logger.debug("ENV: %d numbers from %s", len(numbers), filepath)
    return ExtractionResult.ok(numbers)
