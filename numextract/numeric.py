"""Finite-number predicate shared by every format extractor.

Two entry points:

* ``to_finite_number`` is strict: a string must be a complete decimal
  literal. Typed formats (JSON, YAML, TOML), ENV values and the streamed
  CSV parser go through it.
* ``parse_leading_number`` is loose: it accepts the longest numeric prefix
  of a string, the way spreadsheet-ish text is read by INI values and the
  synchronous CSV splitter.

Both return ``None`` for NaN, infinities, booleans and anything that does
not look like a number.
"""

from __future__ import annotations

import math
import numbers
import re

_DECIMAL = r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?"
_DECIMAL_RE = re.compile(_DECIMAL)


def to_finite_number(value: object) -> float | None:
    """Return ``value`` as a finite float, or ``None`` if it is not one."""

    if isinstance(value, bool):
        return None
    if isinstance(value, numbers.Real):
        try:
            number = float(value)
        except (OverflowError, ValueError):
            return None
        return number if math.isfinite(number) else None
    if isinstance(value, str):
        text = value.strip()
        if not text or _DECIMAL_RE.fullmatch(text) is None:
            return None
        number = float(text)
        return number if math.isfinite(number) else None
    return None


def parse_leading_number(value: str) -> float | None:
    """Return the finite number at the start of ``value``, if any.

    ``"42abc"`` gives ``42.0``, ``"1' OR '1'='1"`` gives ``1.0``;
    ``"=1+1"`` and ``"Infinity"`` give ``None``.
    """

    match = _DECIMAL_RE.match(value.strip())
    if match is None:
        return None
    return to_finite_number(match.group(0))


def is_finite_number(value: object) -> bool:
    return to_finite_number(value) is not None
