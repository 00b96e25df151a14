"""Sort, dedupe and range-filter helpers for extracted numbers.

All functions take any iterable of floats, never modify it, and return a
new tuple.
"""

from __future__ import annotations

from typing import Iterable, Tuple

from .schema import SortMode


def parse_sort_mode(value: SortMode | str | None) -> SortMode:
    """Return the ``SortMode`` for ``value``; anything unrecognised is ``OFF``."""
    if isinstance(value, SortMode):
        return value
    try:
        return SortMode(str(value).strip().lower())
    except ValueError:
        return SortMode.OFF


def sort_numbers(numbers: Iterable[float], mode: SortMode | str | None) -> Tuple[float, ...]:
    """Return ``numbers`` ordered by ``mode``.

    ``sorted`` is stable, including with ``reverse=True``, so equal keys
    keep their input order: ``magnitude-asc`` on ``[-1, 1]`` gives
    ``(-1, 1)`` and on ``[1, -1]`` gives ``(1, -1)``. ``off`` and unknown
    modes return an unchanged copy.
    """
    mode = parse_sort_mode(mode)
    values = list(numbers)
    if mode is SortMode.NUMERIC_ASC:
        return tuple(sorted(values))
    if mode is SortMode.NUMERIC_DESC:
        return tuple(sorted(values, reverse=True))
    if mode is SortMode.MAGNITUDE_ASC:
        return tuple(sorted(values, key=abs))
    if mode is SortMode.MAGNITUDE_DESC:
        return tuple(sorted(values, key=abs, reverse=True))
    return tuple(values)


def dedupe_numbers(numbers: Iterable[float]) -> Tuple[float, ...]:
    """Keep the first occurrence of each value (exact equality), in order."""
    seen: set[float] = set()
    result: list[float] = []
    for number in numbers:
        if number not in seen:
            seen.add(number)
            result.append(number)
    return tuple(result)


def filter_numbers(
    numbers: Iterable[float],
    min_value: float | None = None,
    max_value: float | None = None,
) -> Tuple[float, ...]:
    """Keep values with ``min_value <= v <= max_value``; a ``None`` bound is open."""
    return tuple(
        number
        for number in numbers
        if (min_value is None or number >= min_value)
        and (max_value is None or number <= max_value)
    )


def format_number(number: float) -> str:
    """Render integral floats without a trailing ``.0``."""
    if number.is_integer() and abs(number) < 1e16:
        return str(int(number))
    return repr(number)


def format_numbers(numbers: Iterable[float]) -> str:
    """One number per line."""
    return "\n".join(format_number(number) for number in numbers)
