"""Shared tree walk and error boundary for the format extractors."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Callable, Iterator

from .. import config
from ..error_handling import sanitize_error_message
from ..numeric import to_finite_number
from ..schema import ExtractionResult, ParseError

logger = logging.getLogger(__name__)

LeafConverter = Callable[[Any], "float | None"]


class WalkLimitExceeded(Exception):
    """Raised by ``iter_leaves`` when a document is too deep or too large."""

    def __init__(self, message: str, error_type: str) -> None:
        super().__init__(message)
        self.error_type = error_type


def typed_leaf(value: Any) -> float | None:
    """Leaf rule for formats with native number literals: strings are opaque."""
    if isinstance(value, str):
        return None
    return to_finite_number(value)


def iter_leaves(
    root: Any,
    max_depth: int | None = None,
    max_nodes: int | None = None,
) -> Iterator[Any]:
    """Yield every scalar reachable from ``root`` in natural iteration order.

    Mappings contribute their values (keys are never visited), lists and
    tuples their items. Uses an explicit stack, so deep documents cannot
    overflow the interpreter stack. Containers nested ``max_depth`` levels
    down, or visiting more than ``max_nodes`` values in total (YAML aliases
    can fan a small document out exponentially), raise
    ``WalkLimitExceeded``.
    """
    if max_depth is None:
        max_depth = config.MAX_WALK_DEPTH
    if max_nodes is None:
        max_nodes = config.MAX_WALK_NODES
    stack: list[tuple[Any, int]] = [(root, 0)]
    visited = 0
    while stack:
        value, depth = stack.pop()
        visited += 1
        if visited > max_nodes:
            raise WalkLimitExceeded(
                f"document exceeds maximum of {max_nodes} values",
                "size-limit-exceeded",
            )
        if isinstance(value, Mapping):
            children = list(value.values())
        elif isinstance(value, (list, tuple)):
            children = list(value)
        else:
            yield value
            continue
        if depth >= max_depth:
            raise WalkLimitExceeded(
                f"document exceeds maximum nesting depth of {max_depth}",
                "depth-limit-exceeded",
            )
        # Reversed so the first child is popped first.
        stack.extend((child, depth + 1) for child in reversed(children))


def collect_numbers(
    root: Any,
    leaf: LeafConverter = typed_leaf,
    max_depth: int | None = None,
    max_nodes: int | None = None,
) -> list[float]:
    numbers: list[float] = []
    for value in iter_leaves(root, max_depth=max_depth, max_nodes=max_nodes):
        number = leaf(value)
        if number is not None:
            numbers.append(number)
    return numbers


def parse_failure(
    format_name: str,
    exc: BaseException,
    filepath: str,
    error_type: str = "parse-error",
) -> ExtractionResult:
    """Convert a parser exception into a failed ``ExtractionResult``."""
    native = " ".join(str(exc).split()) or type(exc).__name__
    message = f"{format_name} parse error: {native}"
    logger.warning(
        "%s extraction failed for %s: %s",
        format_name,
        sanitize_error_message(filepath),
        sanitize_error_message(native),
    )
    return ExtractionResult.failed(
        ParseError(type=error_type, message=message, filepath=filepath)
    )


def walk_parsed(
    format_name: str,
    parsed: Any,
    filepath: str,
    leaf: LeafConverter = typed_leaf,
) -> ExtractionResult:
    """Walk an already-parsed tree, turning a guard overflow into a failure."""
    try:
        numbers = collect_numbers(parsed, leaf=leaf)
    except WalkLimitExceeded as exc:
        return parse_failure(format_name, exc, filepath, error_type=exc.error_type)
    logger.debug("%s: %d numbers from %s", format_name, len(numbers), filepath)
    return ExtractionResult.ok(numbers)
