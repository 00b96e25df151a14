"""Document-level commands: extract, sort, dedupe and filter numbers in place.

Each command reads a ``TextDocument``, gets its numbers (line by line for a
plain list of numbers, otherwise through the format extractors), applies
one post-processing step and writes the result back one number per line.
Progress goes to the notifier, usage to telemetry, timing to the tracker;
failures are classified and reported per the notification level.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Tuple

from .config import NOTIFICATION_LEVEL
from .error_handling import (
    classify_exception,
    create_enhanced_error,
    get_error_recovery_options,
    log_enhanced_error,
    sanitize_error_message,
    should_report_error,
)
from .extract import detect_file_type, extract_numbers
from .interfaces import (
    LoggingNotifier,
    LoggingTelemetry,
    Notifier,
    PerfCounterTracker,
    PerformanceTracker,
    TelemetrySink,
    TextDocument,
)
from .messages import DEFAULT_CATALOG, MessageCatalog
from .numeric import to_finite_number
from .postprocess import (
    dedupe_numbers,
    filter_numbers,
    format_numbers,
    parse_sort_mode,
    sort_numbers,
)
from .schema import EnhancedError, ErrorCategory, SortMode
from .utils import DocumentReadError, ExtractionError

logger = logging.getLogger(__name__)

NUMBERS_SOURCE = "numbers"


@dataclass
class CommandDependencies:
    notifier: Notifier = field(default_factory=LoggingNotifier)
    telemetry: TelemetrySink = field(default_factory=LoggingTelemetry)
    tracker: PerformanceTracker = field(default_factory=PerfCounterTracker)
    notification_level: str = NOTIFICATION_LEVEL
    catalog: MessageCatalog = DEFAULT_CATALOG


@dataclass(frozen=True)
class CommandOutcome:
    """What a command did. ``error`` is set when it stopped on a failure."""

    changed: bool = False
    numbers: Tuple[float, ...] = ()
    source: str | None = None
    error: EnhancedError | None = None


@dataclass(frozen=True)
class _LoadedNumbers:
    numbers: Tuple[float, ...]
    source: str


class _CommandAborted(Exception):
    def __init__(self, error: EnhancedError) -> None:
        super().__init__(error.message)
        self.error = error


def _report(error: EnhancedError, deps: CommandDependencies) -> None:
    log_enhanced_error(error, logger)
    if should_report_error(error, deps.notification_level):
        deps.notifier.error(
            sanitize_error_message(f"{error.user_message}. {error.suggestion}")
        )


def _read_text(document: TextDocument, deps: CommandDependencies) -> str:
    """Read the document, retrying recoverable file-system errors."""
    attempt = 0
    while True:
        try:
            return document.get_text()
        except DocumentReadError as exc:
            error = classify_exception(exc, catalog=deps.catalog)
            options = get_error_recovery_options(error)
            if not (error.recoverable and options.retryable) or attempt >= options.max_retries:
                raise
            attempt += 1
            logger.info(
                "Retrying read of %s (%d/%d)",
                sanitize_error_message(document.filename),
                attempt,
                options.max_retries,
            )
            time.sleep(options.retry_delay / 1000.0)


def is_numbers_text(text: str) -> bool:
    """True when every non-blank line is a plain finite number."""
    lines = [line for line in text.split("\n") if line.strip()]
    return bool(lines) and all(to_finite_number(line) is not None for line in lines)


def _load_numbers(document: TextDocument, deps: CommandDependencies) -> _LoadedNumbers | None:
    text = _read_text(document, deps)

    if is_numbers_text(text):
        numbers = tuple(
            number
            for number in (to_finite_number(line) for line in text.split("\n"))
            if number is not None
        )
        return _LoadedNumbers(numbers, NUMBERS_SOURCE)

    file_type = detect_file_type(document.filename)
    deps.notifier.info(f"Reading numbers from {file_type.value} file...")
    result = extract_numbers(text, file_type, document.filename)
    if not result.success:
        error = create_enhanced_error(
            result.errors[0],
            ErrorCategory.PARSE,
            context={"file_type": file_type.value},
            catalog=deps.catalog,
        )
        _report(error, deps)
        raise _CommandAborted(error)
    if not result.numbers:
        deps.notifier.info("No numbers found in the file")
        return None
    return _LoadedNumbers(result.numbers, file_type.value)


def _write_back(
    document: TextDocument, numbers: Tuple[float, ...], deps: CommandDependencies
) -> bool:
    if document.replace_text(format_numbers(numbers)):
        return True
    deps.notifier.error("Failed to update the document content")
    return False


def _run(
    name: str,
    document: TextDocument,
    deps: CommandDependencies,
    body: Callable[[_LoadedNumbers], CommandOutcome],
) -> CommandOutcome:
    handle = deps.tracker.start_operation(name)
    numbers_in = numbers_out = 0
    try:
        loaded = _load_numbers(document, deps)
        if loaded is None:
            return CommandOutcome()
        numbers_in = len(loaded.numbers)
        outcome = body(loaded)
        numbers_out = len(outcome.numbers)
        return outcome
    except _CommandAborted as exc:
        return CommandOutcome(error=exc.error)
    except ExtractionError as exc:
        error = classify_exception(
            exc, context={"command": name}, catalog=deps.catalog
        )
        _report(error, deps)
        return CommandOutcome(error=error)
    finally:
        metrics = handle.end(numbers_in, numbers_out)
        deps.tracker.record_metrics(metrics)


def extract_document(
    document: TextDocument,
    deps: CommandDependencies | None = None,
    *,
    sort_mode: SortMode | str | None = None,
    dedupe: bool = False,
    min_value: float | None = None,
    max_value: float | None = None,
    write_back: bool = False,
) -> CommandOutcome:
    """Extract, then filter, dedupe and sort, optionally replacing the document."""
    deps = deps or CommandDependencies()

    def body(loaded: _LoadedNumbers) -> CommandOutcome:
        numbers = filter_numbers(loaded.numbers, min_value, max_value)
        if dedupe:
            numbers = dedupe_numbers(numbers)
        numbers = sort_numbers(numbers, sort_mode)
        changed = write_back and _write_back(document, numbers, deps)
        deps.notifier.info(f"Extracted {len(numbers)} numbers")
        deps.telemetry.event("numbers.extracted", {
            "count": str(len(numbers)),
            "fileType": loaded.source,
            "sortMode": parse_sort_mode(sort_mode).value,
            "deduped": str(dedupe).lower(),
        })
        return CommandOutcome(changed=changed, numbers=numbers, source=loaded.source)

    return _run("extract", document, deps, body)


def sort_document(
    document: TextDocument,
    mode: SortMode | str | None,
    deps: CommandDependencies | None = None,
) -> CommandOutcome:
    deps = deps or CommandDependencies()
    sort_mode = parse_sort_mode(mode)

    def body(loaded: _LoadedNumbers) -> CommandOutcome:
        if sort_mode is SortMode.OFF:
            deps.notifier.info("Sorting is off; document left unchanged")
            return CommandOutcome(numbers=loaded.numbers, source=loaded.source)
        numbers = sort_numbers(loaded.numbers, sort_mode)
        changed = _write_back(document, numbers, deps)
        if changed:
            deps.notifier.info(f"Sorted {len(numbers)} numbers ({sort_mode.value})")
        deps.telemetry.event("numbers.sorted", {
            "count": str(len(numbers)),
            "sortMode": sort_mode.value,
            "fileType": loaded.source,
        })
        return CommandOutcome(changed=changed, numbers=numbers, source=loaded.source)

    return _run("sort", document, deps, body)


def dedupe_document(
    document: TextDocument,
    deps: CommandDependencies | None = None,
) -> CommandOutcome:
    deps = deps or CommandDependencies()

    def body(loaded: _LoadedNumbers) -> CommandOutcome:
        numbers = dedupe_numbers(loaded.numbers)
        removed = len(loaded.numbers) - len(numbers)
        if removed == 0:
            deps.notifier.info("No duplicate numbers found")
            return CommandOutcome(numbers=numbers, source=loaded.source)
        changed = _write_back(document, numbers, deps)
        if changed:
            deps.notifier.info(
                f"Removed {removed} duplicates ({len(numbers)} unique numbers remaining)"
            )
        deps.telemetry.event("numbers.deduped", {
            "originalCount": str(len(loaded.numbers)),
            "finalCount": str(len(numbers)),
            "duplicatesRemoved": str(removed),
            "fileType": loaded.source,
        })
        return CommandOutcome(changed=changed, numbers=numbers, source=loaded.source)

    return _run("dedupe", document, deps, body)


def filter_document(
    document: TextDocument,
    min_value: float | None = None,
    max_value: float | None = None,
    deps: CommandDependencies | None = None,
) -> CommandOutcome:
    deps = deps or CommandDependencies()

    def body(loaded: _LoadedNumbers) -> CommandOutcome:
        numbers = filter_numbers(loaded.numbers, min_value, max_value)
        removed = len(loaded.numbers) - len(numbers)
        if removed == 0:
            deps.notifier.info("All numbers are within range")
            return CommandOutcome(numbers=numbers, source=loaded.source)
        changed = _write_back(document, numbers, deps)
        if changed:
            deps.notifier.info(
                f"Filtered out {removed} numbers ({len(numbers)} remaining)"
            )
        deps.telemetry.event("numbers.filtered", {
            "originalCount": str(len(loaded.numbers)),
            "finalCount": str(len(numbers)),
            "min": "" if min_value is None else str(min_value),
            "max": "" if max_value is None else str(max_value),
            "fileType": loaded.source,
        })
        return CommandOutcome(changed=changed, numbers=numbers, source=loaded.source)

    return _run("filter", document, deps, body)
