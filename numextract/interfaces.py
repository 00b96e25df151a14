"""Collaborators the document commands talk to, plus default implementations.

The extraction engine never depends on these for correctness: notifiers,
telemetry and timing are sinks, and documents are just text in / text out.
"""

from __future__ import annotations

import logging
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Protocol, TextIO

from .config import MAX_INPUT_CHARS, TELEMETRY_ENABLED
from .utils import read_document_text

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def info(self, message: str) -> None: ...

    def warn(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class TelemetrySink(Protocol):
    def event(self, name: str, properties: Mapping[str, str]) -> None: ...


@dataclass(frozen=True)
class OperationMetrics:
    """Timing of one command run."""

    name: str
    duration_ms: float
    extra1: int = 0
    extra2: int = 0


class OperationHandle(Protocol):
    def end(self, extra1: int = 0, extra2: int = 0) -> OperationMetrics: ...


class PerformanceTracker(Protocol):
    def start_operation(self, name: str) -> OperationHandle: ...

    def record_metrics(self, metrics: OperationMetrics) -> None: ...


class TextDocument(Protocol):
    """Anything holding the text a command reads and rewrites."""

    filename: str

    def get_text(self) -> str: ...

    def replace_text(self, text: str) -> bool: ...


# ---------------------------------------------------------------------------
# Default implementations
# ---------------------------------------------------------------------------
class LoggingNotifier:
    """Routes notifications to a logger."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger

    def info(self, message: str) -> None:
        self._log.info(message)

    def warn(self, message: str) -> None:
        self._log.warning(message)

    def error(self, message: str) -> None:
        self._log.error(message)


class StreamNotifier:
    """Writes notifications to a text stream (stderr by default)."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    def _write(self, prefix: str, message: str) -> None:
        stream = self._stream or sys.stderr
        print(f"{prefix}{message}", file=stream)

    def info(self, message: str) -> None:
        self._write("", message)

    def warn(self, message: str) -> None:
        self._write("Warning: ", message)

    def error(self, message: str) -> None:
        self._write("Error: ", message)


class LoggingTelemetry:
    """Logs telemetry events when enabled; otherwise drops them."""

    def __init__(self, enabled: bool = TELEMETRY_ENABLED) -> None:
        self.enabled = enabled

    def event(self, name: str, properties: Mapping[str, str]) -> None:
        if self.enabled:
            logger.info("telemetry %s %s", name, dict(properties))


class _TimedOperation:
    def __init__(self, name: str) -> None:
        self.name = name
        self._started = time.perf_counter()

    def end(self, extra1: int = 0, extra2: int = 0) -> OperationMetrics:
        elapsed = (time.perf_counter() - self._started) * 1000.0
        return OperationMetrics(self.name, elapsed, extra1, extra2)


@dataclass
class PerfCounterTracker:
    """Wall-clock timing with ``time.perf_counter``; keeps recorded metrics."""

    records: list[OperationMetrics] = field(default_factory=list)

    def start_operation(self, name: str) -> _TimedOperation:
        return _TimedOperation(name)

    def record_metrics(self, metrics: OperationMetrics) -> None:
        self.records.append(metrics)
        logger.debug("%s took %.1f ms", metrics.name, metrics.duration_ms)


class TextBuffer:
    """In-memory document."""

    def __init__(self, text: str, filename: str = "untitled") -> None:
        self.text = text
        self.filename = filename

    def get_text(self) -> str:
        return self.text

    def replace_text(self, text: str) -> bool:
        self.text = text
        return True


class FileDocument:
    """A UTF-8 file on disk; ``replace_text`` overwrites it."""

    def __init__(self, path: str | Path, max_chars: int | None = MAX_INPUT_CHARS) -> None:
        self.path = Path(path)
        self.filename = str(self.path)
        self.max_chars = max_chars

    def get_text(self) -> str:
        return read_document_text(self.path, max_chars=self.max_chars)

    def replace_text(self, text: str) -> bool:
        try:
            self.path.write_text(text, encoding="utf-8")
        except OSError as exc:
            logger.error("Failed to write %s: %s", self.path, exc)
            return False
        return True
