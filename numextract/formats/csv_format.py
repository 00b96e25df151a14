"""Extract numbers from CSV text.

Two strategies:

* ``extract_from_csv``: synchronous, header-agnostic. A small quote-aware
  splitter turns the text into records; every field is read with
  ``parse_leading_number`` (so ``"42 apples"`` counts as 42).
* ``extract_from_csv_async``: streaming, column-aware. pandas reads the
  text in chunks off the event loop; the first record is the header and
  every other field must be a complete number.
"""

from __future__ import annotations

import asyncio
import io
import logging
import threading
from enum import Enum
from typing import Any, Callable

import pandas as pd

from .. import config
from ..numeric import parse_leading_number, to_finite_number
from ..schema import ExtractionResult, ParseError
from .base import parse_failure

logger = logging.getLogger(__name__)

RecordCallback = Callable[[dict[str, Any]], None]


# ---------------------------------------------------------------------------
# Synchronous splitter
# ---------------------------------------------------------------------------
def split_csv_records(text: str) -> list[list[str]]:
    """Split CSV text into records of trimmed fields.

    ``"`` toggles the in-quotes flag and is dropped; ``,`` and ``\\n`` only
    separate outside quotes. Records whose fields are all empty are
    skipped. An unterminated quote simply swallows the rest of the text
    into the current field.
    """
    records: list[list[str]] = []
    record: list[str] = []
    field: list[str] = []
    in_quotes = False

    def _end_record() -> None:
        record.append("".join(field).strip())
        if any(record):
            records.append(list(record))
        record.clear()
        field.clear()

    for char in text:
        if char == '"':
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            record.append("".join(field).strip())
            field.clear()
        elif char == "\n" and not in_quotes:
            _end_record()
        else:
            field.append(char)
    _end_record()
    return records


def extract_from_csv(text: str, filepath: str) -> ExtractionResult:
    """Return the leading number of every CSV field, in reading order."""
    numbers: list[float] = []
    for record in split_csv_records(text):
        for field in record:
            number = parse_leading_number(field)
            if number is not None:
                numbers.append(number)
    logger.debug("CSV: %d numbers from %s", len(numbers), filepath)
    return ExtractionResult.ok(numbers)


# ---------------------------------------------------------------------------
# Streaming parser
# ---------------------------------------------------------------------------
class CsvStreamState(str, Enum):
    IDLE = "idle"
    PARSING = "parsing"
    RECORD_READY = "record-ready"
    DONE = "done"
    FAILED = "failed"
    CANCELLED = "cancelled"


_TERMINAL_STATES = (CsvStreamState.DONE, CsvStreamState.FAILED, CsvStreamState.CANCELLED)


class CancellationToken:
    """Thread-safe flag a caller sets to stop a running ``CsvRecordStream``."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


class CsvRecordStream:
    """One streaming parse of a CSV text.

    Goes ``IDLE -> PARSING -> (RECORD_READY)* -> DONE | FAILED | CANCELLED``.
    ``run()`` can be awaited once; it resolves only after the stream reached
    a terminal state. Chunks are read in a worker thread so a large input
    does not block the event loop, and the cancellation token is checked
    between records. The first record is the header; a record wider than
    the header is a parse error.
    """

    def __init__(
        self,
        text: str,
        filepath: str,
        *,
        chunk_rows: int | None = None,
        on_record: RecordCallback | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> None:
        self.text = text
        self.filepath = filepath
        self.chunk_rows = chunk_rows or config.CSV_STREAM_CHUNK_ROWS
        self.on_record = on_record
        self.cancel_token = cancel_token or CancellationToken()
        self.records_read = 0
        self._state = CsvStreamState.IDLE
        self._numbers: list[float] = []
        self._columns: list[str] | None = None

    @property
    def state(self) -> CsvStreamState:
        return self._state

    @property
    def finished(self) -> bool:
        return self._state in _TERMINAL_STATES

    def _transition(self, state: CsvStreamState) -> None:
        logger.debug("CSV stream %s: %s -> %s", self.filepath, self._state.value, state.value)
        self._state = state

    def _open_reader(self):
        return pd.read_csv(
            io.StringIO(self.text),
            header=None,
            chunksize=self.chunk_rows,
            dtype=str,
            keep_default_na=False,
            skipinitialspace=True,
            skip_blank_lines=True,
        )

    def _emit(self, columns: list[str], row: tuple) -> None:
        self._transition(CsvStreamState.RECORD_READY)
        self.records_read += 1
        for value in row:
            number = to_finite_number(value)
            if number is not None:
                self._numbers.append(number)
        if self.on_record is not None:
            self.on_record(dict(zip(columns, row)))

    def _cancelled_result(self) -> ExtractionResult:
        self._transition(CsvStreamState.CANCELLED)
        logger.info(
            "CSV stream %s cancelled after %d records", self.filepath, self.records_read
        )
        return ExtractionResult.failed(
            ParseError(
                type="cancelled",
                message=f"CSV parse cancelled after {self.records_read} records",
                filepath=self.filepath,
            )
        )

    async def run(self) -> ExtractionResult:
        if self._state is not CsvStreamState.IDLE:
            raise RuntimeError(f"CSV stream already {self._state.value}")
        self._transition(CsvStreamState.PARSING)
        try:
            reader = await asyncio.to_thread(self._open_reader)
        except pd.errors.EmptyDataError:
            # No header, no records: nothing to extract.
            self._transition(CsvStreamState.DONE)
            return ExtractionResult.ok(())
        except Exception as exc:  # pandas raises several unrelated types
            self._transition(CsvStreamState.FAILED)
            return parse_failure("CSV", exc, self.filepath)

        with reader:
            while True:
                if self.cancel_token.cancelled:
                    return self._cancelled_result()
                try:
                    chunk = await asyncio.to_thread(next, reader, None)
                except Exception as exc:
                    self._transition(CsvStreamState.FAILED)
                    return parse_failure("CSV", exc, self.filepath)
                if chunk is None:
                    break
                for row in chunk.itertuples(index=False, name=None):
                    if self.cancel_token.cancelled:
                        return self._cancelled_result()
                    if self._columns is None:
                        self._columns = [str(value) for value in row]
                        continue
                    self._emit(self._columns, row)
                self._transition(CsvStreamState.PARSING)

        self._transition(CsvStreamState.DONE)
        logger.debug(
            "CSV stream: %d numbers from %d records in %s",
            len(self._numbers),
            self.records_read,
            self.filepath,
        )
        return ExtractionResult.ok(self._numbers)


async def extract_from_csv_async(
    text: str,
    filepath: str,
    *,
    cancel_token: CancellationToken | None = None,
    on_record: RecordCallback | None = None,
    chunk_rows: int | None = None,
) -> ExtractionResult:
    """Stream ``text`` through pandas and return every numeric field value."""
    stream = CsvRecordStream(
        text,
        filepath,
        chunk_rows=chunk_rows,
        on_record=on_record,
        cancel_token=cancel_token,
    )
    return await stream.run()
