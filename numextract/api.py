"""FastAPI app for number extraction."""

from __future__ import annotations

import logging

from fastapi import FastAPI, File, HTTPException, UploadFile
from fastapi.responses import JSONResponse

from .config import (
    MAX_INPUT_CHARS,
    MAX_UPLOAD_BYTES,
    SORT_MODES,
    UPLOAD_CHUNK_SIZE,
    log_startup_config,
)
from .error_handling import (
    classify_exception,
    create_enhanced_error,
    log_enhanced_error,
    sanitize_error_message,
)
from .extract import detect_file_type, extract_numbers, extract_numbers_async, resolve_file_type
from .postprocess import dedupe_numbers, filter_numbers, sort_numbers
from .schema import (
    ErrorCategory,
    ExtractionResult,
    ExtractResponse,
    ExtractTextRequest,
    FileType,
)
from .utils import (
    ExtractionError,
    InputTooLargeError,
    InputValidationError,
    guard_max_chars,
)

logger = logging.getLogger(__name__)

app = FastAPI(title="numextract")


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------
@app.on_event("startup")
def _startup() -> None:
    log_startup_config()


# ---------------------------------------------------------------------------
# Global error handler
# ---------------------------------------------------------------------------
@app.exception_handler(Exception)
async def _unhandled_exception_handler(request, exc: Exception):  # noqa: ARG001
    if isinstance(exc, HTTPException):
        raise exc
    logger.exception("Unhandled error")
    return JSONResponse(
        status_code=500,
        content={"detail": sanitize_error_message(str(exc)) or "Internal server error"},
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
async def _read_upload_text(file: UploadFile) -> str:
    """Read *file* in chunks, enforce the size limit and decode as UTF-8."""
    if not file.filename:
        raise HTTPException(status_code=400, detail="No file provided.")
    total = 0
    chunks: list[bytes] = []
    while True:
        chunk = await file.read(UPLOAD_CHUNK_SIZE)
        if not chunk:
            break
        total += len(chunk)
        if total > MAX_UPLOAD_BYTES:
            raise HTTPException(
                status_code=413,
                detail=f"File too large (limit {MAX_UPLOAD_BYTES // (1024*1024)} MB).",
            )
        chunks.append(chunk)
    if total == 0:
        raise HTTPException(status_code=400, detail="Uploaded file is empty.")
    try:
        return b"".join(chunks).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise InputValidationError(
            f"File is not valid UTF-8 text: {exc}", filepath=file.filename
        ) from exc


def _http_error(exc: ExtractionError) -> HTTPException:
    error = classify_exception(exc)
    log_enhanced_error(error, logger)
    status = 413 if isinstance(exc, InputTooLargeError) else 400
    return HTTPException(
        status_code=status,
        detail=sanitize_error_message(f"{error.user_message}. {error.suggestion}"),
    )


def _resolve_requested_type(filename: str, requested: str | None) -> FileType:
    if not requested:
        return detect_file_type(filename)
    resolved = resolve_file_type(requested)
    if resolved is FileType.UNKNOWN and requested.strip().lower() != FileType.UNKNOWN.value:
        raise HTTPException(status_code=422, detail=f"Unsupported file type: {requested}")
    return resolved


def _build_response(
    result: ExtractionResult,
    file_type: FileType,
    filename: str,
    sort: str,
    dedupe: bool,
    min_value: float | None,
    max_value: float | None,
) -> ExtractResponse:
    if not result.success:
        messages = []
        for parse_error in result.errors:
            error = create_enhanced_error(parse_error, ErrorCategory.PARSE)
            log_enhanced_error(error, logger)
            messages.append(
                sanitize_error_message(f"{error.user_message}. {error.suggestion}")
            )
        return ExtractResponse(
            success=False,
            file_type=file_type.value,
            filename=filename,
            errors=list(result.errors),
            messages=messages,
        )

    numbers = filter_numbers(result.numbers, min_value, max_value)
    if dedupe:
        numbers = dedupe_numbers(numbers)
    numbers = sort_numbers(numbers, sort)
    return ExtractResponse(
        success=True,
        file_type=file_type.value,
        filename=filename,
        numbers=list(numbers),
        extracted_count=len(result.numbers),
    )


async def _do_extract(
    text: str,
    filename: str,
    file_type: FileType,
    stream: bool,
) -> ExtractionResult:
    guard_max_chars(text, MAX_INPUT_CHARS, filepath=filename)
    if stream:
        return await extract_numbers_async(text, file_type, filename)
    return extract_numbers(text, file_type, filename)


# ---------------------------------------------------------------------------
# Health / config
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/api/config")
async def api_config():
    """Expose limits and accepted values so clients can validate up front."""
    return {
        "max_input_chars": MAX_INPUT_CHARS,
        "max_upload_bytes": MAX_UPLOAD_BYTES,
        "sort_modes": list(SORT_MODES),
        "file_types": [file_type.value for file_type in FileType],
    }


# ---------------------------------------------------------------------------
# Extraction endpoints
# ---------------------------------------------------------------------------
@app.post("/api/extract", response_model=ExtractResponse)
async def extract_upload_endpoint(
    file: UploadFile = File(...),
    file_type: str | None = None,
    sort: str = "off",
    dedupe: bool = False,
    min_value: float | None = None,
    max_value: float | None = None,
    stream: bool = False,
):
    """Extract numbers from an uploaded file; the format comes from its name."""
    try:
        text = await _read_upload_text(file)
        resolved = _resolve_requested_type(file.filename, file_type)
        result = await _do_extract(text, file.filename, resolved, stream)
    except ExtractionError as exc:
        raise _http_error(exc) from exc
    return _build_response(result, resolved, file.filename, sort, dedupe, min_value, max_value)


@app.post("/api/extract/text", response_model=ExtractResponse)
async def extract_text_endpoint(body: ExtractTextRequest):
    """Extract numbers from text sent in a JSON body."""
    resolved = _resolve_requested_type(body.filename, body.file_type)
    try:
        result = await _do_extract(body.text, body.filename, resolved, body.stream)
    except ExtractionError as exc:
        raise _http_error(exc) from exc
    return _build_response(
        result, resolved, body.filename, body.sort, body.dedupe, body.min_value, body.max_value,
    )
