"""Command-line interface for number extraction."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from .commands import CommandDependencies, extract_document
from .config import DEFAULT_SORT_MODE, LOG_LEVEL, MAX_INPUT_CHARS, SORT_MODES
from .error_handling import (
    classify_exception,
    create_enhanced_error,
    log_enhanced_error,
    sanitize_error_message,
)
from .extract import detect_file_type, extract_numbers, extract_numbers_async, resolve_file_type
from .interfaces import FileDocument, StreamNotifier
from .postprocess import dedupe_numbers, filter_numbers, format_numbers, sort_numbers
from .schema import EnhancedError, ErrorCategory, FileType
from .utils import ExtractionError, UnsupportedFileTypeError, read_document_text

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser."""

    parser = argparse.ArgumentParser(
        description="Extract numbers from JSON, YAML, CSV, TOML, INI, ENV or plain text."
    )
    parser.add_argument("path", help="Path to the file to read.")
    parser.add_argument(
        "--type",
        dest="file_type",
        default=None,
        help="Force the file format (json, yaml, yml, csv, toml, ini, env, unknown). "
             "Detected from the extension by default.",
    )
    parser.add_argument(
        "--sort",
        choices=SORT_MODES,
        default=DEFAULT_SORT_MODE,
        help=f"Sort mode (default: {DEFAULT_SORT_MODE}).",
    )
    parser.add_argument(
        "--dedupe",
        action="store_true",
        help="Keep only the first occurrence of each number.",
    )
    parser.add_argument("--min", dest="min_value", type=float, default=None,
                        help="Drop numbers below this value.")
    parser.add_argument("--max", dest="max_value", type=float, default=None,
                        help="Drop numbers above this value.")
    parser.add_argument(
        "--stream",
        action="store_true",
        help="Use the streaming, header-aware CSV parser (CSV only).",
    )
    parser.add_argument(
        "--output",
        choices=("json", "lines"),
        default="json",
        help="Output format: the full result as JSON, or one number per line.",
    )
    parser.add_argument(
        "--in-place",
        action="store_true",
        help="Replace the file contents with the processed numbers, one per line "
             "(format detected from the extension; --type and --stream are ignored).",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    return parser


def _resolve_type(path: str, requested: str | None) -> FileType:
    if requested is None:
        return detect_file_type(path)
    resolved = resolve_file_type(requested)
    if resolved is FileType.UNKNOWN and requested.strip().lower() != FileType.UNKNOWN.value:
        raise UnsupportedFileTypeError(f"Unsupported file type: {requested}", filepath=path)
    return resolved


def _print_error(error: EnhancedError) -> None:
    log_enhanced_error(error, logger)
    print(
        sanitize_error_message(f"Error: {error.user_message}. {error.suggestion}"),
        file=sys.stderr,
    )


def _run_in_place(args: argparse.Namespace) -> int:
    """Rewrite the file as one processed number per line."""
    deps = CommandDependencies(notifier=StreamNotifier(), notification_level="all")
    outcome = extract_document(
        FileDocument(args.path, max_chars=MAX_INPUT_CHARS),
        deps,
        sort_mode=args.sort,
        dedupe=args.dedupe,
        min_value=args.min_value,
        max_value=args.max_value,
        write_back=True,
    )
    if outcome.error is not None:
        return 1
    if outcome.changed:
        print(f"Wrote {len(outcome.numbers)} numbers to {args.path}", file=sys.stderr)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the CLI."""

    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else LOG_LEVEL,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.in_place:
        return _run_in_place(args)

    try:
        file_type = _resolve_type(args.path, args.file_type)
        text = read_document_text(args.path, max_chars=MAX_INPUT_CHARS)
        if args.stream:
            result = asyncio.run(extract_numbers_async(text, file_type, args.path))
        else:
            result = extract_numbers(text, file_type, args.path)

        if not result.success:
            error = create_enhanced_error(result.errors[0], ErrorCategory.PARSE)
            _print_error(error)
            print(result.model_dump_json(indent=2))
            return 1

        numbers = filter_numbers(result.numbers, args.min_value, args.max_value)
        if args.dedupe:
            numbers = dedupe_numbers(numbers)
        numbers = sort_numbers(numbers, args.sort)

        if args.output == "lines":
            if numbers:
                print(format_numbers(numbers))
        else:
            payload = result.model_dump()
            payload["numbers"] = list(numbers)
            print(json.dumps(payload, indent=2))
        return 0
    except ExtractionError as exc:
        error = classify_exception(exc, context={"path": args.path})
        _print_error(error)
        return 1
    except Exception as exc:  # pragma: no cover - safety net
        print(f"Unexpected error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
