"""Centralized configuration for extraction limits and runtime flags.

All env-driven settings live here so there is a single source of truth.
Import from ``numextract.config`` in api.py, cli.py, the format extractors, etc.
"""

from __future__ import annotations

import os
import sys


def _env_bool(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in ("1", "true", "yes")


def _env_int(name: str, default: int, lo: int = 1, hi: int = 10_000) -> int:
    try:
        return max(lo, min(hi, int(os.environ.get(name, str(default)))))
    except (TypeError, ValueError):
        return default


def _env_choice(name: str, default: str, choices: tuple[str, ...]) -> str:
    value = os.environ.get(name, default).strip().lower()
    return value if value in choices else default


# ---------------------------------------------------------------------------
# Limits
# ---------------------------------------------------------------------------
MAX_INPUT_CHARS: int = _env_int(
    "NUMEXTRACT_MAX_INPUT_CHARS", default=10 * 1024 * 1024, hi=500 * 1024 * 1024,
)
MAX_WALK_DEPTH: int = _env_int("NUMEXTRACT_MAX_WALK_DEPTH", default=512, hi=100_000)
MAX_WALK_NODES: int = _env_int(
    "NUMEXTRACT_MAX_WALK_NODES", default=5_000_000, hi=100_000_000,
)
CSV_STREAM_CHUNK_ROWS: int = _env_int(
    "NUMEXTRACT_CSV_CHUNK_ROWS", default=1000, hi=1_000_000,
)
MAX_UPLOAD_BYTES: int = _env_int(
    "NUMEXTRACT_MAX_UPLOAD_BYTES", default=20 * 1024 * 1024, hi=500 * 1024 * 1024,
)
UPLOAD_CHUNK_SIZE: int = 64 * 1024  # 64 KiB streaming chunks

# ---------------------------------------------------------------------------
# Behaviour
# ---------------------------------------------------------------------------
SORT_MODES: tuple[str, ...] = (
    "off", "numeric-asc", "numeric-desc", "magnitude-asc", "magnitude-desc",
)
NOTIFICATION_LEVELS: tuple[str, ...] = ("all", "important", "silent")

DEFAULT_SORT_MODE: str = _env_choice("NUMEXTRACT_SORT_MODE", "off", SORT_MODES)
NOTIFICATION_LEVEL: str = _env_choice(
    "NUMEXTRACT_NOTIFICATION_LEVEL", "important", NOTIFICATION_LEVELS,
)
TELEMETRY_ENABLED: bool = _env_bool("NUMEXTRACT_TELEMETRY")
LOG_LEVEL: str = os.environ.get("NUMEXTRACT_LOG_LEVEL", "WARNING").strip().upper()


def log_startup_config() -> None:
    """Print one startup line summarising active configuration."""
    msg = (
        f"numextract config: MAX_INPUT_CHARS={MAX_INPUT_CHARS} "
        f"MAX_UPLOAD_BYTES={MAX_UPLOAD_BYTES} "
        f"MAX_WALK_DEPTH={MAX_WALK_DEPTH} MAX_WALK_NODES={MAX_WALK_NODES} "
        f"CSV_STREAM_CHUNK_ROWS={CSV_STREAM_CHUNK_ROWS} "
        f"DEFAULT_SORT_MODE={DEFAULT_SORT_MODE} "
        f"NOTIFICATION_LEVEL={NOTIFICATION_LEVEL} "
        f"TELEMETRY_ENABLED={TELEMETRY_ENABLED} LOG_LEVEL={LOG_LEVEL}"
    )
    sys.stderr.write(msg + "\n")
    sys.stderr.flush()
