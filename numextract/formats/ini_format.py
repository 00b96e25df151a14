"""Extract numbers from INI documents."""

from __future__ import annotations

import configparser
import re
from typing import Any

from ..numeric import parse_leading_number
from ..schema import ExtractionResult
from .base import parse_failure, walk_parsed

# Keys that appear before the first section header land here.
_ROOT_SECTION = "__numextract_root__"
# Disables configparser's DEFAULT inheritance so each value is walked once.
_NO_DEFAULT_SECTION = "__numextract_no_default__"

# ``key[] = value`` lines append to an array instead of overwriting.
_ARRAY_KEY_RE = re.compile(r"^([^=:\[;#][^=:]*?)\s*\[\]\s*([=:].*)$")


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1].strip()
    return value


def ini_leaf(value: Any) -> float | None:
    """INI values are always strings: trim, unquote, then read a leading number."""
    if not isinstance(value, str):
        return None
    return parse_leading_number(_unquote(value.strip()))


def _normalize_lines(text: str) -> str:
    """Dedent every line and give each ``key[]`` entry its own key.

    Indented lines would otherwise be read as continuations of the previous
    value.
    """
    counters: dict[tuple[str, str], int] = {}
    section = ""
    lines = []
    for raw in text.splitlines():
        line = raw.strip()
        if line.startswith("["):
            section = line
        else:
            match = _ARRAY_KEY_RE.match(line)
            if match:
                key, rest = match.groups()
                index = counters.get((section, key), 0)
                counters[(section, key)] = index + 1
                line = f"{key}[{index}] {rest}"
        lines.append(line)
    return "\n".join(lines)


def _parse_ini(text: str, filepath: str) -> dict[str, dict[str, str | None]]:
    parser = configparser.ConfigParser(
        strict=False,
        interpolation=None,
        allow_no_value=True,
        default_section=_NO_DEFAULT_SECTION,
        inline_comment_prefixes=(";", "#"),
    )
    parser.optionxform = str  # keep key case
    parser.read_string(f"[{_ROOT_SECTION}]\n{_normalize_lines(text)}", source=filepath)
    return {
        section: dict(parser.items(section, raw=True))
        for section in parser.sections()
    }


def extract_from_ini(text: str, filepath: str) -> ExtractionResult:
    """Return the leading number of every value in an INI document.

    Parsing is lenient: duplicate sections and keys are merged (the last
    value wins), keys outside any section are accepted, keys without a
    value are ignored and ``; comment`` / ``# comment`` tails are dropped.
    Values read like ``parseFloat``: ``30s`` gives 30, ``abc`` gives nothing.
    """
    try:
        parsed = _parse_ini(text, filepath)
    except Exception as exc:
        return parse_failure("INI", exc, filepath)
    return walk_parsed("INI", parsed, filepath, leaf=ini_leaf)
