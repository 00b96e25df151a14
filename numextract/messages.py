"""User-facing message templates for classified errors.

A ``MessageCatalog`` is passed explicitly to the error classifier instead of
living in global state, so callers can swap in translated templates or
product-specific wording per call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

DEFAULT_MESSAGES: Dict[str, str] = {
    "error.parse": "Failed to parse file: {filepath}",
    "error.file-system": "File system error: {message}",
    "error.configuration": "Configuration error: {message}",
    "error.validation": "Validation failed: {message}",
    "error.safety": "Safety threshold exceeded: {message}",
    "error.operational": "Operation failed: {message}",
    "error.analysis": "Analysis failed: {message}",
    "error.unknown": "Unknown error: {message}",
    "suggestion.parse": (
        "Check the file syntax and ensure it's a valid format "
        "(JSON, YAML, CSV, TOML, INI, or ENV)"
    ),
    "suggestion.permission": "Check file permissions and ensure the file is readable",
    "suggestion.network": "Check network connectivity and try again",
    "suggestion.file-system": "Check if the file exists and is accessible",
    "suggestion.configuration": "Check your settings and fix any invalid values",
    "suggestion.validation": "Review the input data and ensure it contains valid numeric values",
    "suggestion.safety": (
        "Adjust safety thresholds in settings or reduce the scope of the operation"
    ),
    "suggestion.operational": "Try the operation again; restart the tool if it keeps failing",
    "suggestion.analysis": "Ensure sufficient numeric data exists for the analysis",
    "suggestion.unknown": "Check the logs for more details and consider reporting this issue",
}


class _SafeDict(dict):
    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


@dataclass(frozen=True)
class MessageCatalog:
    """Keyed message templates using ``str.format_map`` placeholders.

    Keys missing from ``messages`` fall back to ``DEFAULT_MESSAGES``, and
    unknown placeholders are left as-is rather than raising.
    """

    messages: Dict[str, str] = field(default_factory=dict)
    locale: str = "en"

    def template(self, key: str) -> str:
        if key in self.messages:
            return self.messages[key]
        return DEFAULT_MESSAGES.get(key, key)

    def render(self, key: str, **values: object) -> str:
        return self.template(key).format_map(_SafeDict(values))


DEFAULT_CATALOG = MessageCatalog()
