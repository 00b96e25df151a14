"""Format-specific number extractors.

Each module in this package exposes one ``extract_from_<format>(text,
filepath)`` function returning an ``ExtractionResult``. Extractors never
raise: a parser failure comes back as ``success=False`` with a single
``ParseError``, so the dispatcher and its callers can treat every format
the same way.
"""

from .csv_format import extract_from_csv, extract_from_csv_async
from .env_format import extract_from_env
from .fallback import extract_from_fallback
from .ini_format import extract_from_ini
from .json_format import extract_from_json
from .toml_format import extract_from_toml
from .yaml_format import extract_from_yaml

__all__ = [
    "extract_from_csv",
    "extract_from_csv_async",
    "extract_from_env",
    "extract_from_fallback",
    "extract_from_ini",
    "extract_from_json",
    "extract_from_toml",
    "extract_from_yaml",
]
