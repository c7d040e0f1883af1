"""Format parsers.

Usage:
    from envsync.parsers import DotenvParser, JsonParser

    with open("config.json", encoding="utf-8") as handle:
        result = JsonParser().parse(handle)
"""

from envsync.parsers.base import (
    KEY_FORMAT,
    LoadResult,
    Parser,
    ResultBuilder,
    derive_group,
    is_valid_key,
    validate_key,
)
from envsync.parsers.dotenv_parser import DotenvParser, normalize_value, strip_quotes
from envsync.parsers.json_parser import JsonParser, flatten, to_text

__all__ = [
    "Parser",
    "LoadResult",
    "ResultBuilder",
    "DotenvParser",
    "JsonParser",
    "KEY_FORMAT",
    "derive_group",
    "is_valid_key",
    "validate_key",
    "normalize_value",
    "strip_quotes",
    "flatten",
    "to_text",
]
