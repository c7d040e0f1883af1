"""Dotenv (KEY=VALUE per line) parser.

One assignment per line, split on the first ``=``. Blank lines and lines
starting with ``#`` are skipped. There are no multi-line values, escape
sequences, inline comments or variable interpolation: a value is the
text after the first ``=``, trimmed, with one layer of matching quotes
removed and every whitespace run dropped.
"""

from __future__ import annotations

import re
from typing import Optional, TextIO

from envsync.exceptions import InvalidEnvLine, UnsupportedFileType

from .base import LoadResult, Parser, ResultBuilder, derive_group, validate_key

_WHITESPACE = re.compile(r"\s+")
_QUOTES = ("'", '"')
_COMMENT = "#"
_ASSIGN = "="


def strip_quotes(token: str) -> str:
    """Remove one layer of matching surrounding quotes."""
    if len(token) >= 2 and token[0] == token[-1] and token[0] in _QUOTES:
        return token[1:-1]
    return token


def normalize_value(value: str) -> str:
    """Trim, unquote, then drop all internal whitespace.

    "hello world" -> "helloworld"; values never contain whitespace.
    """
    return _WHITESPACE.sub("", strip_quotes(value.strip()))


class DotenvParser(Parser):
    """Parse ``.env`` files.

    Example:
        with open(".env", encoding="utf-8") as handle:
            result = DotenvParser().parse(handle)
        result.envs["DB_HOST"], result.groups["DB"]
    """

    format_name = "dotenv"

    def accepts(self, content: str) -> bool:
        return content.lstrip()[:1] not in ("{", "[")

    def parse(self, handle: TextIO, source: Optional[str] = None) -> LoadResult:
        source = self.source_name(handle, source)
        content = self.read(handle, source)

        if not self.accepts(content):
            raise UnsupportedFileType(source, self.format_name)

        builder = ResultBuilder(self.override)

        for number, line in enumerate(content.splitlines(), start=1):
            stripped = line.strip()
            if not stripped or stripped.startswith(_COMMENT):
                continue

            if _ASSIGN not in stripped:
                raise InvalidEnvLine(source, number, stripped)

            raw_key, _, raw_value = stripped.partition(_ASSIGN)
            key = validate_key(strip_quotes(raw_key.strip()), source)
            value = normalize_value(raw_value)

            if not builder.add(key, value, derive_group(key)):
                self._logger.debug("Duplicate key ignored", key=key, file=source, line=number)

        return builder.build()
