"""JSON document parser.

A single top-level object. Nested objects flatten into underscore
joined keys ({"DB": {"HOST": "x"}} -> DB_HOST); scalars and arrays
that are not strings keep their JSON text.
"""

from __future__ import annotations

import json
from typing import Any, Iterator, Optional, TextIO, Tuple

from envsync.exceptions import InvalidJson, UnsupportedFileType

from .base import LoadResult, Parser, ResultBuilder, derive_group, validate_key


def to_text(value: Any) -> str:
    """Strings as-is, everything else as compact JSON (true, 1.5, null, [1,2])."""
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def flatten(prefix: str, value: Any) -> Iterator[Tuple[str, str]]:
    """Yield (KEY, text) pairs for every leaf under ``prefix``."""
    if isinstance(value, dict):
        for name, child in value.items():
            yield from flatten(f"{prefix}_{name}", child)
    else:
        yield prefix, to_text(value)


class JsonParser(Parser):
    """Parse JSON configuration documents.

    Top-level objects become groups, top-level scalars are ungrouped keys.
    """

    format_name = "json"

    def accepts(self, content: str) -> bool:
        return content.lstrip()[:1] in ("{", "")

    def parse(self, handle: TextIO, source: Optional[str] = None) -> LoadResult:
        source = self.source_name(handle, source)
        content = self.read(handle, source)

        if not content.strip():
            return LoadResult()

        if not self.accepts(content):
            raise UnsupportedFileType(source, self.format_name)

        try:
            data = json.loads(content)
        except json.JSONDecodeError as exc:
            raise InvalidJson(source, f"{exc.msg} (line {exc.lineno}, column {exc.colno})") from exc

        builder = ResultBuilder(self.override)

        for name, value in data.items():
            if isinstance(value, dict):
                entries = [(key, text, derive_group(key)) for key, text in flatten(name, value)]
            else:
                entries = [(name, to_text(value), None)]

            for key, text, group in entries:
                validate_key(key, source)
                if not builder.add(key, text, group):
                    self._logger.debug("Duplicate key ignored", key=key, file=source)

        return builder.build()
