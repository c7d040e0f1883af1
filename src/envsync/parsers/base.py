"""Parser capability and the load result it produces.

A parser turns one open file into a LoadResult: a flat, ordered
key -> value map plus the group map derived from the keys.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional, TextIO

from envsync.exceptions import InvalidEnvKeyFormat, UnableToOpenFile
from envsync.logger import Logger, create_logger

KEY_FORMAT = r"^[A-Za-z_][A-Za-z_.]*$"
_KEY_PATTERN = re.compile(r"[A-Za-z_][A-Za-z_.]*")


def is_valid_key(key: str) -> bool:
    """Letters, underscores and dots only; never a leading digit or dot."""
    return _KEY_PATTERN.fullmatch(key) is not None


def validate_key(key: str, source: str) -> str:
    """Return ``key`` unchanged or raise InvalidEnvKeyFormat naming ``source``."""
    if not is_valid_key(key):
        raise InvalidEnvKeyFormat(key, source, KEY_FORMAT)
    return key


def derive_group(key: str) -> Optional[str]:
    """Group name of a key: the prefix before its first underscore.

    Examples:
        "DB_HOST" -> "DB"
        "APP.NAME_FULL" -> "APP.NAME"
        "SECRET" -> None
        "_PRIVATE" -> None
    """
    prefix, sep, _ = key.partition("_")
    if not sep or not prefix:
        return None
    return prefix


@dataclass(frozen=True)
class LoadResult:
    """Immutable outcome of loading one or more sources.

    Attributes:
        envs: Flat key -> value map in file-then-line order
        groups: Group name -> (key -> value) for keys that belong to a group
    """

    envs: Mapping[str, str] = field(default_factory=dict)
    groups: Mapping[str, Mapping[str, str]] = field(default_factory=dict)
    _membership: Mapping[str, str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        envs = MappingProxyType(dict(self.envs))
        groups = MappingProxyType(
            {name: MappingProxyType(dict(members)) for name, members in self.groups.items()}
        )
        membership = {key: name for name, members in groups.items() for key in members}

        object.__setattr__(self, "envs", envs)
        object.__setattr__(self, "groups", groups)
        object.__setattr__(self, "_membership", MappingProxyType(membership))

    def __len__(self) -> int:
        return len(self.envs)

    def __iter__(self) -> Iterator[str]:
        return iter(self.envs)

    def group_of(self, key: str) -> Optional[str]:
        """Name of the group holding ``key``, if any."""
        return self._membership.get(key)

    def to_dict(self) -> Dict[str, Any]:
        """Plain, mutable copy: {"envs": {...}, "groups": {...}}."""
        return {
            "envs": dict(self.envs),
            "groups": {name: dict(members) for name, members in self.groups.items()},
        }


class ResultBuilder:
    """Accumulates keys under an override policy.

    With ``override`` False the first definition of a key is kept and
    later ones are ignored; with ``override`` True the last one wins.
    A replaced key keeps its original position.
    """

    def __init__(self, override: bool = False) -> None:
        self.override = override
        self._envs: Dict[str, str] = {}
        self._groups: Dict[str, Optional[str]] = {}

    def __contains__(self, key: str) -> bool:
        return key in self._envs

    def __len__(self) -> int:
        return len(self._envs)

    def add(self, key: str, value: str, group: Optional[str] = None) -> bool:
        """Record one key; return False when the policy ignored it."""
        if key in self._envs and not self.override:
            return False
        self._envs[key] = value
        self._groups[key] = group
        return True

    def merge(self, result: LoadResult) -> int:
        """Fold another result in, key by key; return how many keys were taken."""
        taken = 0
        for key, value in result.envs.items():
            if self.add(key, value, result.group_of(key)):
                taken += 1
        return taken

    def build(self) -> LoadResult:
        groups: Dict[str, Dict[str, str]] = {}
        for key, value in self._envs.items():
            name = self._groups.get(key)
            if name is not None:
                groups.setdefault(name, {})[key] = value
        return LoadResult(envs=self._envs, groups=groups)


class Parser(ABC):
    """Format-specific parser.

    Subclasses implement ``accepts`` (content sniffing) and ``parse``.
    Duplicate keys inside one file follow the ``override`` policy.
    """

    format_name = "unknown"

    def __init__(self, override: bool = False, logger: Optional[Logger] = None) -> None:
        self.override = override
        self._logger = logger or create_logger()

    @abstractmethod
    def accepts(self, content: str) -> bool:
        """Whether ``content`` looks like this parser's format."""

    @abstractmethod
    def parse(self, handle: TextIO, source: Optional[str] = None) -> LoadResult:
        """Parse an open text file into a LoadResult.

        Args:
            handle: Readable text stream
            source: Name used in error messages (defaults to ``handle.name``)
        """

    @staticmethod
    def source_name(handle: TextIO, source: Optional[str] = None) -> str:
        if source:
            return source
        return str(getattr(handle, "name", "<stream>"))

    @staticmethod
    def read(handle: TextIO, source: str) -> str:
        try:
            return handle.read()
        except UnicodeDecodeError as exc:
            raise UnableToOpenFile(source, "not valid UTF-8 text") from exc
