"""Synchronization of loaded keys into the process environment.

The environment is reached through an EnvironmentSink so tests can swap
the OS environment for an in-memory one. The keys written by the last
commit are recorded under a marker key inside the sink itself, which
lets independent Env instances in one process clean up after each other.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Protocol, Set, Tuple, runtime_checkable

from envsync.config import DEFAULT_MARKER_KEY
from envsync.exceptions import ConfigurationError
from envsync.logger import Logger, create_logger

_SEPARATOR = ","


@runtime_checkable
class EnvironmentSink(Protocol):
    """Where committed keys are written."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def unset(self, key: str) -> None:
        ...

    def snapshot_keys(self) -> Set[str]:
        ...


class OsEnvironmentSink:
    """Sink bound to ``os.environ`` (and so to putenv/unsetenv)."""

    def get(self, key: str) -> Optional[str]:
        return os.environ.get(key)

    def set(self, key: str, value: str) -> None:
        os.environ[key] = value

    def unset(self, key: str) -> None:
        os.environ.pop(key, None)

    def snapshot_keys(self) -> Set[str]:
        return set(os.environ)


class MemoryEnvironmentSink:
    """Dict-backed sink for tests and embedding.

    Example:
        sink = MemoryEnvironmentSink({"HOME": "/root"})
        Env(name=".env", sink=sink).load()
        sink.values["APP_ENV"]
    """

    def __init__(self, initial: Optional[Mapping[str, str]] = None) -> None:
        self.values: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value

    def unset(self, key: str) -> None:
        self.values.pop(key, None)

    def snapshot_keys(self) -> Set[str]:
        return set(self.values)

    def clear(self) -> None:
        self.values.clear()


@dataclass(frozen=True)
class SyncReport:
    """What one commit changed."""

    written: Tuple[str, ...]
    removed: Tuple[str, ...]


class EnvironmentSync:
    """Push a merged key set into a sink and drop keys left over from the last push.

    Example:
        sync = EnvironmentSync(MemoryEnvironmentSink())
        sync.commit({"A": "1", "B": "2"})
        sync.commit({"A": "1"})          # B is removed
    """

    def __init__(
        self,
        sink: Optional[EnvironmentSink] = None,
        marker_key: str = DEFAULT_MARKER_KEY,
        logger: Optional[Logger] = None,
    ) -> None:
        self.sink = sink if sink is not None else OsEnvironmentSink()
        self.marker_key = marker_key
        self._logger = logger or create_logger()

    def previous_keys(self) -> List[str]:
        """Keys written by the last commit made through this sink and marker."""
        raw = self.sink.get(self.marker_key)
        if not raw:
            return []
        return [key for key in raw.split(_SEPARATOR) if key]

    def commit(self, envs: Mapping[str, str]) -> SyncReport:
        """Make the sink reflect ``envs``.

        Every key from the previous commit that is missing from ``envs`` is
        unset; every key in ``envs`` is written unconditionally; the marker
        is replaced with the new key list.

        Raises:
            ConfigurationError: If ``envs`` contains the marker key itself
        """
        if self.marker_key in envs:
            raise ConfigurationError(
                "RESERVED_KEY",
                f"'{self.marker_key}' is reserved for tracking loaded keys",
                {"key": self.marker_key},
            )

        current = list(envs)
        current_set = set(current)
        stale = [key for key in self.previous_keys() if key not in current_set]

        for key in stale:
            self.sink.unset(key)

        for key in current:
            self.sink.set(key, envs[key])

        if current:
            self.sink.set(self.marker_key, _SEPARATOR.join(current))
        else:
            self.sink.unset(self.marker_key)

        if stale:
            self._logger.info("Removed stale keys", removed=len(stale), keys=",".join(stale))
        self._logger.info("Environment committed", keys=len(current), removed=len(stale))

        return SyncReport(written=tuple(current), removed=tuple(stale))

    def owned(self) -> Dict[str, Optional[str]]:
        """Current sink value of every key from the last commit."""
        return {key: self.sink.get(key) for key in self.previous_keys()}
