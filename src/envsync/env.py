"""Env orchestrator.

Composes loaders, merges their output in order, commits the merged
key set to the process environment once per load, and answers queries
from the resulting snapshot.

States: unloaded -> loaded. ``load()`` runs the pipeline only from the
unloaded state; ``reload()`` clears the snapshot and runs it again. The
previous key set lives in the environment sink, so a reload still
removes keys that disappeared from the files.
"""

from __future__ import annotations

import os
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from envsync.config import Settings, get_settings
from envsync.exceptions import EnvSyncError
from envsync.loaders import EnvLoader, Loader, LoaderRegistry
from envsync.logger import Logger, create_logger
from envsync.parsers import LoadResult, ResultBuilder, derive_group, validate_key
from envsync.paths import PathLike, PathResolver
from envsync.sync import EnvironmentSink, EnvironmentSync, OsEnvironmentSink, SyncReport

DEFAULTS_SOURCE = "<defaults>"

LoaderSpec = Union[Loader, Sequence[Loader], None]
NameSpec = Union[PathLike, Sequence[PathLike], None]


class Env:
    """Load configuration files into the process environment and query them.

    Args:
        loader: A loader or sequence of loaders to run, in order
        name: File name(s) whose format is guessed from the extension
        override: Later sources win when True (default from settings)
        registry: Extension table used for ``name`` and discovery
        base_path: Directory relative names resolve against
        discover: Also load the settings' discovery files found under base_path
        sink: Environment to commit into (default: os.environ)
        settings: Defaults for every unset argument (default: get_settings())
        logger: Logger shared with every component

    Example:
        env = Env(name=[".env", "config.json"])
        env.get("APP_ENV")
        env.group("DB")            # {"DB_HOST": ..., "DB_USER": ...}
        env.reload()
    """

    def __init__(
        self,
        loader: LoaderSpec = None,
        *,
        name: NameSpec = None,
        override: Optional[bool] = None,
        registry: Optional[LoaderRegistry] = None,
        base_path: Optional[PathLike] = None,
        discover: bool = False,
        sink: Optional[EnvironmentSink] = None,
        settings: Optional[Settings] = None,
        logger: Optional[Logger] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._logger = logger or create_logger()
        self.override = self.settings.override if override is None else override
        self.resolver = PathResolver(base_path or self.settings.base_path, logger=self._logger)
        self.registry = registry or LoaderRegistry.default(logger=self._logger)
        self.sync = EnvironmentSync(
            sink if sink is not None else OsEnvironmentSink(),
            marker_key=self.settings.marker_key,
            logger=self._logger,
        )
        self.discover = discover
        self.loaders = self._build_loaders(loader, name)

        self._envs: Dict[str, str] = {}
        self._groups: Dict[str, Dict[str, str]] = {}
        self._loaded = False
        self.last_report: Optional[SyncReport] = None

    @classmethod
    def create(
        cls,
        loader: LoaderSpec = None,
        name: NameSpec = None,
        override: Optional[bool] = None,
        registry: Optional[LoaderRegistry] = None,
        **kwargs: Any,
    ) -> "Env":
        """Build an Env and load it immediately."""
        env = cls(loader, name=name, override=override, registry=registry, **kwargs)
        return env.load()

    def _build_loaders(self, loader: LoaderSpec, name: NameSpec) -> List[Loader]:
        if loader is not None:
            if isinstance(loader, Loader):
                return [loader]
            return list(loader)

        if name is None and self.discover:
            return []

        return [
            EnvLoader(
                self.registry,
                files=name,
                override=self.override,
                resolver=self.resolver,
                logger=self._logger,
                default_file=self.settings.default_file,
            )
        ]

    def _discovered_files(self) -> List[str]:
        found = []
        for candidate in self.settings.discovery_files:
            path = PathResolver.join(self.resolver.base_path, candidate)
            if os.path.isfile(path):
                found.append(path)
        return found

    def _collect(self) -> LoadResult:
        builder = ResultBuilder(self.override)
        for loader in self.loaders:
            builder.merge(loader.load())
        explicit = builder.build()

        if not self.discover:
            return explicit

        discovered_files = self._discovered_files()
        if not discovered_files:
            return explicit

        self._logger.debug("Discovered files", files=",".join(discovered_files))
        discovered = EnvLoader(
            self.registry,
            files=discovered_files,
            override=self.override,
            resolver=self.resolver,
            logger=self._logger,
        ).load()

        # Explicitly named sources win over discovered ones
        combined = ResultBuilder(override=False)
        combined.merge(explicit)
        combined.merge(discovered)
        return combined.build()

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def previous_keys(self) -> List[str]:
        return self.sync.previous_keys()

    def load(self) -> "Env":
        """Run the pipeline once; later calls are no-ops until reload().

        Nothing is committed unless every source parses cleanly.

        Raises:
            LoaderError: Any resolution, open or parse failure
        """
        if self._loaded:
            return self
        return self._run()

    def _with_defaults(self, result: LoadResult, defaults: Mapping[str, str]) -> LoadResult:
        builder = ResultBuilder(override=False)
        builder.merge(result)
        for key, value in defaults.items():
            validate_key(key, DEFAULTS_SOURCE)
            builder.add(key, str(value), derive_group(key))
        return builder.build()

    def _run(self, defaults: Optional[Mapping[str, str]] = None) -> "Env":
        result = self._collect()
        if defaults:
            result = self._with_defaults(result, defaults)
        self.last_report = self.sync.commit(result.envs)

        snapshot = result.to_dict()
        self._envs = snapshot["envs"]
        self._groups = snapshot["groups"]
        self._loaded = True

        self._logger.debug("Env loaded", keys=len(self._envs), groups=len(self._groups))
        return self

    def reload(self, defaults: Optional[Mapping[str, str]] = None) -> "Env":
        """Forget the snapshot and load again, removing keys that disappeared.

        Args:
            defaults: Extra keys committed with this load only; a key
                defined by a file wins over the same default

        Raises:
            InvalidEnvKeyFormat: If a default key breaks the key format
        """
        self._envs = {}
        self._groups = {}
        self._loaded = False
        return self._run(defaults)

    def safe_load(self) -> Dict[str, str]:
        """Load, returning {} instead of raising on any envsync error."""
        try:
            self.load()
        except EnvSyncError as exc:
            self._logger.warning("Safe load failed", code=exc.code, error=exc.message)
            return {}
        return dict(self._envs)

    def get(self, key: Optional[str] = None, default: Any = None) -> Any:
        """Value of ``key``, or a copy of every value when ``key`` is None."""
        self.load()

        if key is None:
            return dict(self._envs)

        return self._envs.get(key, default)

    def group(self, name: Optional[str] = None, default: Any = None) -> Any:
        """Members of group ``name``, or a copy of every group when ``name`` is None."""
        self.load()

        if name is None:
            return {group: dict(members) for group, members in self._groups.items()}

        if name not in self._groups:
            return default
        return dict(self._groups[name])

    def has(self, key: str) -> bool:
        self.load()
        return key in self._envs

    def keys(self) -> List[str]:
        self.load()
        return list(self._envs)

    def dump(self) -> Dict[str, Any]:
        """Snapshot plus the current process value of every committed key."""
        self.load()
        return {
            "envs": dict(self._envs),
            "groups": {group: dict(members) for group, members in self._groups.items()},
            "process": self.sync.owned(),
        }
