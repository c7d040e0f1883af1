"""Extension -> loader factory table.

Used when the caller names files without choosing a format: the
extension of each file picks the loader.
"""

from __future__ import annotations

import os
from functools import partial
from pathlib import Path
from typing import Callable, Dict, List, Optional

from envsync.exceptions import MissingLoader
from envsync.logger import Logger, create_logger
from envsync.paths import PathLike, PathResolver

from .base import Loader
from .dotenv_loader import DotenvLoader
from .json_loader import JsonLoader

# Called as factory(file_path, override)
LoaderFactory = Callable[[str, bool], Loader]

DOTENV = "dotenv"


def _normalize_extension(extension: str) -> str:
    return extension.strip().lower().lstrip(".")


class LoaderRegistry:
    """Registry of loader factories keyed by file extension.

    The last registration for an extension wins. Files without a
    registered extension that look like dotenv files (".env",
    ".env.local", "app.env", or no extension at all) use the
    ``dotenv`` entry.

    Example:
        registry = LoaderRegistry.default()
        registry.register("yaml", YamlLoader)
        loader = registry.resolve("/srv/app/config.json")
    """

    def __init__(self, logger: Optional[Logger] = None) -> None:
        self._factories: Dict[str, LoaderFactory] = {}
        self._logger = logger or create_logger()

    @classmethod
    def default(cls, logger: Optional[Logger] = None) -> "LoaderRegistry":
        """A fresh registry with the built-in dotenv and JSON loaders."""
        registry = cls(logger=logger)
        dotenv = partial(DotenvLoader, logger=registry._logger)
        registry.register(DOTENV, dotenv)
        registry.register("env", dotenv)
        registry.register("json", partial(JsonLoader, logger=registry._logger))
        return registry

    def register(self, extension: str, factory: LoaderFactory) -> "LoaderRegistry":
        """Register ``factory`` for ``extension`` (case-insensitive, dot optional)."""
        key = _normalize_extension(extension)
        if not key:
            raise ValueError("extension must not be empty")
        if key in self._factories:
            self._logger.debug("Replacing loader registration", extension=key)
        self._factories[key] = factory
        return self

    def unregister(self, extension: str) -> None:
        self._factories.pop(_normalize_extension(extension), None)

    def has(self, extension: str) -> bool:
        return _normalize_extension(extension) in self._factories

    def extensions(self) -> List[str]:
        return list(self._factories)

    @staticmethod
    def extension_of(file_path: PathLike) -> str:
        """Lower-cased last suffix of the file name, without the dot.

        Examples:
            "config.JSON" -> "json"
            ".env.local" -> "local"
            ".env" -> ""
        """
        name = os.path.basename(PathResolver.normalize(file_path))
        return Path(name).suffix.lstrip(".").lower()

    @staticmethod
    def is_dotenv_name(file_path: PathLike) -> bool:
        name = os.path.basename(PathResolver.normalize(file_path)).lower()
        return (
            name == ".env"
            or name.startswith(".env.")
            or name.endswith(".env")
            or not Path(name).suffix
        )

    def lookup(self, file_path: PathLike) -> str:
        """Registry key used for ``file_path``.

        Raises:
            MissingLoader: If no registered entry applies
        """
        extension = self.extension_of(file_path)

        if extension and extension in self._factories:
            return extension

        if self.is_dotenv_name(file_path) and DOTENV in self._factories:
            return DOTENV

        raise MissingLoader(extension or DOTENV, os.fspath(file_path))

    def resolve(self, file_path: PathLike, override: bool = False) -> Loader:
        """Build the loader for ``file_path`` with ``override`` threaded through.

        Raises:
            MissingLoader: If no loader is registered for the file's extension
        """
        key = self.lookup(file_path)
        factory = self._factories[key]
        self._logger.debug("Resolved loader", file=os.fspath(file_path), extension=key)
        return factory(os.fspath(file_path), override)
