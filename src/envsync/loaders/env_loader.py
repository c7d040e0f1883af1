"""Format-guessing loader.

Resolves every named file, asks the LoaderRegistry for the loader that
matches each file's extension, and merges the per-file results in the
order the files were given.
"""

from __future__ import annotations

from typing import Optional

from envsync.logger import Logger
from envsync.parsers import LoadResult, ResultBuilder
from envsync.paths import PathResolver

from .base import BaseLoader, FileSpec
from .registry import LoaderRegistry


class EnvLoader(BaseLoader):
    """Load files of mixed formats through a LoaderRegistry.

    Example:
        loader = EnvLoader(files=[".env", "config.json"], override=False)
        result = loader.load()
    """

    def __init__(
        self,
        registry: Optional[LoaderRegistry] = None,
        files: FileSpec = None,
        override: bool = False,
        resolver: Optional[PathResolver] = None,
        logger: Optional[Logger] = None,
        default_file: Optional[str] = None,
    ) -> None:
        super().__init__(files, override, resolver, logger=logger, default_file=default_file)
        self.registry = registry or LoaderRegistry.default(logger=self._logger)

    def load(self) -> LoadResult:
        builder = ResultBuilder(self.override)

        for file in self.resolve_files():
            loader = self.registry.resolve(file, self.override)
            result = loader.load()
            taken = builder.merge(result)
            self._logger.debug(
                "Loaded file",
                file=file,
                loader=type(loader).__name__,
                keys=len(result),
                taken=taken,
            )

        return builder.build()
