"""Loader skeleton shared by every file format.

A loader owns a list of file names, resolves them with a PathResolver,
parses each with its parser and folds the results together under the
override policy. Loaders never touch the process environment; the Env
orchestrator commits their merged result once.
"""

from __future__ import annotations

import importlib
import os
from typing import List, Optional, Protocol, Sequence, Type, Union, runtime_checkable

from envsync.config import DEFAULT_FILE
from envsync.exceptions import MissingParser, PathNotFound, UnableToOpenFile
from envsync.logger import Logger, create_logger
from envsync.parsers import LoadResult, Parser, ResultBuilder
from envsync.paths import PathLike, PathResolver

FileSpec = Union[PathLike, Sequence[PathLike], None]
ParserSpec = Union[Type[Parser], str, None]


@runtime_checkable
class Loader(Protocol):
    """Anything that produces a LoadResult.

    Example:
        class StaticLoader:
            override = False

            def load(self) -> LoadResult:
                return LoadResult(envs={"APP_ENV": "test"})
    """

    override: bool

    def load(self) -> LoadResult:
        """Parse every source and return the merged result."""
        ...


def _as_list(files: FileSpec) -> List[str]:
    if files is None:
        return []
    if isinstance(files, (str, os.PathLike)):
        return [os.fspath(files)]
    return [os.fspath(f) for f in files]


class BaseLoader:
    """Common loading pipeline, parametrized by ``parser_class``.

    ``parser_class`` is a Parser subclass or a dotted import path to one.
    When no file is named the loader falls back to ``default_file`` and
    treats its absence as an empty source; named files must exist.

    Example:
        loader = DotenvLoader([".env", ".env.local"], override=True)
        result = loader.load()
    """

    parser_class: ParserSpec = None
    default_file: str = DEFAULT_FILE

    def __init__(
        self,
        files: FileSpec = None,
        override: bool = False,
        resolver: Optional[PathResolver] = None,
        parser: Optional[Parser] = None,
        logger: Optional[Logger] = None,
        default_file: Optional[str] = None,
    ) -> None:
        self._logger = logger or create_logger()
        self.resolver = resolver or PathResolver(logger=self._logger)
        if default_file:
            self.default_file = default_file
        self.explicit = files is not None
        self.files = _as_list(files) if self.explicit else [self.default_file]
        self.override = override
        self._parser = parser

    def __repr__(self) -> str:
        return f"{type(self).__name__}(files={self.files!r}, override={self.override!r})"

    def resolve_files(self) -> List[str]:
        """Resolve every file before anything is parsed.

        Raises:
            PathNotFound: For an explicitly named file that does not exist
        """
        resolved = []
        for file in self.files:
            try:
                resolved.append(self.resolver.resolve(file))
            except PathNotFound:
                if self.explicit:
                    raise
                self._logger.debug("Default file not found, skipping", file=file)
        return resolved

    def parser(self) -> Parser:
        """The parser instance, built from ``parser_class`` on first use.

        Raises:
            MissingParser: If the parser cannot be imported or constructed
        """
        if self._parser is None:
            self._parser = self._build_parser()
        return self._parser

    def _build_parser(self) -> Parser:
        loader_name = type(self).__name__
        target = self.parser_class

        if isinstance(target, str):
            module_name, _, attr = target.rpartition(".")
            try:
                target = getattr(importlib.import_module(module_name), attr)
            except (ImportError, AttributeError, ValueError) as exc:
                raise MissingParser(self.parser_class, loader_name) from exc

        if not (isinstance(target, type) and issubclass(target, Parser)):
            raise MissingParser(repr(self.parser_class), loader_name)

        try:
            return target(override=self.override, logger=self._logger)
        except TypeError as exc:
            raise MissingParser(target.__name__, loader_name) from exc

    def load(self) -> LoadResult:
        """Resolve, open and parse every file, then merge in file order."""
        builder = ResultBuilder(self.override)

        for file in self.resolve_files():
            result = self.load_file(file)
            taken = builder.merge(result)
            self._logger.debug("Loaded file", file=file, keys=len(result), taken=taken)

        return builder.build()

    def load_file(self, path: str) -> LoadResult:
        """Open one resolved file and hand it to the parser.

        Raises:
            UnableToOpenFile: If ``path`` is a directory or unreadable
        """
        if not os.path.isfile(path):
            raise UnableToOpenFile(path, "not a regular file")

        try:
            handle = open(path, encoding="utf-8")
        except OSError as exc:
            raise UnableToOpenFile(path, exc.strerror) from exc

        with handle:
            return self.parser().parse(handle, path)
