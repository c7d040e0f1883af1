"""Path resolution for configuration files.

Normalizes user-given paths (either slash style) to the platform
separator and resolves them against a base directory.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Optional, Union

from envsync.exceptions import PathNotFound
from envsync.logger import Logger, create_logger

PathLike = Union[str, Path]

_DRIVE_PATTERN = re.compile(r"^[A-Za-z]:[\\/]")


class PathResolver:
    """Resolve file names to absolute paths.

    A path is tried as given first, then joined onto ``base_path``.

    Example:
        resolver = PathResolver("/srv/app")
        resolver.resolve(".env")            # "/srv/app/.env"
        PathResolver.join("/var", "www")    # "/var/www"
    """

    SEP = os.sep

    def __init__(self, base_path: Optional[PathLike] = None, logger: Optional[Logger] = None) -> None:
        self.base_path = os.fspath(base_path) if base_path else os.getcwd()
        self._logger = logger or create_logger()

    def resolve(self, path: PathLike) -> str:
        """Return the absolute path of ``path``.

        Raises:
            PathNotFound: If neither ``path`` nor ``base_path/path`` exists
        """
        raw = os.fspath(path)
        normalized = self.normalize(raw)

        if normalized and os.path.exists(normalized):
            return os.path.abspath(normalized)

        joined = self.join(self.base_path, normalized)
        if not os.path.exists(joined):
            raise PathNotFound(raw, self.base_path)

        self._logger.debug("Resolved path against base", path=raw, resolved=joined)
        return os.path.abspath(joined)

    def exists(self, path: PathLike) -> bool:
        """Check whether ``path`` would resolve."""
        try:
            self.resolve(path)
        except PathNotFound:
            return False
        return True

    @classmethod
    def is_absolute(cls, path: PathLike) -> bool:
        """Check for POSIX ("/etc") or drive-letter ("C:\\Users") absolute paths."""
        path = os.fspath(path)
        converted = path.replace("/", cls.SEP).replace("\\", cls.SEP)
        return converted.startswith(cls.SEP) or bool(_DRIVE_PATTERN.match(path))

    @classmethod
    def normalize(cls, path: PathLike) -> str:
        """Use the platform separator and trim separators off relative paths.

        Absolute paths keep their leading separator; trailing ones are
        kept too, as for the bare root.
        """
        path = os.fspath(path)
        converted = path.replace("/", cls.SEP).replace("\\", cls.SEP)

        if cls.is_absolute(path):
            return converted

        return converted.strip(cls.SEP)

    @classmethod
    def join(cls, *paths: PathLike) -> str:
        """Join path segments into one normalized path.

        The result is absolute exactly when the first segment is.

        Example:
            PathResolver.join("/var", "www", "html")   # "/var/www/html"
            PathResolver.join("config", "/app/")       # "config/app"
        """
        if not paths:
            return ""

        first = os.fspath(paths[0])
        absolute = cls.is_absolute(first)
        head = cls.normalize(first)
        if head != cls.SEP:
            head = head.rstrip(cls.SEP)

        segments = [head] if head else []
        for path in paths[1:]:
            segment = cls.normalize(path).strip(cls.SEP)
            if segment:
                segments.append(segment)

        if not segments:
            return cls.SEP if absolute else ""

        if segments[0] == cls.SEP:
            return cls.SEP + cls.SEP.join(segments[1:])

        joined = cls.SEP.join(segments)
        return joined if absolute else joined.lstrip(cls.SEP)
