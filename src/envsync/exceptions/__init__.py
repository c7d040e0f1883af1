"""Exceptions raised by envsync.

Every exception carries structured error information (code, message,
details). Loading failures all derive from LoaderError so callers can
catch one type around load()/reload().

Usage:
    from envsync.exceptions import EnvSyncError, InvalidEnvLine, PathNotFound
"""

from envsync.exceptions.base import (
    ConfigurationError,
    EnvSyncError,
    InvalidEnvKeyFormat,
    InvalidEnvLine,
    InvalidJson,
    LoaderError,
    MissingLoader,
    MissingParser,
    PathNotFound,
    ResourceNotFoundError,
    UnableToOpenFile,
    UnableToOpenFileException,
    UnsupportedFileType,
    ValidationError,
)

__all__ = [
    # Base exceptions
    "EnvSyncError",
    "ValidationError",
    "ResourceNotFoundError",
    "ConfigurationError",
    "LoaderError",
    # Loading failures
    "PathNotFound",
    "UnableToOpenFile",
    "UnableToOpenFileException",
    "UnsupportedFileType",
    "MissingLoader",
    "MissingParser",
    "InvalidJson",
    "InvalidEnvLine",
    "InvalidEnvKeyFormat",
]
