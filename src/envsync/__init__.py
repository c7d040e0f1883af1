"""envsync - load dotenv and JSON configuration into the process environment.

This package provides:
- paths: PathResolver for base-directory relative file names
- parsers: dotenv and JSON parsers producing flat key maps and groups
- loaders: per-format loaders and an extension-driven LoaderRegistry
- sync: EnvironmentSync, which commits keys and removes stale ones
- env: the Env orchestrator with get/group/has/dump and load/reload
- config, logger, exceptions: settings, structured logging and errors
"""

__version__ = "1.0.0"

from envsync.config import Settings, get_settings, reset_settings
from envsync.env import Env
from envsync.exceptions import (
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
from envsync.loaders import (
    BaseLoader,
    DotenvLoader,
    EnvLoader,
    JsonLoader,
    Loader,
    LoaderRegistry,
)
from envsync.logger import Logger, StructuredLogger, create_logger, get_logger
from envsync.parsers import DotenvParser, JsonParser, LoadResult, Parser
from envsync.paths import PathResolver
from envsync.sync import (
    EnvironmentSink,
    EnvironmentSync,
    MemoryEnvironmentSink,
    OsEnvironmentSink,
    SyncReport,
)

__all__ = [
    "__version__",
    # Orchestrator
    "Env",
    # Loading pipeline
    "PathResolver",
    "Parser",
    "DotenvParser",
    "JsonParser",
    "LoadResult",
    "Loader",
    "BaseLoader",
    "DotenvLoader",
    "JsonLoader",
    "EnvLoader",
    "LoaderRegistry",
    # Sync
    "EnvironmentSink",
    "EnvironmentSync",
    "OsEnvironmentSink",
    "MemoryEnvironmentSink",
    "SyncReport",
    # Config
    "Settings",
    "get_settings",
    "reset_settings",
    # Logger
    "Logger",
    "StructuredLogger",
    "create_logger",
    "get_logger",
    # Exceptions
    "EnvSyncError",
    "ValidationError",
    "ResourceNotFoundError",
    "ConfigurationError",
    "LoaderError",
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
