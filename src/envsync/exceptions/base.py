"""Exception classes for envsync.

All envsync exceptions include structured error information:
- code: Machine-readable error identifier
- message: Human-readable error description
- details: Additional context (file, line, key) for debugging
"""

from typing import Any, Dict, Optional


class EnvSyncError(Exception):
    """Base exception for all envsync errors.

    Attributes:
        code: Machine-readable error code (e.g., "INVALID_ENV_LINE")
        message: Human-readable error message
        details: Optional additional context for debugging
    """

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return formatted error string."""
        if self.details:
            return f"{self.code}: {self.message} (details: {self.details})"
        return f"{self.code}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON serialization.

        Returns:
            Dictionary with code, message, and details keys.
        """
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(EnvSyncError):
    """Base for errors in the content of a configuration source."""

    pass


class ResourceNotFoundError(EnvSyncError):
    """Base for errors where a configuration source does not exist."""

    pass


class ConfigurationError(EnvSyncError):
    """Base for errors in how loaders and parsers are wired together."""

    pass


class LoaderError(EnvSyncError):
    """Base for every failure raised while loading a source.

    Any LoaderError aborts the whole load call; nothing is committed
    to the process environment.
    """

    pass


class PathNotFound(ResourceNotFoundError, LoaderError):
    """Raised when a named file exists neither as given nor under the base path."""

    def __init__(self, path: str, base_path: Optional[str] = None):
        details: Dict[str, Any] = {"path": path}
        if base_path is not None:
            details["base_path"] = base_path
        super().__init__("PATH_NOT_FOUND", f"Unable to locate {path}", details)
        self.path = path


class UnableToOpenFile(LoaderError):
    """Raised when a path exists but cannot be read as a regular file."""

    def __init__(self, file: str, reason: Optional[str] = None):
        details: Dict[str, Any] = {"file": file}
        if reason:
            details["reason"] = reason
        super().__init__("UNABLE_TO_OPEN_FILE", f"Unable to open file '{file}'", details)
        self.file = file


UnableToOpenFileException = UnableToOpenFile


class UnsupportedFileType(ValidationError, LoaderError):
    """Raised when a loader is given a file whose content is in another format."""

    def __init__(self, file: str, expected: str):
        super().__init__(
            "UNSUPPORTED_FILE_TYPE",
            f"'{file}' is not a {expected} file",
            {"file": file, "expected": expected},
        )
        self.file = file
        self.expected = expected


class MissingLoader(ConfigurationError, LoaderError):
    """Raised when no loader is registered for a file extension."""

    def __init__(self, extension: str, file: Optional[str] = None):
        details: Dict[str, Any] = {"extension": extension}
        if file is not None:
            details["file"] = file
        super().__init__(
            "MISSING_LOADER",
            f"No loader registered for the .{extension} extension. "
            f"Use LoaderRegistry.register() to add a loader for '{extension}'.",
            details,
        )
        self.extension = extension


class MissingParser(ConfigurationError, LoaderError):
    """Raised when a loader's parser cannot be imported or constructed."""

    def __init__(self, parser: str, loader: str):
        super().__init__(
            "MISSING_PARSER",
            f"Missing parser: '{parser}' for loader {loader}",
            {"parser": parser, "loader": loader},
        )
        self.parser = parser


class InvalidJson(ValidationError, LoaderError):
    """Raised when a JSON source fails to decode."""

    def __init__(self, file: str, reason: Optional[str] = None):
        details: Dict[str, Any] = {"file": file}
        if reason:
            details["reason"] = reason
        super().__init__("INVALID_JSON", f"Invalid JSON in '{file}'", details)
        self.file = file


class InvalidEnvLine(ValidationError, LoaderError):
    """Raised when a dotenv line is not a KEY=VALUE assignment."""

    def __init__(self, file: str, line: int, content: str = ""):
        super().__init__(
            "INVALID_ENV_LINE",
            f"Invalid env line at {file}({line})",
            {"file": file, "line": line, "content": content},
        )
        self.file = file
        self.line = line


class InvalidEnvKeyFormat(ValidationError, LoaderError):
    """Raised when a key does not match the allowed key format."""

    def __init__(self, key: str, file: str, pattern: str):
        super().__init__(
            "INVALID_ENV_KEY_FORMAT",
            f"'{key}' format is unmatched with allowed format {pattern} in {file}",
            {"key": key, "file": file, "pattern": pattern},
        )
        self.key = key
        self.file = file
