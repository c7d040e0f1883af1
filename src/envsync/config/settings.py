"""Dataclass-based settings for envsync.

Every option the Env orchestrator falls back to when it is not given an
explicit argument. Values come from {prefix}_* environment variables
with sensible defaults.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

DEFAULT_PREFIX = "ENVSYNC"
DEFAULT_FILE = ".env"
DEFAULT_MARKER_KEY = "__ENVSYNC_KEYS"
DEFAULT_DISCOVERY_FILES: Tuple[str, ...] = (
    ".env",
    ".env.local",
    ".env.development",
    ".env.production",
    ".env.dev",
    ".env.prod",
)

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _parse_bool(value: Optional[str], default: bool) -> bool:
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in _TRUE_VALUES


def _parse_list(value: Optional[str], default: Tuple[str, ...]) -> Tuple[str, ...]:
    if not value:
        return default
    return tuple(item.strip() for item in value.split(",") if item.strip())


@dataclass
class Settings:
    """Loader configuration

    Attributes:
        base_path: Directory relative file names are resolved against
        override: Whether later sources replace keys set by earlier ones
        default_file: File loaded when no file is named
        discovery_files: Candidate names searched when discovery is enabled
        marker_key: Environment key recording the keys of the last commit
    """

    base_path: Path = field(default_factory=Path.cwd)
    override: bool = False
    default_file: str = DEFAULT_FILE
    discovery_files: Tuple[str, ...] = DEFAULT_DISCOVERY_FILES
    marker_key: str = DEFAULT_MARKER_KEY

    def __post_init__(self) -> None:
        self.base_path = Path(self.base_path)
        self.discovery_files = tuple(self.discovery_files)
        self.validate()

    def validate(self) -> None:
        """Raise ValueError for settings that cannot work."""
        if not self.marker_key:
            raise ValueError("marker_key must not be empty")
        if not self.default_file:
            raise ValueError("default_file must not be empty")

    @classmethod
    def from_env(cls, prefix: str = DEFAULT_PREFIX) -> "Settings":
        """Load settings from environment variables

        Environment variables:
            {prefix}_BASE_PATH: Base directory (default: current directory)
            {prefix}_OVERRIDE: "true"/"1"/"yes"/"on" to let later sources win
            {prefix}_DEFAULT_FILE: Default file name (default: .env)
            {prefix}_DISCOVERY_FILES: Comma separated discovery candidates
            {prefix}_MARKER_KEY: Key-list marker (default: __ENVSYNC_KEYS)
        """
        base_path = os.environ.get(f"{prefix}_BASE_PATH")

        return cls(
            base_path=Path(base_path) if base_path else Path.cwd(),
            override=_parse_bool(os.environ.get(f"{prefix}_OVERRIDE"), False),
            default_file=os.environ.get(f"{prefix}_DEFAULT_FILE", DEFAULT_FILE),
            discovery_files=_parse_list(
                os.environ.get(f"{prefix}_DISCOVERY_FILES"), DEFAULT_DISCOVERY_FILES
            ),
            marker_key=os.environ.get(f"{prefix}_MARKER_KEY", DEFAULT_MARKER_KEY),
        )


# Global settings storage per prefix
_global_settings: dict[str, Settings] = {}


def get_settings(prefix: str = DEFAULT_PREFIX, reload: bool = False) -> Settings:
    """
    Get or create the settings instance for a given prefix

    Args:
        prefix: Environment variable prefix
        reload: If True, re-read settings from the environment

    Returns:
        Settings instance for the given prefix
    """
    if prefix not in _global_settings or reload:
        _global_settings[prefix] = Settings.from_env(prefix=prefix)

    return _global_settings[prefix]


def reset_settings(prefix: Optional[str] = None) -> None:
    """Reset cached settings (primarily for testing)

    Args:
        prefix: Specific prefix to reset, or None to reset all
    """
    if prefix:
        _global_settings.pop(prefix, None)
    else:
        _global_settings.clear()
