"""Configuration for envsync itself.

Example:
    from envsync.config import get_settings

    settings = get_settings()          # reads ENVSYNC_* variables once
    settings.base_path, settings.override
"""

from envsync.config.settings import (
    DEFAULT_DISCOVERY_FILES,
    DEFAULT_FILE,
    DEFAULT_MARKER_KEY,
    DEFAULT_PREFIX,
    Settings,
    get_settings,
    reset_settings,
)

__all__ = [
    "Settings",
    "get_settings",
    "reset_settings",
    "DEFAULT_PREFIX",
    "DEFAULT_FILE",
    "DEFAULT_MARKER_KEY",
    "DEFAULT_DISCOVERY_FILES",
]
