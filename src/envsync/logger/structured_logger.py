"""
Structured logger for envsync events.

Loaders, the registry, EnvironmentSync and Env report what they did as a
short message plus keyword context: file paths, key names, loader and
extension names, and counts. Loaded values are never passed in. Context is
rendered as trailing key=value pairs in text mode or as fields of one JSON
object per line.
"""

import json
import logging
import sys
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .interface import Logger

# LogRecord attributes that are never treated as extra context
_RESERVED_KEYS = frozenset({
    "args", "asctime", "created", "exc_info", "exc_text", "filename",
    "funcName", "levelname", "levelno", "lineno", "module",
    "msecs", "message", "msg", "name", "pathname", "process",
    "processName", "relativeCreated", "stack_info", "thread",
    "threadName", "taskName",
})


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RESERVED_KEYS and key != "session_id"
    }


class JsonFormatter(logging.Formatter):
    """One JSON object per record; keyword context becomes top-level fields.

    Example line:
        {"timestamp": "...", "level": "INFO", "message": "Environment committed",
         "logger": "envsync", "session_id": "1a2b3c4d", "keys": 12, "removed": 1}
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }

        session_id = getattr(record, "session_id", None)
        if session_id:
            log_data["session_id"] = str(session_id)

        log_data.update(_extra_fields(record))

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Text line with keyword context appended.

    Example line:
        2024-01-01 12:00:00,000 [DEBUG] [envsync] [session:1a2b3c4d] Loaded file file=/srv/.env keys=3 taken=3
    """

    def format(self, record: logging.LogRecord) -> str:
        s = super().format(record)

        extra_args = _extra_fields(record)
        if extra_args:
            s += " " + " ".join(f"{k}={v}" for k, v in extra_args.items())

        return s


class StructuredLogger(Logger):
    """Logger shared by every envsync component of one Env.

    The session id ties together the lines written through one logger, so the
    "Resolved loader", "Loaded file" and "Environment committed" lines of
    a reload can be grepped as a unit.

    Example:
        logger = StructuredLogger(name="envsync", level=logging.DEBUG)
        Env(name=".env", logger=logger).load()

        # JSON lines to a file
        logger = StructuredLogger(name="envsync", json_format=True, log_file="/tmp/envsync.log")
    """

    def __init__(
        self,
        name: str = "envsync",
        level: int = logging.INFO,
        log_file: Optional[str] = None,
        json_format: bool = False,
    ):
        """Initialize the structured logger.

        Args:
            name: Logger name
            level: Logging level (logging.DEBUG, logging.INFO, etc.)
            log_file: Optional file path for log output
            json_format: If True, output logs as JSON; otherwise use text format
        """
        self._name = name
        self._session_id = str(uuid.uuid4())[:8]
        self._logger = logging.getLogger(name)
        self._logger.setLevel(level)

        # Re-initialising the same name must not stack handlers
        if self._logger.hasHandlers():
            self._logger.handlers.clear()

        self._logger.propagate = False

        if json_format:
            formatter: logging.Formatter = JsonFormatter()
        else:
            formatter = TextFormatter(
                "%(asctime)s [%(levelname)s] [%(name)s] [session:%(session_id)s] %(message)s"
            )

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        self._logger.addHandler(console_handler)

        if log_file:
            try:
                file_handler = logging.FileHandler(log_file)
                file_handler.setFormatter(formatter)
                self._logger.addHandler(file_handler)
            except OSError as e:
                # Fallback to console if file cannot be opened
                print(f"Failed to setup log file {log_file}: {e}", file=sys.stderr)

    @property
    def name(self) -> str:
        return self._name

    def get_session_id(self) -> str:
        """Get the current session ID."""
        return self._session_id

    def _log(self, level: int, message: str, **kwargs: Any) -> None:
        extra: Dict[str, Any] = {"session_id": self._session_id}

        for k, v in kwargs.items():
            if k in _RESERVED_KEYS:
                # Prefix reserved keys to avoid LogRecord collisions
                extra[f"_{k}"] = v
            else:
                extra[k] = v

        self._logger.log(level, message, extra=extra)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, message, **kwargs)

    def critical(self, message: str, **kwargs: Any) -> None:
        self._log(logging.CRITICAL, message, **kwargs)
