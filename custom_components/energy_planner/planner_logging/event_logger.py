"""Structured event logger for Energy Planner.

Every log line is an event name plus key=value context, for example::

    PLAN_UPSERTED | date=2026-10-19 | hour=9 | level=high

Lines always go to the Home Assistant log. When file logging is enabled
they are also written to a small rotating file next to the integration,
which is handy when debugging session expiry on a device.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

_LOGGER = logging.getLogger(__name__)


class EnergyLogger:
    """Event-style logger shared by the engine and the integration."""

    # Log levels
    CRITICAL = "critical"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    DEBUG = "debug"

    _LEVELS = {
        CRITICAL: logging.CRITICAL,
        ERROR: logging.ERROR,
        WARNING: logging.WARNING,
        INFO: logging.INFO,
        DEBUG: logging.DEBUG,
    }

    def __init__(
        self,
        name: str = "engine",
        max_file_size_mb: int = 1,
        backup_count: int = 3,
    ) -> None:
        """Initialize the logger.

        Args:
            name: Suffix of the underlying logging.Logger name
            max_file_size_mb: Max size of the rotating log file
            backup_count: Number of rotated files to keep
        """
        self.name = name
        self._max_file_size_mb = max_file_size_mb
        self._backup_count = backup_count
        self._logger = logging.getLogger(f"custom_components.energy_planner.{name}")
        self._file_handler: RotatingFileHandler | None = None
        self.log_file: Path | None = None

    def log(self, level: str, event: str, **data: Any) -> None:
        """Log an event at the given level.

        Args:
            level: One of critical, error, warning, info, debug
            event: Event name, e.g. "SESSION_STARTED"
            **data: Context values
        """
        message = event
        if data:
            message = " | ".join([event, *(f"{k}={v}" for k, v in data.items())])
        self._logger.log(self._LEVELS.get(level, logging.DEBUG), message)

    def critical(self, event: str, **data: Any) -> None:
        """Log critical event."""
        self.log(self.CRITICAL, event, **data)

    def error(self, event: str, **data: Any) -> None:
        """Log error event."""
        self.log(self.ERROR, event, **data)

    def warning(self, event: str, **data: Any) -> None:
        """Log warning event."""
        self.log(self.WARNING, event, **data)

    def info(self, event: str, **data: Any) -> None:
        """Log info event."""
        self.log(self.INFO, event, **data)

    def debug(self, event: str, **data: Any) -> None:
        """Log debug event."""
        self.log(self.DEBUG, event, **data)

    @property
    def file_logging_enabled(self) -> bool:
        """Whether lines are also written to the rotating file."""
        return self._file_handler is not None

    def set_file_logging(self, enabled: bool, log_dir: Path | None = None) -> None:
        """Attach or detach the rotating file handler.

        Does blocking I/O; call from an executor inside the event loop.
        """
        if enabled and self._file_handler is None:
            if log_dir is None:
                log_dir = Path(__file__).parent.parent / "log"
            try:
                log_dir.mkdir(parents=True, exist_ok=True)
                handler = RotatingFileHandler(
                    log_dir / "energy_planner.log",
                    maxBytes=self._max_file_size_mb * 1024 * 1024,
                    backupCount=self._backup_count,
                    encoding="utf-8",
                )
            except OSError as ex:
                _LOGGER.error("Failed to set up file handler: %s", ex)
                return
            handler.setFormatter(
                logging.Formatter(
                    "%(asctime)s | %(levelname)s | %(message)s",
                    datefmt="%Y-%m-%d %H:%M:%S",
                )
            )
            handler.setLevel(logging.DEBUG)
            self._logger.addHandler(handler)
            self._file_handler = handler
            self.log_file = log_dir / "energy_planner.log"
        elif not enabled and self._file_handler is not None:
            self._logger.removeHandler(self._file_handler)
            self._file_handler.close()
            self._file_handler = None

        self.info("FILE_LOGGING_CHANGED", enabled=enabled)


# Singleton instance
_logger_instance: EnergyLogger | None = None


def get_logger() -> EnergyLogger:
    """Get or create the singleton logger instance."""
    global _logger_instance
    if _logger_instance is None:
        _logger_instance = EnergyLogger()
    return _logger_instance
