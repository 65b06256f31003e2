"""Centralised logging utilities."""

from __future__ import annotations

import logging
import logging.config
import os
from pathlib import Path
from typing import Any, Dict

from hookbridge.utils import get_filename, path_from_root

LOG_DIR_ENV = "HOOKBRIDGE_LOG_DIR"
LOGGER_NAME = "hookbridge"
LOG_FORMAT = (
    "[%(asctime)s] [%(levelname)-8s] [%(filename)-16s] "
    "[%(funcName)-24s] [%(lineno)-4d] %(message)s"
)

# ANSI color codes for log levels
LOG_COLORS = {
    "DEBUG": "\033[36m",  # Cyan
    "INFO": "\033[32m",  # Green
    "WARNING": "\033[33m",  # Yellow
    "ERROR": "\033[31m",  # Red
    "CRITICAL": "\033[41m",  # Red background
}
RESET_COLOR = "\033[0m"


def log_directory() -> Path:
    """Return the directory that receives per-run log files."""

    override = os.environ.get(LOG_DIR_ENV)
    if override:
        return Path(override)
    return Path(path_from_root(".cache", "logs"))


class ColoredFormatter(logging.Formatter):
    """Formatter with ANSI color codes for log levels."""

    def format(self, record):
        color = LOG_COLORS.get(record.levelname, "")
        formatted = super().format(record)
        return f"{color}{formatted}{RESET_COLOR}"


class LogManager:
    """Singleton manager that configures and exposes the hook subsystem logger."""

    __instance: "LogManager | None" = None

    def __new__(cls):
        if cls.__instance is None:
            cls.__instance = super().__new__(cls)
            cls.__instance._logger = None  # type: ignore[attr-defined]
        return cls.__instance

    def __init__(self):
        if getattr(self, "_logger", None) is None:
            self._logger = self._init_logger()

    @staticmethod
    def _init_logger() -> logging.Logger:
        """Initialise and configure the hookbridge logger."""

        directory = log_directory()
        log_file_path = Path(get_filename("Log_", ".log", directory))

        config = LogManager._build_logging_config(log_file_path)
        logging.config.dictConfig(config)

        LogManager._create_latest_log_link(log_file_path)
        return logging.getLogger(LOGGER_NAME)

    @staticmethod
    def _build_logging_config(log_file_path: Path) -> Dict[str, Any]:
        """Return the logging configuration dictionary."""

        return {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "console_formatter": {
                    "()": ColoredFormatter,
                    "format": LOG_FORMAT,
                },
                "file_formatter": {
                    "format": LOG_FORMAT,
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "level": "INFO",
                    "formatter": "console_formatter",
                },
                "file": {
                    "class": "logging.FileHandler",
                    "filename": str(log_file_path),
                    "level": "DEBUG",
                    "mode": "w",
                    "formatter": "file_formatter",
                    "encoding": "utf8",
                    "delay": True,
                },
            },
            "loggers": {
                LOGGER_NAME: {
                    "handlers": ["console", "file"],
                    "level": "DEBUG",
                    "propagate": False,
                },
            },
        }

    @staticmethod
    def _create_latest_log_link(log_file_path: Path) -> None:
        """Create or refresh the ``latest.log`` symbolic link next to the log directory."""

        latest = log_file_path.parent.parent / "latest.log"
        try:
            latest.parent.mkdir(parents=True, exist_ok=True)

            if latest.exists() or latest.is_symlink():
                latest.unlink()

            latest.symlink_to(log_file_path)
        except OSError as exc:  # pragma: no cover - platform dependent
            print(f"Warning: Failed to create log symlink: {exc}")

    def get_logger(self) -> logging.Logger:
        """Return the configured logger instance."""

        return self._logger


log = LogManager().get_logger()
