# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-02
# Updated: 2026-03-06
# Description: logging_utils.py
# -----------------------------------------------------------------------------
import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

import colorlog

BASE_LOGGER_NAME = "companion"

CONSOLE_FORMAT = (
    "%(log_color)s%(asctime)s [%(levelname)s] "
    "%(name)s:%(lineno)d:%(reset)s %(message_log_color)s%(message)s"
)
FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# One rotating handler per process; every class logger shares it
_file_handler: Optional[RotatingFileHandler] = None


def _truthy(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "y", "on")


def _console_handler() -> logging.Handler:
    handler = colorlog.StreamHandler()
    handler.setFormatter(
        colorlog.ColoredFormatter(
            fmt=CONSOLE_FORMAT,
            datefmt=DATE_FORMAT,
            log_colors={
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "bold_red",
            },
            secondary_log_colors={
                "message": {
                    "INFO": "white",
                    "WARNING": "yellow",
                    "ERROR": "light_red",
                    "CRITICAL": "red",
                }
            },
            style="%",
        )
    )
    return handler


def _shared_file_handler() -> Optional[logging.Handler]:
    """
    Rotating file handler, only when COMPANION_LOG_TO_FILE is set.
    Sized by COMPANION_LOG_MAX_BYTES / COMPANION_LOG_BACKUP_COUNT.
    """
    global _file_handler

    if not _truthy(os.getenv("COMPANION_LOG_TO_FILE", "0")):
        return None

    if _file_handler is None:
        log_path = Path(os.getenv("COMPANION_LOG_FILE", "./logs/companion.log"))
        log_path.parent.mkdir(parents=True, exist_ok=True)

        _file_handler = RotatingFileHandler(
            filename=str(log_path),
            maxBytes=int(os.getenv("COMPANION_LOG_MAX_BYTES", str(5 * 1024 * 1024))),  # 5MB
            backupCount=int(os.getenv("COMPANION_LOG_BACKUP_COUNT", "5")),
            encoding="utf-8",
        )
        _file_handler.setFormatter(logging.Formatter(fmt=FILE_FORMAT, datefmt=DATE_FORMAT))
    return _file_handler


def _configure(full_name: str) -> logging.Logger:
    logger = logging.getLogger(full_name)
    if logger.handlers:
        return logger

    logger.addHandler(_console_handler())
    file_handler = _shared_file_handler()
    if file_handler is not None:
        logger.addHandler(file_handler)

    level_name = os.getenv("COMPANION_LOG_LEVEL", "INFO").upper()
    logger.setLevel(getattr(logging, level_name, logging.INFO))
    # handlers are attached per logger, so stop records reaching the root twice
    logger.propagate = False
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Module-level logger under the `companion` namespace."""
    return _configure(f"{BASE_LOGGER_NAME}.{name}" if name else BASE_LOGGER_NAME)


def get_class_logger(cls: type) -> logging.Logger:
    """
    Returns a logger whose name includes module + class, e.g.:

      companion.vectorstore.EmbeddingIndex.EmbeddingIndex
      companion.scheduling.DebounceScheduler.DebounceScheduler
    """
    module = getattr(cls, "__module__", "unknown_module")
    classname = getattr(cls, "__name__", "UnknownClass")
    return _configure(f"{BASE_LOGGER_NAME}.{module}.{classname}")
