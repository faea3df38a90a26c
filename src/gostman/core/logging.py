"""
Gostman Logging Configuration

Log lines go to stderr, keeping CLI output on stdout pipeable, and optionally
to a rotating file. Data passed through ``log_structured`` is appended to the
line as ``key=value`` pairs.
"""

import logging
import logging.config
from pathlib import Path
from typing import Any, Dict, Optional

from .config import get_config

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that only matter when they complain
QUIET_LOGGERS = ("aiohttp", "asyncio")


class StructuredFormatter(logging.Formatter):
    """Formatter that appends a record's structured data as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        data = getattr(record, "structured_data", None)
        if data:
            pairs = " ".join(f"{key}={value}" for key, value in data.items())
            line = f"{line} | {pairs}"
        return line


def resolve_level(log_level: Optional[str] = None) -> str:
    """Explicit level if given, else DEBUG in debug mode, else the configured level."""
    if log_level:
        return log_level.upper()
    config = get_config()
    return "DEBUG" if config.debug else config.logging.level


def setup_logging(
    log_level: Optional[str] = None, log_file: Optional[Path] = None
) -> None:
    """
    Configure the ``gostman`` logger tree.

    Args:
        log_level: Logging level (see ``resolve_level`` when None)
        log_file: Rotating log file (configured path if None, none if unset)
    """
    config = get_config()
    level = resolve_level(log_level)

    if log_file is None and config.logging.file_path:
        log_file = Path(config.logging.file_path)

    handlers: Dict[str, Dict[str, Any]] = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "structured",
            "stream": "ext://sys.stderr",
        }
    }
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "formatter": "structured",
            "filename": str(log_file),
            "maxBytes": config.logging.max_file_size,
            "backupCount": config.logging.backup_count,
            "encoding": "utf-8",
        }
    handler_names = list(handlers)

    loggers = {
        "gostman": {"level": level, "handlers": handler_names, "propagate": False}
    }
    for name in QUIET_LOGGERS:
        loggers[name] = {
            "level": "WARNING",
            "handlers": handler_names,
            "propagate": False,
        }

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "structured": {
                    "()": StructuredFormatter,
                    "format": LOG_FORMAT,
                    "datefmt": DATE_FORMAT,
                }
            },
            "handlers": handlers,
            "loggers": loggers,
        }
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def log_structured(
    logger: logging.Logger, level: int, message: str, **structured_data: Any
) -> None:
    """Log message with key/value data rendered by StructuredFormatter."""
    logger.log(level, message, extra={"structured_data": structured_data})
