"""
Centralized logging configuration for Texify.

All loggers live under the 'texify' hierarchy. Console output is
colourised; the optional log file rotates and can be written as JSON lines
so API requests and conversions can be analysed later.
"""
import json
import logging
import logging.handlers
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from .constants import (
    LOG_BACKUP_COUNT,
    LOG_FILE_NAME,
    LOG_FORMAT,
    LOG_LEVEL,
    LOG_MAX_SIZE_MB,
)

ROOT_LOGGER_NAME = "texify"

# Attributes passed through `extra=` that the formatters know how to show
CONTEXT_FIELDS = ("session_id", "request_id", "duration_ms", "tokens_used")


def _context(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        name: getattr(record, name)
        for name in CONTEXT_FIELDS
        if getattr(record, name, None) is not None
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per line, with conversion/request context when present."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        entry.update(_context(record))

        if record.exc_info and record.exc_info[0]:
            entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }

        return json.dumps(entry, ensure_ascii=False)


class ColoredFormatter(logging.Formatter):
    """Console formatter: coloured level tag plus a [key=value] context suffix."""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, self.RESET)
        when = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        line = f"{color}{record.levelname:<7}{self.RESET} {when} {record.name}: {record.getMessage()}"

        context = _context(record)
        if context:
            shown = []
            if "session_id" in context:
                shown.append(f"session={context['session_id']}")
            if "duration_ms" in context:
                shown.append(f"duration={context['duration_ms']:.2f}ms")
            if "tokens_used" in context:
                shown.append(f"tokens={context['tokens_used']}")
            if shown:
                line += " [" + ", ".join(shown) + "]"

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logger(
    name: Optional[str] = None,
    level: str = LOG_LEVEL,
    log_dir: Optional[Path] = None,
    log_to_console: bool = True,
    json_format: bool = False,
    max_bytes: int = LOG_MAX_SIZE_MB * 1024 * 1024,
    backup_count: int = LOG_BACKUP_COUNT,
) -> logging.Logger:
    """
    Configure a logger with console output and an optional rotating file.

    Calling it again replaces the handlers, so the server and the CLI can
    both configure the same hierarchy.

    Args:
        name: Logger name; 'texify' if None
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        log_dir: Directory for texify.log; no file if None
        log_to_console: Also log to stdout
        json_format: Write the file as JSON lines (texify.json.log)
    """
    logger = logging.getLogger(name or ROOT_LOGGER_NAME)
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        stem = Path(LOG_FILE_NAME).stem
        log_file = log_dir / (f"{stem}.json.log" if json_format else LOG_FILE_NAME)

        file_handler = logging.handlers.RotatingFileHandler(
            log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
        file_handler.setFormatter(JSONFormatter() if json_format else logging.Formatter(LOG_FORMAT))
        logger.addHandler(file_handler)

    if log_to_console:
        stream = logging.StreamHandler(sys.stdout)
        stream.setFormatter(ColoredFormatter())
        logger.addHandler(stream)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Module logger under the 'texify' hierarchy.

    Usage:
        logger = get_logger(__name__)   # -> texify.core.converter
    """
    if not name:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def configure_from_settings(settings) -> logging.Logger:
    """Apply log_level, log_to_file, log_json and logs_dir from settings."""
    return setup_logger(
        ROOT_LOGGER_NAME,
        level=settings.log_level,
        log_dir=settings.logs_dir if settings.log_to_file else None,
        json_format=settings.log_json,
    )


def log_api_request(
    method: str,
    endpoint: str,
    status_code: int,
    duration_ms: float,
    request_id: Optional[str] = None,
):
    """One line per API call on texify.api"""
    get_logger("api").info(
        f"{method} {endpoint} -> {status_code}",
        extra={"request_id": request_id, "duration_ms": duration_ms},
    )


def log_conversion(
    direction: str,
    status: str,
    duration_ms: Optional[float] = None,
    tokens_used: Optional[int] = None,
    session_id: Optional[str] = None,
):
    """Record the outcome, duration and token usage of a model call on texify.performance"""
    extra = {"duration_ms": duration_ms, "tokens_used": tokens_used}
    if session_id:
        extra["session_id"] = session_id
    get_logger("performance").info(f"Conversion {direction}: {status}", extra=extra)
