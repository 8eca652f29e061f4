"""
Logging setup for the sweep backtest engine.

The package logger ("sweep_backtest") gets a colored console handler and a
rotating file handler; module loggers created with getLogger(__name__)
inherit both. Polygon credentials travel as an `apiKey` query parameter and
show up in aiohttp error messages, so every handler scrubs them.
"""

import logging
import re
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Optional, Sequence

PACKAGE_LOGGER = "sweep_backtest"

CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(funcName)s:%(lineno)d | %(message)s"

# Chatty dependencies capped at WARNING
QUIET_LOGGERS = ("aiohttp", "asyncio")

_API_KEY_RE = re.compile(r"(api_?key=)[^&\s'\"]+", re.IGNORECASE)


def redact_api_key(text: str) -> str:
    """
    Mask API key query parameters in a message.

    Example:
        >>> redact_api_key("GET /v3/quotes?limit=1&apiKey=abc123")
        'GET /v3/quotes?limit=1&apiKey=***'
    """
    return _API_KEY_RE.sub(r"\1***", text)


class ApiKeyRedactionFilter(logging.Filter):
    """Rewrite records so no handler ever emits a raw API key."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = redact_api_key(message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


class ColoredFormatter(logging.Formatter):
    """Console formatter with the level name colored by severity."""

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record):
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname


def _console_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ColoredFormatter(fmt=CONSOLE_FORMAT, datefmt="%H:%M:%S"))
    return handler


def _file_handler(log_file: str, max_bytes: int, backup_count: int) -> logging.Handler:
    Path(log_file).parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        filename=log_file,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(fmt=FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def setup_logger(
    name: str = PACKAGE_LOGGER,
    log_file: Optional[str] = None,
    level: str = "INFO",
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
    console_output: bool = True,
    file_output: bool = True,
    quiet_loggers: Sequence[str] = QUIET_LOGGERS,
) -> logging.Logger:
    """
    Configure a logger with console and rotating file output.

    Calling it again replaces the handlers rather than adding to them.

    Args:
        name: Logger name; the package name covers every module logger
        log_file: Path to log file (default: logs/{name}.log)
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        max_bytes: Maximum log file size before rotation
        backup_count: Number of rotated files to keep
        console_output: Log to stdout
        file_output: Log to log_file
        quiet_loggers: Third-party loggers capped at WARNING

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))

    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()

    handlers = []
    if console_output:
        handlers.append(_console_handler())
    if file_output:
        handlers.append(_file_handler(log_file or f"logs/{name}.log", max_bytes, backup_count))

    redaction = ApiKeyRedactionFilter()
    for handler in handlers:
        handler.addFilter(redaction)
        logger.addHandler(handler)

    logger.propagate = False

    for noisy in quiet_loggers:
        logging.getLogger(noisy).setLevel(logging.WARNING)

    return logger


def setup_logger_from_config(config, console_output: bool = True) -> logging.Logger:
    """Configure the package logger from Config.LOG_LEVEL and Config.LOG_FILE."""
    return setup_logger(
        name=PACKAGE_LOGGER,
        log_file=config.LOG_FILE,
        level=config.LOG_LEVEL,
        console_output=console_output,
        file_output=bool(config.LOG_FILE),
    )


def set_log_level(logger: logging.Logger, level: str):
    """Change log level for an existing logger."""
    logger.setLevel(getattr(logging, level.upper()))
    logger.info(f"Log level changed to: {level.upper()}")
