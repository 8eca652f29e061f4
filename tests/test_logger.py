"""
Test logger functionality.
"""

import logging

from sweep_backtest.config import Config
from sweep_backtest.logger import (
    ColoredFormatter,
    redact_api_key,
    set_log_level,
    setup_logger,
    setup_logger_from_config,
)


def test_logger_writes_file(tmp_path):
    """Test console and file handlers are attached and the file receives records."""
    log_file = tmp_path / "logs" / "sweep_test.log"
    logger = setup_logger(name="sweep_test", log_file=str(log_file), level="INFO")

    logger.debug("Debug message (filtered)")
    logger.info("Backtest started")
    try:
        raise ValueError("Test exception")
    except ValueError:
        logger.error("Exception caught:", exc_info=True)

    for handler in logger.handlers:
        handler.flush()

    assert len(logger.handlers) == 2
    assert logger.propagate is False

    content = log_file.read_text(encoding="utf-8")
    assert "Backtest started" in content
    assert "Debug message" not in content
    assert "ValueError: Test exception" in content

    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()


def test_setup_is_idempotent():
    """Test repeated setup does not stack handlers."""
    setup_logger(name="sweep_idempotent", file_output=False)
    logger = setup_logger(name="sweep_idempotent", file_output=False)

    assert len(logger.handlers) == 1
    logger.handlers.clear()


def test_set_log_level():
    logger = setup_logger(name="sweep_level", file_output=False, console_output=False)

    set_log_level(logger, "debug")

    assert logger.level == logging.DEBUG


def test_colored_formatter_restores_levelname():
    """Test coloring does not leak into the record for other handlers."""
    formatter = ColoredFormatter(fmt="%(levelname)s %(message)s")
    record = logging.LogRecord("x", logging.WARNING, __file__, 1, "careful", None, None)

    formatted = formatter.format(record)

    assert "\033[33m" in formatted
    assert record.levelname == "WARNING"


def test_redact_api_key():
    assert redact_api_key("GET /v3/quotes?limit=1&apiKey=abc123") == "GET /v3/quotes?limit=1&apiKey=***"
    assert redact_api_key("https://api.polygon.io/v3/trades?apikey=xyz&cursor=1") == (
        "https://api.polygon.io/v3/trades?apikey=***&cursor=1"
    )
    assert redact_api_key("no secrets here") == "no secrets here"


def test_file_output_is_redacted(tmp_path):
    """Test API keys in log arguments never reach the log file."""
    log_file = tmp_path / "redacted.log"
    logger = setup_logger(name="sweep_redact", log_file=str(log_file), console_output=False)

    logger.error("Request failed: %s", "429, url='https://api.polygon.io/v3/trades?apiKey=s3cret'")
    for handler in logger.handlers:
        handler.flush()

    content = log_file.read_text(encoding="utf-8")
    assert "s3cret" not in content
    assert "apiKey=***" in content

    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()


def test_setup_from_config_quiets_dependencies(tmp_path):
    config = Config()
    config.LOG_LEVEL = "DEBUG"
    config.LOG_FILE = str(tmp_path / "logs" / "sweep_backtest.log")

    logger = setup_logger_from_config(config, console_output=False)

    assert logger.name == "sweep_backtest"
    assert logger.level == logging.DEBUG
    assert (tmp_path / "logs").is_dir()
    assert logging.getLogger("aiohttp").level == logging.WARNING
