"""
Pytest configuration and fixtures for sweep backtest tests.
"""
import logging
import pytest
from datetime import date

from sweep_backtest.config import Config
from sweep_backtest.models import (
    BacktestParams,
    DataSource,
    EvaluatedResult,
    InferredSide,
    OptionType,
    PricedSweep,
    SweepObservation,
    TradeLocation,
)
from sweep_backtest.backtesting.classifier import classify
from sweep_backtest.backtesting.evaluator import evaluate


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Detach handlers a test attached to the package logger."""
    yield
    logger = logging.getLogger("sweep_backtest")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.propagate = True


@pytest.fixture
def config():
    """Provide test configuration (strict mode, no API key)."""
    cfg = Config()
    cfg.POLYGON_API_KEY = ""
    cfg.ALLOW_SYNTHETIC_FALLBACK = False
    cfg.DATA_FETCH_TIMEOUT = 5.0
    cfg.MAX_REQUEST_RETRIES = 1
    return cfg


@pytest.fixture
def fallback_config(config):
    """Configuration that allows synthetic fallback."""
    config.ALLOW_SYNTHETIC_FALLBACK = True
    return config


@pytest.fixture
def spy_params():
    """The SPY January 2024 example parameters."""
    return BacktestParams(
        ticker="SPY",
        start_date="2024-01-02",
        end_date="2024-01-31",
        hold_period=10,
        trade_locations=("at-ask", "below-bid"),
    )


@pytest.fixture
def make_result():
    """Factory for EvaluatedResult objects."""
    counter = {"n": 0}

    def _make(
        option_type=OptionType.CALL,
        trade_location=TradeLocation.AT_ASK,
        percent_change=1.0,
        is_win=None,
        entry_price=100.0,
        day=date(2024, 1, 3),
        data_source=DataSource.LIVE,
    ):
        counter["n"] += 1
        side = classify(trade_location)
        if is_win is None:
            is_win = side != InferredSide.NEUTRAL and evaluate(option_type, side, percent_change)
        return EvaluatedResult(
            id=f"result_{counter['n']}",
            date=day,
            ticker="SPY",
            option_type=option_type,
            trade_location=trade_location,
            inferred_side=side,
            entry_price=entry_price,
            exit_price=round(entry_price * (1 + percent_change / 100), 2),
            percent_change=percent_change,
            is_win=is_win,
            hold_days=5,
            data_source=data_source,
        )

    return _make


@pytest.fixture
def make_priced_sweep():
    """Factory for PricedSweep objects."""

    def _make(
        option_type=OptionType.CALL,
        trade_location=TradeLocation.AT_ASK,
        entry_price=100.0,
        exit_price=101.0,
        day=date(2024, 1, 3),
        symbol="O:SPY240216C00420000",
    ):
        sweep = SweepObservation(
            ticker="SPY",
            trade_date=day,
            option_type=option_type,
            volume=500,
            price=5.10,
            bid=5.00,
            ask=5.10,
            trade_location=trade_location,
            option_symbol=symbol,
        )
        return PricedSweep(sweep=sweep, entry_price=entry_price, exit_price=exit_price)

    return _make


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests that make real API calls (deselect with '-m \"not integration\"')"
    )
