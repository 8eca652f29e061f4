"""
Data models for the sweep backtest engine.
"""

from sweep_backtest.models.sweep import (
    TradeLocation,
    OptionType,
    InferredSide,
    DataSource,
    SweepObservation,
    PricedSweep,
)
from sweep_backtest.models.params import BacktestParams
from sweep_backtest.models.results import (
    EvaluatedResult,
    LocationBreakdown,
    Summary,
    BacktestRun,
)

__all__ = [
    # Sweep
    "TradeLocation",
    "OptionType",
    "InferredSide",
    "DataSource",
    "SweepObservation",
    "PricedSweep",
    # Params
    "BacktestParams",
    # Results
    "EvaluatedResult",
    "LocationBreakdown",
    "Summary",
    "BacktestRun",
]
