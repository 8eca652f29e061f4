"""
Backtesting framework for directional option sweeps
"""

from .classifier import classify, locate_trade
from .evaluator import evaluate, evaluate_sweep, percent_change
from .synthetic_data import SyntheticSweepGenerator, LinearCongruentialGenerator, string_seed
from .aggregator import aggregate
from .backtest_engine import BacktestEngine
from .backtest_report import BacktestReport

__all__ = [
    "classify",
    "locate_trade",
    "evaluate",
    "evaluate_sweep",
    "percent_change",
    "SyntheticSweepGenerator",
    "LinearCongruentialGenerator",
    "string_seed",
    "aggregate",
    "BacktestEngine",
    "BacktestReport",
]
