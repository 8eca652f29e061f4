"""
Backtest engine for directional options sweeps.
"""

__version__ = "0.1.0"
