"""
Error taxonomy for the sweep backtest engine.

ValidationError      - malformed backtest parameters, raised before any work starts
DataAcquisitionError - the market data provider failed or is unavailable
ComputationError     - a contract violation inside classification/evaluation/aggregation
"""

from typing import Optional


class BacktestError(Exception):
    """Base class for all backtest engine errors."""
    pass


class ValidationError(BacktestError):
    """Raised when backtest parameters are invalid."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class DataAcquisitionError(BacktestError):
    """Raised when live market data could not be obtained."""
    pass


class ComputationError(BacktestError):
    """Raised when an evaluated result violates the engine's own contracts."""
    pass
