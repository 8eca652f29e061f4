"""
Utility functions and helpers.
"""

from sweep_backtest.utils.decorators import async_retry, timing
from sweep_backtest.utils.rate_limiter import RateLimiter
from sweep_backtest.utils.validators import (
    validate_ticker,
    validate_hold_period,
    validate_date_range,
    validate_backtest_params,
)
from sweep_backtest.utils.formatters import (
    format_price,
    format_percentage,
    format_date,
)

__all__ = [
    # Decorators
    'async_retry',
    'timing',

    # Rate limiting
    'RateLimiter',

    # Validators
    'validate_ticker',
    'validate_hold_period',
    'validate_date_range',
    'validate_backtest_params',

    # Formatters
    'format_price',
    'format_percentage',
    'format_date',
]
