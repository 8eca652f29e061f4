"""
Validation functions for backtest parameters.
"""

from sweep_backtest.errors import ValidationError
from sweep_backtest.models.params import BacktestParams

MIN_HOLD_PERIOD = 1
MAX_HOLD_PERIOD = 30


def validate_ticker(ticker: str) -> bool:
    """
    Validate ticker symbol.

    Args:
        ticker: Underlying symbol

    Returns:
        True if valid

    Raises:
        ValidationError: If ticker is invalid
    """
    if not isinstance(ticker, str):
        raise ValidationError(f"Ticker must be string, got {type(ticker)}", field="ticker")

    if not ticker.strip():
        raise ValidationError("Ticker cannot be empty", field="ticker")

    return True


def validate_hold_period(
    hold_period: int,
    min_days: int = MIN_HOLD_PERIOD,
    max_days: int = MAX_HOLD_PERIOD,
) -> bool:
    """
    Validate hold period is a whole number of days within range.

    Args:
        hold_period: Days to hold after the sweep
        min_days: Minimum allowed hold period
        max_days: Maximum allowed hold period

    Returns:
        True if valid

    Raises:
        ValidationError: If hold period is invalid
    """
    if isinstance(hold_period, bool) or not isinstance(hold_period, int):
        raise ValidationError(
            f"Hold period must be integer, got {type(hold_period)}", field="hold_period"
        )

    if hold_period < min_days or hold_period > max_days:
        raise ValidationError(
            f"Hold period must be between {min_days} and {max_days} days, got {hold_period}",
            field="hold_period",
        )

    return True


def validate_date_range(params: BacktestParams) -> bool:
    """
    Validate start date is not after end date.

    Raises:
        ValidationError: If the range is inverted
    """
    if params.start_date > params.end_date:
        raise ValidationError(
            f"Start date {params.start_date} is after end date {params.end_date}",
            field="start_date",
        )

    return True


def validate_backtest_params(params: BacktestParams) -> bool:
    """
    Validate a full set of backtest parameters.

    Args:
        params: Parameters for a backtest run

    Returns:
        True if valid

    Raises:
        ValidationError: Naming the first invalid field
    """
    validate_ticker(params.ticker)

    if not params.trade_locations:
        raise ValidationError(
            "At least one trade location must be selected", field="trade_locations"
        )

    validate_hold_period(params.hold_period)
    validate_date_range(params)

    return True
