"""
Outcome evaluation for directional sweeps.
"""

from typing import Optional

from sweep_backtest.errors import ComputationError
from sweep_backtest.models.results import EvaluatedResult
from sweep_backtest.models.sweep import (
    DataSource,
    InferredSide,
    OptionType,
    PricedSweep,
)
from sweep_backtest.backtesting.classifier import classify

# +1 expects the underlying to rise, -1 expects it to fall.
# Buying calls and selling puts are bullish; the converse is bearish.
_EXPECTED_DIRECTION = {
    (OptionType.CALL, InferredSide.BUY): 1,
    (OptionType.PUT, InferredSide.BUY): -1,
    (OptionType.CALL, InferredSide.SELL): -1,
    (OptionType.PUT, InferredSide.SELL): 1,
}


def evaluate(
    option_type: OptionType,
    inferred_side: InferredSide,
    percent_change: float,
) -> bool:
    """
    Decide whether the underlying moved the way the sweep implied.

    A flat move (percent_change == 0) is always a loss.

    Raises:
        ComputationError: If called with a neutral side
    """
    key = (OptionType(option_type), InferredSide(inferred_side))
    if key not in _EXPECTED_DIRECTION:
        raise ComputationError(
            f"Cannot score a {key[1].value} sweep; neutral sweeps must be filtered first"
        )

    if _EXPECTED_DIRECTION[key] > 0:
        return percent_change > 0
    return percent_change < 0


def percent_change(entry_price: float, exit_price: float) -> float:
    """Percent move from entry to exit (2.5 means +2.5%)."""
    if entry_price <= 0:
        raise ComputationError(f"Entry price must be positive, got {entry_price}")
    return (exit_price - entry_price) / entry_price * 100


def evaluate_sweep(
    priced: PricedSweep,
    hold_days: int,
    data_source: DataSource = DataSource.LIVE,
    result_id: Optional[str] = None,
) -> EvaluatedResult:
    """
    Score one priced sweep.

    Args:
        priced: Sweep with realized entry/exit closes
        hold_days: Hold period used to pick the exit close
        data_source: Origin of the sweep
        result_id: Identifier for the result (derived from the sweep if omitted)

    Returns:
        EvaluatedResult for the sweep
    """
    sweep = priced.sweep
    side = classify(sweep.trade_location)
    change = percent_change(priced.entry_price, priced.exit_price)

    if result_id is None:
        symbol = sweep.option_symbol or f"{sweep.ticker}_{sweep.option_type.value}"
        result_id = f"result_{symbol}_{sweep.trade_date.isoformat()}"

    return EvaluatedResult(
        id=result_id,
        date=sweep.trade_date,
        ticker=sweep.ticker,
        option_type=sweep.option_type,
        trade_location=sweep.trade_location,
        inferred_side=side,
        entry_price=priced.entry_price,
        exit_price=priced.exit_price,
        percent_change=change,
        is_win=evaluate(sweep.option_type, side, change),
        hold_days=hold_days,
        data_source=data_source,
    )
