"""
Deterministic synthetic sweep outcomes.

Used when live market data is unavailable and the engine is allowed to fall
back, and for reproducible tests. Every value is drawn from a linear
congruential sequence seeded by a hash of the backtest parameters, so the
same parameters always produce the same results.
"""

import logging
import math
from datetime import timedelta
from typing import List

from sweep_backtest.models.params import BacktestParams
from sweep_backtest.models.results import EvaluatedResult
from sweep_backtest.models.sweep import DataSource, InferredSide, OptionType
from sweep_backtest.backtesting.classifier import classify
from sweep_backtest.backtesting.evaluator import evaluate

MIN_EVENTS = 15
MAX_EVENTS = 25

# Approximate reference prices; unknown tickers use DEFAULT_BASE_PRICE
BASE_PRICES = {
    "SPY": 575.0,
    "QQQ": 495.0,
    "AAPL": 230.0,
    "MSFT": 445.0,
    "GOOGL": 175.0,
    "AMZN": 195.0,
    "TSLA": 275.0,
    "NVDA": 135.0,
    "META": 555.0,
}
DEFAULT_BASE_PRICE = 100.0

PRICE_BAND = 0.10  # entry price within +/-10% of base
MOVE_SCALE = 8.0  # percent change spans roughly -3.6% to +4.4%
MOVE_BIAS = 0.45


def string_seed(value: str) -> int:
    """
    Stable 32-bit string hash (h = h * 31 + code point, signed wrap).

    Returns the absolute value so the seed is never negative.
    """
    h = 0
    for ch in value:
        h = (h * 31 + ord(ch)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return abs(h)


class LinearCongruentialGenerator:
    """Minimal LCG producing floats in [0, 1)."""

    MULTIPLIER = 9301
    INCREMENT = 49297
    MODULUS = 233280

    def __init__(self, seed: int):
        self.state = seed

    def next_float(self) -> float:
        self.state = (self.state * self.MULTIPLIER + self.INCREMENT) % self.MODULUS
        return self.state / self.MODULUS

    def next_index(self, size: int) -> int:
        """Draw an index in [0, size)."""
        return min(int(math.floor(self.next_float() * size)), size - 1)


def base_price_for(ticker: str) -> float:
    return BASE_PRICES.get(ticker.upper(), DEFAULT_BASE_PRICE)


class SyntheticSweepGenerator:
    """
    Generate plausible, reproducible sweep outcomes for a set of parameters.

    Example:
        >>> generator = SyntheticSweepGenerator()
        >>> results = generator.generate(params)
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    @staticmethod
    def event_count(params: BacktestParams) -> int:
        """Number of candidate events, scaled by the date span."""
        return max(MIN_EVENTS, min(MAX_EVENTS, params.days // 2))

    def generate(self, params: BacktestParams) -> List[EvaluatedResult]:
        """
        Generate synthetic evaluated results.

        Candidates that land on a weekend, or on a location with no
        directional side, are dropped, so fewer results than candidates may
        be returned.
        """
        rng = LinearCongruentialGenerator(string_seed(params.seed_key()))
        locations = list(params.trade_locations)
        days = max(params.days, 0)
        base_price = base_price_for(params.ticker)
        candidates = self.event_count(params)

        results = []
        if not locations:
            return results

        for i in range(candidates):
            trade_date = params.start_date + timedelta(days=int(math.floor(rng.next_float() * days)))
            if trade_date.weekday() >= 5:
                continue

            option_type = OptionType.CALL if rng.next_float() > 0.5 else OptionType.PUT
            trade_location = locations[rng.next_index(len(locations))]
            side = classify(trade_location)
            if side == InferredSide.NEUTRAL:
                continue

            entry_price = round(base_price * (1 - PRICE_BAND + 2 * PRICE_BAND * rng.next_float()), 2)
            change = round((rng.next_float() - MOVE_BIAS) * MOVE_SCALE, 2)
            exit_price = round(entry_price * (1 + change / 100), 2)

            results.append(EvaluatedResult(
                id=f"synthetic_{params.ticker}_{i}",
                date=trade_date,
                ticker=params.ticker,
                option_type=option_type,
                trade_location=trade_location,
                inferred_side=side,
                entry_price=entry_price,
                exit_price=exit_price,
                percent_change=change,
                is_win=evaluate(option_type, side, change),
                hold_days=params.hold_period,
                data_source=DataSource.SYNTHETIC,
            ))

        self.logger.debug(
            f"Generated {len(results)} synthetic results from {candidates} candidates "
            f"for {params.ticker}"
        )
        return results
