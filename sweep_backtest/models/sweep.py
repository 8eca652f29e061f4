"""
Options sweep data model.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional


class TradeLocation(str, Enum):
    """Where a print fell against the quoted spread, most-sold to most-bought."""
    BELOW_BID = "below-bid"
    AT_BID = "at-bid"
    MIDPOINT = "midpoint"
    AT_ASK = "at-ask"
    ABOVE_ASK = "above-ask"

    @classmethod
    def ordered(cls):
        """All locations in canonical order."""
        return list(cls)


class OptionType(str, Enum):
    """Option contract type."""
    CALL = "call"
    PUT = "put"


class InferredSide(str, Enum):
    """Directional side implied by a trade location."""
    BUY = "buy"
    SELL = "sell"
    NEUTRAL = "neutral"


class DataSource(str, Enum):
    """Origin of the data behind a backtest result."""
    LIVE = "live"
    SYNTHETIC = "synthetic"


@dataclass(frozen=True)
class SweepObservation:
    """
    A single options sweep as seen on the tape.

    Attributes:
        ticker: Underlying symbol
        trade_date: Date the sweep printed
        option_type: Call or put
        volume: Contracts traded
        price: Traded option price
        bid: Quoted bid at the time of the trade
        ask: Quoted ask at the time of the trade
        trade_location: Where the price fell against bid/ask
        option_symbol: OCC option symbol (live data only)
        strike_price: Contract strike (live data only)
        expiration_date: Contract expiration (live data only)
    """

    ticker: str
    trade_date: date
    option_type: OptionType
    volume: int
    price: float
    bid: float
    ask: float
    trade_location: TradeLocation
    option_symbol: Optional[str] = None
    strike_price: Optional[float] = None
    expiration_date: Optional[date] = None

    @property
    def premium(self) -> float:
        """Total premium paid, in dollars (100 shares per contract)."""
        return self.volume * self.price * 100


@dataclass(frozen=True)
class PricedSweep:
    """A sweep together with the underlying's realized entry and exit closes."""

    sweep: SweepObservation
    entry_price: float
    exit_price: float
