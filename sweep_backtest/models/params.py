"""
Backtest parameter model.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Iterable, Optional, Tuple, Union

from sweep_backtest.errors import ValidationError
from sweep_backtest.models.sweep import TradeLocation


def _coerce_date(value: Union[date, str], field_name: str) -> date:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise ValidationError(
            f"{field_name} must be an ISO date (YYYY-MM-DD), got {value!r}",
            field=field_name,
        )


def _coerce_locations(values: Optional[Iterable[Union[TradeLocation, str]]]) -> Tuple[TradeLocation, ...]:
    if values is None:
        return ()
    requested = set()
    for value in values:
        try:
            requested.add(TradeLocation(value))
        except ValueError:
            raise ValidationError(
                f"Unknown trade location: {value!r}", field="trade_locations"
            )
    return tuple(loc for loc in TradeLocation.ordered() if loc in requested)


@dataclass(frozen=True)
class BacktestParams:
    """
    Input for a single backtest run.

    Dates may be given as ISO strings; trade locations as their string
    values. Both are normalized on construction. Range checks happen in
    validate_backtest_params before a run starts.
    """

    ticker: str
    start_date: date
    end_date: date
    hold_period: int
    trade_locations: Tuple[TradeLocation, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "ticker", (self.ticker or "").strip().upper())
        object.__setattr__(self, "start_date", _coerce_date(self.start_date, "start_date"))
        object.__setattr__(self, "end_date", _coerce_date(self.end_date, "end_date"))
        object.__setattr__(self, "trade_locations", _coerce_locations(self.trade_locations))

    @property
    def days(self) -> int:
        """Calendar days between start and end date."""
        return (self.end_date - self.start_date).days

    def seed_key(self) -> str:
        """Stable string used to seed synthetic data for these parameters."""
        return (
            f"{self.ticker}{self.start_date.isoformat()}"
            f"{self.end_date.isoformat()}{self.hold_period}"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ticker": self.ticker,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "hold_period": self.hold_period,
            "trade_locations": [loc.value for loc in self.trade_locations],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BacktestParams":
        return cls(
            ticker=data.get("ticker", ""),
            start_date=data.get("start_date", ""),
            end_date=data.get("end_date", ""),
            hold_period=data.get("hold_period", 0),
            trade_locations=tuple(data.get("trade_locations", ())),
        )
