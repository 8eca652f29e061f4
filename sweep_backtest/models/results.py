"""
Evaluated result and summary models for backtest output.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from sweep_backtest.models.params import BacktestParams
from sweep_backtest.models.sweep import (
    DataSource,
    InferredSide,
    OptionType,
    TradeLocation,
)


@dataclass(frozen=True)
class EvaluatedResult:
    """One sweep paired with the underlying's move over the hold period"""

    id: str
    date: date
    ticker: str
    option_type: OptionType
    trade_location: TradeLocation
    inferred_side: InferredSide
    entry_price: float
    exit_price: float
    percent_change: float
    is_win: bool
    hold_days: int
    data_source: DataSource = DataSource.LIVE

    @property
    def abs_move(self) -> float:
        return abs(self.percent_change)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "ticker": self.ticker,
            "option_type": self.option_type.value,
            "trade_location": self.trade_location.value,
            "inferred_side": self.inferred_side.value,
            "entry_price": self.entry_price,
            "exit_price": self.exit_price,
            "percent_change": self.percent_change,
            "is_win": self.is_win,
            "hold_days": self.hold_days,
            "data_source": self.data_source.value,
        }


@dataclass(frozen=True)
class LocationBreakdown:
    """Aggregate statistics for a single trade location"""

    total: int = 0
    wins: int = 0
    win_rate: float = 0.0
    avg_move: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "wins": self.wins,
            "win_rate": self.win_rate,
            "avg_move": self.avg_move,
        }


@dataclass(frozen=True)
class Summary:
    """Whole-run aggregate"""

    total_trades: int
    neutral_trades: int
    non_neutral_trades: int
    wins: int
    losses: int
    win_rate: float
    average_move: float
    best_trade: Optional[EvaluatedResult]
    worst_trade: Optional[EvaluatedResult]
    breakdown_by_location: Dict[TradeLocation, LocationBreakdown]
    data_source: DataSource = DataSource.LIVE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_trades": self.total_trades,
            "neutral_trades": self.neutral_trades,
            "non_neutral_trades": self.non_neutral_trades,
            "wins": self.wins,
            "losses": self.losses,
            "win_rate": self.win_rate,
            "average_move": self.average_move,
            "best_trade": self.best_trade.to_dict() if self.best_trade else None,
            "worst_trade": self.worst_trade.to_dict() if self.worst_trade else None,
            "breakdown_by_location": {
                loc.value: breakdown.to_dict()
                for loc, breakdown in self.breakdown_by_location.items()
            },
            "data_source": self.data_source.value,
        }


@dataclass
class BacktestRun:
    """Everything a backtest run hands back to its caller"""

    results: List[EvaluatedResult]
    summary: Summary
    data_source: DataSource = DataSource.LIVE
    params: Optional[BacktestParams] = None
    completed_at: Optional[datetime] = None
    notes: List[str] = field(default_factory=list)

    @property
    def is_synthetic(self) -> bool:
        return self.data_source == DataSource.SYNTHETIC

    def to_dict(self) -> Dict[str, Any]:
        return {
            "data_source": self.data_source.value,
            "params": self.params.to_dict() if self.params is not None else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "notes": list(self.notes),
            "summary": self.summary.to_dict(),
            "results": [r.to_dict() for r in self.results],
        }
