"""
Aggregation of evaluated sweep results into a run summary.
"""

from typing import Dict, List, Optional, Sequence

from sweep_backtest.errors import ComputationError
from sweep_backtest.models.results import EvaluatedResult, LocationBreakdown, Summary
from sweep_backtest.models.sweep import DataSource, InferredSide, TradeLocation


def _win_rate(wins: int, total: int) -> float:
    return wins / total * 100 if total > 0 else 0.0


def _average_move(results: Sequence[EvaluatedResult]) -> float:
    if not results:
        return 0.0
    return sum(r.abs_move for r in results) / len(results)


def best_trade(results: Sequence[EvaluatedResult]) -> Optional[EvaluatedResult]:
    """Result with the largest absolute move; the earliest one wins ties."""
    best = None
    for result in results:
        if best is None or result.abs_move > best.abs_move:
            best = result
    return best


def worst_trade(results: Sequence[EvaluatedResult]) -> Optional[EvaluatedResult]:
    """Result with the smallest absolute move; the earliest one wins ties."""
    worst = None
    for result in results:
        if worst is None or result.abs_move < worst.abs_move:
            worst = result
    return worst


def breakdown_by_location(
    results: Sequence[EvaluatedResult],
) -> Dict[TradeLocation, LocationBreakdown]:
    """Per-location statistics, with every location present."""
    grouped: Dict[TradeLocation, List[EvaluatedResult]] = {
        loc: [] for loc in TradeLocation.ordered()
    }
    for result in results:
        grouped[result.trade_location].append(result)

    breakdown = {}
    for loc, group in grouped.items():
        wins = sum(1 for r in group if r.is_win)
        breakdown[loc] = LocationBreakdown(
            total=len(group),
            wins=wins,
            win_rate=_win_rate(wins, len(group)),
            avg_move=_average_move(group),
        )
    return breakdown


def aggregate(
    results: Sequence[EvaluatedResult],
    total_sweeps: int,
    data_source: DataSource = DataSource.LIVE,
) -> Summary:
    """
    Reduce evaluated results to a Summary.

    Args:
        results: Scored (non-neutral) results
        total_sweeps: Sweeps considered, including neutral ones that were
            not scored
        data_source: Origin of the results

    Returns:
        Summary for the run

    Raises:
        ComputationError: If a neutral result was scored or the totals are
            inconsistent
    """
    results = list(results)

    for result in results:
        if result.inferred_side == InferredSide.NEUTRAL:
            raise ComputationError(f"Neutral result {result.id} reached aggregation")

    if total_sweeps < len(results):
        raise ComputationError(
            f"Total sweeps ({total_sweeps}) is less than scored results ({len(results)})"
        )

    wins = sum(1 for r in results if r.is_win)
    scored = len(results)

    return Summary(
        total_trades=total_sweeps,
        neutral_trades=total_sweeps - scored,
        non_neutral_trades=scored,
        wins=wins,
        losses=scored - wins,
        win_rate=_win_rate(wins, scored),
        average_move=_average_move(results),
        best_trade=best_trade(results),
        worst_trade=worst_trade(results),
        breakdown_by_location=breakdown_by_location(results),
        data_source=data_source,
    )
