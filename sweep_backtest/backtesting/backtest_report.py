"""
Report generation for sweep backtest results
"""
import json
import logging
from pathlib import Path
from typing import Optional

from sweep_backtest.models.results import BacktestRun
from sweep_backtest.models.sweep import TradeLocation
from sweep_backtest.utils.formatters import format_date, format_percentage, format_price

logger = logging.getLogger(__name__)


class BacktestReport:
    """Generate human-readable reports from a backtest run"""

    def __init__(self, run: BacktestRun):
        self.run = run

    def print_summary(self):
        """Print formatted summary to console"""
        s = self.run.summary
        params = self.run.params

        print("\n" + "=" * 80)
        print("SWEEP BACKTEST SUMMARY")
        print("=" * 80)

        if self.run.is_synthetic:
            print("\n⚠️  SYNTHETIC DATA - live market data was unavailable.")
            print("   These results are simulated and say nothing about the real market.")
            for note in self.run.notes:
                print(f"   {note}")

        if params is not None:
            print(f"\n📅 TEST PARAMETERS")
            print(f"   Ticker:      {params.ticker}")
            print(f"   Period:      {params.start_date} to {params.end_date}")
            print(f"   Hold Period: {params.hold_period} days")
            print(f"   Locations:   {', '.join(loc.value for loc in params.trade_locations)}")

        print(f"\n📊 SWEEP STATISTICS")
        print(f"   Total Sweeps:       {s.total_trades}")
        print(f"   Neutral (skipped):  {s.neutral_trades}")
        print(f"   Directional:        {s.non_neutral_trades}")
        print(f"   Wins:               {s.wins}")
        print(f"   Losses:             {s.losses}")
        print(f"   Win Rate:           {s.win_rate:.1f}%")
        print(f"   Average Move:       {s.average_move:.2f}%")

        if s.best_trade is not None:
            b = s.best_trade
            print(f"\n🏆 BEST TRADE")
            print(f"   {format_date(b.date)} {b.option_type.value.upper()} {b.inferred_side.value} "
                  f"@ {b.trade_location.value}: {format_percentage(b.percent_change)}")
        if s.worst_trade is not None:
            w = s.worst_trade
            print(f"\n🐢 WORST TRADE")
            print(f"   {format_date(w.date)} {w.option_type.value.upper()} {w.inferred_side.value} "
                  f"@ {w.trade_location.value}: {format_percentage(w.percent_change)}")

        print(f"\n📍 BREAKDOWN BY TRADE LOCATION")
        print(f"   {'Location':<12} {'Total':>6} {'Wins':>6} {'Win Rate':>10} {'Avg Move':>10}")
        for loc in TradeLocation.ordered():
            data = s.breakdown_by_location[loc]
            print(f"   {loc.value:<12} {data.total:>6} {data.wins:>6} "
                  f"{data.win_rate:>9.1f}% {data.avg_move:>9.2f}%")

        print("\n" + "=" * 80)

    def print_trade_log(self, limit: int = 20):
        """Print detailed trade log"""
        print(f"\n📋 TRADE LOG (showing last {limit} trades)")
        print("-" * 100)
        print(f"{'Date':<12} {'Type':<6} {'Side':<6} {'Location':<11} {'Entry':>11} {'Exit':>11} "
              f"{'Change':>9} {'Result':<6}")
        print("-" * 100)

        shown = self.run.results[-limit:] if limit > 0 else []
        for r in shown:
            print(f"{format_date(r.date):<12} {r.option_type.value:<6} {r.inferred_side.value:<6} "
                  f"{r.trade_location.value:<11} {format_price(r.entry_price):>11} "
                  f"{format_price(r.exit_price):>11} {format_percentage(r.percent_change):>9} "
                  f"{'WIN' if r.is_win else 'LOSS':<6}")

        print("-" * 100)

    def save_to_json(self, filename: str, output_dir: Optional[str] = None) -> Path:
        """Save the run to a JSON file and return its path"""
        directory = Path(output_dir or "data/backtest_results")
        directory.mkdir(parents=True, exist_ok=True)

        filepath = directory / filename

        with open(filepath, 'w') as f:
            json.dump(self.run.to_dict(), f, indent=2)

        logger.info(f"Results saved to: {filepath}")
        return filepath
