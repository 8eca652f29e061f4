#!/usr/bin/env python3
"""
Run a sweep backtest for one ticker

Usage:
    python scripts/run_backtest.py SPY 2024-01-02 2024-01-31 --hold-period 10 \
        --locations at-ask below-bid
"""
import argparse
import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from sweep_backtest.config import Config
from sweep_backtest.errors import DataAcquisitionError, ValidationError
from sweep_backtest.logger import setup_logger_from_config
from sweep_backtest.models import BacktestParams, TradeLocation
from sweep_backtest.clients import PolygonClient
from sweep_backtest.backtesting import BacktestEngine, BacktestReport


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Backtest directional option sweeps")
    parser.add_argument("ticker", help="Underlying symbol, e.g. SPY")
    parser.add_argument("start_date", help="Start date (YYYY-MM-DD)")
    parser.add_argument("end_date", help="End date (YYYY-MM-DD)")
    parser.add_argument("--hold-period", type=int, default=5, help="Days to hold (1-30)")
    parser.add_argument(
        "--locations",
        nargs="+",
        default=[TradeLocation.AT_ASK.value, TradeLocation.ABOVE_ASK.value],
        choices=[loc.value for loc in TradeLocation],
        help="Trade locations to include",
    )
    parser.add_argument(
        "--allow-synthetic",
        action="store_true",
        help="Use synthetic data if live data is unavailable",
    )
    parser.add_argument(
        "--synthetic-only",
        action="store_true",
        help="Skip the live data provider and run on synthetic data",
    )
    parser.add_argument("--save", metavar="FILE", help="Save results to a JSON file")
    parser.add_argument("--trades", type=int, default=20, help="Trades to show in the log")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    return parser.parse_args(argv)


def print_progress(percentage: int, status: str):
    print(f"   [{percentage:>3}%] {status}")


async def main(argv=None) -> int:
    """Main backtest execution"""
    args = parse_args(argv)

    config = Config()
    if args.allow_synthetic or args.synthetic_only:
        config.ALLOW_SYNTHETIC_FALLBACK = True
    if args.log_level:
        config.LOG_LEVEL = args.log_level

    setup_logger_from_config(config)

    print("=" * 80)
    print("SWEEP BACKTEST")
    print("=" * 80)

    try:
        params = BacktestParams(
            ticker=args.ticker,
            start_date=args.start_date,
            end_date=args.end_date,
            hold_period=args.hold_period,
            trade_locations=tuple(args.locations),
        )
    except ValidationError as e:
        print(f"❌ Invalid {e.field}: {e}")
        return 2

    provider = None if args.synthetic_only else PolygonClient(config)
    engine = BacktestEngine(config=config, provider=provider)

    print(f"\n🔁 Synthetic fallback: {'enabled' if engine.fallback_enabled else 'disabled'}")

    try:
        run = await engine.run_test(params, on_progress=print_progress)
    except ValidationError as e:
        print(f"❌ Invalid {e.field}: {e}")
        return 2
    except DataAcquisitionError as e:
        print(f"❌ Market data unavailable: {e}")
        print("   Re-run with --allow-synthetic to use simulated data instead.")
        return 1
    finally:
        if provider is not None:
            await provider.close()

    report = BacktestReport(run)
    report.print_summary()
    report.print_trade_log(limit=args.trades)

    if args.save:
        path = report.save_to_json(args.save, output_dir=config.RESULTS_DIR)
        print(f"\n✅ Results saved to: {path}")

    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
