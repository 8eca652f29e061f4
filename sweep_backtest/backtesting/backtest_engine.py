"""
Main backtesting engine for directional option sweeps
"""
import asyncio
import logging
from datetime import datetime
from typing import Callable, List, Optional, Sequence, Tuple

from sweep_backtest.config import Config
from sweep_backtest.errors import DataAcquisitionError
from sweep_backtest.models.params import BacktestParams
from sweep_backtest.models.results import BacktestRun, EvaluatedResult
from sweep_backtest.models.sweep import DataSource, InferredSide, PricedSweep
from sweep_backtest.clients.base_client import MarketDataProvider
from sweep_backtest.utils.decorators import timing
from sweep_backtest.utils.validators import validate_backtest_params
from .aggregator import aggregate
from .classifier import classify
from .evaluator import evaluate_sweep
from .synthetic_data import SyntheticSweepGenerator

ProgressCallback = Callable[[int, str], None]


class _RunContext:
    """Per-run state: the params being tested and where progress goes."""

    def __init__(self, params: BacktestParams, on_progress: Optional[ProgressCallback], logger):
        self.params = params
        self.on_progress = on_progress
        self.logger = logger
        self.notes: List[str] = []

    def report(self, percentage: int, status: str):
        self.logger.debug(f"[{self.params.ticker}] {percentage}% {status}")
        if self.on_progress is None:
            return
        try:
            self.on_progress(percentage, status)
        except Exception as e:
            self.logger.warning(f"Progress callback failed at {percentage}%: {e}")


class BacktestEngine:
    """
    Score directional option sweeps against the underlying's later move.

    The engine holds configuration and collaborators only; each call to
    run_test builds its own context, so concurrent runs do not interact.

    Args:
        config: Engine configuration
        provider: Live market data source. When None, runs either use
            synthetic data (if fallback is enabled) or fail.
        generator: Synthetic data generator used for fallback
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        provider: Optional[MarketDataProvider] = None,
        generator: Optional[SyntheticSweepGenerator] = None,
    ):
        self.config = config or Config()
        self.provider = provider
        self.generator = generator or SyntheticSweepGenerator()
        self.logger = logging.getLogger(__name__)

    @property
    def fallback_enabled(self) -> bool:
        """Whether failed live fetches are replaced with synthetic data."""
        return self.config.ALLOW_SYNTHETIC_FALLBACK

    @timing
    async def run_test(
        self,
        params: BacktestParams,
        on_progress: Optional[ProgressCallback] = None,
    ) -> BacktestRun:
        """
        Run a backtest.

        Args:
            params: What to test
            on_progress: Optional callback receiving (percentage, status)

        Returns:
            BacktestRun with the evaluated results, summary and data source

        Raises:
            ValidationError: If params are invalid (before any data is fetched)
            DataAcquisitionError: If live data is unavailable and fallback is disabled
        """
        validate_backtest_params(params)

        ctx = _RunContext(params, on_progress, self.logger)
        ctx.report(0, "Starting sweep analysis...")
        self.logger.info(
            f"Starting backtest for {params.ticker} from {params.start_date} to {params.end_date} "
            f"(hold {params.hold_period}d, locations: "
            f"{', '.join(loc.value for loc in params.trade_locations)})"
        )

        ctx.report(10, "Fetching market data...")
        try:
            priced = await self._fetch_live(params)
        except DataAcquisitionError as e:
            if not self.fallback_enabled:
                self.logger.error(f"Live data unavailable for {params.ticker}: {e}")
                ctx.report(0, "Error: market data unavailable")
                raise

            self.logger.warning(
                f"Live data unavailable for {params.ticker} ({e}); "
                f"using SYNTHETIC data"
            )
            ctx.notes.append(f"Live data unavailable: {e}")
            ctx.report(50, "Market data unavailable, generated synthetic data")
            results = self.generator.generate(params)
            return self._finish(ctx, results, len(results), DataSource.SYNTHETIC)

        ctx.report(50, f"Fetched {len(priced)} live sweeps")
        results, total = self._evaluate(params, priced)
        return self._finish(ctx, results, total, DataSource.LIVE)

    async def _fetch_live(self, params: BacktestParams) -> List[PricedSweep]:
        if self.provider is None:
            raise DataAcquisitionError("No market data provider configured")

        try:
            return await asyncio.wait_for(
                self.provider.fetch_sweeps_and_prices(
                    params.ticker,
                    params.start_date,
                    params.end_date,
                    params.hold_period,
                    params.trade_locations,
                ),
                timeout=self.config.DATA_FETCH_TIMEOUT,
            )
        except DataAcquisitionError:
            raise
        except asyncio.TimeoutError as e:
            raise DataAcquisitionError(
                f"Market data fetch timed out after {self.config.DATA_FETCH_TIMEOUT:.0f}s"
            ) from e
        except Exception as e:
            raise DataAcquisitionError(f"Market data provider failed: {e}") from e

    def _evaluate(
        self,
        params: BacktestParams,
        priced: Sequence[PricedSweep],
    ) -> Tuple[List[EvaluatedResult], int]:
        """
        Classify and score live sweeps.

        Returns:
            (scored results, total sweeps considered including neutral ones)
        """
        results = []
        total = 0
        skipped = 0

        for i, item in enumerate(priced):
            if item.sweep.trade_location not in params.trade_locations:
                skipped += 1
                continue

            total += 1
            if classify(item.sweep.trade_location) == InferredSide.NEUTRAL:
                continue

            results.append(evaluate_sweep(
                item,
                hold_days=params.hold_period,
                data_source=DataSource.LIVE,
                result_id=f"result_{i}_{item.sweep.option_symbol or item.sweep.ticker}",
            ))

        if skipped:
            self.logger.debug(f"Dropped {skipped} sweeps outside requested trade locations")
        self.logger.info(f"Analyzed {len(results)} non-neutral sweeps of {total}")
        return results, total

    def _finish(
        self,
        ctx: _RunContext,
        results: List[EvaluatedResult],
        total: int,
        data_source: DataSource,
    ) -> BacktestRun:
        summary = aggregate(results, total, data_source=data_source)
        ctx.report(100, "Analysis complete!")

        self.logger.info(
            f"Backtest complete ({data_source.value}): {summary.non_neutral_trades} directional sweeps, "
            f"win rate {summary.win_rate:.1f}%"
        )

        return BacktestRun(
            results=results,
            summary=summary,
            data_source=data_source,
            params=ctx.params,
            completed_at=datetime.now(),
            notes=ctx.notes,
        )
