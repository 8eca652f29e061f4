# sweep_backtest/clients/base_client.py

from abc import ABC, abstractmethod
from datetime import date
from typing import List, Sequence

from sweep_backtest.models.sweep import PricedSweep, TradeLocation


class MarketDataProvider(ABC):
    """Abstract base class for sources of historical sweeps and prices"""

    @abstractmethod
    async def fetch_sweeps_and_prices(
        self,
        ticker: str,
        start_date: date,
        end_date: date,
        hold_period: int,
        trade_locations: Sequence[TradeLocation],
    ) -> List[PricedSweep]:
        """
        Fetch sweeps in the date range with the underlying's closes on the
        trade date and hold_period days later.

        Raises:
            DataAcquisitionError: If the data could not be obtained
        """
        pass

    async def close(self):
        """Cleanup resources"""
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
