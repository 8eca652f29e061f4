"""
Market data clients.
"""

from sweep_backtest.clients.base_client import MarketDataProvider
from sweep_backtest.clients.polygon_client import PolygonClient, parse_option_symbol

__all__ = [
    "MarketDataProvider",
    "PolygonClient",
    "parse_option_symbol",
]
