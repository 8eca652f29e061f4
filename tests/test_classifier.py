"""
Tests for sweep side classification.
"""

import pytest

from sweep_backtest.models import InferredSide, TradeLocation
from sweep_backtest.backtesting.classifier import classify, locate_trade


class TestClassify:
    """Test trade location -> side mapping."""

    def test_every_location_is_classified(self):
        """Test classify is total over all trade locations."""
        for loc in TradeLocation:
            assert classify(loc) in set(InferredSide)

    def test_buy_side(self):
        """Test prints at or above the ask are buys."""
        assert classify(TradeLocation.AT_ASK) == InferredSide.BUY
        assert classify(TradeLocation.ABOVE_ASK) == InferredSide.BUY

    def test_sell_side(self):
        """Test prints at or below the bid are sells."""
        assert classify(TradeLocation.BELOW_BID) == InferredSide.SELL
        assert classify(TradeLocation.AT_BID) == InferredSide.SELL

    def test_midpoint_is_neutral(self):
        """Test midpoint prints carry no direction."""
        assert classify(TradeLocation.MIDPOINT) == InferredSide.NEUTRAL

    def test_accepts_string_values(self):
        """Test classify accepts raw location strings."""
        assert classify("at-ask") == InferredSide.BUY
        assert classify("midpoint") == InferredSide.NEUTRAL

    def test_deterministic(self):
        """Test repeated calls agree."""
        for loc in TradeLocation:
            assert classify(loc) == classify(loc)


class TestLocateTrade:
    """Test placing a traded price against its quote."""

    @pytest.mark.parametrize("price,expected", [
        (4.90, TradeLocation.BELOW_BID),
        (5.00, TradeLocation.AT_BID),
        (5.005, TradeLocation.AT_BID),
        (5.10, TradeLocation.MIDPOINT),
        (5.195, TradeLocation.AT_ASK),
        (5.20, TradeLocation.AT_ASK),
        (5.35, TradeLocation.ABOVE_ASK),
    ])
    def test_locations(self, price, expected):
        """Test each band of the spread."""
        assert locate_trade(price, bid=5.00, ask=5.20) == expected

    def test_locked_market_prefers_nearest_quote(self):
        """Test a one-cent market resolves to the closer quote."""
        assert locate_trade(5.00, bid=5.00, ask=5.01) == TradeLocation.AT_BID
        assert locate_trade(5.01, bid=5.00, ask=5.01) == TradeLocation.AT_ASK

    def test_custom_tolerance(self):
        """Test a wider tolerance widens the at-quote bands."""
        assert locate_trade(5.04, bid=5.00, ask=5.20) == TradeLocation.MIDPOINT
        assert locate_trade(5.04, bid=5.00, ask=5.20, tolerance=0.05) == TradeLocation.AT_BID
