"""
Tests for sweep outcome evaluation.
"""

import pytest

from sweep_backtest.errors import ComputationError
from sweep_backtest.models import DataSource, InferredSide, OptionType, TradeLocation
from sweep_backtest.backtesting.evaluator import evaluate, evaluate_sweep, percent_change


class TestEvaluate:
    """Test the expected-direction table."""

    @pytest.mark.parametrize("option_type,side,change,expected", [
        (OptionType.CALL, InferredSide.BUY, 1.5, True),
        (OptionType.CALL, InferredSide.BUY, -1.5, False),
        (OptionType.PUT, InferredSide.BUY, -1.5, True),
        (OptionType.PUT, InferredSide.BUY, 1.5, False),
        (OptionType.CALL, InferredSide.SELL, -1.5, True),
        (OptionType.CALL, InferredSide.SELL, 1.5, False),
        (OptionType.PUT, InferredSide.SELL, 1.5, True),
        (OptionType.PUT, InferredSide.SELL, -1.5, False),
    ])
    def test_direction_table(self, option_type, side, change, expected):
        """Test every option type / side combination."""
        assert evaluate(option_type, side, change) is expected

    @pytest.mark.parametrize("option_type", list(OptionType))
    @pytest.mark.parametrize("side", [InferredSide.BUY, InferredSide.SELL])
    def test_flat_move_always_loses(self, option_type, side):
        """Test a zero move is a loss for every combination."""
        assert evaluate(option_type, side, 0.0) is False

    def test_neutral_side_rejected(self):
        """Test neutral sweeps cannot be scored."""
        with pytest.raises(ComputationError):
            evaluate(OptionType.CALL, InferredSide.NEUTRAL, 2.0)


class TestPercentChange:
    """Test percent move calculation."""

    def test_up_move(self):
        assert percent_change(100.0, 102.5) == pytest.approx(2.5)

    def test_down_move(self):
        assert percent_change(200.0, 190.0) == pytest.approx(-5.0)

    def test_non_positive_entry_rejected(self):
        """Test a zero entry price is a contract violation."""
        with pytest.raises(ComputationError):
            percent_change(0.0, 10.0)


class TestEvaluateSweep:
    """Test scoring a priced sweep end to end."""

    def test_bullish_call_buy(self, make_priced_sweep):
        """Test a call bought at the ask before a rally is a win."""
        priced = make_priced_sweep(entry_price=100.0, exit_price=103.0)
        result = evaluate_sweep(priced, hold_days=10)

        assert result.inferred_side == InferredSide.BUY
        assert result.percent_change == pytest.approx(3.0)
        assert result.is_win is True
        assert result.hold_days == 10
        assert result.entry_price == 100.0
        assert result.exit_price == 103.0
        assert result.data_source == DataSource.LIVE
        assert result.id.startswith("result_")

    def test_put_sold_at_bid_before_drop(self, make_priced_sweep):
        """Test a put sold at the bid before a drop is a loss."""
        priced = make_priced_sweep(
            option_type=OptionType.PUT,
            trade_location=TradeLocation.AT_BID,
            entry_price=100.0,
            exit_price=98.0,
        )
        result = evaluate_sweep(priced, hold_days=5)

        assert result.inferred_side == InferredSide.SELL
        assert result.is_win is False

    def test_explicit_id_and_source(self, make_priced_sweep):
        """Test caller-supplied id and data source are kept."""
        result = evaluate_sweep(
            make_priced_sweep(), hold_days=1, data_source=DataSource.SYNTHETIC, result_id="abc"
        )
        assert result.id == "abc"
        assert result.data_source == DataSource.SYNTHETIC
