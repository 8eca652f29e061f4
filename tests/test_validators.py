"""
Tests for backtest parameter construction and validation.
"""

import pytest
from datetime import date

from sweep_backtest.errors import ValidationError
from sweep_backtest.models import BacktestParams, TradeLocation
from sweep_backtest.utils.validators import (
    validate_backtest_params,
    validate_hold_period,
    validate_ticker,
)


def make_params(**overrides):
    values = dict(
        ticker="SPY",
        start_date="2024-01-02",
        end_date="2024-01-31",
        hold_period=10,
        trade_locations=("at-ask",),
    )
    values.update(overrides)
    return BacktestParams(**values)


class TestBacktestParams:
    """Test parameter normalization."""

    def test_string_inputs_are_coerced(self):
        """Test ISO dates and location strings become typed values."""
        params = make_params(ticker=" spy ")
        assert params.ticker == "SPY"
        assert params.start_date == date(2024, 1, 2)
        assert params.end_date == date(2024, 1, 31)
        assert params.trade_locations == (TradeLocation.AT_ASK,)

    def test_locations_are_ordered_and_deduplicated(self):
        """Test locations are stored once, most-sold to most-bought."""
        params = make_params(trade_locations=["above-ask", "below-bid", "above-ask", "midpoint"])
        assert params.trade_locations == (
            TradeLocation.BELOW_BID,
            TradeLocation.MIDPOINT,
            TradeLocation.ABOVE_ASK,
        )

    def test_unknown_location(self):
        """Test unknown locations name the field."""
        with pytest.raises(ValidationError) as exc_info:
            make_params(trade_locations=("at-mid",))
        assert exc_info.value.field == "trade_locations"

    def test_bad_date(self):
        """Test unparseable dates name the field."""
        with pytest.raises(ValidationError) as exc_info:
            make_params(end_date="01/31/2024")
        assert exc_info.value.field == "end_date"

    def test_seed_key(self):
        """Test the seed key concatenates ticker, dates and hold period."""
        assert make_params().seed_key() == "SPY2024-01-022024-01-3110"

    def test_dict_round_trip(self):
        """Test to_dict/from_dict preserve the parameters."""
        params = make_params(trade_locations=("at-bid", "at-ask"))
        assert BacktestParams.from_dict(params.to_dict()) == params

    def test_immutable(self):
        """Test params cannot be modified after creation."""
        params = make_params()
        with pytest.raises(AttributeError):
            params.ticker = "QQQ"


class TestValidateBacktestParams:
    """Test run-time validation."""

    def test_valid(self):
        assert validate_backtest_params(make_params()) is True

    def test_single_day_range(self):
        """Test start == end is allowed."""
        assert validate_backtest_params(make_params(end_date="2024-01-02")) is True

    def test_empty_ticker(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_backtest_params(make_params(ticker="  "))
        assert exc_info.value.field == "ticker"

    def test_empty_locations(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_backtest_params(make_params(trade_locations=()))
        assert exc_info.value.field == "trade_locations"

    @pytest.mark.parametrize("hold_period", [0, 31, -5])
    def test_hold_period_out_of_range(self, hold_period):
        with pytest.raises(ValidationError) as exc_info:
            validate_backtest_params(make_params(hold_period=hold_period))
        assert exc_info.value.field == "hold_period"

    @pytest.mark.parametrize("hold_period", [1, 30])
    def test_hold_period_bounds_inclusive(self, hold_period):
        assert validate_backtest_params(make_params(hold_period=hold_period)) is True

    def test_start_after_end(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_backtest_params(make_params(start_date="2024-02-01"))
        assert exc_info.value.field == "start_date"


class TestFieldValidators:
    """Test individual field validators."""

    def test_ticker_must_be_string(self):
        with pytest.raises(ValidationError):
            validate_ticker(123)

    def test_hold_period_must_be_integer(self):
        with pytest.raises(ValidationError):
            validate_hold_period(2.5)
        with pytest.raises(ValidationError):
            validate_hold_period(True)

    def test_missing_locations_reported_by_validator(self):
        """Test None locations are treated as empty and named on validation."""
        params = make_params(trade_locations=None)
        assert params.trade_locations == ()

        with pytest.raises(ValidationError) as exc_info:
            validate_backtest_params(params)
        assert exc_info.value.field == "trade_locations"
