"""Tests for SMA / RSI entry-filter indicators."""

import pytest

from grid_simulator.core.config import EntryFilter
from grid_simulator.core.indicators import (
    RSI_NEUTRAL,
    compute_filter_series,
    rsi,
    sma,
)


class TestSMA:

    def test_warm_up_returns_raw_price(self):
        assert sma([1.0, 2.0, 3.0, 4.0, 5.0], 3) == pytest.approx([1.0, 2.0, 2.0, 3.0, 4.0])

    def test_period_one_is_identity(self):
        prices = [5.0, 7.0, 6.0]
        assert sma(prices, 1) == pytest.approx(prices)

    def test_shorter_than_period(self):
        assert sma([10.0, 11.0], 50) == [10.0, 11.0]

    def test_matches_naive_mean(self):
        prices = [100 + (i * 7) % 13 for i in range(80)]
        result = sma(prices, 10)
        for i in range(9, len(prices)):
            assert result[i] == pytest.approx(sum(prices[i - 9:i + 1]) / 10)

    def test_invalid_period(self):
        with pytest.raises(ValueError):
            sma([1.0, 2.0], 0)


class TestRSI:

    def test_neutral_until_enough_history(self):
        assert rsi([1.0, 2.0, 3.0], 14) == [RSI_NEUTRAL] * 3

    def test_rising_prices_saturate_at_100(self):
        prices = [float(i) for i in range(30)]
        result = rsi(prices, 14)
        assert result[:15] == [RSI_NEUTRAL] * 15
        assert result[15:] == [100.0] * 15

    def test_falling_prices_go_to_zero(self):
        prices = [float(100 - i) for i in range(30)]
        result = rsi(prices, 14)
        assert result[15] == pytest.approx(0.0)
        assert result[-1] == pytest.approx(0.0)

    def test_wilder_smoothing(self):
        # Seed: one gain of 2 and one loss of 1 over period 2
        prices = [10.0, 12.0, 11.0, 12.0]
        result = rsi(prices, 2)
        avg_gain = (1.0 * 1 + 1.0) / 2
        avg_loss = (0.5 * 1 + 0.0) / 2
        expected = 100 - 100 / (1 + avg_gain / avg_loss)
        assert result[3] == pytest.approx(expected)

    def test_bounded(self):
        prices = [100 + ((i * 37) % 11) - 5 for i in range(200)]
        assert all(0.0 <= v <= 100.0 for v in rsi(prices, 14))

    def test_invalid_period(self):
        with pytest.raises(ValueError):
            rsi([1.0, 2.0], 0)


class TestFilterSeries:

    def test_none_computes_nothing(self):
        series = compute_filter_series([1.0] * 60, EntryFilter.NONE)
        assert series.sma50 == ()
        assert series.rsi14 == ()

    def test_trend_computes_sma50(self):
        series = compute_filter_series([float(i) for i in range(60)], EntryFilter.TREND)
        assert len(series.sma50) == 60
        assert series.sma50[49] == pytest.approx(24.5)
        assert series.rsi14 == ()

    def test_rsi_computes_rsi14(self):
        series = compute_filter_series([float(i) for i in range(20)], EntryFilter.RSI)
        assert len(series.rsi14) == 20
        assert series.sma50 == ()
