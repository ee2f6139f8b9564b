"""Tests for metrics aggregation."""

import math

import pytest

from grid_simulator.engine.metrics import calculate_metrics, max_drawdown, profit_factor
from grid_simulator.engine.models import EquitySample, Position, PositionSide, Trade, TradeType


def curve(equities):
    return [
        EquitySample(step=i, price=100.0, equity=e, balance=e, inventory=0.0, unrealized_pnl=0.0)
        for i, e in enumerate(equities)
    ]


def close_trade(pnl, trade_id="C-L-1"):
    return Trade(
        id=trade_id, step=1, price=100.0, type=TradeType.SELL, amount=1.0,
        realized_pnl=pnl, side=PositionSide.LONG, related_position_id="POS-L-0",
    )


def open_trade(step=0):
    return Trade(
        id=f"O-L-{step}", step=step, price=100.0, type=TradeType.BUY, amount=1.0,
        realized_pnl=0.0, side=PositionSide.LONG,
    )


class TestMaxDrawdown:

    def test_peak_to_trough(self):
        assert max_drawdown([100, 120, 90, 130, 110]) == (30, 130)

    def test_monotonic_rise(self):
        assert max_drawdown([1, 2, 3]) == (0.0, 3)

    def test_first_sample_sets_peak(self):
        dd, peak = max_drawdown([50, 40])
        assert dd == 10
        assert peak == 50


class TestProfitFactor:

    def test_ratio(self):
        trades = [close_trade(3.0), close_trade(-1.5), close_trade(1.0)]
        assert profit_factor(trades) == pytest.approx(4.0 / 1.5)

    def test_no_losses_is_infinite(self):
        assert math.isinf(profit_factor([close_trade(2.0)]))

    def test_no_closes(self):
        assert profit_factor([open_trade()]) == 0.0


class TestCalculateMetrics:

    def test_returns_and_drawdown_pct(self):
        metrics = calculate_metrics(curve([100, 120, 90, 130, 110]), [], [], 100.0, 0.0)
        assert metrics.total_return == pytest.approx(10.0)
        assert metrics.total_return_pct == pytest.approx(10.0)
        assert metrics.max_drawdown == pytest.approx(30.0)
        # Percentage is taken against the final running peak
        assert metrics.max_drawdown_pct == pytest.approx(30.0 / 130.0 * 100)
        assert metrics.final_equity == 110

    def test_trade_counts(self):
        trades = [
            open_trade(0),
            close_trade(2.0, "C-L-1"),
            open_trade(2),
            close_trade(-1.0, "SL-L-3-POS-L-2"),
        ]
        metrics = calculate_metrics(curve([100, 101]), trades, [], 100.0, 1.0)
        assert metrics.total_trades == 4
        assert metrics.closed_trades == 2
        assert metrics.winning_trades == 1
        assert metrics.win_rate == pytest.approx(0.5)
        assert metrics.stop_loss_trades == 1
        assert metrics.profit_factor == pytest.approx(2.0)
        assert metrics.grid_profit == 1.0

    def test_open_positions(self):
        positions = [
            Position(id="POS-L-1", entry_price=990.0, amount=0.1, step_opened=1, side=PositionSide.LONG),
            Position(id="POS-L-2", entry_price=980.0, amount=0.1, step_opened=2, side=PositionSide.LONG),
        ]
        metrics = calculate_metrics(curve([100]), [], positions, 100.0, 0.0)
        assert metrics.active_position_count == 2
        assert metrics.avg_entry_price == pytest.approx(985.0)

    def test_zero_capital(self):
        metrics = calculate_metrics(curve([0.0]), [], [], 0.0, 0.0)
        assert metrics.total_return_pct == 0.0
        assert metrics.max_drawdown_pct == 0.0

    def test_empty_curve(self):
        with pytest.raises(ValueError):
            calculate_metrics([], [], [], 100.0, 0.0)

    def test_to_dict_rounds(self):
        metrics = calculate_metrics(curve([100, 100.123456]), [], [], 100.0, 0.0)
        assert metrics.to_dict()["final_equity"] == 100.12
