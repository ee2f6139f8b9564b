"""Tests for SimulationReporter."""

import json

import pytest
import yaml

from grid_simulator.engine.reporter import (
    EQUITY_COLUMNS,
    POSITION_COLUMNS,
    TRADE_COLUMNS,
    SimulationReporter,
)
from grid_simulator.engine.simulator import GridTradingSimulator
from grid_simulator.engine.system import GridSimulationSystem
from tests.conftest import make_grid, make_market


@pytest.fixture
def reporter():
    return SimulationReporter()


@pytest.fixture
def round_trip_result():
    prices = [1005.0, 995.0, 985.0, 995.0]
    return GridTradingSimulator(make_market(prices), make_grid(), prices).run()


class TestFrames:

    def test_trades_frame(self, reporter, round_trip_result):
        df = reporter.trades_frame(round_trip_result)
        assert list(df.columns) == TRADE_COLUMNS
        assert list(df["id"]) == ["O-L-1", "O-L-2", "C-L-3"]
        assert list(df["type"]) == ["buy", "buy", "sell"]
        assert df["realized_pnl"].sum() == pytest.approx(1.0)

    def test_equity_frame(self, reporter, round_trip_result):
        df = reporter.equity_frame(round_trip_result)
        assert list(df.columns) == EQUITY_COLUMNS
        assert len(df) == 4
        assert (df["equity"] == df["balance"] + df["inventory"] * df["price"]).all()

    def test_positions_frame(self, reporter, round_trip_result):
        df = reporter.positions_frame(round_trip_result)
        assert list(df.columns) == POSITION_COLUMNS
        assert list(df["id"]) == ["POS-L-1"]

    def test_empty_frames_keep_columns(self, reporter):
        prices = [1005.0, 1004.0]
        result = GridTradingSimulator(make_market(prices), make_grid(), prices).run()
        assert list(reporter.trades_frame(result).columns) == TRADE_COLUMNS
        assert reporter.trades_frame(result).empty
        assert reporter.positions_frame(result).empty

    def test_sweep_frame(self, reporter, volatile_market):
        sweep = GridSimulationSystem().run_sweep(
            volatile_market, make_grid(), {"num_grids": [10, 20]}, base_seed=3,
        )
        df = reporter.sweep_frame(sweep)
        assert len(df) == 2
        assert list(df["num_grids"]) == [10, 20]
        assert "max_drawdown_pct" in df.columns


class TestExport:

    def test_summary(self, reporter, round_trip_result):
        summary = reporter.summary(round_trip_result)
        assert summary["steps_processed"] == 4
        assert summary["grid"]["direction"] == "long"
        assert summary["total_trades"] == 3
        assert len(summary["grid_levels"]) == 21

    def test_json_replaces_infinite_profit_factor(self, reporter, round_trip_result):
        assert round_trip_result.metrics.profit_factor == float("inf")
        data = json.loads(reporter.export_json(round_trip_result))
        assert data["profit_factor"] is None
        assert data["grid_profit"] == pytest.approx(1.0)
        assert data["market"]["model"] == "gbm"

    def test_yaml(self, reporter, round_trip_result):
        data = yaml.safe_load(reporter.export_yaml(round_trip_result))
        assert data["total_trades"] == 3
        assert data["profit_factor"] is None
        assert data["grid"]["num_grids"] == 20
