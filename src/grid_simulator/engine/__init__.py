"""Grid simulation engine — simulator, metrics, reporter, system."""

from grid_simulator.engine.models import (
    EquitySample,
    Position,
    PositionSide,
    PriceTick,
    SimulationMetrics,
    SimulationResult,
    Trade,
    TradeType,
)
from grid_simulator.engine.metrics import calculate_metrics, max_drawdown, profit_factor
from grid_simulator.engine.simulator import GridTradingSimulator, PositionBook
from grid_simulator.engine.system import (
    GridSimulationSystem,
    SweepResult,
    SweepTrial,
    run_simulation,
)
from grid_simulator.engine.reporter import SimulationReporter

__all__ = [
    "EquitySample",
    "Position",
    "PositionSide",
    "PriceTick",
    "SimulationMetrics",
    "SimulationResult",
    "Trade",
    "TradeType",
    "calculate_metrics",
    "max_drawdown",
    "profit_factor",
    "GridTradingSimulator",
    "PositionBook",
    "GridSimulationSystem",
    "SweepResult",
    "SweepTrial",
    "run_simulation",
    "SimulationReporter",
]
