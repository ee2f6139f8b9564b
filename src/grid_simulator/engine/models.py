"""
Grid simulation data models — enums, records, results.

Defines all data structures produced by a simulation run:
- Trade / position side enums
- Price ticks, positions, trades and equity samples
- Summary metrics
- The immutable simulation result handed to the presentation layer
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from grid_simulator.core.config import GridConfig, MarketConfig


# =============================================================================
# Enums
# =============================================================================


class TradeType(str, Enum):
    """Execution direction."""

    BUY = "buy"
    SELL = "sell"


class PositionSide(str, Enum):
    """Inventory side of a position."""

    LONG = "long"
    SHORT = "short"


# =============================================================================
# Records
# =============================================================================


@dataclass(frozen=True)
class PriceTick:
    """Single simulated price."""

    step: int
    price: float


@dataclass(frozen=True)
class Position:
    """Open inventory lot."""

    id: str
    entry_price: float
    amount: float
    step_opened: int
    side: PositionSide

    def unrealized_pnl(self, price: float) -> float:
        if self.side == PositionSide.LONG:
            return (price - self.entry_price) * self.amount
        return (self.entry_price - price) * self.amount

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "entry_price": self.entry_price,
            "amount": self.amount,
            "step_opened": self.step_opened,
            "side": self.side.value,
        }


@dataclass(frozen=True)
class Trade:
    """Single execution; realized_pnl is 0 for opening trades."""

    id: str
    step: int
    price: float
    type: TradeType
    amount: float
    realized_pnl: float
    side: PositionSide
    related_position_id: str | None = None

    @property
    def is_close(self) -> bool:
        return self.related_position_id is not None

    @property
    def is_stop_loss(self) -> bool:
        return self.id.startswith("SL-")

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "step": self.step,
            "price": self.price,
            "type": self.type.value,
            "amount": self.amount,
            "realized_pnl": self.realized_pnl,
            "side": self.side.value,
            "related_position_id": self.related_position_id,
        }


@dataclass(frozen=True)
class EquitySample:
    """Single point in the equity curve; equity == balance + inventory * price."""

    step: int
    price: float
    equity: float
    balance: float
    inventory: float
    unrealized_pnl: float


# =============================================================================
# Metrics
# =============================================================================


@dataclass(frozen=True)
class SimulationMetrics:
    """Summary statistics of a simulation run."""

    total_return: float = 0.0
    total_return_pct: float = 0.0
    max_drawdown: float = 0.0
    max_drawdown_pct: float = 0.0
    total_trades: int = 0
    winning_trades: int = 0
    closed_trades: int = 0
    win_rate: float = 0.0
    profit_factor: float = 0.0
    stop_loss_trades: int = 0
    final_balance: float = 0.0
    final_equity: float = 0.0

    # Grid specific
    grid_profit: float = 0.0  # realized
    floating_pnl: float = 0.0  # unrealized
    active_position_count: int = 0
    avg_entry_price: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_return": round(self.total_return, 4),
            "total_return_pct": round(self.total_return_pct, 4),
            "max_drawdown": round(self.max_drawdown, 4),
            "max_drawdown_pct": round(self.max_drawdown_pct, 4),
            "total_trades": self.total_trades,
            "winning_trades": self.winning_trades,
            "closed_trades": self.closed_trades,
            "win_rate": round(self.win_rate, 4),
            "profit_factor": round(self.profit_factor, 4),
            "stop_loss_trades": self.stop_loss_trades,
            "final_balance": round(self.final_balance, 2),
            "final_equity": round(self.final_equity, 2),
            "grid_profit": round(self.grid_profit, 4),
            "floating_pnl": round(self.floating_pnl, 4),
            "active_position_count": self.active_position_count,
            "avg_entry_price": round(self.avg_entry_price, 4),
        }


# =============================================================================
# Simulation Result
# =============================================================================


@dataclass(frozen=True)
class SimulationResult:
    """Everything a run produced. Never mutated after the run completes."""

    market: MarketConfig
    grid: GridConfig
    price_path: tuple[PriceTick, ...] = ()
    equity_curve: tuple[EquitySample, ...] = ()
    trades: tuple[Trade, ...] = ()
    open_positions: tuple[Position, ...] = ()
    grid_levels: tuple[float, ...] = ()
    metrics: SimulationMetrics = field(default_factory=SimulationMetrics)

    # Run metadata
    seed: int | None = None
    duration_seconds: float = 0.0

    @property
    def prices(self) -> list[float]:
        return [tick.price for tick in self.price_path]

    @property
    def equities(self) -> list[float]:
        return [sample.equity for sample in self.equity_curve]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary (without heavy time series)."""
        return {
            "market": self.market.to_dict(),
            "grid": self.grid.to_dict(),
            "grid_levels": list(self.grid_levels),
            "steps_processed": len(self.equity_curve),
            "seed": self.seed,
            "duration_seconds": round(self.duration_seconds, 4),
            **self.metrics.to_dict(),
        }
