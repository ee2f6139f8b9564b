"""
GridTradingSimulator — Core grid trading state machine.

Walks a price path tick by tick and reacts to grid zone crossings:
- Down-cross: cover the latest short, else open a long
- Up-cross: sell the latest long, else open a short
- Optional long stop-loss, price triggers and indicator entry filters

Cash, open positions and the current zone live on the instance and are only
exposed through the immutable SimulationResult returned by run().
"""

import time
from collections.abc import Callable, Sequence

from grid_simulator.core.calculator import GridCalculator
from grid_simulator.core.config import (
    EntryFilter,
    GridConfig,
    MarketConfig,
    StrategyDirection,
)
from grid_simulator.core.indicators import (
    RSI_OVERBOUGHT,
    RSI_OVERSOLD,
    IndicatorSeries,
    compute_filter_series,
)
from grid_simulator.engine.metrics import calculate_metrics
from grid_simulator.engine.models import (
    EquitySample,
    Position,
    PositionSide,
    PriceTick,
    SimulationResult,
    Trade,
    TradeType,
)
from grid_simulator.exceptions import SimulationError
from grid_simulator.logging import get_logger

logger = get_logger(__name__)


# =============================================================================
# Position Book
# =============================================================================


class PositionBook:
    """
    Open positions in opening order.

    The end of the list is the most recently opened position, so it doubles
    as a LIFO stack; drain() removes one side while keeping the order of the
    other.
    """

    def __init__(self) -> None:
        self._stack: list[Position] = []

    def __len__(self) -> int:
        return len(self._stack)

    @property
    def positions(self) -> tuple[Position, ...]:
        return tuple(self._stack)

    def push(self, position: Position) -> None:
        self._stack.append(position)

    def last(self) -> Position | None:
        return self._stack[-1] if self._stack else None

    def last_is(self, side: PositionSide) -> bool:
        last = self.last()
        return last is not None and last.side == side

    def pop(self) -> Position:
        if not self._stack:
            raise SimulationError("No open position to close")
        return self._stack.pop()

    def has_side(self, side: PositionSide) -> bool:
        return any(p.side == side for p in self._stack)

    def drain(self, side: PositionSide) -> list[Position]:
        """Remove and return every position of a side."""
        drained = [p for p in self._stack if p.side == side]
        self._stack = [p for p in self._stack if p.side != side]
        return drained

    def inventory(self) -> float:
        """Net signed base amount: longs positive, shorts negative."""
        return sum(
            p.amount if p.side == PositionSide.LONG else -p.amount
            for p in self._stack
        )

    def unrealized_pnl(self, price: float) -> float:
        return sum(p.unrealized_pnl(price) for p in self._stack)


# =============================================================================
# Simulator
# =============================================================================


class GridTradingSimulator:
    """
    Runs one grid strategy over one price path.

    Usage:
        simulator = GridTradingSimulator(market, grid, prices)
        result = simulator.run()
    """

    def __init__(
        self,
        market: MarketConfig,
        grid: GridConfig,
        prices: Sequence[float],
        levels: Sequence[float] | None = None,
        indicators: IndicatorSeries | None = None,
        seed: int | None = None,
    ) -> None:
        if not prices:
            raise SimulationError("Price path is empty")

        self.market = market
        self.grid = grid
        self.prices = tuple(prices)
        self.levels = tuple(levels) if levels is not None else GridCalculator.calculate_grid(grid)
        self.indicators = (
            indicators if indicators is not None
            else compute_filter_series(list(self.prices), grid.entry_filter)
        )
        self.seed = seed

        self._filters: dict[EntryFilter, Callable[[int, float, PositionSide], bool]] = {
            EntryFilter.NONE: self._accept_all,
            EntryFilter.TREND: self._trend_filter,
            EntryFilter.RSI: self._rsi_filter,
        }

        self._balance = grid.initial_capital
        self._book = PositionBook()
        self._grid_profit = 0.0
        self._zone = GridCalculator.zone_of(self.prices[0], self.levels)
        self._trades: list[Trade] = []
        self._equity_curve: list[EquitySample] = []
        self._finished = False

    def run(self) -> SimulationResult:
        """Process every tick and return the frozen result."""
        if self._finished:
            raise SimulationError("GridTradingSimulator instances are single-use")
        self._finished = True

        start_time = time.perf_counter()

        logger.info(
            "Starting grid simulation",
            steps=len(self.prices) - 1,
            num_grids=self.grid.num_grids,
            spacing=self.grid.spacing.value,
            direction=self.grid.direction.value,
            entry_filter=self.grid.entry_filter.value,
        )

        for step, price in enumerate(self.prices):
            self._process_tick(step, price)

        open_positions = self._book.positions
        metrics = calculate_metrics(
            self._equity_curve,
            self._trades,
            open_positions,
            self.grid.initial_capital,
            self._grid_profit,
        )

        elapsed = time.perf_counter() - start_time

        logger.info(
            "Grid simulation completed",
            trades=metrics.total_trades,
            return_pct=round(metrics.total_return_pct, 2),
            max_drawdown_pct=round(metrics.max_drawdown_pct, 2),
            open_positions=metrics.active_position_count,
            duration_s=round(elapsed, 4),
        )

        return SimulationResult(
            market=self.market,
            grid=self.grid,
            price_path=tuple(PriceTick(step=i, price=p) for i, p in enumerate(self.prices)),
            equity_curve=tuple(self._equity_curve),
            trades=tuple(self._trades),
            open_positions=open_positions,
            grid_levels=self.levels,
            metrics=metrics,
            seed=self.seed,
            duration_seconds=elapsed,
        )

    # =========================================================================
    # Tick Processing
    # =========================================================================

    def _process_tick(self, step: int, price: float) -> None:
        if self.grid.stop_loss > 0:
            self._check_stop_loss(step, price)

        new_zone = GridCalculator.zone_of(price, self.levels)
        if new_zone != self._zone:
            if new_zone < self._zone:
                self._on_cross_down(step, price)
            else:
                self._on_cross_up(step, price)
            self._zone = new_zone

        self._record_sample(step, price)

    def _check_stop_loss(self, step: int, price: float) -> None:
        # Longs only; shorts are never stopped out
        if price > self.grid.stop_loss or not self._book.has_side(PositionSide.LONG):
            return

        longs = self._book.drain(PositionSide.LONG)
        for pos in longs:
            pnl = (price - pos.entry_price) * pos.amount
            self._balance += pos.amount * price
            self._grid_profit += pnl
            self._trades.append(Trade(
                id=f"SL-L-{step}-{pos.id}",
                step=step,
                price=price,
                type=TradeType.SELL,
                amount=pos.amount,
                realized_pnl=pnl,
                side=PositionSide.LONG,
                related_position_id=pos.id,
            ))

        logger.warning(
            "Stop-loss triggered",
            step=step,
            price=round(price, 4),
            stop_loss=self.grid.stop_loss,
            closed=len(longs),
        )

    def _on_cross_down(self, step: int, price: float) -> None:
        if self._book.last_is(PositionSide.SHORT):
            pos = self._book.pop()
            pnl = (pos.entry_price - price) * pos.amount
            self._balance -= pos.amount * price
            self._grid_profit += pnl
            self._trades.append(Trade(
                id=f"C-S-{step}",
                step=step,
                price=price,
                type=TradeType.BUY,
                amount=pos.amount,
                realized_pnl=pnl,
                side=PositionSide.SHORT,
                related_position_id=pos.id,
            ))
            return

        if not self._may_open(PositionSide.LONG, step, price):
            return

        amount = self.grid.amount_per_grid
        cost = amount * price
        if self._balance < cost:
            logger.debug("Long entry skipped: insufficient cash", step=step, cost=cost, balance=self._balance)
            return

        self._balance -= cost
        self._book.push(Position(
            id=f"POS-L-{step}",
            entry_price=price,
            amount=amount,
            step_opened=step,
            side=PositionSide.LONG,
        ))
        self._trades.append(Trade(
            id=f"O-L-{step}",
            step=step,
            price=price,
            type=TradeType.BUY,
            amount=amount,
            realized_pnl=0.0,
            side=PositionSide.LONG,
        ))

    def _on_cross_up(self, step: int, price: float) -> None:
        if self._book.last_is(PositionSide.LONG):
            pos = self._book.pop()
            pnl = (price - pos.entry_price) * pos.amount
            self._balance += pos.amount * price
            self._grid_profit += pnl
            self._trades.append(Trade(
                id=f"C-L-{step}",
                step=step,
                price=price,
                type=TradeType.SELL,
                amount=pos.amount,
                realized_pnl=pnl,
                side=PositionSide.LONG,
                related_position_id=pos.id,
            ))
            return

        if not self._may_open(PositionSide.SHORT, step, price):
            return

        # Short sale credits the proceeds; the liability is the negative inventory
        amount = self.grid.amount_per_grid
        self._balance += amount * price
        self._book.push(Position(
            id=f"POS-S-{step}",
            entry_price=price,
            amount=amount,
            step_opened=step,
            side=PositionSide.SHORT,
        ))
        self._trades.append(Trade(
            id=f"O-S-{step}",
            step=step,
            price=price,
            type=TradeType.SELL,
            amount=amount,
            realized_pnl=0.0,
            side=PositionSide.SHORT,
        ))

    def _record_sample(self, step: int, price: float) -> None:
        inventory = self._book.inventory()
        self._equity_curve.append(EquitySample(
            step=step,
            price=price,
            equity=self._balance + inventory * price,
            balance=self._balance,
            inventory=inventory,
            unrealized_pnl=self._book.unrealized_pnl(price),
        ))

    # =========================================================================
    # Entry Gates
    # =========================================================================

    def _may_open(self, side: PositionSide, step: int, price: float) -> bool:
        """Direction, price trigger and indicator filter checks for a new entry."""
        if not self._direction_allows(side, price):
            return False

        if side == PositionSide.LONG:
            ceiling = self.grid.max_buy_price
            if ceiling > 0 and price > ceiling:
                return False
        else:
            floor = self.grid.min_sell_price
            if floor > 0 and price < floor:
                return False

        if not self._filters[self.grid.entry_filter](step, price, side):
            logger.debug("Entry rejected by filter", step=step, side=side.value,
                         entry_filter=self.grid.entry_filter.value)
            return False
        return True

    def _direction_allows(self, side: PositionSide, price: float) -> bool:
        direction = self.grid.direction
        if direction == StrategyDirection.NEUTRAL:
            # Neutral grids split at the start price: longs below, shorts above
            if side == PositionSide.LONG:
                return price < self.market.start_price
            return price > self.market.start_price
        if side == PositionSide.LONG:
            return direction == StrategyDirection.LONG
        return direction == StrategyDirection.SHORT

    @staticmethod
    def _accept_all(step: int, price: float, side: PositionSide) -> bool:
        return True

    def _trend_filter(self, step: int, price: float, side: PositionSide) -> bool:
        sma = self.indicators.sma50[step]
        if side == PositionSide.LONG:
            return price > sma
        return price < sma

    def _rsi_filter(self, step: int, price: float, side: PositionSide) -> bool:
        value = self.indicators.rsi14[step]
        if side == PositionSide.LONG:
            return value < RSI_OVERSOLD
        return value > RSI_OVERBOUGHT
