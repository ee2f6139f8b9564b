"""Metrics aggregation — reduces equity curve and trade log to summary stats."""

from collections.abc import Sequence

from grid_simulator.engine.models import (
    EquitySample,
    Position,
    SimulationMetrics,
    Trade,
)


def max_drawdown(equities: Sequence[float]) -> tuple[float, float]:
    """
    Largest decline from the running peak.

    Returns (max_drawdown, final_peak); the peak starts at -inf so the first
    sample always sets it.
    """
    peak = float("-inf")
    max_dd = 0.0
    for equity in equities:
        if equity > peak:
            peak = equity
        dd = peak - equity
        if dd > max_dd:
            max_dd = dd
    return max_dd, peak


def profit_factor(trades: Sequence[Trade]) -> float:
    """Gross profit over gross loss of closing trades."""
    closes = [t for t in trades if t.is_close]
    gross_profit = sum(t.realized_pnl for t in closes if t.realized_pnl > 0)
    gross_loss = abs(sum(t.realized_pnl for t in closes if t.realized_pnl < 0))
    if gross_loss > 0:
        return gross_profit / gross_loss
    return float("inf") if gross_profit > 0 else 0.0


def calculate_metrics(
    equity_curve: Sequence[EquitySample],
    trades: Sequence[Trade],
    open_positions: Sequence[Position],
    initial_capital: float,
    grid_profit: float,
) -> SimulationMetrics:
    """Build the summary metrics of a completed run."""
    if not equity_curve:
        raise ValueError("equity_curve must contain at least one sample")

    final = equity_curve[-1]
    total_return = final.equity - initial_capital
    total_return_pct = (total_return / initial_capital) * 100 if initial_capital > 0 else 0.0

    max_dd, peak = max_drawdown([s.equity for s in equity_curve])
    max_dd_pct = (max_dd / peak) * 100 if peak > 0 else 0.0

    closed = sum(1 for t in trades if t.is_close)
    winning = sum(1 for t in trades if t.realized_pnl > 0)

    avg_entry = (
        sum(p.entry_price for p in open_positions) / len(open_positions)
        if open_positions
        else 0.0
    )

    return SimulationMetrics(
        total_return=total_return,
        total_return_pct=total_return_pct,
        max_drawdown=max_dd,
        max_drawdown_pct=max_dd_pct,
        total_trades=len(trades),
        winning_trades=winning,
        closed_trades=closed,
        win_rate=winning / closed if closed > 0 else 0.0,
        profit_factor=profit_factor(trades),
        stop_loss_trades=sum(1 for t in trades if t.is_stop_loss),
        final_balance=final.balance,
        final_equity=final.equity,
        grid_profit=grid_profit,
        floating_pnl=final.unrealized_pnl,
        active_position_count=len(open_positions),
        avg_entry_price=avg_entry,
    )
