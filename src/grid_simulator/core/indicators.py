"""
Technical indicators used as grid entry filters.

- SMA with raw-price warm-up
- Wilder-smoothed RSI with neutral warm-up
"""

from dataclasses import dataclass

import numpy as np

from grid_simulator.core.config import EntryFilter

TREND_SMA_PERIOD = 50
RSI_PERIOD = 14
RSI_NEUTRAL = 50.0
RSI_OVERSOLD = 30.0
RSI_OVERBOUGHT = 70.0


def sma(prices: list[float], period: int) -> list[float]:
    """Simple moving average; indices before period - 1 carry the raw price."""
    if period < 1:
        raise ValueError("period must be >= 1")

    data = np.asarray(prices, dtype=float)
    out = data.copy()
    if len(data) < period:
        return out.tolist()

    csum = np.cumsum(np.insert(data, 0, 0.0))
    out[period - 1:] = (csum[period:] - csum[:-period]) / period
    return out.tolist()


def rsi(prices: list[float], period: int = RSI_PERIOD) -> list[float]:
    """Wilder RSI; neutral 50 until period + 1 samples, 100 when avg loss is 0."""
    if period < 1:
        raise ValueError("period must be >= 1")

    n = len(prices)
    out = [RSI_NEUTRAL] * n
    if n < period + 1:
        return out

    gains = 0.0
    losses = 0.0
    for i in range(1, period + 1):
        change = prices[i] - prices[i - 1]
        if change >= 0:
            gains += change
        else:
            losses -= change
    avg_gain = gains / period
    avg_loss = losses / period

    for i in range(period + 1, n):
        change = prices[i] - prices[i - 1]
        gain = change if change > 0 else 0.0
        loss = -change if change < 0 else 0.0

        avg_gain = (avg_gain * (period - 1) + gain) / period
        avg_loss = (avg_loss * (period - 1) + loss) / period

        if avg_loss == 0:
            out[i] = 100.0
        else:
            rs = avg_gain / avg_loss
            out[i] = 100.0 - 100.0 / (1.0 + rs)

    return out


@dataclass(frozen=True)
class IndicatorSeries:
    """Per-step indicator values required by the active entry filter."""

    sma50: tuple[float, ...] = ()
    rsi14: tuple[float, ...] = ()


def compute_filter_series(prices: list[float], entry_filter: EntryFilter) -> IndicatorSeries:
    """Compute only the series the filter actually reads."""
    if entry_filter == EntryFilter.TREND:
        return IndicatorSeries(sma50=tuple(sma(prices, TREND_SMA_PERIOD)))
    if entry_filter == EntryFilter.RSI:
        return IndicatorSeries(rsi14=tuple(rsi(prices, RSI_PERIOD)))
    return IndicatorSeries()
