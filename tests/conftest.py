"""Shared test fixtures and helpers for grid simulator tests."""

import pytest

from grid_simulator.core.config import GridConfig, MarketConfig


class ScriptedShocks:
    """Deterministic shock source replaying fixed draws, then neutral values."""

    def __init__(self, normals: list[float] | None = None, uniforms: list[float] | None = None) -> None:
        self.normals = list(normals or [])
        self.uniforms = list(uniforms or [])
        self.calls: list[str] = []

    def normal(self) -> float:
        self.calls.append("normal")
        return self.normals.pop(0) if self.normals else 0.0

    def uniform(self) -> float:
        self.calls.append("uniform")
        return self.uniforms.pop(0) if self.uniforms else 0.999


def make_market(prices: list[float], **overrides) -> MarketConfig:
    """Market config matching a hand-built price path."""
    return MarketConfig(start_price=prices[0], steps=len(prices) - 1, **overrides)


def make_grid(**overrides) -> GridConfig:
    """Default 900-1100 grid with 20 intervals (levels every 10)."""
    params = {
        "lower_price": 900.0,
        "upper_price": 1100.0,
        "num_grids": 20,
        "initial_capital": 10000.0,
        "amount_per_grid": 0.1,
    }
    params.update(overrides)
    return GridConfig(**params)


def make_oscillating_prices(n: int = 200, center: float = 1000.0, amplitude: float = 60.0) -> list[float]:
    """Triangle wave crossing many grid levels in both directions."""
    prices = []
    period = 40
    for i in range(n):
        phase = (i % period) / period
        offset = (4 * phase - 1) if phase < 0.5 else (3 - 4 * phase)
        prices.append(center + amplitude * offset)
    return prices


@pytest.fixture
def default_grid():
    return make_grid()


@pytest.fixture
def volatile_market():
    return MarketConfig(start_price=1000.0, steps=500, volatility=0.01)
