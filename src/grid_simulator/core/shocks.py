"""Random shock source for the stochastic price models."""

import math
from typing import Protocol

import numpy as np


class ShockProvider(Protocol):
    """Anything the path generators can draw randomness from."""

    def normal(self) -> float: ...

    def uniform(self) -> float: ...


class ShockSource:
    """
    Standard-normal shocks via the Box-Muller transform.

    Uniform draws come from a numpy Generator owned by the instance, so two
    sources built with the same seed produce identical paths and nothing is
    shared between runs.
    """

    def __init__(self, seed: int | None = None) -> None:
        self.seed = seed
        self._rng = np.random.default_rng(seed)

    def uniform(self) -> float:
        """Uniform draw in [0, 1)."""
        return float(self._rng.random())

    def normal(self) -> float:
        """Standard-normal draw (mean 0, std 1)."""
        u = 0.0
        v = 0.0
        # Zero would blow up the log
        while u == 0.0:
            u = self.uniform()
        while v == 0.0:
            v = self.uniform()
        return math.sqrt(-2.0 * math.log(u)) * math.cos(2.0 * math.pi * v)
