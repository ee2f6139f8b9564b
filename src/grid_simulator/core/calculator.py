"""
GridCalculator — Grid level calculation engine.

Supports:
- Arithmetic grids (evenly spaced price levels)
- Geometric grids (ratio-based levels)
- Zone lookup (which grid interval a price sits in)
- Percentage spacing between adjacent levels
"""

import bisect
import math

from grid_simulator.core.config import GridConfig, GridSpacing
from grid_simulator.logging import get_logger

logger = get_logger(__name__)


class GridCalculator:
    """
    Calculates grid boundary prices for the grid trading simulator.

    A grid of `count` intervals has `count + 1` boundary levels, the first
    equal to the lower bound and the last to the upper bound.
    """

    @staticmethod
    def calculate_arithmetic_levels(
        upper_price: float,
        lower_price: float,
        count: int,
    ) -> list[float]:
        """Calculate evenly spaced grid levels."""
        if count < 1:
            raise ValueError("count must be at least 1")
        if upper_price <= lower_price:
            raise ValueError("upper_price must be greater than lower_price")

        step = (upper_price - lower_price) / count
        return [lower_price + i * step for i in range(count + 1)]

    @staticmethod
    def calculate_geometric_levels(
        upper_price: float,
        lower_price: float,
        count: int,
    ) -> list[float]:
        """Calculate ratio-based (geometric) grid levels."""
        if count < 1:
            raise ValueError("count must be at least 1")
        if upper_price <= lower_price:
            raise ValueError("upper_price must be greater than lower_price")
        if lower_price <= 0:
            raise ValueError("lower_price must be positive for geometric grid")

        ratio = (upper_price / lower_price) ** (1.0 / count)
        return [lower_price * ratio ** i for i in range(count + 1)]

    @staticmethod
    def calculate_levels(
        upper_price: float,
        lower_price: float,
        count: int,
        spacing: GridSpacing = GridSpacing.ARITHMETIC,
    ) -> list[float]:
        """Calculate grid levels using the specified spacing type."""
        if spacing == GridSpacing.ARITHMETIC:
            levels = GridCalculator.calculate_arithmetic_levels(upper_price, lower_price, count)
        elif spacing == GridSpacing.GEOMETRIC:
            levels = GridCalculator.calculate_geometric_levels(upper_price, lower_price, count)
        else:
            raise ValueError(f"Unknown spacing type: {spacing}")

        if not all(math.isfinite(level) for level in levels):
            raise ValueError("grid levels must be finite")
        return levels

    @staticmethod
    def calculate_grid(config: GridConfig) -> tuple[float, ...]:
        """Calculate the immutable level sequence for a grid config."""
        config.validate()

        levels = GridCalculator.calculate_levels(
            config.upper_price,
            config.lower_price,
            config.num_grids,
            config.spacing,
        )

        logger.debug(
            "Grid levels calculated",
            spacing=config.spacing.value,
            num_grids=config.num_grids,
            upper=config.upper_price,
            lower=config.lower_price,
        )

        return tuple(levels)

    @staticmethod
    def zone_of(price: float, levels: tuple[float, ...] | list[float]) -> int:
        """
        Map a price to its grid zone.

        Returns -1 below the lowest level, len(levels) above the highest,
        otherwise i such that levels[i] <= price < levels[i + 1]. A price
        exactly on the top level belongs to zone len(levels) - 1.
        """
        if price < levels[0]:
            return -1
        if price > levels[-1]:
            return len(levels)
        return bisect.bisect_right(levels, price) - 1

    @staticmethod
    def spacing_pct(levels: list[float] | tuple[float, ...]) -> list[float]:
        """Calculate percentage spacing between consecutive grid levels."""
        if len(levels) < 2:
            return []
        return [
            (levels[i] - levels[i - 1]) / levels[i - 1] * 100
            for i in range(1, len(levels))
        ]
