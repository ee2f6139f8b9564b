"""Core simulation components — config, shocks, price paths, grid calculator, indicators."""

from grid_simulator.core.config import (
    DEFAULT_GRID,
    DEFAULT_MARKET,
    MARKET_PRESETS,
    EntryFilter,
    GridConfig,
    GridSpacing,
    MarketConfig,
    PricingModel,
    StrategyDirection,
    apply_market_preset,
    build_config,
    config_from_dict,
    load_config,
)
from grid_simulator.core.shocks import ShockProvider, ShockSource
from grid_simulator.core.price_paths import (
    MIN_PRICE,
    PATH_GENERATORS,
    generate_gbm_path,
    generate_jd_path,
    generate_ou_path,
    generate_price_path,
)
from grid_simulator.core.calculator import GridCalculator
from grid_simulator.core.indicators import IndicatorSeries, compute_filter_series, rsi, sma

__all__ = [
    "DEFAULT_GRID",
    "DEFAULT_MARKET",
    "MARKET_PRESETS",
    "EntryFilter",
    "GridConfig",
    "GridSpacing",
    "MarketConfig",
    "PricingModel",
    "StrategyDirection",
    "apply_market_preset",
    "build_config",
    "config_from_dict",
    "load_config",
    "ShockProvider",
    "ShockSource",
    "MIN_PRICE",
    "PATH_GENERATORS",
    "generate_gbm_path",
    "generate_jd_path",
    "generate_ou_path",
    "generate_price_path",
    "GridCalculator",
    "IndicatorSeries",
    "compute_filter_series",
    "rsi",
    "sma",
]
