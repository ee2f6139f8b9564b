"""
Simulation configuration — market and grid settings, presets, YAML loading.

Defines:
- Pricing model, spacing, direction and entry-filter enums
- MarketConfig / GridConfig (immutable, validated on demand)
- Default configurations and named market presets
- YAML / dict loading with strict key checking
"""

import dataclasses
import math
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from grid_simulator.exceptions import ConfigError


# =============================================================================
# Enums
# =============================================================================


class PricingModel(str, Enum):
    """Stochastic model used to generate the synthetic price path."""

    GBM = "gbm"  # geometric brownian motion
    OU = "ou"  # ornstein-uhlenbeck on log price
    JD = "jd"  # merton jump diffusion


class GridSpacing(str, Enum):
    """Grid spacing type."""

    ARITHMETIC = "arithmetic"
    GEOMETRIC = "geometric"


class StrategyDirection(str, Enum):
    """Which sides the grid is allowed to open."""

    LONG = "long"
    SHORT = "short"
    NEUTRAL = "neutral"


class EntryFilter(str, Enum):
    """Indicator gate applied before opening a new position."""

    NONE = "none"
    TREND = "trend"  # SMA 50
    RSI = "rsi"  # RSI 14 reversal


# =============================================================================
# Market Configuration
# =============================================================================


@dataclass(frozen=True)
class MarketConfig:
    """Parameters of the synthetic market."""

    start_price: float = 1000.0
    steps: int = 1000
    model: PricingModel = PricingModel.GBM

    # GBM / JD
    drift: float = 0.0
    volatility: float = 0.005

    # OU
    mean_reversion_speed: float = 0.05
    long_term_mean: float = 1000.0

    # JD
    jump_intensity: float = 0.02
    jump_mean: float = -0.05
    jump_std: float = 0.02

    def validate(self) -> None:
        """Validate config values. Raises ConfigError on invalid config."""
        _require_finite(self, ("start_price", "drift", "volatility", "mean_reversion_speed",
                               "long_term_mean", "jump_intensity", "jump_mean", "jump_std"))
        if self.steps < 1:
            raise ConfigError("steps must be at least 1")
        if self.start_price <= 0:
            raise ConfigError("start_price must be positive")
        if self.volatility < 0:
            raise ConfigError("volatility must be non-negative")
        if self.model == PricingModel.OU and self.long_term_mean <= 0:
            raise ConfigError("long_term_mean must be positive for the OU model")
        if not 0 <= self.jump_intensity <= 1:
            raise ConfigError("jump_intensity must be a probability in [0, 1]")
        if self.jump_std < 0:
            raise ConfigError("jump_std must be non-negative")

    def to_dict(self) -> dict[str, Any]:
        return _to_plain_dict(self)


# =============================================================================
# Grid Configuration
# =============================================================================


@dataclass(frozen=True)
class GridConfig:
    """Grid strategy parameters."""

    lower_price: float = 900.0
    upper_price: float = 1100.0
    num_grids: int = 20
    spacing: GridSpacing = GridSpacing.ARITHMETIC
    initial_capital: float = 10000.0
    amount_per_grid: float = 0.1  # base units per level

    # Risk / triggers, 0 = disabled
    stop_loss: float = 0.0
    max_buy_price: float = 0.0
    min_sell_price: float = 0.0

    direction: StrategyDirection = StrategyDirection.LONG
    entry_filter: EntryFilter = EntryFilter.NONE

    def validate(self) -> None:
        """Validate config values. Raises ConfigError on invalid config."""
        _require_finite(self, ("lower_price", "upper_price", "initial_capital", "amount_per_grid",
                               "stop_loss", "max_buy_price", "min_sell_price"))
        if self.upper_price <= self.lower_price:
            raise ConfigError("upper_price must be greater than lower_price")
        if self.num_grids < 2:
            raise ConfigError("num_grids must be at least 2")
        if self.spacing == GridSpacing.GEOMETRIC and self.lower_price <= 0:
            raise ConfigError("lower_price must be positive for geometric grid")
        if self.initial_capital < 0:
            raise ConfigError("initial_capital must be non-negative")
        if self.amount_per_grid <= 0:
            raise ConfigError("amount_per_grid must be positive")
        for name in ("stop_loss", "max_buy_price", "min_sell_price"):
            if getattr(self, name) < 0:
                raise ConfigError(f"{name} must be non-negative (0 disables it)")

    def to_dict(self) -> dict[str, Any]:
        return _to_plain_dict(self)


DEFAULT_MARKET = MarketConfig()
DEFAULT_GRID = GridConfig()


# =============================================================================
# Market Presets
# =============================================================================


# Presets always switch to GBM, which handles drift natively
MARKET_PRESETS: dict[str, dict[str, float]] = {
    "up": {"drift": 0.0008, "volatility": 0.008},
    "down": {"drift": -0.0008, "volatility": 0.008},
    "sideways": {"drift": 0.0, "volatility": 0.005},
    "volatile": {"drift": 0.0, "volatility": 0.02},
}


def apply_market_preset(config: MarketConfig, name: str) -> MarketConfig:
    """Return a copy of config with the named market regime applied."""
    preset = MARKET_PRESETS.get(name.lower())
    if preset is None:
        raise ConfigError(
            f"Unknown market preset: {name!r} (expected one of {sorted(MARKET_PRESETS)})"
        )
    return dataclasses.replace(config, model=PricingModel.GBM, **preset)


# =============================================================================
# Loading
# =============================================================================


def load_config(path: str | Path) -> tuple[MarketConfig, GridConfig]:
    """Load market and grid configuration from a YAML file."""
    path = Path(path)
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    return config_from_dict(data)


def config_from_dict(data: dict[str, Any]) -> tuple[MarketConfig, GridConfig]:
    """Build validated configs from a mapping with optional market/grid sections."""
    if not isinstance(data, dict):
        raise ConfigError("Configuration root must be a mapping")

    unknown = set(data) - {"market", "grid"}
    if unknown:
        raise ConfigError(f"Unknown configuration sections: {sorted(unknown)}")

    market_data = dict(data.get("market") or {})
    preset_name = market_data.pop("preset", None)

    market = build_config(MarketConfig, market_data)
    if preset_name:
        market = apply_market_preset(market, preset_name)
        # Explicit values win over the preset
        overrides = {k: v for k, v in market_data.items() if k in ("drift", "volatility", "model")}
        if overrides:
            market = build_config(MarketConfig, {**market.to_dict(), **overrides})

    grid = build_config(GridConfig, dict(data.get("grid") or {}))

    market.validate()
    grid.validate()
    return market, grid


def build_config(cls: type, values: dict[str, Any]) -> Any:
    """
    Instantiate a config dataclass from loosely typed values.

    Enum fields accept members or their values (any case). Int fields reject
    values that are not whole numbers.
    """
    fields = {f.name: f for f in dataclasses.fields(cls)}
    unknown = set(values) - set(fields)
    if unknown:
        raise ConfigError(f"Unknown {cls.__name__} fields: {sorted(unknown)}")

    kwargs: dict[str, Any] = {}
    for name, raw in values.items():
        default = fields[name].default
        try:
            if isinstance(default, Enum):
                value = raw.value if isinstance(raw, Enum) else str(raw).lower()
                kwargs[name] = type(default)(value)
            elif isinstance(default, int):
                number = float(raw)
                if not number.is_integer():
                    raise ValueError(f"{raw!r} is not a whole number")
                kwargs[name] = int(number)
            else:
                kwargs[name] = float(raw)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid value for {cls.__name__}.{name}: {raw!r}") from e
    return cls(**kwargs)


def _require_finite(config: Any, names: tuple[str, ...]) -> None:
    for name in names:
        if not math.isfinite(getattr(config, name)):
            raise ConfigError(f"{name} must be a finite number")


def _to_plain_dict(config: Any) -> dict[str, Any]:
    return {
        k: (v.value if isinstance(v, Enum) else v)
        for k, v in dataclasses.asdict(config).items()
    }
