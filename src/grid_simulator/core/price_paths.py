"""
Price path generators — synthetic market data for the grid simulator.

Supports:
- Geometric Brownian Motion (discrete, per-step drift and noise)
- Ornstein-Uhlenbeck mean reversion on log price
- Merton jump diffusion (GBM plus Bernoulli-triggered jumps)

Every generator returns steps + 1 prices, the first being the start price.
"""

import math
from typing import Callable

from grid_simulator.core.config import MarketConfig, PricingModel
from grid_simulator.core.shocks import ShockProvider, ShockSource
from grid_simulator.exceptions import ConfigError
from grid_simulator.logging import get_logger

logger = get_logger(__name__)

MIN_PRICE = 0.01


def generate_gbm_path(config: MarketConfig, steps: int, shocks: ShockProvider) -> list[float]:
    """p[i] = p[i-1] * (1 + drift + volatility * Z), floored at MIN_PRICE."""
    prices = [config.start_price]
    price = config.start_price

    for _ in range(steps):
        shock = shocks.normal()
        price = price + price * (config.drift + config.volatility * shock)
        if price < MIN_PRICE:
            price = MIN_PRICE
        prices.append(price)

    return prices


def generate_ou_path(config: MarketConfig, steps: int, shocks: ShockProvider) -> list[float]:
    """Mean reversion on ln(price); exp keeps every price positive without clamping."""
    prices = [config.start_price]
    log_price = math.log(config.start_price)
    log_mean = math.log(config.long_term_mean)

    for _ in range(steps):
        shock = shocks.normal()
        log_price = (
            log_price
            + config.mean_reversion_speed * (log_mean - log_price)
            + config.volatility * shock
        )
        prices.append(math.exp(log_price))

    return prices


def generate_jd_path(config: MarketConfig, steps: int, shocks: ShockProvider) -> list[float]:
    """GBM step plus, with probability jump_intensity, a normal jump term."""
    prices = [config.start_price]
    price = config.start_price

    for _ in range(steps):
        shock = shocks.normal()
        step_return = config.drift + config.volatility * shock

        if shocks.uniform() < config.jump_intensity:
            step_return += shocks.normal() * config.jump_std + config.jump_mean

        price = price + price * step_return
        if price < MIN_PRICE:
            price = MIN_PRICE
        prices.append(price)

    return prices


PathGenerator = Callable[[MarketConfig, int, ShockProvider], list[float]]

PATH_GENERATORS: dict[PricingModel, PathGenerator] = {
    PricingModel.GBM: generate_gbm_path,
    PricingModel.OU: generate_ou_path,
    PricingModel.JD: generate_jd_path,
}


def generate_price_path(
    config: MarketConfig,
    shocks: ShockProvider | None = None,
) -> list[float]:
    """Validate config and generate a path with the configured model."""
    config.validate()

    generator = PATH_GENERATORS.get(config.model)
    if generator is None:
        raise ConfigError(f"Unknown pricing model: {config.model}")

    if shocks is None:
        shocks = ShockSource()

    prices = generator(config, config.steps, shocks)

    logger.debug(
        "Price path generated",
        model=config.model.value,
        steps=config.steps,
        first=round(prices[0], 4),
        last=round(prices[-1], 4),
    )

    return prices
