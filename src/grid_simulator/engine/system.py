"""
GridSimulationSystem — End-to-end grid simulation pipeline.

Orchestrates:
1. Config validation
2. Price path generation (GBM / OU / JD)
3. Indicator series for the active entry filter
4. Grid level calculation
5. Tick-by-tick simulation and metrics
6. Parameter sweeps over grid settings (sequential or ProcessPoolExecutor)
"""

import dataclasses
import itertools
import time
import uuid
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Any

from grid_simulator.core.calculator import GridCalculator
from grid_simulator.core.config import GridConfig, MarketConfig, build_config
from grid_simulator.core.indicators import compute_filter_series
from grid_simulator.core.price_paths import generate_price_path
from grid_simulator.core.shocks import ShockProvider, ShockSource
from grid_simulator.engine.models import SimulationResult
from grid_simulator.engine.simulator import GridTradingSimulator
from grid_simulator.exceptions import ConfigError
from grid_simulator.logging import LoggerMixin, get_logger, log_context

logger = get_logger(__name__)


def run_simulation(
    market: MarketConfig,
    grid: GridConfig,
    shocks: ShockProvider | None = None,
    seed: int | None = None,
) -> SimulationResult:
    """
    Run one complete simulation.

    Args:
        market: Synthetic market parameters
        grid: Grid strategy parameters
        shocks: Injected shock source; overrides seed when given
        seed: Seed for a fresh ShockSource (None = independent random run)
    """
    market.validate()
    grid.validate()

    if shocks is None:
        shocks = ShockSource(seed)

    with log_context(run_id=uuid.uuid4().hex[:8]):
        prices = generate_price_path(market, shocks)
        indicators = compute_filter_series(prices, grid.entry_filter)
        levels = GridCalculator.calculate_grid(grid)

        simulator = GridTradingSimulator(
            market,
            grid,
            prices,
            levels=levels,
            indicators=indicators,
            seed=seed,
        )
        return simulator.run()


# =============================================================================
# Sweep Models
# =============================================================================


@dataclass
class SweepTrial:
    """Result of a single sweep trial."""

    trial_id: int
    grid: GridConfig
    seed: int | None
    result: SimulationResult

    def to_dict(self) -> dict[str, Any]:
        return {
            "trial_id": self.trial_id,
            "seed": self.seed,
            **self.grid.to_dict(),
            **self.result.metrics.to_dict(),
        }


@dataclass
class SweepResult:
    """Result of a full parameter sweep."""

    market: MarketConfig
    param_grid: dict[str, list[Any]]
    trials: list[SweepTrial] = field(default_factory=list)
    failed_trials: int = 0
    total_duration_seconds: float = 0.0

    def top_n(self, n: int = 5, key: str = "total_return_pct") -> list[SweepTrial]:
        """Get top N trials by a metric."""
        return sorted(
            self.trials,
            key=lambda t: getattr(t.result.metrics, key),
            reverse=True,
        )[:n]

    def best(self, key: str = "total_return_pct") -> SweepTrial | None:
        top = self.top_n(1, key)
        return top[0] if top else None


# =============================================================================
# Standalone trial runner (picklable for ProcessPoolExecutor)
# =============================================================================


def _run_single_trial(market: MarketConfig, grid: GridConfig, seed: int | None) -> SimulationResult:
    """Run a single sweep trial in a worker process."""
    return run_simulation(market, grid, seed=seed)


# =============================================================================
# System
# =============================================================================


class GridSimulationSystem(LoggerMixin):
    """End-to-end grid simulation system."""

    def __init__(self, max_workers: int | None = None) -> None:
        self.max_workers = max_workers

    def run_single(
        self,
        market: MarketConfig,
        grid: GridConfig,
        seed: int | None = None,
        shocks: ShockProvider | None = None,
    ) -> SimulationResult:
        """Run a single simulation with given configs."""
        self.logger.info("Running single simulation", model=market.model.value, seed=seed)
        return run_simulation(market, grid, shocks=shocks, seed=seed)

    def run_sweep(
        self,
        market: MarketConfig,
        base_grid: GridConfig,
        param_grid: dict[str, list[Any]],
        runs_per_combo: int = 1,
        base_seed: int | None = None,
        max_workers: int | None = None,
    ) -> SweepResult:
        """
        Run the cartesian product of grid parameter values.

        Every trial gets its own GridConfig and shock source; with base_seed
        set, trial i uses seed base_seed + i so the sweep is reproducible.
        """
        start_time = time.perf_counter()
        workers = max_workers or self.max_workers

        if runs_per_combo < 1:
            raise ConfigError("runs_per_combo must be at least 1")

        market.validate()
        combos = self._generate_combos(base_grid, param_grid)

        jobs: list[tuple[int, GridConfig, int | None]] = []
        for grid in combos:
            for _ in range(runs_per_combo):
                trial_id = len(jobs)
                seed = base_seed + trial_id if base_seed is not None else None
                jobs.append((trial_id, grid, seed))

        self.logger.info(
            "Starting parameter sweep",
            combos=len(combos),
            runs_per_combo=runs_per_combo,
            trials=len(jobs),
            max_workers=workers,
        )

        sweep = SweepResult(market=market, param_grid=param_grid)

        if workers and workers > 1 and len(jobs) > 1:
            sweep.trials = self._run_trials_parallel(market, jobs, workers)
        else:
            sweep.trials = self._run_trials_sequential(market, jobs)

        sweep.failed_trials = len(jobs) - len(sweep.trials)
        sweep.total_duration_seconds = time.perf_counter() - start_time

        self.logger.info(
            "Parameter sweep complete",
            trials=len(sweep.trials),
            failed=sweep.failed_trials,
            duration_s=round(sweep.total_duration_seconds, 2),
        )

        return sweep

    # =========================================================================
    # Combo Generation
    # =========================================================================

    @staticmethod
    def _generate_combos(base: GridConfig, param_grid: dict[str, list[Any]]) -> list[GridConfig]:
        """Generate validated GridConfig combinations from parameter values."""
        known = {f.name for f in dataclasses.fields(GridConfig)}
        unknown = set(param_grid) - known
        if unknown:
            raise ConfigError(f"Unknown GridConfig fields in sweep: {sorted(unknown)}")

        names = list(param_grid)
        combos = []
        for values in itertools.product(*(param_grid[n] for n in names)):
            # Coerced like file-loaded configs
            grid = build_config(GridConfig, {**base.to_dict(), **dict(zip(names, values))})
            grid.validate()
            combos.append(grid)

        return combos

    # =========================================================================
    # Trial Execution
    # =========================================================================

    def _run_trials_sequential(
        self,
        market: MarketConfig,
        jobs: list[tuple[int, GridConfig, int | None]],
    ) -> list[SweepTrial]:
        """Run trials sequentially."""
        return [
            SweepTrial(trial_id=trial_id, grid=grid, seed=seed,
                       result=run_simulation(market, grid, seed=seed))
            for trial_id, grid, seed in jobs
        ]

    def _run_trials_parallel(
        self,
        market: MarketConfig,
        jobs: list[tuple[int, GridConfig, int | None]],
        max_workers: int,
    ) -> list[SweepTrial]:
        """Run trials in parallel using ProcessPoolExecutor."""
        trials: list[SweepTrial] = []

        with ProcessPoolExecutor(max_workers=max_workers) as executor:
            future_to_job = {
                executor.submit(_run_single_trial, market, grid, seed): (trial_id, grid, seed)
                for trial_id, grid, seed in jobs
            }

            for future in as_completed(future_to_job):
                trial_id, grid, seed = future_to_job[future]
                try:
                    result = future.result()
                except Exception as e:
                    logger.error("Trial failed", trial_id=trial_id, error=str(e))
                    continue
                trials.append(SweepTrial(trial_id=trial_id, grid=grid, seed=seed, result=result))

        trials.sort(key=lambda t: t.trial_id)
        self.logger.info("Parallel trials complete", successful=len(trials))
        return trials
