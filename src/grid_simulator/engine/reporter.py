"""
SimulationReporter — Report generation and result export.

Generates:
- Summary dicts from simulation results
- pandas DataFrames of trades, equity curve, open positions and sweep trials
- JSON/YAML export of the summary for the presentation layer
"""

import json
import math
from typing import Any

import pandas as pd
import yaml

from grid_simulator.engine.models import SimulationResult
from grid_simulator.engine.system import SweepResult
from grid_simulator.logging import get_logger

logger = get_logger(__name__)

TRADE_COLUMNS = ["id", "step", "price", "type", "amount", "realized_pnl", "side", "related_position_id"]
EQUITY_COLUMNS = ["step", "price", "equity", "balance", "inventory", "unrealized_pnl"]
POSITION_COLUMNS = ["id", "entry_price", "amount", "step_opened", "side"]


class SimulationReporter:
    """Turns simulation results into plain, serializable structures."""

    def summary(self, result: SimulationResult) -> dict[str, Any]:
        """Config, grid levels and metrics of a run."""
        return result.to_dict()

    def trades_frame(self, result: SimulationResult) -> pd.DataFrame:
        return pd.DataFrame([t.to_dict() for t in result.trades], columns=TRADE_COLUMNS)

    def equity_frame(self, result: SimulationResult) -> pd.DataFrame:
        rows = [
            {
                "step": s.step,
                "price": s.price,
                "equity": s.equity,
                "balance": s.balance,
                "inventory": s.inventory,
                "unrealized_pnl": s.unrealized_pnl,
            }
            for s in result.equity_curve
        ]
        return pd.DataFrame(rows, columns=EQUITY_COLUMNS)

    def positions_frame(self, result: SimulationResult) -> pd.DataFrame:
        return pd.DataFrame([p.to_dict() for p in result.open_positions], columns=POSITION_COLUMNS)

    def sweep_frame(self, sweep: SweepResult) -> pd.DataFrame:
        """One row per trial: grid parameters followed by metrics."""
        df = pd.DataFrame([t.to_dict() for t in sweep.trials])
        logger.info("Sweep report generated", trials=len(df))
        return df

    def export_json(self, result: SimulationResult) -> str:
        """Export run summary as JSON."""
        return json.dumps(self._serializable(self.summary(result)), indent=2)

    def export_yaml(self, result: SimulationResult) -> str:
        """Export run summary as YAML."""
        return yaml.safe_dump(
            self._serializable(self.summary(result)),
            default_flow_style=False,
            sort_keys=False,
        )

    @staticmethod
    def _serializable(data: dict[str, Any]) -> dict[str, Any]:
        # inf profit factor is not valid JSON
        return {
            k: (None if isinstance(v, float) and not math.isfinite(v) else v)
            for k, v in data.items()
        }
