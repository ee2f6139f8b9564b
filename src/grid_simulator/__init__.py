"""
Grid Simulator — Synthetic market generation and grid trading strategy simulation.

Provides:
- GBM, mean-reverting (OU) and jump-diffusion price paths
- Arithmetic and geometric grid level calculation
- SMA / RSI entry filters
- Tick-by-tick grid trading state machine with long, short and neutral modes
- Equity, drawdown and PnL metrics
- Parameter sweeps across processes
- pandas / JSON / YAML result export
"""

__version__ = "1.0.0"
