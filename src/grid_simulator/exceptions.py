"""Custom exceptions for grid simulation runs"""


class GridSimulatorError(Exception):
    """Base exception for all grid simulator errors"""

    pass


class ConfigError(GridSimulatorError, ValueError):
    """Raised when a market or grid configuration is invalid"""

    pass


class SimulationError(GridSimulatorError, RuntimeError):
    """Raised when the simulator is used outside its single-run contract"""

    pass
