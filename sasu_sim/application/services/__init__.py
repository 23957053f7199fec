"""Application services."""

from .live_state import LiveState
from .store import ACTIVE_SIMULATION_KEY, SIMULATIONS_KEY, SimulationStore

__all__ = [
    "ACTIVE_SIMULATION_KEY",
    "SIMULATIONS_KEY",
    "LiveState",
    "SimulationStore",
]
