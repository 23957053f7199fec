"""Live parameter set shared by the UI and the simulation store.

Holds the snapshot currently being edited, notifies subscribers on every
change and serves the matching results, recomputed only when the snapshot
changes.
"""

from __future__ import annotations

from typing import Callable

from sasu_sim.core.logging import get_logger
from sasu_sim.domain.calculator.income import compute_results
from sasu_sim.domain.models.results import SimulationResults
from sasu_sim.domain.models.simulation import DEFAULT_SIMULATION_DATA, SimulationData

log = get_logger(__name__)

# Called with the new snapshot after each change
Listener = Callable[[SimulationData], None]


class LiveState:
    """Injectable container for the live ``SimulationData``."""

    def __init__(self, initial: SimulationData | None = None):
        self._data = initial if initial is not None else DEFAULT_SIMULATION_DATA
        self._results: SimulationResults | None = None
        self._listeners: list[Listener] = []

    @property
    def snapshot(self) -> SimulationData:
        """Current live snapshot."""
        return self._data

    @property
    def results(self) -> SimulationResults:
        """Results for the current snapshot."""
        if self._results is None:
            self._results = compute_results(self._data)
        return self._results

    def set(self, data: SimulationData) -> None:
        """Replace the live snapshot and notify subscribers.

        Setting an equal snapshot is a no-op.
        """
        if data == self._data:
            return
        self._data = data
        self._results = None
        log.debug("live_data_changed", listeners=len(self._listeners))
        for listener in list(self._listeners):
            listener(data)

    def update(self, fn: Callable[[SimulationData], SimulationData]) -> None:
        """Apply ``fn`` to the current snapshot and store its result."""
        self.set(fn(self._data))

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener.

        Returns:
            A callable that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
