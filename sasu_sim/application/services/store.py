"""Named simulation collection with write-back and persistence.

The store keeps the saved simulations, the id of the active one, and mirrors
the live parameter set into the active simulation whenever they diverge.
The whole collection is written to key-value storage after every change:

- ``sasu-simulations``: JSON array of ``{id, name, data, updatedAt}``
- ``sasu-active-simulation-id``: the active id as a plain string

Nothing in here raises on bad stored data or failing storage. Damaged records
are repaired where possible, and storage failures are logged while the store
keeps running in memory. The collection is written before the active id, so a
failure between the two writes only leaves the previous active id behind;
the next load restores it, or the first simulation if it no longer exists.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, Callable

from pydantic import ValidationError

from sasu_sim.application.services.live_state import LiveState
from sasu_sim.core.exceptions import InvalidParameterError, SimulationNotFoundError, StorageError
from sasu_sim.core.logging import get_logger
from sasu_sim.core.settings import AppSettings, get_settings
from sasu_sim.domain.models.simulation import (
    Simulation,
    SimulationData,
    data_equals,
    now_ms,
    parse_number,
    with_defaults,
)
from sasu_sim.services.storage import KeyValueStorage

log = get_logger(__name__)

SIMULATIONS_KEY = "sasu-simulations"
ACTIVE_SIMULATION_KEY = "sasu-active-simulation-id"
NAME_PREFIX = "Simulation"


class SimulationStore:
    """Owns the simulations and keeps the active one in sync with live data.

    The store subscribes to ``live`` on construction, so each live change is
    written back to the active simulation before anything else can happen.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        live: LiveState | None = None,
        *,
        settings: AppSettings | None = None,
        clock: Callable[[], int] = now_ms,
    ):
        self._storage = storage
        self._live = live or LiveState()
        self._clock = clock
        self._default_name = (settings or get_settings()).default_simulation_name
        self._simulations: list[Simulation] = []
        self._active_id = ""
        self._unsubscribe = self._live.subscribe(self.sync)

    @classmethod
    def open(
        cls,
        storage: KeyValueStorage,
        live: LiveState | None = None,
        **kwargs: Any,
    ) -> SimulationStore:
        """Create a store and load it from storage."""
        store = cls(storage, live, **kwargs)
        store.load()
        return store

    # --- Accessors ---

    @property
    def live(self) -> LiveState:
        return self._live

    @property
    def simulations(self) -> tuple[Simulation, ...]:
        return tuple(self._simulations)

    @property
    def active_id(self) -> str:
        return self._active_id

    @property
    def active(self) -> Simulation:
        """The active simulation, falling back to the first one."""
        return self._find(self._active_id) or self._simulations[0]

    def get(self, simulation_id: str) -> Simulation:
        """Look up a simulation by id.

        Raises:
            SimulationNotFoundError: No simulation has this id.
        """
        simulation = self._find(simulation_id)
        if simulation is None:
            raise SimulationNotFoundError(simulation_id)
        return simulation

    def next_name(self) -> str:
        """First free conventional name: "Simulation N"."""
        taken = {s.name for s in self._simulations}
        n = len(self._simulations) + 1
        while f"{NAME_PREFIX} {n}" in taken:
            n += 1
        return f"{NAME_PREFIX} {n}"

    # --- Loading ---

    def load(self) -> None:
        """Read the collection and active id, then apply the active data live."""
        simulations = self._read_simulations()
        seeded = not simulations
        if seeded:
            simulations = [
                Simulation(name=self._default_name, data=with_defaults(None), updated_at=self._clock())
            ]
            log.info("default_simulation_seeded", name=self._default_name)

        stored_active_id = self._read_active_id()
        self._simulations = simulations
        if any(s.id == stored_active_id for s in simulations):
            self._active_id = stored_active_id
        else:
            self._active_id = simulations[0].id
            if stored_active_id:
                log.warning("stored_active_id_unknown", active_id=stored_active_id)

        log.info("simulations_loaded", count=len(simulations), active_id=self._active_id)
        self._live.set(self.active.data)

        if seeded or self._active_id != stored_active_id:
            self.persist()

    def _read_simulations(self) -> list[Simulation]:
        try:
            raw = self._storage.get_item(SIMULATIONS_KEY)
        except StorageError as e:
            log.error("storage_read_failed", key=SIMULATIONS_KEY, error=str(e))
            return []
        if not raw:
            return []

        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as e:
            log.warning("stored_simulations_malformed", error=str(e))
            return []
        if not isinstance(payload, list):
            log.warning("stored_simulations_wrong_shape", type=type(payload).__name__)
            return []

        simulations: list[Simulation] = []
        seen: set[str] = set()
        for index, record in enumerate(payload):
            try:
                simulation = _parse_record(record, index)
            except (ValidationError, InvalidParameterError) as e:
                log.warning("stored_simulation_dropped", index=index, error=str(e))
                continue
            if simulation.id in seen:
                log.warning("stored_simulation_duplicate", index=index, id=simulation.id)
                continue
            seen.add(simulation.id)
            simulations.append(simulation)
        return simulations

    def _read_active_id(self) -> str | None:
        try:
            return self._storage.get_item(ACTIVE_SIMULATION_KEY)
        except StorageError as e:
            log.error("storage_read_failed", key=ACTIVE_SIMULATION_KEY, error=str(e))
            return None

    # --- Write-back ---

    def sync(self, data: SimulationData) -> bool:
        """Copy live data into the active simulation if it differs.

        Returns:
            True when the active simulation was updated. A failed write is
            logged by :meth:`persist` and does not change the result.
        """
        if not self._simulations:
            return False
        active = self.active
        if data_equals(data, active.data):
            return False

        self._replace(active.model_copy(update={"data": data, "updated_at": self._clock()}))
        log.debug("simulation_written_back", id=active.id)
        self.persist()
        return True

    # --- Collection operations ---

    def select(self, simulation_id: str) -> bool:
        """Make another simulation active and load its data live.

        Pending live edits are written back to the current simulation first.
        """
        if self._find(simulation_id) is None:
            log.warning("select_unknown_simulation", id=simulation_id)
            return False
        if simulation_id == self._active_id:
            return True

        self.sync(self._live.snapshot)
        self._active_id = simulation_id
        self.persist()
        # Active id already switched: the resulting sync sees no difference
        self._live.set(self.get(simulation_id).data)
        log.info("simulation_selected", id=simulation_id)
        return True

    def create(self, name: str | None = None) -> Simulation:
        """Save the live data as a new simulation and activate it."""
        self.sync(self._live.snapshot)
        clean_name = (name or "").strip() or self.next_name()
        simulation = Simulation(name=clean_name, data=self._live.snapshot, updated_at=self._clock())
        self._simulations.append(simulation)
        self._active_id = simulation.id
        self.persist()
        log.info("simulation_created", id=simulation.id, name=clean_name)
        return simulation

    def rename(self, simulation_id: str, name: str) -> bool:
        """Rename a simulation; empty or unchanged names are ignored."""
        simulation = self._find(simulation_id)
        if simulation is None:
            log.warning("rename_unknown_simulation", id=simulation_id)
            return False
        clean_name = (name or "").strip()
        if not clean_name or clean_name == simulation.name:
            return False

        self._replace(simulation.model_copy(update={"name": clean_name, "updated_at": self._clock()}))
        self.persist()
        log.info("simulation_renamed", id=simulation_id, name=clean_name)
        return True

    def delete(self, simulation_id: str) -> bool:
        """Remove a simulation; the collection never becomes empty."""
        if self._find(simulation_id) is None:
            log.warning("delete_unknown_simulation", id=simulation_id)
            return False

        self._simulations = [s for s in self._simulations if s.id != simulation_id]
        log.info("simulation_deleted", id=simulation_id, remaining=len(self._simulations))

        if not self._simulations:
            fresh = Simulation(name=self._default_name, data=self._live.snapshot, updated_at=self._clock())
            self._simulations = [fresh]
            self._active_id = fresh.id
            self.persist()
            log.info("default_simulation_seeded", name=fresh.name)
            return True

        if simulation_id == self._active_id:
            self._active_id = self._simulations[0].id
            self.persist()
            self._live.set(self._simulations[0].data)
        else:
            self.persist()
        return True

    # --- Persistence ---

    def persist(self) -> bool:
        """Write the collection and the active id to storage.

        Returns:
            False when the storage backend failed; the failure is logged.
        """
        payload = json.dumps(
            [s.model_dump(mode="json", by_alias=True) for s in self._simulations],
            ensure_ascii=False,
        )
        try:
            self._storage.set_item(SIMULATIONS_KEY, payload)
            self._storage.set_item(ACTIVE_SIMULATION_KEY, self._active_id)
        except StorageError as e:
            log.error("storage_write_failed", key=e.key, error=str(e))
            return False
        return True

    def close(self) -> None:
        """Stop following the live state."""
        self._unsubscribe()

    # --- Internals ---

    def _find(self, simulation_id: str | None) -> Simulation | None:
        return next((s for s in self._simulations if s.id == simulation_id), None)

    def _replace(self, simulation: Simulation) -> None:
        self._simulations = [simulation if s.id == simulation.id else s for s in self._simulations]


def _parse_record(record: Any, index: int) -> Simulation:
    """Rebuild one stored simulation, repairing what can be repaired.

    Only records that are not objects are rejected. A missing id gets a fresh
    one, a missing name the conventional name for its position, and data that
    is not an object is replaced by the defaults.
    """
    if not isinstance(record, dict):
        raise InvalidParameterError("simulation", type(record).__name__, "expected an object")

    raw_data = record.get("data")
    if raw_data is not None and not isinstance(raw_data, Mapping):
        log.warning("stored_simulation_data_replaced", index=index, type=type(raw_data).__name__)
        raw_data = None

    fields: dict[str, Any] = {"data": with_defaults(raw_data)}
    if isinstance(record.get("id"), str) and record["id"]:
        fields["id"] = record["id"]
    name = record.get("name")
    fields["name"] = name.strip() if isinstance(name, str) and name.strip() else f"{NAME_PREFIX} {index + 1}"
    updated_at = parse_number(record.get("updatedAt"))
    if updated_at is not None:
        fields["updated_at"] = int(updated_at)
    return Simulation.model_validate(fields)
