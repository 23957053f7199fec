"""Unit tests for sasu_sim.application.services.store module."""

import json

import pytest

from conftest import CountingStorage, FailingKeyStorage, FailingStorage
from sasu_sim.application.services.live_state import LiveState
from sasu_sim.application.services.store import (
    ACTIVE_SIMULATION_KEY,
    SIMULATIONS_KEY,
    SimulationStore,
)
from sasu_sim.core.exceptions import SimulationNotFoundError
from sasu_sim.domain.models.simulation import DEFAULT_SIMULATION_DATA, Simulation


def stored_simulations(storage):
    return json.loads(storage.get_item(SIMULATIONS_KEY))


def seeded_storage(*simulations, active_id=None):
    storage = CountingStorage()
    storage.set_item(
        SIMULATIONS_KEY,
        json.dumps([s.model_dump(mode="json", by_alias=True) for s in simulations]),
    )
    if active_id is not None:
        storage.set_item(ACTIVE_SIMULATION_KEY, active_id)
    storage.writes.clear()
    return storage


class TestLoad:
    """Tests for loading and fallback behaviour."""

    def test_empty_storage_seeds_default(self, store, storage, live):
        assert len(store.simulations) == 1
        assert store.active.name == "Simulation 1"
        assert store.active.data == DEFAULT_SIMULATION_DATA
        assert live.snapshot == DEFAULT_SIMULATION_DATA
        assert storage.get_item(ACTIVE_SIMULATION_KEY) == store.active_id
        assert len(stored_simulations(storage)) == 1

    @pytest.mark.parametrize("raw", ["{not json", "42", '{"id": "x"}', "null", ""])
    def test_malformed_storage_falls_back(self, raw, settings, clock):
        storage = CountingStorage({SIMULATIONS_KEY: raw})
        store = SimulationStore.open(storage, settings=settings, clock=clock)
        assert len(store.simulations) == 1
        assert store.active.data == DEFAULT_SIMULATION_DATA

    def test_non_object_records_dropped(self, sample_data, settings, clock):
        good = Simulation(id="good", name="Bonne", data=sample_data)
        payload = ["not an object", 42, None, good.model_dump(mode="json", by_alias=True)]
        storage = CountingStorage({SIMULATIONS_KEY: json.dumps(payload)})
        store = SimulationStore.open(storage, settings=settings, clock=clock)
        assert [s.id for s in store.simulations] == ["good"]

    def test_fractional_days_record_kept(self, sample_data, settings, clock):
        """A saved simulation with one odd value is repaired, not replaced."""
        data = sample_data.model_dump(mode="json", by_alias=True)
        data.update(daysWorked=180.5, tjm=900)
        record = {"id": "mine", "name": "Mienne", "data": data, "updatedAt": 7}
        storage = CountingStorage(
            {SIMULATIONS_KEY: json.dumps([record]), ACTIVE_SIMULATION_KEY: "mine"}
        )
        store = SimulationStore.open(storage, settings=settings, clock=clock)

        assert [s.id for s in store.simulations] == ["mine"]
        assert store.active.data.days_worked == 180
        assert store.active.data.tjm == 900
        assert store.active.data.deductible_charges == sample_data.deductible_charges
        assert stored_simulations(storage)[0]["id"] == "mine"

    def test_out_of_range_values_repaired(self, settings, clock):
        record = {
            "id": "wide",
            "name": "Large",
            "data": {"daysWorked": 400, "employerContribRate": 1.2, "tjm": "lots"},
            "updatedAt": 1,
        }
        storage = CountingStorage({SIMULATIONS_KEY: json.dumps([record])})
        store = SimulationStore.open(storage, settings=settings, clock=clock)

        data = store.get("wide").data
        assert data.days_worked == 366
        assert data.employer_contrib_rate == 1.0
        assert data.tjm == DEFAULT_SIMULATION_DATA.tjm

    def test_incomplete_record_fields_repaired(self, settings, clock):
        payload = [
            {"id": "no-name", "data": {"tjm": 700}, "updatedAt": 3},
            {"name": "Sans id", "data": [1, 2], "updatedAt": "n/a"},
        ]
        storage = CountingStorage({SIMULATIONS_KEY: json.dumps(payload)})
        store = SimulationStore.open(storage, settings=settings, clock=clock)

        first, second = store.simulations
        assert (first.id, first.name, first.updated_at) == ("no-name", "Simulation 1", 3)
        assert first.data.tjm == 700
        assert second.id and second.id != "no-name"
        assert second.name == "Sans id"
        assert second.data == DEFAULT_SIMULATION_DATA

    def test_duplicate_ids_dropped(self, sample_data, settings, clock):
        first = Simulation(id="dup", name="A", data=sample_data)
        second = Simulation(id="dup", name="B", data=sample_data)
        store = SimulationStore.open(seeded_storage(first, second), settings=settings, clock=clock)
        assert [s.name for s in store.simulations] == ["A"]

    def test_stored_active_id_restored(self, sample_data, settings, clock):
        a = Simulation(id="a", name="A", data=DEFAULT_SIMULATION_DATA)
        b = Simulation(id="b", name="B", data=sample_data)
        live = LiveState()
        store = SimulationStore.open(seeded_storage(a, b, active_id="b"), live, settings=settings, clock=clock)
        assert store.active_id == "b"
        assert live.snapshot == sample_data

    def test_unknown_active_id_falls_back_to_first(self, sample_data, settings, clock):
        a = Simulation(id="a", name="A", data=sample_data)
        b = Simulation(id="b", name="B", data=DEFAULT_SIMULATION_DATA)
        storage = seeded_storage(a, b, active_id="ghost")
        store = SimulationStore.open(storage, settings=settings, clock=clock)
        assert store.active_id == "a"
        assert storage.get_item(ACTIVE_SIMULATION_KEY) == "a"

    def test_partial_record_normalized(self, sample_data, settings, clock):
        """A record from an older shape is completed from defaults."""
        record = Simulation(id="old", name="Ancienne", data=sample_data, updated_at=5).model_dump(
            mode="json", by_alias=True
        )
        del record["data"]["dividendFlatTaxRate"]
        storage = CountingStorage({SIMULATIONS_KEY: json.dumps([record])})
        store = SimulationStore.open(storage, settings=settings, clock=clock)

        data = store.get("old").data
        assert data.dividend_flat_tax_rate == 0.3
        assert data.tjm == sample_data.tjm
        assert data.deductible_charges == sample_data.deductible_charges
        assert store.get("old").updated_at == 5

    def test_read_failure_falls_back(self, settings, clock):
        storage = FailingStorage(fail_reads=True, fail_writes=True)
        store = SimulationStore.open(storage, settings=settings, clock=clock)
        assert len(store.simulations) == 1

    def test_existing_collection_not_rewritten(self, sample_data, settings, clock):
        a = Simulation(id="a", name="A", data=sample_data)
        storage = seeded_storage(a, active_id="a")
        SimulationStore.open(storage, settings=settings, clock=clock)
        assert storage.writes == {}


class TestSync:
    """Tests for the write-back dirty check."""

    def test_identical_data_untouched(self, store, storage):
        before = store.active
        storage.writes.clear()
        copy = DEFAULT_SIMULATION_DATA.model_validate(DEFAULT_SIMULATION_DATA.model_dump())
        assert store.sync(copy) is False
        assert store.active is before
        assert storage.writes == {}

    def test_changed_data_written_back(self, store, storage, sample_data, clock):
        before = store.active.updated_at
        assert store.sync(sample_data) is True
        assert store.active.data == sample_data
        assert store.active.updated_at > before
        assert stored_simulations(storage)[0]["data"]["tjm"] == 500

    def test_live_edits_written_back_automatically(self, store, live):
        live.update(lambda d: d.with_values(tjm=700))
        assert store.active.data.tjm == 700

    def test_repeated_identical_edits_write_once(self, store, live, storage):
        storage.writes.clear()
        live.set(DEFAULT_SIMULATION_DATA.with_values(tjm=700))
        live.set(DEFAULT_SIMULATION_DATA.with_values(tjm=700))
        assert storage.writes[SIMULATIONS_KEY] == 1

    def test_write_failure_is_not_raised(self, sample_data, settings, clock):
        storage = FailingStorage(fail_writes=True)
        live = LiveState()
        store = SimulationStore.open(storage, live, settings=settings, clock=clock)
        live.set(sample_data)
        assert store.active.data == sample_data
        assert live.results.annual_turnover == 100000
        assert store.persist() is False

    def test_sync_reports_update_when_write_fails(self, sample_data, settings, clock):
        storage = FailingStorage(fail_writes=True)
        store = SimulationStore.open(storage, settings=settings, clock=clock)
        attempts = storage.write_attempts
        assert store.sync(sample_data) is True
        assert store.active.data == sample_data
        assert storage.write_attempts > attempts

    def test_failed_active_id_write_reloads_previous(self, settings, clock):
        """The collection is saved even when the active id write fails."""
        storage = FailingKeyStorage()
        store = SimulationStore.open(storage, settings=settings, clock=clock)
        first_id = store.active_id

        storage.failing_keys.add(ACTIVE_SIMULATION_KEY)
        created = store.create("Variante")
        assert store.persist() is False

        reloaded = SimulationStore.open(storage, settings=settings, clock=clock)
        assert [s.id for s in reloaded.simulations] == [first_id, created.id]
        assert reloaded.active_id == first_id


class TestSelect:
    """Tests for switching the active simulation."""

    def test_select_applies_stored_data(self, store, live, sample_data):
        first_id = store.active_id
        live.set(sample_data)
        second = store.create("Deuxième")
        live.update(lambda d: d.with_values(tjm=900))

        assert store.select(first_id) is True
        assert store.active_id == first_id
        assert live.snapshot == sample_data
        # Edits made before switching were kept
        assert store.get(second.id).data.tjm == 900

    def test_select_persists_active_id(self, store, storage):
        first_id = store.active_id
        store.create("B")
        store.select(first_id)
        assert storage.get_item(ACTIVE_SIMULATION_KEY) == first_id

    def test_select_does_not_bump_target(self, store):
        first = store.active
        store.create("B")
        store.select(first.id)
        assert store.active.updated_at == first.updated_at

    def test_select_unknown(self, store):
        active = store.active_id
        assert store.select("ghost") is False
        assert store.active_id == active

    def test_select_current_is_noop(self, store, storage):
        storage.writes.clear()
        assert store.select(store.active_id) is True
        assert storage.writes == {}


class TestCreate:
    """Tests for creating simulations."""

    def test_create_from_live_data(self, store, live, sample_data, clock):
        live.set(sample_data)
        created = store.create("Scénario B")
        assert created.name == "Scénario B"
        assert created.data == sample_data
        assert created.updated_at == clock.now
        assert store.active_id == created.id
        assert len(store.simulations) == 2
        assert len({s.id for s in store.simulations}) == 2

    def test_blank_name_uses_convention(self, store):
        assert store.create("  ").name == "Simulation 2"
        assert store.create().name == "Simulation 3"

    def test_next_name_skips_taken(self, store):
        store.rename(store.active_id, "Simulation 2")
        assert store.next_name() == "Simulation 3"


class TestRename:
    """Tests for renaming."""

    def test_rename(self, store, storage):
        sim_id = store.active_id
        before = store.active.updated_at
        assert store.rename(sim_id, "  Mission Lyon ") is True
        assert store.active.name == "Mission Lyon"
        assert store.active.updated_at > before
        assert stored_simulations(storage)[0]["name"] == "Mission Lyon"

    @pytest.mark.parametrize("name", ["", "   ", "Simulation 1"])
    def test_rejected_names(self, store, storage, name):
        storage.writes.clear()
        assert store.rename(store.active_id, name) is False
        assert store.active.name == "Simulation 1"
        assert storage.writes == {}

    def test_rename_unknown(self, store):
        assert store.rename("ghost", "X") is False


class TestDelete:
    """Tests for deletion."""

    def test_delete_last_recreates_from_live(self, store, live, sample_data):
        live.set(sample_data)
        old_id = store.active_id
        assert store.delete(old_id) is True
        assert len(store.simulations) == 1
        assert store.active_id != old_id
        assert store.active.data == sample_data
        assert live.snapshot == sample_data

    def test_delete_active_activates_first(self, store, live, sample_data):
        first_id = store.active_id
        live.set(sample_data)
        second = store.create("B")
        live.update(lambda d: d.with_values(tjm=1))
        store.delete(second.id)
        assert store.active_id == first_id
        assert live.snapshot == sample_data

    def test_delete_inactive_keeps_active(self, store):
        first_id = store.active_id
        second = store.create("B")
        store.delete(first_id)
        assert store.active_id == second.id
        assert [s.id for s in store.simulations] == [second.id]

    def test_delete_persists(self, store, storage):
        second = store.create("B")
        store.delete(second.id)
        assert [s["id"] for s in stored_simulations(storage)] == [store.active_id]

    def test_delete_unknown(self, store):
        assert store.delete("ghost") is False
        assert len(store.simulations) == 1


class TestAccessors:
    def test_get_unknown_raises(self, store):
        with pytest.raises(SimulationNotFoundError):
            store.get("ghost")

    def test_close_stops_write_back(self, store, live):
        store.close()
        live.set(DEFAULT_SIMULATION_DATA.with_values(tjm=1))
        assert store.active.data.tjm == DEFAULT_SIMULATION_DATA.tjm
