"""Pytest fixtures for sasu_sim tests."""

import os
import sys

import pytest

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sasu_sim.application.services.live_state import LiveState
from sasu_sim.application.services.store import SimulationStore
from sasu_sim.core.exceptions import StorageError
from sasu_sim.core.settings import AppSettings
from sasu_sim.domain.models.simulation import DeductibleCharge, SimulationData
from sasu_sim.services.storage import MemoryStorage


class FakeClock:
    """Deterministic epoch-ms clock advancing 1 s per call."""

    def __init__(self, start: int = 1_700_000_000_000):
        self.now = start

    def __call__(self) -> int:
        self.now += 1000
        return self.now


class FailingStorage(MemoryStorage):
    """Storage whose reads and/or writes always fail."""

    def __init__(self, fail_reads: bool = False, fail_writes: bool = True, initial=None):
        super().__init__(initial)
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes
        self.write_attempts = 0

    def get_item(self, key):
        if self.fail_reads:
            raise StorageError(key, "backend unavailable")
        return super().get_item(key)

    def set_item(self, key, value):
        self.write_attempts += 1
        if self.fail_writes:
            raise StorageError(key, "quota exceeded")
        super().set_item(key, value)


class FailingKeyStorage(MemoryStorage):
    """Storage whose writes fail for the given keys only."""

    def __init__(self, *failing_keys, initial=None):
        super().__init__(initial)
        self.failing_keys = set(failing_keys)

    def set_item(self, key, value):
        if key in self.failing_keys:
            raise StorageError(key, "write rejected")
        super().set_item(key, value)


class CountingStorage(MemoryStorage):
    """Memory storage counting writes per key."""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.writes = {}

    def set_item(self, key, value):
        self.writes[key] = self.writes.get(key, 0) + 1
        super().set_item(key, value)


@pytest.fixture
def settings():
    """Settings with the in-memory backend."""
    return AppSettings(storage_backend="memory")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sample_data():
    """Complete snapshot with round figures."""
    return SimulationData(
        tjm=500,
        days_worked=200,
        monthly_net_salary=3000,
        monthly_income_tax_rate=0.1,
        deductible_charges=(
            DeductibleCharge(id="c1", label="Logiciels", amount=1000),
            DeductibleCharge(id="c2", label="Comptable", amount=2000),
        ),
        corporate_tax_reduced_rate=0.15,
        corporate_tax_normal_rate=0.25,
        corporate_tax_threshold=42500,
        dividend_flat_tax_rate=0.3,
        employee_contrib_rate=0.2,
        employer_contrib_rate=0.4,
    )


@pytest.fixture
def storage():
    return CountingStorage()


@pytest.fixture
def live():
    return LiveState()


@pytest.fixture
def store(storage, live, settings, clock):
    """Store loaded from empty storage: one default simulation."""
    return SimulationStore.open(storage, live, settings=settings, clock=clock)
