"""Session state management for the Streamlit app.

Each browser session owns one ``SimulationStore`` and its ``LiveState``,
kept in ``st.session_state`` across reruns.
"""

from __future__ import annotations

import streamlit as st

from sasu_sim.application.services.live_state import LiveState
from sasu_sim.application.services.store import SimulationStore
from sasu_sim.core.logging import get_logger
from sasu_sim.core.settings import get_settings
from sasu_sim.services.storage import create_storage

STORE_KEY = "simulation_store"

log = get_logger(__name__)


def get_store() -> SimulationStore:
    """Session store, loaded from the configured storage on first access."""
    if STORE_KEY not in st.session_state:
        settings = get_settings()
        store = SimulationStore.open(create_storage(settings), LiveState(), settings=settings)
        st.session_state[STORE_KEY] = store
        log.info("session_store_opened", backend=settings.storage_backend)
    return st.session_state[STORE_KEY]


def widget_key(store: SimulationStore, name: str) -> str:
    """Widget key scoped to the active simulation.

    Switching simulation changes every key, so inputs are re-seeded from
    the newly active data instead of keeping the previous widget values.
    """
    return f"{name}__{store.active_id}"
