"""Sidebar: management of saved simulations."""

from __future__ import annotations

import streamlit as st

from sasu_sim.application.services.store import SimulationStore
from sasu_sim.core.logging import get_logger
from sasu_sim.core.settings import get_settings
from sasu_sim.services.exporter import SimulationExporter
from sasu_sim.ui.helpers import format_timestamp
from sasu_sim.ui.state import widget_key

log = get_logger(__name__)


def render_simulation_selector(store: SimulationStore) -> None:
    """Pick the active simulation."""
    ids = [s.id for s in store.simulations]
    names = {s.id: s.name for s in store.simulations}
    selected = st.selectbox(
        "Simulation active",
        ids,
        index=ids.index(store.active_id),
        format_func=lambda sim_id: names[sim_id],
        key=widget_key(store, "simulation_select"),
    )
    if selected != store.active_id:
        store.select(selected)
        st.rerun()

    st.caption(f"Dernière modification : {format_timestamp(store.active.updated_at)}")


def render_simulation_actions(store: SimulationStore) -> None:
    """Create, rename and delete buttons."""
    new_name = st.text_input(
        "Nom",
        value=store.active.name,
        key=widget_key(store, "simulation_name"),
    )
    col_rename, col_new, col_delete = st.columns(3)

    if col_rename.button("Renommer", use_container_width=True):
        if store.rename(store.active_id, new_name):
            st.rerun()
        st.warning("Nom vide ou inchangé.")

    if col_new.button("Nouvelle", use_container_width=True, help="Copie des paramètres affichés"):
        store.create(store.next_name())
        st.rerun()

    if col_delete.button("Supprimer", use_container_width=True, type="secondary"):
        store.delete(store.active_id)
        st.rerun()


def render_export(store: SimulationStore) -> None:
    """Export all simulations with their results to JSON."""
    settings = get_settings()
    if not settings.enable_export:
        return
    if st.button("💾 Exporter les simulations", use_container_width=True):
        try:
            path = SimulationExporter(settings.export_dir).save(store.simulations)
        except OSError as e:
            st.error(f"Export impossible : {e}")
        else:
            st.success(f"Export enregistré : {path}")


def render_sidebar(store: SimulationStore) -> None:
    """Render the whole sidebar."""
    with st.sidebar:
        st.title("📁 Simulations")
        render_simulation_selector(store)
        render_simulation_actions(store)
        st.divider()
        render_export(store)
