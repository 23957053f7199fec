"""Main page rendering.

Composes the input cards, results and analyses. Edits are pushed to the
live state, which writes them back to the active simulation.
"""

from __future__ import annotations

import streamlit as st

from sasu_sim.application.services.store import SimulationStore
from sasu_sim.core.settings import get_settings
from sasu_sim.domain.calculator.income import calculate_total_deductibles
from sasu_sim.domain.calculator.sensitivity import SENSITIVITY_PARAMETERS, run_sensitivity
from sasu_sim.services.exporter import comparison_table
from sasu_sim.ui.components.charts import (
    render_comparison_table,
    render_income_waterfall,
    render_sensitivity_chart,
)
from sasu_sim.ui.components.inputs import (
    render_activity_inputs,
    render_assumptions,
    render_charges_editor,
    render_salary_inputs,
)
from sasu_sim.ui.components.results import (
    render_kpi_summary,
    render_methodology_notes,
    render_payroll_details,
)
from sasu_sim.ui.helpers import format_euro


def render_header() -> None:
    """Render page header."""
    st.title("🧮 Simulateur de revenus SASU")
    st.caption(
        "Paramétrez vos données (TJM, jours, salaire net visé et charges déductibles) pour estimer "
        "la rémunération nette et les dividendes après IS et PFU."
    )


def render_inputs(store: SimulationStore) -> None:
    """Draw all input cards and push the edited snapshot live."""
    live = store.live
    data = live.snapshot

    col_left, col_right = st.columns(2)
    with col_left:
        with st.container(border=True):
            data = render_activity_inputs(store, data, live.results)
        with st.container(border=True):
            data = render_salary_inputs(store, data)
            render_payroll_details(live.results)
    with col_right:
        with st.container(border=True):
            data = render_charges_editor(store, data)
            st.write(f"Total charges : **{format_euro(calculate_total_deductibles(data.deductible_charges))}**")
        with st.container(border=True):
            data = render_assumptions(store, data)

    if data != live.snapshot:
        live.set(data)
        # Redraw so captions and details above reflect the edit
        st.rerun()


def render_sensitivity(store: SimulationStore) -> None:
    """Sensitivity of the take-home income to one input."""
    parameter = st.selectbox(
        "Paramètre",
        list(SENSITIVITY_PARAMETERS),
        format_func=SENSITIVITY_PARAMETERS.get,
        key="sensitivity_parameter",
    )
    delta = st.slider("Amplitude (±%)", 5, 80, 30, 5, key="sensitivity_delta")
    df = run_sensitivity(store.live.snapshot, parameter, delta, get_settings().sensitivity_steps)
    render_sensitivity_chart(df, parameter)


def render_main_page(store: SimulationStore) -> None:
    """Render the whole main page."""
    render_header()
    render_inputs(store)

    results = store.live.results
    render_kpi_summary(results)

    tab_waterfall, tab_sensitivity, tab_compare = st.tabs(
        ["Décomposition", "Sensibilité", "Comparaison des simulations"]
    )
    with tab_waterfall:
        render_income_waterfall(results)
    with tab_sensitivity:
        render_sensitivity(store)
    with tab_compare:
        render_comparison_table(comparison_table(store.simulations))

    render_methodology_notes(store.live.snapshot)
