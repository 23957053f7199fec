"""Input cards for the live parameter set.

Each ``render_*`` function draws its widgets and returns the snapshot with
the user's edits applied. Widget keys are scoped to the active simulation.
"""

from __future__ import annotations

import streamlit as st

from sasu_sim.application.services.store import SimulationStore
from sasu_sim.domain.models.results import SimulationResults
from sasu_sim.domain.models.simulation import MAX_DAYS_WORKED, SimulationData
from sasu_sim.ui.helpers import format_amount_input, format_euro, pct_to_rate, rate_to_pct
from sasu_sim.ui.state import widget_key


def _pct_input(store: SimulationStore, label: str, name: str, rate: float, upper: float = 100.0) -> float:
    # Widget ceiling may sit below a stored rate (employee rate just under 100 %)
    shown = min(rate_to_pct(rate), upper)
    value = st.number_input(
        f"{label} (%)",
        min_value=0.0,
        max_value=upper,
        value=shown,
        step=0.5,
        format="%.1f",
        key=widget_key(store, name),
    )
    if value == shown:
        return rate
    return pct_to_rate(value, upper=upper / 100.0)


def render_activity_inputs(store: SimulationStore, data: SimulationData, results: SimulationResults) -> SimulationData:
    """TJM and billed days."""
    st.subheader("📈 Données activité")
    tjm = st.number_input(
        "TJM HT (€)", min_value=0.0, value=float(data.tjm), step=10.0, key=widget_key(store, "tjm")
    )
    days = st.number_input(
        "Jours facturés dans l'année",
        min_value=0,
        max_value=MAX_DAYS_WORKED,
        value=int(data.days_worked),
        step=1,
        key=widget_key(store, "days_worked"),
    )
    st.caption(f"Chiffre d'affaires annuel estimé : {format_euro(results.annual_turnover)} HT")
    return data.with_values(tjm=tjm, days_worked=int(days))


def render_salary_inputs(store: SimulationStore, data: SimulationData) -> SimulationData:
    """Target net salary and withholding rate."""
    st.subheader("💶 Rémunération salariale")
    salary = st.number_input(
        "Salaire net mensuel visé (€)",
        min_value=0.0,
        value=float(data.monthly_net_salary),
        step=100.0,
        key=widget_key(store, "monthly_net_salary"),
    )
    withholding = _pct_input(
        store, "Taux de prélèvement à la source", "monthly_income_tax_rate", data.monthly_income_tax_rate
    )
    return data.with_values(monthly_net_salary=salary, monthly_income_tax_rate=withholding)


def render_charges_editor(store: SimulationStore, data: SimulationData) -> SimulationData:
    """Editable list of deductible charges."""
    header, add = st.columns([3, 1])
    header.subheader("🧾 Charges déductibles")
    if add.button("Ajouter", key=widget_key(store, "add_charge")):
        return data.add_charge()

    if not data.deductible_charges:
        st.caption("Ajoutez vos charges (logiciels, déplacements, matériel…).")

    for charge in data.deductible_charges:
        col_label, col_amount, col_remove = st.columns([3, 2, 1])
        label = col_label.text_input(
            "Libellé",
            value=charge.label,
            key=widget_key(store, f"charge_label_{charge.id}"),
            label_visibility="collapsed",
            placeholder="Nom de la charge",
        )
        # Free text: non-numeric input counts as 0
        amount = col_amount.text_input(
            "Montant",
            value=format_amount_input(charge.amount),
            key=widget_key(store, f"charge_amount_{charge.id}"),
            label_visibility="collapsed",
            placeholder="€",
        )
        if col_remove.button("✕", key=widget_key(store, f"charge_remove_{charge.id}")):
            return data.remove_charge(charge.id)
        data = data.update_charge(charge.id, label=label, amount=amount)

    return data


def render_assumptions(store: SimulationStore, data: SimulationData) -> SimulationData:
    """Contribution, corporate tax and dividend tax rates."""
    st.subheader("⚖️ Hypothèses SASU")
    employee = _pct_input(
        store, "Part salariale (net → brut)", "employee_contrib_rate", data.employee_contrib_rate, upper=99.0
    )
    employer = _pct_input(store, "Charges patronales", "employer_contrib_rate", data.employer_contrib_rate)
    reduced = _pct_input(store, "Taux réduit d'IS", "corporate_tax_reduced_rate", data.corporate_tax_reduced_rate)
    normal = _pct_input(store, "Taux normal d'IS", "corporate_tax_normal_rate", data.corporate_tax_normal_rate)
    threshold = st.number_input(
        "Plafond du taux réduit (€)",
        min_value=0.0,
        value=float(data.corporate_tax_threshold),
        step=500.0,
        key=widget_key(store, "corporate_tax_threshold"),
    )
    pfu = _pct_input(store, "PFU dividendes", "dividend_flat_tax_rate", data.dividend_flat_tax_rate)
    st.caption("Ajustez les taux pour refléter votre situation (ACRE, exonérations locales…).")
    return data.with_values(
        employee_contrib_rate=employee,
        employer_contrib_rate=employer,
        corporate_tax_reduced_rate=reduced,
        corporate_tax_normal_rate=normal,
        corporate_tax_threshold=threshold,
        dividend_flat_tax_rate=pfu,
    )
