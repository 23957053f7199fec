"""Result display components."""

from __future__ import annotations

import streamlit as st

from sasu_sim.domain.models.results import SimulationResults
from sasu_sim.domain.models.simulation import SimulationData
from sasu_sim.ui.helpers import format_euro, format_rate


def render_payroll_details(results: SimulationResults) -> None:
    """Net to employer cost breakdown of the salary."""
    rows = [
        ("Net annuel", results.annual_net_salary),
        ("Salaire brut annuel", results.annual_gross_salary),
        ("Charges patronales", results.annual_employer_contribution),
        ("Coût total de la rémunération", results.total_payroll_cost),
        ("Net après PAS", results.net_salary_after_withholding),
    ]
    for label, value in rows:
        left, right = st.columns([3, 2])
        left.write(label)
        right.write(f"**{format_euro(value)}**")


def render_kpi_summary(results: SimulationResults) -> None:
    """Headline annual results."""
    st.subheader("📊 Résultats annuels")
    cols = st.columns(5)
    cols[0].metric("Résultat avant IS", format_euro(results.result_before_tax))
    cols[1].metric("IS dû", format_euro(results.corporate_tax))
    cols[2].metric("Résultat distribuable", format_euro(results.distributable_result))
    cols[3].metric("Dividendes nets (PFU)", format_euro(results.net_dividends))
    cols[4].metric(
        "Revenu net total",
        format_euro(results.total_take_home),
        help=f"Soit {format_euro(results.monthly_take_home)} par mois",
    )
    st.caption(
        "Le revenu net total additionne la rémunération nette après prélèvement à la source "
        "et les dividendes après PFU. Montants en euros, arrondis à l'unité."
    )


def render_methodology_notes(data: SimulationData) -> None:
    """Assumptions behind the figures."""
    with st.expander("📝 Notes méthodologiques", expanded=False):
        st.markdown(
            f"""
Hypothèses simplifiées pour une SASU avec président assimilé salarié :

- Charges sociales : {format_rate(data.employee_contrib_rate)} salariales (net → brut)
  et {format_rate(data.employer_contrib_rate)} patronales.
- IS : {format_rate(data.corporate_tax_reduced_rate)} jusqu'à {format_euro(data.corporate_tax_threshold)}
  de bénéfice, {format_rate(data.corporate_tax_normal_rate)} au-delà. Aucun IS en cas de perte.
- Dividendes : soumis au PFU de {format_rate(data.dividend_flat_tax_rate)} sans abattement.
- Le taux de prélèvement à la source s'applique au net annuel.
- Le calcul exclut la TVA et les éventuels acomptes/provisions (URSSAF, IS).
"""
        )
