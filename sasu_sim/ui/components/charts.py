"""Chart components for visualization."""

from __future__ import annotations

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from sasu_sim.domain.calculator.sensitivity import RESULT_COLUMNS, SENSITIVITY_PARAMETERS
from sasu_sim.domain.models.results import SimulationResults


def build_income_waterfall(results: SimulationResults) -> go.Figure:
    """Waterfall from turnover down to the officer's take-home income."""
    steps = [
        ("CA HT", results.annual_turnover, "absolute"),
        ("Rémunération chargée", -results.total_payroll_cost, "relative"),
        ("Charges déductibles", -results.total_deductibles, "relative"),
        ("IS", -results.corporate_tax, "relative"),
        ("Résultat distribuable", results.distributable_result, "total"),
        ("PFU", results.net_dividends - results.distributable_result, "relative"),
        ("Net après PAS", results.net_salary_after_withholding, "relative"),
        ("Revenu net total", results.total_take_home, "total"),
    ]
    fig = go.Figure(go.Waterfall(
        x=[label for label, _, _ in steps],
        y=[value for _, value, _ in steps],
        measure=[measure for _, _, measure in steps],
        connector=dict(line=dict(color="#888")),
        increasing=dict(marker=dict(color="#28a745")),
        decreasing=dict(marker=dict(color="#dc3545")),
        totals=dict(marker=dict(color="#17a2b8")),
    ))
    fig.update_layout(
        title="Du chiffre d'affaires au revenu net",
        yaxis_title="€ / an",
        showlegend=False,
        margin=dict(l=20, r=20, t=50, b=20),
    )
    return fig


def render_income_waterfall(results: SimulationResults) -> None:
    st.plotly_chart(build_income_waterfall(results), use_container_width=True)


def render_sensitivity_chart(df: pd.DataFrame, parameter: str) -> None:
    """Take-home components against the varied input."""
    if df is None or df.empty:
        st.warning("Pas de données de sensibilité disponibles.")
        return

    fig = go.Figure()
    for column, label in RESULT_COLUMNS.items():
        fig.add_trace(go.Scatter(
            x=df[parameter],
            y=df[column],
            name=label,
            mode="lines+markers",
            line=dict(width=3 if column == "total_take_home" else 1.5),
        ))
    fig.update_layout(
        xaxis_title=SENSITIVITY_PARAMETERS.get(parameter, parameter),
        yaxis_title="€ / an",
        hovermode="x unified",
        margin=dict(l=20, r=20, t=30, b=20),
    )
    st.plotly_chart(fig, use_container_width=True)


def render_comparison_table(df: pd.DataFrame) -> None:
    """Side-by-side results of all saved simulations."""
    if df.empty:
        st.info("Aucune simulation enregistrée.")
        return
    st.dataframe(df.style.format("{:,.0f} €"), use_container_width=True)
