"""Sensitivity of the take-home income to one input.

Re-runs the computation graph over a grid of values around the current one
and returns a table for charting.
"""

from __future__ import annotations

import numpy as np
import pandas as pd

from sasu_sim.core.exceptions import InvalidParameterError
from sasu_sim.domain.calculator.income import compute_results
from sasu_sim.domain.models.simulation import MAX_DAYS_WORKED, SimulationData

# Inputs that can be varied, with their French display labels
SENSITIVITY_PARAMETERS: dict[str, str] = {
    "tjm": "TJM HT (€)",
    "days_worked": "Jours facturés",
    "monthly_net_salary": "Salaire net mensuel (€)",
}

RESULT_COLUMNS: dict[str, str] = {
    "net_salary_after_withholding": "Net après PAS",
    "net_dividends": "Dividendes nets",
    "corporate_tax": "IS dû",
    "total_take_home": "Revenu net total",
}


def sensitivity_grid(center: float, delta_pct: float, steps: int) -> np.ndarray:
    """Evenly spaced non-negative values within ±delta_pct of center."""
    if steps < 2:
        raise InvalidParameterError("steps", steps, "at least 2 points are needed")
    if delta_pct < 0:
        raise InvalidParameterError("delta_pct", delta_pct, "must be non-negative")
    spread = abs(center) * delta_pct / 100.0
    grid = np.linspace(center - spread, center + spread, steps)
    return np.clip(grid, 0.0, None)


def run_sensitivity(
    data: SimulationData,
    parameter: str,
    delta_pct: float = 30.0,
    steps: int = 11,
) -> pd.DataFrame:
    """Take-home figures while one input moves around its current value.

    Args:
        data: Base snapshot; left untouched
        parameter: One of ``SENSITIVITY_PARAMETERS``
        delta_pct: Half-width of the range as a percentage of the current value
        steps: Number of grid points

    Returns:
        DataFrame with the varied input in the first column, then one column
        per entry of ``RESULT_COLUMNS``. Rows are sorted by the input.
    """
    if parameter not in SENSITIVITY_PARAMETERS:
        raise InvalidParameterError(
            "parameter", parameter, f"expected one of {sorted(SENSITIVITY_PARAMETERS)}"
        )

    grid = sensitivity_grid(float(getattr(data, parameter)), delta_pct, steps)
    if parameter == "days_worked":
        grid = np.unique(np.clip(np.rint(grid), 0, MAX_DAYS_WORKED).astype(int))

    rows = []
    for value in grid:
        variant = data.with_values(**{parameter: value.item()})
        results = compute_results(variant)
        rows.append({parameter: value.item(), **{k: getattr(results, k) for k in RESULT_COLUMNS}})

    return pd.DataFrame(rows, columns=[parameter, *RESULT_COLUMNS])
