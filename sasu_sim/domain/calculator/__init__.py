"""Computation graph and derived analyses."""

from .income import (
    calculate_corporate_tax,
    calculate_gross_salary,
    calculate_net_dividends,
    calculate_total_deductibles,
    compute_results,
)
from .sensitivity import SENSITIVITY_PARAMETERS, run_sensitivity

__all__ = [
    "calculate_corporate_tax",
    "calculate_gross_salary",
    "calculate_net_dividends",
    "calculate_total_deductibles",
    "compute_results",
    "SENSITIVITY_PARAMETERS",
    "run_sensitivity",
]
