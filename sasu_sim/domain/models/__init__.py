"""Data models for sasu_sim."""

from .results import SimulationResults
from .simulation import (
    DEFAULT_SIMULATION_DATA,
    EMPLOYEE_CONTRIB_RATE,
    EMPLOYER_CONTRIB_RATE,
    MAX_DAYS_WORKED,
    DeductibleCharge,
    Simulation,
    SimulationData,
    coerce_number,
    data_equals,
    parse_number,
    with_defaults,
)

__all__ = [
    "DEFAULT_SIMULATION_DATA",
    "EMPLOYEE_CONTRIB_RATE",
    "EMPLOYER_CONTRIB_RATE",
    "MAX_DAYS_WORKED",
    "DeductibleCharge",
    "Simulation",
    "SimulationData",
    "SimulationResults",
    "coerce_number",
    "data_equals",
    "parse_number",
    "with_defaults",
]
