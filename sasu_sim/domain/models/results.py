"""Derived results model.

Every field is computed from a ``SimulationData`` snapshot by
``sasu_sim.domain.calculator.income.compute_results``; results are never
persisted.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, computed_field
from pydantic.alias_generators import to_camel


class SimulationResults(BaseModel):
    """Annual figures derived from one input snapshot, in €."""

    # Activity
    annual_turnover: float = Field(..., description="Chiffre d'affaires HT")

    # Payroll
    annual_net_salary: float = Field(..., description="Net annuel")
    annual_gross_salary: float = Field(..., description="Brut annuel")
    annual_employer_contribution: float = Field(..., description="Charges patronales")
    total_payroll_cost: float = Field(..., description="Coût total de la rémunération")

    # Company result
    total_deductibles: float = Field(..., description="Total des charges déductibles")
    result_before_tax: float = Field(..., description="Résultat avant IS, may be negative")
    corporate_tax: float = Field(..., ge=0, description="IS dû")
    distributable_result: float = Field(..., description="Résultat distribuable, may be negative")

    # Take-home
    net_dividends: float = Field(..., ge=0, description="Dividendes nets de PFU")
    net_salary_after_withholding: float = Field(..., description="Net après PAS")
    total_take_home: float = Field(..., description="Revenu net total")

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "frozen": True,
    }

    @computed_field
    @property
    def monthly_take_home(self) -> float:
        """Total take-home spread over twelve months."""
        return self.total_take_home / 12.0
