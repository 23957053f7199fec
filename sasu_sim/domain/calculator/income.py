"""Take-home income calculations for a SASU officer.

The computation graph is an ordered pipeline: each derived value depends only
on the raw inputs and on values computed before it. Every function here is
pure.
"""

from __future__ import annotations

from collections.abc import Iterable

from sasu_sim.domain.models.results import SimulationResults
from sasu_sim.domain.models.simulation import DeductibleCharge, SimulationData

MONTHS_PER_YEAR = 12


def calculate_gross_salary(annual_net_salary: float, employee_contrib_rate: float) -> float:
    """Uplift a net salary to gross.

    Args:
        annual_net_salary: Annual net salary in €
        employee_contrib_rate: Employee-side contribution rate, fraction < 1

    Returns:
        Annual gross salary in €
    """
    return annual_net_salary / (1.0 - employee_contrib_rate)


def calculate_total_deductibles(charges: Iterable[DeductibleCharge]) -> float:
    """Sum charge amounts; no charges gives 0."""
    return sum((charge.amount for charge in charges), 0.0)


def calculate_corporate_tax(
    result_before_tax: float,
    threshold: float,
    reduced_rate: float,
    normal_rate: float,
) -> float:
    """Two-bracket corporate tax (IS).

    The part of the profit up to ``threshold`` is taxed at ``reduced_rate``,
    the rest at ``normal_rate``. A loss yields no tax and no rebate.

    Args:
        result_before_tax: Company result before IS in €, may be negative
        threshold: Ceiling of the reduced bracket in €
        reduced_rate: Reduced IS rate, fraction
        normal_rate: Normal IS rate, fraction

    Returns:
        Corporate tax due in €
    """
    taxable = max(0.0, result_before_tax)
    reduced_base = min(taxable, threshold)
    normal_base = max(0.0, taxable - threshold)
    return reduced_base * reduced_rate + normal_base * normal_rate


def calculate_net_dividends(distributable_result: float, flat_tax_rate: float) -> float:
    """Dividends after the flat tax (PFU), never negative."""
    return max(0.0, distributable_result * (1.0 - flat_tax_rate))


def compute_results(data: SimulationData) -> SimulationResults:
    """Evaluate the whole computation graph for one snapshot.

    Args:
        data: Input snapshot

    Returns:
        All derived annual figures
    """
    annual_turnover = data.tjm * data.days_worked
    annual_net_salary = data.monthly_net_salary * MONTHS_PER_YEAR
    annual_gross_salary = calculate_gross_salary(annual_net_salary, data.employee_contrib_rate)
    annual_employer_contribution = annual_gross_salary * data.employer_contrib_rate
    total_payroll_cost = annual_gross_salary + annual_employer_contribution
    total_deductibles = calculate_total_deductibles(data.deductible_charges)

    result_before_tax = annual_turnover - total_payroll_cost - total_deductibles
    corporate_tax = calculate_corporate_tax(
        result_before_tax,
        data.corporate_tax_threshold,
        data.corporate_tax_reduced_rate,
        data.corporate_tax_normal_rate,
    )
    # Unclamped: negative when the company runs at a loss
    distributable_result = result_before_tax - corporate_tax
    net_dividends = calculate_net_dividends(distributable_result, data.dividend_flat_tax_rate)

    # The withholding rate is labelled monthly but applies to the annual salary
    net_salary_after_withholding = annual_net_salary * (1.0 - data.monthly_income_tax_rate)
    total_take_home = net_salary_after_withholding + net_dividends

    return SimulationResults(
        annual_turnover=annual_turnover,
        annual_net_salary=annual_net_salary,
        annual_gross_salary=annual_gross_salary,
        annual_employer_contribution=annual_employer_contribution,
        total_payroll_cost=total_payroll_cost,
        total_deductibles=total_deductibles,
        result_before_tax=result_before_tax,
        corporate_tax=corporate_tax,
        distributable_result=distributable_result,
        net_dividends=net_dividends,
        net_salary_after_withholding=net_salary_after_withholding,
        total_take_home=total_take_home,
    )
