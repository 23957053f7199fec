"""Simulation input data models.

A simulation is a named, saved set of parameters for one SASU take-home
estimate. Snapshots are immutable: every edit produces a new
``SimulationData`` so a stored snapshot can never change behind the store.
"""

from __future__ import annotations

import math
import time
import uuid
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

from sasu_sim.core.exceptions import InvalidParameterError

# Average 2025 rates for a "président assimilé salarié"
EMPLOYEE_CONTRIB_RATE = 0.225  # charges salariales, net -> brut
EMPLOYER_CONTRIB_RATE = 0.433  # charges patronales

NEW_CHARGE_LABEL = "Nouvelle charge"
MAX_DAYS_WORKED = 366

_MODEL_CONFIG = {
    "alias_generator": to_camel,
    "populate_by_name": True,
    "frozen": True,
}


def new_id() -> str:
    """Opaque unique identifier for charges and simulations."""
    return uuid.uuid4().hex


def now_ms() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


def parse_number(value: Any) -> float | None:
    """Read a finite number from raw input, or None when there is none.

    Accepts numbers and numeric text with French conventions (``"1 800,50"``).
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        cleaned = "".join(value.split()).replace(",", ".")
        try:
            number = float(cleaned)
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def coerce_number(value: Any) -> float:
    """Coerce raw user input to a float, falling back to 0.

    Anything :func:`parse_number` cannot read, including NaN and
    infinities, is 0.
    """
    number = parse_number(value)
    return 0.0 if number is None else number


class DeductibleCharge(BaseModel):
    """A company expense deducted before corporate tax."""

    id: str = Field(default_factory=new_id, min_length=1, description="Opaque unique id")
    label: str = Field(default="", description="Display label")
    amount: float = Field(default=0.0, ge=0, description="Annual amount in €")

    model_config = _MODEL_CONFIG

    @field_validator("amount", mode="before")
    @classmethod
    def clamp_amount(cls, v: Any) -> float:
        """Coerce non-numeric amounts to 0 and clamp negatives."""
        return max(0.0, coerce_number(v))


class SimulationData(BaseModel):
    """Live input snapshot for the computation graph.

    All rates are fractions of 1 (0.15 means 15 %).
    """

    # Activity
    tjm: float = Field(..., ge=0, description="Daily billing rate in €")
    days_worked: int = Field(..., ge=0, le=MAX_DAYS_WORKED, description="Days billed in the year")

    # Salary
    monthly_net_salary: float = Field(..., ge=0, description="Target monthly net salary in €")
    monthly_income_tax_rate: float = Field(..., ge=0, le=1, description="Withholding tax rate")

    # Expenses
    deductible_charges: tuple[DeductibleCharge, ...] = Field(
        default=(), description="Deductible charges, in display order"
    )

    # Corporate tax (IS) and dividends (PFU)
    corporate_tax_reduced_rate: float = Field(..., ge=0, le=1)
    corporate_tax_normal_rate: float = Field(..., ge=0, le=1)
    corporate_tax_threshold: float = Field(..., ge=0, description="Reduced-rate ceiling in €")
    dividend_flat_tax_rate: float = Field(..., ge=0, le=1)

    # Social contributions; the employee rate must stay below 1 (net -> gross division)
    employee_contrib_rate: float = Field(default=EMPLOYEE_CONTRIB_RATE, ge=0, lt=1)
    employer_contrib_rate: float = Field(default=EMPLOYER_CONTRIB_RATE, ge=0, le=1)

    model_config = _MODEL_CONFIG

    def with_values(self, **changes: Any) -> SimulationData:
        """Return a validated copy with the given fields replaced."""
        return SimulationData.model_validate({**dict(self), **changes})

    def add_charge(self, label: str = NEW_CHARGE_LABEL, amount: float = 0.0) -> SimulationData:
        """Append a new charge with a fresh id."""
        charge = DeductibleCharge(label=label, amount=amount)
        return self.with_values(deductible_charges=(*self.deductible_charges, charge))

    def update_charge(
        self,
        charge_id: str,
        *,
        label: str | None = None,
        amount: Any = None,
    ) -> SimulationData:
        """Edit the label and/or amount of one charge.

        ``amount`` may be raw input text; it is coerced to a number.
        Unknown ids leave the snapshot unchanged.
        """
        changed = False
        charges = []
        for charge in self.deductible_charges:
            if charge.id == charge_id:
                update: dict[str, Any] = {}
                if label is not None:
                    update["label"] = label
                if amount is not None:
                    update["amount"] = amount
                charge = DeductibleCharge.model_validate({**dict(charge), **update})
                changed = True
            charges.append(charge)
        if not changed:
            return self
        return self.with_values(deductible_charges=tuple(charges))

    def remove_charge(self, charge_id: str) -> SimulationData:
        """Drop the charge with the given id."""
        charges = tuple(c for c in self.deductible_charges if c.id != charge_id)
        if len(charges) == len(self.deductible_charges):
            return self
        return self.with_values(deductible_charges=charges)


class Simulation(BaseModel):
    """A named, saved parameter set."""

    id: str = Field(default_factory=new_id, min_length=1)
    name: str = Field(..., description="Display name")
    data: SimulationData
    updated_at: int = Field(default_factory=now_ms, description="Last change, epoch ms")

    model_config = _MODEL_CONFIG


DEFAULT_SIMULATION_DATA = SimulationData(
    tjm=650,
    days_worked=180,
    monthly_net_salary=3800,
    monthly_income_tax_rate=0.11,
    deductible_charges=(
        DeductibleCharge(label="Logiciels et abonnements", amount=1800),
        DeductibleCharge(label="Matériel et amortissements", amount=2200),
        DeductibleCharge(label="Frais de déplacement", amount=1200),
    ),
    corporate_tax_reduced_rate=0.15,
    corporate_tax_normal_rate=0.25,
    corporate_tax_threshold=42500,
    dividend_flat_tax_rate=0.3,
    employee_contrib_rate=EMPLOYEE_CONTRIB_RATE,
    employer_contrib_rate=EMPLOYER_CONTRIB_RATE,
)

SCALAR_FIELDS: tuple[str, ...] = tuple(
    name for name in SimulationData.model_fields if name != "deductible_charges"
)


# Accepted range of each scalar field; None means unbounded
_SCALAR_BOUNDS: dict[str, tuple[float, float | None]] = {
    "tjm": (0.0, None),
    "days_worked": (0.0, MAX_DAYS_WORKED),
    "monthly_net_salary": (0.0, None),
    "monthly_income_tax_rate": (0.0, 1.0),
    "corporate_tax_reduced_rate": (0.0, 1.0),
    "corporate_tax_normal_rate": (0.0, 1.0),
    "corporate_tax_threshold": (0.0, None),
    "dividend_flat_tax_rate": (0.0, 1.0),
    "employee_contrib_rate": (0.0, None),
    "employer_contrib_rate": (0.0, 1.0),
}


def _repair_scalar(name: str, value: Any) -> float | int:
    default = getattr(DEFAULT_SIMULATION_DATA, name)
    number = parse_number(value)
    if number is None:
        return default

    low, high = _SCALAR_BOUNDS[name]
    number = max(low, number)
    if high is not None:
        number = min(high, number)
    # No valid clamp exists: the rate must stay strictly below 1
    if name == "employee_contrib_rate" and number >= 1:
        return default
    if name == "days_worked":
        return int(round(number))
    return number


def _repair_charges(value: Any) -> tuple[DeductibleCharge, ...]:
    if not isinstance(value, (list, tuple)):
        return ()
    charges = []
    for entry in value:
        if isinstance(entry, DeductibleCharge):
            charges.append(entry)
            continue
        if not isinstance(entry, Mapping):
            continue
        fields: dict[str, Any] = {"amount": entry.get("amount")}
        if isinstance(entry.get("id"), str) and entry["id"]:
            fields["id"] = entry["id"]
        label = entry.get("label")
        fields["label"] = "" if label is None else str(label)
        charges.append(DeductibleCharge.model_validate(fields))
    return tuple(charges)


def with_defaults(raw: SimulationData | Mapping[str, Any] | None) -> SimulationData:
    """Complete and repair a possibly partial snapshot.

    Absent, null or non-numeric fields take the default value. Numbers
    outside their range are clamped into it and fractional days are rounded;
    an employee rate of 100 % or more, which has no valid clamp, takes the
    default. An absent or empty charge list (after dropping entries that are
    not objects) is replaced by the whole default list. Keys may be camelCase
    (stored shape) or snake_case. Normalizing a complete snapshot returns an
    equal one.

    Raises:
        InvalidParameterError: ``raw`` is neither a mapping nor a snapshot.
    """
    if isinstance(raw, SimulationData):
        raw = dict(raw)
    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        raise InvalidParameterError("data", type(raw).__name__, "expected a mapping")

    merged: dict[str, Any] = {}
    for name, field in SimulationData.model_fields.items():
        alias = field.alias or name
        value = raw.get(alias)
        if value is None:
            value = raw.get(name)
        if name == "deductible_charges":
            merged[name] = _repair_charges(value) or DEFAULT_SIMULATION_DATA.deductible_charges
        else:
            merged[name] = _repair_scalar(name, value)

    return SimulationData.model_validate(merged)


def data_equals(left: SimulationData, right: SimulationData) -> bool:
    """Structural equality used by the write-back dirty check.

    Every scalar field must match, and charges must match position by
    position on id, label and amount.
    """
    if any(getattr(left, name) != getattr(right, name) for name in SCALAR_FIELDS):
        return False
    if len(left.deductible_charges) != len(right.deductible_charges):
        return False
    return all(
        a.id == b.id and a.label == b.label and a.amount == b.amount
        for a, b in zip(left.deductible_charges, right.deductible_charges)
    )
