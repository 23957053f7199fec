"""UI helper functions for Streamlit.

Formatting of euros and rates, and conversion of percent inputs.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sasu_sim.domain.models.simulation import coerce_number


def format_euro(value: float | None, decimals: int = 0) -> str:
    """Format a number as Euro currency.

    Args:
        value: Amount to format
        decimals: Number of decimal places

    Returns:
        Formatted string like "117 000 €"
    """
    if value is None:
        return "—"
    if decimals == 0:
        return f"{int(round(value)):,}".replace(",", " ") + " €"
    return f"{value:,.{decimals}f}".replace(",", " ") + " €"


def format_rate(rate: float | None, decimals: int = 1) -> str:
    """Format a fraction as a percentage: 0.11 -> "11.0 %"."""
    if rate is None:
        return "—"
    return f"{rate * 100:.{decimals}f} %"


def rate_to_pct(rate: float) -> float:
    """Fraction to percent for display in a number input."""
    return round(rate * 100.0, 4)


def pct_to_rate(value: Any, upper: float = 1.0) -> float:
    """Percent input (number or text) to a fraction within [0, upper]."""
    rate = coerce_number(value) / 100.0
    return min(upper, max(0.0, rate))


def format_timestamp(epoch_ms: int) -> str:
    """Epoch milliseconds to a local "dd/mm/YYYY HH:MM" string."""
    return datetime.fromtimestamp(epoch_ms / 1000).strftime("%d/%m/%Y %H:%M")


def format_amount_input(amount: float) -> str:
    """Amount as editable text: "1800", "99.5"; empty for 0."""
    if not amount:
        return ""
    return f"{amount:.2f}".rstrip("0").rstrip(".")
