"""Comparison and export of saved simulations.

Builds a side-by-side results table and writes the collection, with computed
results, to timestamped JSON files.
"""

import json
import os
from datetime import datetime
from typing import Any, Dict, Iterable, Optional

import pandas as pd

from sasu_sim.core.logging import get_logger
from sasu_sim.domain.calculator.income import compute_results
from sasu_sim.domain.models.simulation import Simulation

log = get_logger(__name__)

# Headline results shown in the comparison table, with French column labels
COMPARISON_COLUMNS: Dict[str, str] = {
    "annual_turnover": "CA HT",
    "total_payroll_cost": "Coût rémunération",
    "result_before_tax": "Résultat avant IS",
    "corporate_tax": "IS",
    "net_dividends": "Dividendes nets",
    "net_salary_after_withholding": "Net après PAS",
    "total_take_home": "Revenu net total",
}


def comparison_table(simulations: Iterable[Simulation]) -> pd.DataFrame:
    """One row per simulation with its headline results.

    Args:
        simulations: Saved simulations, in display order

    Returns:
        DataFrame indexed by simulation name, columns labelled in French
    """
    rows = []
    for simulation in simulations:
        results = compute_results(simulation.data)
        row = {"Simulation": simulation.name}
        row.update({label: getattr(results, field) for field, label in COMPARISON_COLUMNS.items()})
        rows.append(row)

    df = pd.DataFrame(rows, columns=["Simulation", *COMPARISON_COLUMNS.values()])
    return df.set_index("Simulation")


class SimulationExporter:
    """Writes simulations and their results to JSON files."""

    def __init__(self, output_dir: str = "results"):
        """Initialize exporter.

        Args:
            output_dir: Directory where exports are written.
        """
        self.output_dir = str(output_dir)

    def _ensure_dir(self) -> None:
        if not os.path.exists(self.output_dir):
            os.makedirs(self.output_dir)
            log.info("created_output_directory", path=self.output_dir)

    def build_payload(
        self,
        simulations: Iterable[Simulation],
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Serializable export content: stored shape plus computed results."""
        entries = [
            {
                **simulation.model_dump(mode="json", by_alias=True),
                "results": compute_results(simulation.data).model_dump(mode="json", by_alias=True),
            }
            for simulation in simulations
        ]
        return {
            "metadata": {
                "timestamp": datetime.now().isoformat(),
                "count": len(entries),
                **(metadata or {}),
            },
            "simulations": entries,
        }

    def save(
        self,
        simulations: Iterable[Simulation],
        prefix: str = "simulations",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> str:
        """Save simulations to a timestamped JSON file.

        Returns:
            Path to the saved file.
        """
        self._ensure_dir()
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filepath = os.path.join(self.output_dir, f"{prefix}_{timestamp}.json")
        payload = self.build_payload(simulations, metadata)

        try:
            with open(filepath, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
        except OSError as e:
            log.error("export_failed", path=filepath, error=str(e))
            raise

        log.info("simulations_exported", path=filepath, count=payload["metadata"]["count"])
        return filepath
