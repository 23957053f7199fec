"""Infrastructure services: storage and export."""

from .exporter import SimulationExporter, comparison_table
from .storage import JSONFileStorage, KeyValueStorage, MemoryStorage, create_storage

__all__ = [
    "SimulationExporter",
    "comparison_table",
    "JSONFileStorage",
    "KeyValueStorage",
    "MemoryStorage",
    "create_storage",
]
