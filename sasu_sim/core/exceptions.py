"""Custom exceptions for sasu_sim.

Domain-specific exception types for storage, store and parameter errors.
"""

from __future__ import annotations

from typing import Any


class SasuSimError(Exception):
    """Base exception for all sasu_sim errors."""
    pass


# --- Storage Errors ---

class StorageError(SasuSimError):
    """Failed to read from or write to the key-value storage backend."""

    def __init__(self, key: str, reason: str = ""):
        self.key = key
        self.reason = reason
        msg = f"Storage failure on key '{key}'"
        if reason:
            msg += f" - {reason}"
        super().__init__(msg)


# --- Store Errors ---

class SimulationNotFoundError(SasuSimError):
    """No simulation with the requested id exists in the collection."""

    def __init__(self, simulation_id: str):
        self.simulation_id = simulation_id
        super().__init__(f"Simulation '{simulation_id}' not found")


class InvalidParameterError(SasuSimError):
    """Invalid parameter value provided."""

    def __init__(self, param_name: str, value: Any, reason: str = ""):
        self.param_name = param_name
        self.value = value
        self.reason = reason
        msg = f"Invalid parameter '{param_name}': {value}"
        if reason:
            msg += f" - {reason}"
        super().__init__(msg)


# --- Configuration Errors ---

class ConfigurationError(SasuSimError):
    """Error in application configuration."""
    pass
