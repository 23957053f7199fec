"""Core infrastructure: settings, logging and exceptions."""

from .exceptions import (
    ConfigurationError,
    InvalidParameterError,
    SasuSimError,
    SimulationNotFoundError,
    StorageError,
)

__all__ = [
    "ConfigurationError",
    "InvalidParameterError",
    "SasuSimError",
    "SimulationNotFoundError",
    "StorageError",
]
