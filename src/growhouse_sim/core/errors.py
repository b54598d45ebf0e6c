"""Exception types raised at the simulation boundary.

Per-tick growth and climate transitions never raise; these exceptions only
come from actuator commands, lookups, and startup configuration.
"""

from __future__ import annotations


class GreenhouseSimError(Exception):
    """Base class for all growhouse_sim errors."""


class ValidationError(GreenhouseSimError, ValueError):
    """An actuator or speed value is outside its declared range."""


class NotFoundError(GreenhouseSimError, LookupError):
    """An unknown greenhouse or table id was requested."""


class ConfigurationError(GreenhouseSimError, ValueError):
    """The environment dataset or configuration cannot drive a simulation."""
