"""Core module for greenhouse simulation.

This module provides the foundational pieces of the simulation:
- State of greenhouses and their tables
- Greenhouse registry with lookup and actuator commands
- Configuration loading and validation
- Event system for crop and actuator changes
- Error hierarchy
"""

from growhouse_sim.core.errors import (
    ConfigurationError,
    GreenhouseSimError,
    NotFoundError,
    ValidationError,
)
from growhouse_sim.core.events import Event, EventBus, EventType, get_event_bus
from growhouse_sim.core.registry import GreenhouseRegistry
from growhouse_sim.core.state import (
    GreenhouseState,
    TableState,
    create_greenhouse,
    create_table,
)

__all__ = [
    # Errors
    "GreenhouseSimError",
    "ValidationError",
    "NotFoundError",
    "ConfigurationError",
    # State
    "GreenhouseState",
    "TableState",
    "create_greenhouse",
    "create_table",
    # Registry
    "GreenhouseRegistry",
    # Events
    "Event",
    "EventBus",
    "EventType",
    "get_event_bus",
]
