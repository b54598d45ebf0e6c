"""Greenhouse registry: ownership, lookup and actuator commands.

The registry owns the fixed collection of greenhouses (and, through them,
their tables) for the lifetime of a simulation. It is created once at startup
and passed explicitly to the engine; nothing else holds greenhouse state.

Actuator setters validate every argument before touching state, so a failed
command never leaves a partial mutation behind.

Usage:
    registry = GreenhouseRegistry.create(greenhouse_count=4, tables_per_greenhouse=8)
    registry.set_table_watering(1, 3, True)
    table = registry.get_table(1, 3)
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING

from growhouse_sim.core.errors import NotFoundError, ValidationError
from growhouse_sim.core.events import EventType, get_event_bus
from growhouse_sim.core.state import GreenhouseState, TableState, create_greenhouse
from growhouse_sim.physics.constants import (
    MAX_ART_LIGHT,
    MAX_SHADING,
    MIN_ART_LIGHT,
    MIN_SHADING,
)

if TYPE_CHECKING:
    from growhouse_sim.core.events import EventBus

logger = logging.getLogger(__name__)


def _require_bool(name: str, value: object) -> bool:
    if not isinstance(value, bool):
        msg = f"{name} must be a boolean, got {value!r}"
        raise ValidationError(msg)
    return value


def _require_range(name: str, value: object, low: float, high: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        msg = f"{name} must be a number, got {value!r}"
        raise ValidationError(msg)
    if math.isnan(value) or not low <= value <= high:
        msg = f"{name} {value} outside valid range [{low}, {high}]"
        raise ValidationError(msg)
    return float(value)


class GreenhouseRegistry:
    """Owner of all greenhouses in a simulation.

    Greenhouses are keyed by their stable integer id; tables are looked up
    through their owning greenhouse.
    """

    def __init__(
        self,
        greenhouses: Iterable[GreenhouseState],
        event_bus: EventBus | None = None,
    ) -> None:
        """Initialize registry.

        Args:
            greenhouses: Greenhouses to own.
            event_bus: Bus for actuator events (global bus if omitted).

        Raises:
            ValueError: If two greenhouses share an id.
        """
        self._greenhouses: dict[int, GreenhouseState] = {}
        for greenhouse in greenhouses:
            if greenhouse.id in self._greenhouses:
                msg = f"Greenhouse id {greenhouse.id} already registered"
                raise ValueError(msg)
            self._greenhouses[greenhouse.id] = greenhouse
        self._event_bus = event_bus or get_event_bus()

    @classmethod
    def create(
        cls,
        greenhouse_count: int = 4,
        tables_per_greenhouse: int = 8,
        planted_day: int = 0,
        event_bus: EventBus | None = None,
    ) -> GreenhouseRegistry:
        """Create a registry of freshly seeded greenhouses numbered from 1.

        Args:
            greenhouse_count: Number of greenhouses.
            tables_per_greenhouse: Tables in each greenhouse.
            planted_day: Simulated day the initial crop is seeded on.
            event_bus: Bus for actuator events.

        Returns:
            New registry.
        """
        registry = cls(
            (
                create_greenhouse(gh_id, tables_per_greenhouse, planted_day)
                for gh_id in range(1, greenhouse_count + 1)
            ),
            event_bus=event_bus,
        )
        logger.info(
            "Initialized %d greenhouses with %d tables each",
            greenhouse_count,
            tables_per_greenhouse,
        )
        return registry

    def __len__(self) -> int:
        return len(self._greenhouses)

    def __iter__(self) -> Iterator[GreenhouseState]:
        return iter(self._greenhouses.values())

    # =========================================================================
    # Lookup
    # =========================================================================

    def list_greenhouses(self) -> list[GreenhouseState]:
        """List all greenhouses in id order."""
        return [self._greenhouses[gh_id] for gh_id in sorted(self._greenhouses)]

    def get_greenhouse(self, greenhouse_id: int) -> GreenhouseState:
        """Get a greenhouse by id.

        Raises:
            NotFoundError: If no greenhouse has this id.
        """
        greenhouse = self._greenhouses.get(greenhouse_id)
        if greenhouse is None:
            msg = f"Unknown greenhouse {greenhouse_id}. Available: {sorted(self._greenhouses)}"
            raise NotFoundError(msg)
        return greenhouse

    def get_table(self, greenhouse_id: int, table_id: int) -> TableState:
        """Get a table by greenhouse id and table id.

        Raises:
            NotFoundError: If the greenhouse or table does not exist.
        """
        greenhouse = self.get_greenhouse(greenhouse_id)
        table = greenhouse.get_table(table_id)
        if table is None:
            msg = f"Unknown table {table_id} in greenhouse {greenhouse_id}"
            raise NotFoundError(msg)
        return table

    def get_greenhouse_or_none(self, greenhouse_id: int) -> GreenhouseState | None:
        """Get a greenhouse by id or None if not found."""
        return self._greenhouses.get(greenhouse_id)

    def get_table_or_none(self, greenhouse_id: int, table_id: int) -> TableState | None:
        """Get a table or None if either id is unknown."""
        try:
            return self.get_table(greenhouse_id, table_id)
        except NotFoundError:
            return None

    def iter_tables(self) -> Iterator[tuple[GreenhouseState, TableState]]:
        """Iterate over every (greenhouse, table) pair in id order."""
        for greenhouse in self.list_greenhouses():
            for table in greenhouse.tables:
                yield greenhouse, table

    # =========================================================================
    # Actuator commands
    # =========================================================================

    def _announce(self, source: str, actuator: str, value: object) -> None:
        self._event_bus.emit_simple(
            EventType.ACTUATOR_CHANGED,
            source=source,
            message=f"{actuator} set to {value}",
            actuator=actuator,
            value=value,
        )

    def set_table_watering(self, greenhouse_id: int, table_id: int, state: bool) -> bool:
        """Switch a table's water actuator.

        Returns:
            True on success.

        Raises:
            ValidationError: If state is not a boolean.
            NotFoundError: If the table does not exist.
        """
        state = _require_bool("Watering state", state)
        table = self.get_table(greenhouse_id, table_id)
        table.water = state
        logger.info(
            "Greenhouse %d, table %d: watering %s",
            greenhouse_id,
            table_id,
            "ON" if state else "OFF",
        )
        self._announce(table.position, "water", state)
        return True

    def set_table_fertilizer(
        self, greenhouse_id: int, table_id: int, state: bool
    ) -> bool:
        """Switch a table's fertilizer actuator.

        The fertilizer only has an effect while the water actuator is on.

        Raises:
            ValidationError: If state is not a boolean.
            NotFoundError: If the table does not exist.
        """
        state = _require_bool("Fertilizer state", state)
        table = self.get_table(greenhouse_id, table_id)
        table.fertilizer = state
        logger.info(
            "Greenhouse %d, table %d: fertilizer %s",
            greenhouse_id,
            table_id,
            "ON" if state else "OFF",
        )
        self._announce(table.position, "fertilizer", state)
        return True

    def set_greenhouse_fan(self, greenhouse_id: int, state: bool) -> bool:
        """Switch a greenhouse's ventilation fan.

        Raises:
            ValidationError: If state is not a boolean.
            NotFoundError: If the greenhouse does not exist.
        """
        state = _require_bool("Fan state", state)
        greenhouse = self.get_greenhouse(greenhouse_id)
        greenhouse.fan = state
        logger.info("Greenhouse %d: fan %s", greenhouse_id, "ON" if state else "OFF")
        self._announce(greenhouse.name, "fan", state)
        return True

    def set_greenhouse_shading(self, greenhouse_id: int, percentage: float) -> bool:
        """Set a greenhouse's shading screen closure.

        Raises:
            ValidationError: If percentage is outside [0, 100].
            NotFoundError: If the greenhouse does not exist.
        """
        value = _require_range("Shading", percentage, MIN_SHADING, MAX_SHADING)
        greenhouse = self.get_greenhouse(greenhouse_id)
        greenhouse.shading = value
        logger.info("Greenhouse %d: shading set to %s%%", greenhouse_id, value)
        self._announce(greenhouse.name, "shading", value)
        return True

    def set_table_light(self, greenhouse_id: int, table_id: int, lumens: float) -> bool:
        """Set a table's artificial lamp output.

        Raises:
            ValidationError: If lumens is outside [0, 2000].
            NotFoundError: If the table does not exist.
        """
        value = _require_range("Table light", lumens, MIN_ART_LIGHT, MAX_ART_LIGHT)
        table = self.get_table(greenhouse_id, table_id)
        table.art_light = value
        logger.info(
            "Greenhouse %d, table %d: light set to %s lx",
            greenhouse_id,
            table_id,
            value,
        )
        self._announce(table.position, "art_light", value)
        return True
