"""Greenhouse simulation engine.

The engine orchestrates one simulated minute per tick:
1. Look up the outside climate of the current day
2. Update every greenhouse's climate
3. Update every table of that greenhouse against the fresh climate
4. Emit crop lifecycle events
5. Advance the simulated clock

``tick()`` has no wall-clock dependency. Real-time pacing is the job of
``growhouse_sim.simulation.runner.SimulationRunner``.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from typing import TYPE_CHECKING

from growhouse_sim.core.events import EventType, get_event_bus
from growhouse_sim.simulation.clock import ClockStatus, SimulationClock
from growhouse_sim.simulation.environment import GreenhouseEnvironmentEngine
from growhouse_sim.simulation.growth import (
    TableGrowthEngine,
    TableOutcome,
    TableUpdate,
    replant,
)

if TYPE_CHECKING:
    from growhouse_sim.core.events import EventBus
    from growhouse_sim.core.registry import GreenhouseRegistry
    from growhouse_sim.core.state import GreenhouseState, TableState
    from growhouse_sim.simulation.dataset import EnvironmentDataset, EnvironmentRecord

logger = logging.getLogger(__name__)


class SimulationStatus(str, Enum):
    """Simulation status states."""

    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"
    ERROR = "error"


@dataclass
class SimulationStats:
    """Statistics from simulation run.

    Attributes:
        steps_completed: Number of ticks completed.
        harvests: Harvests performed.
        plants_harvested: Plants removed by harvests.
        replants: Tables replanted by the growth rules.
        heat_deaths: Tables lost to heat.
        over_fertilization_deaths: Tables lost to over-fertilization.
        drought_deaths: Plants lost to drought.
        wall_time: Actual elapsed time spent in ``run``.
    """

    steps_completed: int = 0
    harvests: int = 0
    plants_harvested: int = 0
    replants: int = 0
    heat_deaths: int = 0
    over_fertilization_deaths: int = 0
    drought_deaths: int = 0
    wall_time: timedelta = field(default_factory=timedelta)

    @property
    def simulation_time(self) -> timedelta:
        """Total simulated time (one minute per step)."""
        return timedelta(minutes=self.steps_completed)

    @property
    def avg_step_time(self) -> float:
        """Average wall time per step in milliseconds."""
        if self.steps_completed == 0:
            return 0.0
        return self.wall_time.total_seconds() * 1000 / self.steps_completed


class SimulationEngine:
    """Main greenhouse simulation engine.

    Owns the clock and the two per-minute engines; the greenhouses are owned
    by the registry handed in by the caller.
    """

    def __init__(
        self,
        registry: GreenhouseRegistry,
        dataset: EnvironmentDataset,
        clock: SimulationClock | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        """Initialize simulation engine.

        Args:
            registry: Greenhouses to simulate.
            dataset: Daily outside climate.
            clock: Simulated clock (default: day 100, 100 ms per minute).
            event_bus: Bus for lifecycle events (global bus if omitted).
        """
        self._registry = registry
        self._dataset = dataset
        self._clock = clock or SimulationClock()
        self._event_bus = event_bus or get_event_bus()

        self._environment_engine = GreenhouseEnvironmentEngine()
        self._growth_engine = TableGrowthEngine()

        self._status = SimulationStatus.IDLE
        self._stats = SimulationStats()

    @property
    def registry(self) -> GreenhouseRegistry:
        """Greenhouses being simulated."""
        return self._registry

    @property
    def clock(self) -> SimulationClock:
        """Simulated clock."""
        return self._clock

    @property
    def dataset(self) -> EnvironmentDataset:
        """Outside climate dataset."""
        return self._dataset

    @property
    def status(self) -> SimulationStatus:
        """Current simulation status."""
        return self._status

    @property
    def stats(self) -> SimulationStats:
        """Simulation statistics."""
        return self._stats

    # =========================================================================
    # Read accessors
    # =========================================================================

    def current_environment(self) -> EnvironmentRecord:
        """Outside climate record of the current simulated day."""
        return self._dataset.record_for_day(self._clock.current_day)

    def simulation_status(self) -> ClockStatus:
        """Speed, tick interval, day and minute."""
        return self._clock.status()

    # =========================================================================
    # Commands
    # =========================================================================

    def set_speed(self, multiplier: float) -> float:
        """Change the speed multiplier; day and minute are preserved.

        Returns:
            New tick interval in ms.

        Raises:
            ValidationError: If the multiplier is outside (0, 1000].
        """
        interval = self._clock.set_speed(multiplier)
        self._event_bus.emit_simple(
            EventType.SPEED_CHANGED,
            source="engine",
            message=f"Speed set to {self._clock.speed:g}x",
            day=self._clock.current_day,
            minute=self._clock.minute_of_day,
            speed=self._clock.speed,
            tick_interval_ms=interval,
        )
        return interval

    def replant_table(self, greenhouse_id: int, table_id: int) -> bool:
        """Replant a table by hand, e.g. after it died.

        Raises:
            NotFoundError: If the table does not exist.
        """
        table = self._registry.get_table(greenhouse_id, table_id)
        replant(table, self._clock.current_day)
        self._emit_table_event(EventType.REPLANT, table, "Replanted by operator")
        return True

    # =========================================================================
    # Simulation loop
    # =========================================================================

    def tick(self) -> None:
        """Advance the whole simulation by one minute."""
        record = self.current_environment()
        day = self._clock.current_day
        minute = self._clock.minute_of_day
        elapsed_minutes = self._clock.total_minutes

        for greenhouse in self._registry.list_greenhouses():
            self._environment_engine.update(greenhouse, record, elapsed_minutes)
            for table in greenhouse.tables:
                update = self._growth_engine.update(table, greenhouse, day)
                self._record_update(greenhouse, table, update)

        if self._clock.advance_one_minute():
            logger.info("Day %d completed", day)
            self._event_bus.emit_simple(
                EventType.DAY_COMPLETED,
                source="engine",
                message=f"Day {day} completed",
                day=day,
                minute=minute,
                living_plants=sum(gh.living_plants for gh in self._registry),
            )

        self._stats.steps_completed += 1

    def run(self, steps: int) -> SimulationStats:
        """Run the simulation for a number of ticks as fast as possible.

        Args:
            steps: Number of simulated minutes.

        Returns:
            Simulation statistics.
        """
        self._status = SimulationStatus.RUNNING
        self._emit_lifecycle(EventType.SIMULATION_START, "Simulation started")
        start_wall = time.perf_counter()

        try:
            for _ in range(steps):
                self.tick()
        except Exception as e:
            self._status = SimulationStatus.ERROR
            self._emit_lifecycle(
                EventType.SIMULATION_ERROR, f"Simulation error: {e}", error=str(e)
            )
            raise
        finally:
            self._stats.wall_time += timedelta(seconds=time.perf_counter() - start_wall)
            self._emit_lifecycle(
                EventType.SIMULATION_STOP,
                f"Simulation stopped after {self._stats.steps_completed} steps",
            )

        self._status = SimulationStatus.STOPPED
        return self._stats

    def mark_running(self) -> None:
        """Flag the engine as driven by a real-time runner."""
        self._status = SimulationStatus.RUNNING
        self._emit_lifecycle(EventType.SIMULATION_START, "Simulation started")

    def mark_stopped(self) -> None:
        """Flag the engine as no longer driven."""
        self._status = SimulationStatus.STOPPED
        self._emit_lifecycle(
            EventType.SIMULATION_STOP,
            f"Simulation stopped after {self._stats.steps_completed} steps",
        )

    # =========================================================================
    # Bookkeeping
    # =========================================================================

    def _record_update(
        self, greenhouse: GreenhouseState, table: TableState, update: TableUpdate
    ) -> None:
        stats = self._stats
        stats.drought_deaths += update.drought_deaths

        if update.outcome is TableOutcome.HEAT_DEATH:
            stats.heat_deaths += 1
            self._emit_table_event(
                EventType.HEAT_DEATH,
                table,
                f"All plants died from heat ({greenhouse.temperature:.1f}°C)",
                temperature=greenhouse.temperature,
            )
        elif update.outcome is TableOutcome.OVER_FERTILIZATION_DEATH:
            stats.over_fertilization_deaths += 1
            self._emit_table_event(
                EventType.OVER_FERTILIZATION_DEATH,
                table,
                "All plants died from over-fertilization",
            )
        elif update.outcome is TableOutcome.HARVESTED:
            stats.harvests += 1
            stats.plants_harvested += update.harvested
            self._emit_table_event(
                EventType.HARVEST,
                table,
                f"Harvested {update.harvested} plants",
                harvested=update.harvested,
            )

        if update.replanted:
            stats.replants += 1
            self._emit_table_event(EventType.REPLANT, table, "Planted new seedlings")

    def _emit_table_event(
        self, event_type: EventType, table: TableState, message: str, **data: object
    ) -> None:
        self._event_bus.emit_simple(
            event_type,
            source=table.position,
            message=message,
            day=self._clock.current_day,
            minute=self._clock.minute_of_day,
            **data,
        )

    def _emit_lifecycle(self, event_type: EventType, message: str, **data: object) -> None:
        self._event_bus.emit_simple(
            event_type,
            source="engine",
            message=message,
            day=self._clock.current_day,
            minute=self._clock.minute_of_day,
            **data,
        )
