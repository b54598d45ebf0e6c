"""Real-time driver for the simulation engine.

The runner paces ``SimulationEngine.tick()`` against the wall clock using one
background thread. A single lock serves as the execution lane: ticks, actuator
commands, speed changes and reads all take it, so a caller never observes a
greenhouse halfway through a tick and ticks never overlap.

Usage:
    runner = SimulationRunner(engine)
    runner.start()
    runner.set_table_watering(1, 2, True)
    runner.set_simulation_speed(100)
    ...
    runner.stop()
"""

from __future__ import annotations

import copy
import logging
import threading
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from growhouse_sim.core.state import GreenhouseState, TableState
    from growhouse_sim.simulation.clock import ClockStatus
    from growhouse_sim.simulation.dataset import EnvironmentRecord
    from growhouse_sim.simulation.engine import SimulationEngine

logger = logging.getLogger(__name__)


class SimulationRunner:
    """Drive an engine in real time and serialize access to its state."""

    def __init__(self, engine: SimulationEngine) -> None:
        """Initialize runner.

        Args:
            engine: Engine to drive.
        """
        self._engine = engine
        self._lock = threading.RLock()
        self._stop_event = threading.Event()
        self._wake_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._error: BaseException | None = None

    @property
    def engine(self) -> SimulationEngine:
        """Driven engine."""
        return self._engine

    @property
    def running(self) -> bool:
        """True while the driver thread is alive."""
        return self._thread is not None and self._thread.is_alive()

    @property
    def error(self) -> BaseException | None:
        """Exception that stopped the driver thread, if any."""
        return self._error

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start(self) -> None:
        """Start ticking in the background.

        Raises:
            RuntimeError: If the runner is already running.
        """
        if self.running:
            msg = "Simulation runner is already running"
            raise RuntimeError(msg)
        self._stop_event.clear()
        self._wake_event.clear()
        self._error = None
        with self._lock:
            self._engine.mark_running()
        self._thread = threading.Thread(
            target=self._loop, name="growhouse-sim-ticker", daemon=True
        )
        self._thread.start()
        logger.info(
            "Simulation started (%gms per simulated minute)",
            self._engine.clock.tick_interval_ms,
        )

    def stop(self, timeout: float | None = 5.0) -> None:
        """Stop ticking and wait for the driver thread to finish."""
        if self._thread is None:
            return
        self._stop_event.set()
        self._wake_event.set()
        self._thread.join(timeout)
        self._thread = None
        with self._lock:
            self._engine.mark_stopped()
        logger.info("Simulation stopped")

    def __enter__(self) -> SimulationRunner:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    def _loop(self) -> None:
        while not self._stop_event.is_set():
            with self._lock:
                interval = self._engine.clock.tick_interval_seconds
            woken = self._wake_event.wait(interval)
            if self._stop_event.is_set():
                break
            if woken:
                # Speed changed mid-wait: restart the wait with the new interval
                self._wake_event.clear()
                continue
            try:
                with self._lock:
                    self._engine.tick()
            except Exception as e:
                self._error = e
                logger.exception("Simulation tick failed; stopping runner")
                break

    # =========================================================================
    # Speed
    # =========================================================================

    def set_simulation_speed(self, multiplier: float) -> bool:
        """Change the speed multiplier and restart the tick timer.

        The simulated day and minute are preserved; no minute is skipped or
        repeated.

        Raises:
            ValidationError: If the multiplier is outside (0, 1000].
        """
        with self._lock:
            self._engine.set_speed(multiplier)
            self._wake_event.set()
        return True

    # =========================================================================
    # Serialized reads
    # =========================================================================

    def list_greenhouses(self) -> list[dict[str, Any]]:
        """Snapshot of all greenhouses with their tables."""
        with self._lock:
            return [gh.to_dict() for gh in self._engine.registry.list_greenhouses()]

    def get_greenhouse(self, greenhouse_id: int) -> GreenhouseState:
        """Snapshot of a greenhouse and its tables.

        The copy is taken between ticks; later ticks do not change it.

        Raises:
            NotFoundError: If no greenhouse has this id.
        """
        with self._lock:
            return copy.deepcopy(self._engine.registry.get_greenhouse(greenhouse_id))

    def get_table(self, greenhouse_id: int, table_id: int) -> TableState:
        """Snapshot of a table by greenhouse id and table id.

        Raises:
            NotFoundError: If the greenhouse or table does not exist.
        """
        with self._lock:
            return copy.deepcopy(self._engine.registry.get_table(greenhouse_id, table_id))

    def simulation_status(self) -> ClockStatus:
        """Speed, tick interval, day and minute."""
        with self._lock:
            return self._engine.simulation_status()

    def current_environment(self) -> EnvironmentRecord:
        """Outside climate record of the current simulated day."""
        with self._lock:
            return self._engine.current_environment()

    # =========================================================================
    # Serialized actuator commands
    # =========================================================================

    def set_table_watering(self, greenhouse_id: int, table_id: int, state: bool) -> bool:
        """Switch a table's water actuator between ticks."""
        with self._lock:
            return self._engine.registry.set_table_watering(greenhouse_id, table_id, state)

    def set_table_fertilizer(
        self, greenhouse_id: int, table_id: int, state: bool
    ) -> bool:
        """Switch a table's fertilizer actuator between ticks."""
        with self._lock:
            return self._engine.registry.set_table_fertilizer(
                greenhouse_id, table_id, state
            )

    def set_greenhouse_fan(self, greenhouse_id: int, state: bool) -> bool:
        """Switch a greenhouse fan between ticks."""
        with self._lock:
            return self._engine.registry.set_greenhouse_fan(greenhouse_id, state)

    def set_greenhouse_shading(self, greenhouse_id: int, percentage: float) -> bool:
        """Set a greenhouse's shading between ticks."""
        with self._lock:
            return self._engine.registry.set_greenhouse_shading(greenhouse_id, percentage)

    def set_table_light(self, greenhouse_id: int, table_id: int, lumens: float) -> bool:
        """Set a table lamp between ticks."""
        with self._lock:
            return self._engine.registry.set_table_light(greenhouse_id, table_id, lumens)

    def replant_table(self, greenhouse_id: int, table_id: int) -> bool:
        """Replant a table between ticks."""
        with self._lock:
            return self._engine.replant_table(greenhouse_id, table_id)
