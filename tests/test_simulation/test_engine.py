"""Tests for simulation engine."""

from __future__ import annotations

from datetime import timedelta

import numpy as np
import pytest

from growhouse_sim.core.errors import NotFoundError, ValidationError
from growhouse_sim.core.events import Event, EventBus, EventType
from growhouse_sim.core.registry import GreenhouseRegistry
from growhouse_sim.simulation.clock import SimulationClock
from growhouse_sim.simulation.dataset import EnvironmentDataset
from growhouse_sim.simulation.engine import (
    SimulationEngine,
    SimulationStats,
    SimulationStatus,
)


class TestSimulationStats:
    """Tests for SimulationStats."""

    def test_defaults(self) -> None:
        """Fresh stats are all zero."""
        stats = SimulationStats()
        assert stats.steps_completed == 0
        assert stats.harvests == 0
        assert stats.wall_time == timedelta(0)
        assert stats.avg_step_time == 0.0

    def test_derived_values(self) -> None:
        """Simulated time is one minute per step."""
        stats = SimulationStats(steps_completed=120, wall_time=timedelta(seconds=0.6))
        assert stats.simulation_time == timedelta(hours=2)
        assert stats.avg_step_time == pytest.approx(5.0)


class TestEngineBasics:
    """Tests for engine construction and accessors."""

    def test_initial_state(self, engine: SimulationEngine) -> None:
        """Engine starts idle at day 100, minute 0."""
        assert engine.status == SimulationStatus.IDLE
        status = engine.simulation_status()
        assert status.current_day == 100
        assert status.current_minute == 0
        assert status.speed == 1.0
        assert status.tick_interval_ms == 100.0

    def test_default_clock(
        self, registry: GreenhouseRegistry, dataset: EnvironmentDataset
    ) -> None:
        """Without a clock the engine starts on day 100."""
        engine = SimulationEngine(registry, dataset)
        assert engine.clock.current_day == 100

    def test_current_environment(self, engine: SimulationEngine) -> None:
        """The current record is chosen by day modulo dataset length."""
        # 100 % 3 == 1
        assert engine.current_environment().tavg == 4.0


class TestTick:
    """Tests for SimulationEngine.tick."""

    def test_tick_advances_minute(self, engine: SimulationEngine) -> None:
        """Each tick advances simulated time by one minute."""
        engine.tick()
        assert engine.clock.minute_of_day == 1
        assert engine.stats.steps_completed == 1

    def test_tick_updates_every_greenhouse(self, engine: SimulationEngine) -> None:
        """Climate and tables move in every greenhouse."""
        engine.tick()
        for greenhouse, table in engine.registry.iter_tables():
            assert greenhouse.light_intensity == 1000
            assert greenhouse.temperature == pytest.approx(20.1)
            assert table.temperature == pytest.approx(20.1)
            assert table.plant_size > 2.0

    def test_day_rollover(self, engine: SimulationEngine, event_bus: EventBus) -> None:
        """A full day of ticks completes the day and switches the record."""
        days: list[Event] = []
        event_bus.subscribe(EventType.DAY_COMPLETED, days.append)
        # Closed screens keep the unventilated houses below heat death
        for greenhouse in engine.registry:
            greenhouse.shading = 100.0

        engine.run(1440)

        assert engine.clock.current_day == 101
        assert engine.clock.minute_of_day == 0
        assert len(days) == 1
        assert days[0].day == 100
        assert days[0].data["living_plants"] > 0
        assert engine.current_environment().tavg == 6.0

    def test_fan_timer_spans_days(self, engine: SimulationEngine) -> None:
        """A fan left running keeps its start marker across midnight."""
        engine.registry.set_greenhouse_fan(1, True)

        engine.run(1441)

        greenhouse = engine.registry.get_greenhouse(1)
        assert greenhouse.ventilation_start == 100 * 1440
        assert greenhouse.temperature < 10.0
        assert engine.registry.get_greenhouse(2).ventilation_start is None

    def test_no_wall_clock_dependency(self, engine: SimulationEngine) -> None:
        """Ticks run back to back regardless of the configured speed."""
        engine.set_speed(0.001)
        engine.run(10)
        assert engine.clock.minute_of_day == 10


class TestCropEvents:
    """Tests for lifecycle bookkeeping during ticks."""

    def test_harvest_event(self, engine: SimulationEngine, event_bus: EventBus) -> None:
        """A harvest is counted and announced."""
        table = engine.registry.get_table(1, 2)
        table.plant_size = 30.0
        table.soil_moisture = 40.0

        engine.tick()

        harvests = event_bus.get_history(EventType.HARVEST)
        assert len(harvests) == 1
        assert harvests[0].source == "G1T2"
        assert harvests[0].data["harvested"] == 456
        assert engine.stats.harvests == 1
        assert engine.stats.plants_harvested == 456
        assert engine.stats.replants == 1
        assert len(event_bus.get_history(EventType.REPLANT, source="G1T2")) == 1

    def test_heat_death_event(self, engine: SimulationEngine, event_bus: EventBus) -> None:
        """Tables in an overheated greenhouse die together."""
        engine.registry.get_greenhouse(2).temperature = 65.0

        engine.tick()

        deaths = event_bus.get_history(EventType.HEAT_DEATH)
        assert sorted(e.source for e in deaths) == ["G2T1", "G2T2", "G2T3"]
        assert engine.stats.heat_deaths == 3
        assert all(t.plant_count == 0 for t in engine.registry.get_greenhouse(2).tables)
        assert all(t.plant_count == 480 for t in engine.registry.get_greenhouse(1).tables)

    def test_over_fertilization_event(
        self, engine: SimulationEngine, event_bus: EventBus
    ) -> None:
        """Over-fertilization deaths are counted and announced."""
        engine.registry.get_table(1, 1).soil_fertility = 130.0
        engine.run(10)

        assert engine.stats.over_fertilization_deaths == 1
        assert len(event_bus.get_history(EventType.OVER_FERTILIZATION_DEATH)) == 1

    def test_drought_counted(self, engine: SimulationEngine) -> None:
        """Drought losses accumulate in the stats."""
        engine.registry.get_table(1, 1).soil_moisture = 5.0
        engine.tick()
        assert engine.stats.drought_deaths == 5


class TestCommands:
    """Tests for engine-level commands."""

    def test_set_speed(self, engine: SimulationEngine, event_bus: EventBus) -> None:
        """Speed 10 at a 100 ms base gives 10 ms and keeps day and minute."""
        engine.run(5)
        assert engine.set_speed(10) == 10.0

        status = engine.simulation_status()
        assert status.tick_interval_ms == 10.0
        assert (status.current_day, status.current_minute) == (100, 5)

        events = event_bus.get_history(EventType.SPEED_CHANGED)
        assert events[-1].data == {"speed": 10.0, "tick_interval_ms": 10.0}

    def test_set_speed_invalid(self, engine: SimulationEngine, event_bus: EventBus) -> None:
        """Invalid speeds raise and are not announced."""
        with pytest.raises(ValidationError):
            engine.set_speed(2000)
        assert engine.simulation_status().speed == 1.0
        assert event_bus.get_history(EventType.SPEED_CHANGED) == []

    def test_replant_dead_table(self, engine: SimulationEngine, event_bus: EventBus) -> None:
        """A dead table can be replanted by hand."""
        table = engine.registry.get_table(2, 3)
        table.plant_count = 0
        table.plant_size = 0.0

        assert engine.replant_table(2, 3) is True
        assert table.plant_count == 480
        assert table.planted_day == 100
        assert len(event_bus.get_history(EventType.REPLANT)) == 1

    def test_replant_unknown_table(self, engine: SimulationEngine) -> None:
        """Replanting an unknown table raises NotFoundError."""
        with pytest.raises(NotFoundError):
            engine.replant_table(5, 1)


class TestRun:
    """Tests for SimulationEngine.run."""

    def test_run_stats(self, engine: SimulationEngine) -> None:
        """run() completes the requested ticks and records wall time."""
        stats = engine.run(30)
        assert stats.steps_completed == 30
        assert stats.wall_time > timedelta(0)
        assert engine.status == SimulationStatus.STOPPED

    def test_lifecycle_events(self, engine: SimulationEngine, event_bus: EventBus) -> None:
        """run() is bracketed by start and stop events."""
        engine.run(3)
        types = [e.event_type for e in event_bus.get_history()]
        assert types[0] == EventType.SIMULATION_START
        assert types[-1] == EventType.SIMULATION_STOP

    def test_error_status(
        self,
        engine: SimulationEngine,
        event_bus: EventBus,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """An exception inside a tick marks the engine as errored."""

        def broken_tick() -> None:
            raise RuntimeError("sensor fault")

        monkeypatch.setattr(engine, "tick", broken_tick)
        with pytest.raises(RuntimeError, match="sensor fault"):
            engine.run(1)

        assert engine.status == SimulationStatus.ERROR
        assert len(event_bus.get_history(EventType.SIMULATION_ERROR)) == 1

    def test_mark_running_and_stopped(self, engine: SimulationEngine) -> None:
        """Runner hooks switch the status."""
        engine.mark_running()
        assert engine.status == SimulationStatus.RUNNING
        engine.mark_stopped()
        assert engine.status == SimulationStatus.STOPPED


class TestInvariants:
    """Randomized multi-day runs with random actuator settings."""

    @pytest.mark.slow
    def test_bounds_hold_under_random_operation(
        self, dataset: EnvironmentDataset, rng: np.random.Generator
    ) -> None:
        """Environment and table bounds hold after every tick."""
        registry = GreenhouseRegistry.create(2, 4, planted_day=0)
        engine = SimulationEngine(registry, dataset, SimulationClock(start_day=0))

        for _ in range(40):
            gh_id = int(rng.integers(1, 3))
            table_id = int(rng.integers(1, 5))
            registry.set_greenhouse_fan(gh_id, bool(rng.integers(0, 2)))
            registry.set_greenhouse_shading(gh_id, float(rng.uniform(0, 100)))
            registry.set_table_watering(gh_id, table_id, bool(rng.integers(0, 2)))
            registry.set_table_fertilizer(gh_id, table_id, bool(rng.integers(0, 2)))
            registry.set_table_light(gh_id, table_id, float(rng.uniform(0, 2000)))

            for _ in range(int(rng.integers(10, 120))):
                engine.tick()
                for greenhouse, table in registry.iter_tables():
                    assert 0.0 <= greenhouse.temperature <= 70.0
                    assert 0.0 <= greenhouse.humidity <= 85.0
                    assert 0 <= table.plant_count <= 480
                    assert table.plant_size >= 0.0
                    assert 0.0 <= table.soil_moisture <= 100.0
                    assert 0.0 <= table.soil_fertility <= 150.0
