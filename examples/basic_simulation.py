#!/usr/bin/env python3
"""Basic greenhouse simulation example.

This script demonstrates how to run greenhouse crop simulations headless
and in real time, and how to operate actuators between ticks.

Run with: uv run python examples/basic_simulation.py
"""

import time

from growhouse_sim.core.config import LayoutConfig, SimulationConfig
from growhouse_sim.core.events import Event, EventType, get_event_bus
from growhouse_sim.simulation.factory import create_engine_from_config
from growhouse_sim.simulation.runner import SimulationRunner


def run_growing_season() -> None:
    """Grow one greenhouse for 30 days with scheduled irrigation."""
    print("=" * 60)
    print("GROWING SEASON: one greenhouse, 30 days")
    print("=" * 60)

    config = SimulationConfig(
        name="Growing season",
        layout=LayoutConfig(greenhouse_count=1, tables_per_greenhouse=4),
    )
    engine = create_engine_from_config(config)
    registry = engine.registry

    harvests: list[Event] = []
    bus = get_event_bus()
    bus.subscribe(EventType.HARVEST, harvests.append)

    print("Running simulation...")
    for day in range(30):
        # Water for the first hour of each day; dry soil the rest of the time
        for table in registry.get_greenhouse(1).tables:
            registry.set_table_watering(1, table.id, True)
            registry.set_table_fertilizer(1, table.id, day % 3 == 0)
        engine.run(60)
        for table in registry.get_greenhouse(1).tables:
            registry.set_table_watering(1, table.id, False)
        engine.run(24 * 60 - 60)

    stats = engine.stats
    print()
    print(f"Completed {stats.steps_completed} steps in {stats.wall_time.total_seconds():.2f}s")
    print(f"Avg step time: {stats.avg_step_time:.3f}ms")
    print()

    print(f"{'Table':>8} {'Plants':>8} {'Size':>8} {'Moisture':>10} {'Fertility':>10}")
    print("-" * 48)
    for _, table in registry.iter_tables():
        print(
            f"{table.position:>8} {table.plant_count:>8} {table.plant_size:>7.1f}c "
            f"{table.soil_moisture:>10.1f} {table.soil_fertility:>10.1f}"
        )
    print("-" * 48)
    print(f"Harvests: {len(harvests)} ({stats.plants_harvested} plants)")
    print()


def run_real_time() -> None:
    """Run the simulation against the wall clock and change speed mid-run."""
    print("=" * 60)
    print("REAL TIME: two seconds at 1x, two seconds at 100x")
    print("=" * 60)

    engine = create_engine_from_config(SimulationConfig())
    with SimulationRunner(engine) as runner:
        runner.set_greenhouse_fan(1, True)
        time.sleep(2)
        print(f"After 1x:   {runner.simulation_status().to_dict()}")
        runner.set_simulation_speed(100)
        time.sleep(2)
        print(f"After 100x: {runner.simulation_status().to_dict()}")

    greenhouse = engine.registry.get_greenhouse(1)
    print(f"Ventilated {greenhouse.name}: {greenhouse.temperature:.1f}°C, "
          f"{greenhouse.humidity:.1f}% RH")
    print()


def main() -> None:
    """Run greenhouse simulation examples."""
    print()
    print("GROWHOUSE-SIM: Greenhouse Crop Simulation")
    print()

    run_growing_season()
    run_real_time()

    print("=" * 60)
    print("Simulations complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
