"""Simulation engine, clock, climate data and real-time runner."""

from growhouse_sim.simulation.clock import ClockStatus, SimulationClock
from growhouse_sim.simulation.dataset import (
    EnvironmentDataset,
    EnvironmentRecord,
    load_environment_csv,
    synthetic_dataset,
)
from growhouse_sim.simulation.engine import (
    SimulationEngine,
    SimulationStats,
    SimulationStatus,
)
from growhouse_sim.simulation.environment import GreenhouseEnvironmentEngine
from growhouse_sim.simulation.factory import create_engine_from_config
from growhouse_sim.simulation.growth import TableGrowthEngine, TableOutcome, TableUpdate
from growhouse_sim.simulation.runner import SimulationRunner

__all__ = [
    # Engine
    "SimulationEngine",
    "SimulationStats",
    "SimulationStatus",
    "GreenhouseEnvironmentEngine",
    "TableGrowthEngine",
    "TableOutcome",
    "TableUpdate",
    # Clock
    "ClockStatus",
    "SimulationClock",
    # Climate data
    "EnvironmentDataset",
    "EnvironmentRecord",
    "load_environment_csv",
    "synthetic_dataset",
    # Runner
    "SimulationRunner",
    "create_engine_from_config",
]
