"""Shared pytest fixtures for growhouse_sim tests."""

from __future__ import annotations

from datetime import date

import numpy as np
import pytest

from growhouse_sim.core.events import EventBus, get_event_bus, reset_event_bus
from growhouse_sim.core.registry import GreenhouseRegistry
from growhouse_sim.core.state import GreenhouseState, TableState, create_greenhouse
from growhouse_sim.simulation.clock import SimulationClock
from growhouse_sim.simulation.dataset import EnvironmentDataset, EnvironmentRecord
from growhouse_sim.simulation.engine import SimulationEngine

# =============================================================================
# Autouse fixtures for test isolation
# =============================================================================


@pytest.fixture(autouse=True)
def reset_global_state() -> None:
    """Reset the global event bus before each test for isolation."""
    reset_event_bus()


# =============================================================================
# Random number generator fixtures
# =============================================================================


@pytest.fixture
def rng() -> np.random.Generator:
    """Provide a seeded random generator for reproducible tests."""
    return np.random.default_rng(42)


# =============================================================================
# Climate data fixtures
# =============================================================================


@pytest.fixture
def mild_record() -> EnvironmentRecord:
    """Mild spring day."""
    return EnvironmentRecord(date=date(2024, 4, 9), tavg=12.0, tmin=6.0, tmax=18.0)


@pytest.fixture
def dataset() -> EnvironmentDataset:
    """Three days of climate data with distinct averages."""
    return EnvironmentDataset(
        [
            EnvironmentRecord(date=date(2024, 1, 1), tavg=2.0, tmin=-1.0, tmax=5.0),
            EnvironmentRecord(date=date(2024, 1, 2), tavg=4.0, tmin=1.0, tmax=7.0),
            EnvironmentRecord(date=date(2024, 1, 3), tavg=6.0, tmin=3.0, tmax=9.0),
        ]
    )


# =============================================================================
# State fixtures
# =============================================================================


@pytest.fixture
def greenhouse() -> GreenhouseState:
    """Freshly seeded greenhouse with two tables."""
    return create_greenhouse(1, 2, planted_day=100)


@pytest.fixture
def table(greenhouse: GreenhouseState) -> TableState:
    """First table of the ``greenhouse`` fixture."""
    return greenhouse.tables[0]


@pytest.fixture
def registry() -> GreenhouseRegistry:
    """Two greenhouses with three tables each."""
    return GreenhouseRegistry.create(
        greenhouse_count=2, tables_per_greenhouse=3, planted_day=100
    )


@pytest.fixture
def event_bus() -> EventBus:
    """The global event bus (reset before each test)."""
    return get_event_bus()


@pytest.fixture
def engine(registry: GreenhouseRegistry, dataset: EnvironmentDataset) -> SimulationEngine:
    """Engine over the small registry starting at day 100, minute 0."""
    return SimulationEngine(
        registry=registry, dataset=dataset, clock=SimulationClock(start_day=100)
    )
