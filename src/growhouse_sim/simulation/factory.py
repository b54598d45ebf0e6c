"""Factory functions for creating a simulation from configuration.

This module is the bridge between YAML/JSON configuration files and a
runnable simulation. The main entry point is `create_engine_from_config()`
which creates a fully wired SimulationEngine ready to tick.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from growhouse_sim.core.registry import GreenhouseRegistry
from growhouse_sim.simulation.clock import SimulationClock
from growhouse_sim.simulation.dataset import (
    EnvironmentDataset,
    load_environment_csv,
    synthetic_dataset,
)
from growhouse_sim.simulation.engine import SimulationEngine

if TYPE_CHECKING:
    from growhouse_sim.core.config import (
        ClockConfig,
        DatasetConfig,
        LayoutConfig,
        SimulationConfig,
    )
    from growhouse_sim.core.events import EventBus

logger = logging.getLogger(__name__)


def create_dataset(config: DatasetConfig) -> EnvironmentDataset:
    """Create the daily climate dataset from configuration.

    Raises:
        ConfigurationError: If the climate file is missing or unusable.
    """
    if config.source == "file" and config.file:
        return load_environment_csv(config.file, delimiter=config.delimiter)

    logger.info("Using synthetic climate data for %d", config.year)
    return synthetic_dataset(
        year=config.year,
        mean_temperature=config.mean_temperature,
        annual_amplitude=config.annual_amplitude,
    )


def create_clock(config: ClockConfig) -> SimulationClock:
    """Create the simulated clock from configuration."""
    return SimulationClock(
        start_day=config.start_day,
        base_tick_interval_ms=config.base_tick_interval_ms,
        speed=config.speed,
    )


def create_registry(
    config: LayoutConfig,
    planted_day: int,
    event_bus: EventBus | None = None,
) -> GreenhouseRegistry:
    """Create freshly seeded greenhouses from configuration."""
    return GreenhouseRegistry.create(
        greenhouse_count=config.greenhouse_count,
        tables_per_greenhouse=config.tables_per_greenhouse,
        planted_day=planted_day,
        event_bus=event_bus,
    )


def create_engine_from_config(
    config: SimulationConfig,
    *,
    dataset: EnvironmentDataset | None = None,
    event_bus: EventBus | None = None,
) -> SimulationEngine:
    """Create a fully configured SimulationEngine from a SimulationConfig.

    Args:
        config: Validated SimulationConfig object (from load_config or direct).
        dataset: Pre-parsed climate records; overrides ``config.dataset``.
        event_bus: Bus for engine and registry events.

    Returns:
        SimulationEngine ready to tick.

    Raises:
        ConfigurationError: If the climate dataset cannot be created.
    """
    clock = create_clock(config.clock)
    registry = create_registry(config.layout, clock.current_day, event_bus)
    return SimulationEngine(
        registry=registry,
        dataset=dataset if dataset is not None else create_dataset(config.dataset),
        clock=clock,
        event_bus=event_bus,
    )
