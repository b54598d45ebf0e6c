"""State management for greenhouse simulation.

This module defines the data structures that represent the state of every
greenhouse and plant table at any point in time:

- TableState: Soil, plants, lamp and actuators of one plant table
- GreenhouseState: Climate, ventilation, shading and the owned tables

Both are plain mutable dataclasses. The engines in
``growhouse_sim.simulation`` mutate them in place once per simulated minute;
the registry mutates actuator fields between ticks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from growhouse_sim.physics.constants import (
    FULL_TABLE_PLANTS,
    MAX_ART_LIGHT,
    MAX_SHADING,
    SEED_HUMIDITY,
    SEED_LIGHT_INTENSITY,
    SEED_SOIL_FERTILITY,
    SEED_SOIL_MOISTURE,
    SEED_TEMPERATURE,
    SEEDLING_SIZE,
)


@dataclass
class TableState:
    """State of one plant table.

    Attributes:
        id: Table id, unique within its greenhouse.
        position: Human-readable position label (e.g. "G1T3").
        temperature: Air temperature at the table in °C (mirrors greenhouse).
        plant_count: Living plants on the table.
        plant_size: Average plant size in cm.
        soil_moisture: Soil moisture as percentage (0-100).
        soil_fertility: Soil fertility as percentage (0-150).
        art_light: Artificial lamp output in lumens (0-2000).
        water: Water actuator on/off.
        fertilizer: Fertilizer actuator on/off (only effective while watering).
        planted_day: Simulated day the current crop was seeded.
        over_fertilized_minutes: Consecutive minutes spent above 100 % fertility.
    """

    id: int
    position: str
    temperature: float = SEED_TEMPERATURE
    plant_count: int = FULL_TABLE_PLANTS
    plant_size: float = SEEDLING_SIZE
    soil_moisture: float = SEED_SOIL_MOISTURE
    soil_fertility: float = SEED_SOIL_FERTILITY
    art_light: float = 0.0
    water: bool = False
    fertilizer: bool = False
    planted_day: int = 0
    over_fertilized_minutes: int = 0

    def __post_init__(self) -> None:
        """Validate table values."""
        if not 0 <= self.plant_count <= FULL_TABLE_PLANTS:
            msg = f"Plant count {self.plant_count} outside valid range [0, {FULL_TABLE_PLANTS}]"
            raise ValueError(msg)
        if self.plant_size < 0:
            msg = f"Plant size cannot be negative, got {self.plant_size}"
            raise ValueError(msg)
        if not 0 <= self.soil_moisture <= 100:
            msg = f"Soil moisture {self.soil_moisture}% outside valid range [0, 100]"
            raise ValueError(msg)
        if not 0 <= self.soil_fertility <= 150:
            msg = f"Soil fertility {self.soil_fertility}% outside valid range [0, 150]"
            raise ValueError(msg)
        if not 0 <= self.art_light <= MAX_ART_LIGHT:
            msg = f"Table light {self.art_light} outside valid range [0, {MAX_ART_LIGHT}]"
            raise ValueError(msg)

    @property
    def is_dead(self) -> bool:
        """True when nothing is left growing on the table."""
        return self.plant_count <= 0 or self.plant_size <= 0

    def to_dict(self) -> dict[str, Any]:
        """Convert table to dictionary for serialization.

        Keys follow the camelCase names used by the dashboard transport.
        """
        return {
            "id": self.id,
            "position": self.position,
            "temperature": self.temperature,
            "plantCount": self.plant_count,
            "plantSize": self.plant_size,
            "soilMoisture": self.soil_moisture,
            "soilFertility": self.soil_fertility,
            "artLight": self.art_light,
            "water": self.water,
            "fertilizer": self.fertilizer,
            "plantedDate": self.planted_day,
        }


@dataclass
class GreenhouseState:
    """State of one greenhouse and the tables it owns.

    Attributes:
        id: Stable greenhouse id (1..N).
        name: Display name (e.g. "G1").
        light_intensity: Sunlight reaching the tables in lux, after shading.
        temperature: Interior air temperature in °C.
        humidity: Interior relative humidity as percentage.
        fan: Ventilation fan on/off.
        shading: Shading screen closure as percentage (0-100).
        tables: Tables owned by this greenhouse.
        ventilation_start: Simulated minute (since day 0) the fan was switched
            on, None while off.
    """

    id: int
    name: str
    light_intensity: float = SEED_LIGHT_INTENSITY
    temperature: float = SEED_TEMPERATURE
    humidity: float = SEED_HUMIDITY
    fan: bool = False
    shading: float = 0.0
    tables: list[TableState] = field(default_factory=list)
    ventilation_start: int | None = None

    def __post_init__(self) -> None:
        """Validate greenhouse values."""
        if not 0 <= self.shading <= MAX_SHADING:
            msg = f"Shading {self.shading}% outside valid range [0, {MAX_SHADING}]"
            raise ValueError(msg)
        if not 0 <= self.humidity <= 100:
            msg = f"Humidity {self.humidity}% outside valid range [0, 100]"
            raise ValueError(msg)
        ids = [t.id for t in self.tables]
        if len(ids) != len(set(ids)):
            msg = f"Duplicate table ids in greenhouse {self.id}: {ids}"
            raise ValueError(msg)

    def get_table(self, table_id: int) -> TableState | None:
        """Find an owned table by id."""
        for table in self.tables:
            if table.id == table_id:
                return table
        return None

    @property
    def living_plants(self) -> int:
        """Total living plants across all tables."""
        return sum(t.plant_count for t in self.tables)

    def to_dict(self) -> dict[str, Any]:
        """Convert greenhouse (with tables) to dictionary for serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "lightIntensity": self.light_intensity,
            "temperature": self.temperature,
            "humidity": self.humidity,
            "fan": self.fan,
            "shading": self.shading,
            "tables": [t.to_dict() for t in self.tables],
        }


def create_table(greenhouse_id: int, table_id: int, planted_day: int) -> TableState:
    """Create a freshly seeded table.

    Args:
        greenhouse_id: Id of the owning greenhouse (used for the label).
        table_id: Table id within the greenhouse.
        planted_day: Simulated day of seeding.

    Returns:
        TableState with seedling values.
    """
    return TableState(
        id=table_id,
        position=f"G{greenhouse_id}T{table_id}",
        planted_day=planted_day,
    )


def create_greenhouse(
    greenhouse_id: int, table_count: int, planted_day: int
) -> GreenhouseState:
    """Create a greenhouse with ``table_count`` seeded tables."""
    return GreenhouseState(
        id=greenhouse_id,
        name=f"G{greenhouse_id}",
        tables=[
            create_table(greenhouse_id, table_id, planted_day)
            for table_id in range(1, table_count + 1)
        ],
    )
