"""Table growth engine.

Once per simulated minute, after its greenhouse's climate has been updated,
each table goes through the crop state machine:

1. Dead tables stay dead
2. Heat death above 60 °C
3. Over-fertilization death after 10 minutes above 100 % fertility
4. Watering, fertilizing or evaporation
5. Fertility decay
6. Growth from moisture, fertility, light and temperature
7. Drought losses
8. Replant when the population has collapsed
9. Table temperature follows the greenhouse
10. Harvest of grown plants on dry soil
11. Crowding as plants outgrow the table

Every branch is plain arithmetic on the table; nothing here raises.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from growhouse_sim.physics.constants import (
    DEATH_TEMPERATURE,
    DROUGHT_MOISTURE,
    FERTILIZER_DECAY,
    FERTILIZER_RATE,
    FULL_TABLE_PLANTS,
    HARVEST_MAX_MOISTURE,
    HARVEST_SIZE,
    MAX_SOIL_FERTILITY,
    MAX_SOIL_MOISTURE,
    OPTIMAL_FERTILITY_MAX,
    OVER_FERTILIZATION_DEATH_MINUTES,
    REPLANT_FERTILITY_BOOST,
    REPLANT_FERTILITY_CAP,
    REPLANT_THRESHOLD,
    SEEDLING_SIZE,
    WATER_INCREASE_RATE,
)
from growhouse_sim.physics.plants import (
    crowded_population,
    drought_losses,
    evaporation_rate,
    growth_rate,
    harvest_count,
)

if TYPE_CHECKING:
    from growhouse_sim.core.state import GreenhouseState, TableState

logger = logging.getLogger(__name__)


class TableOutcome(str, Enum):
    """What happened to a table during one tick."""

    DORMANT = "dormant"
    GREW = "grew"
    HEAT_DEATH = "heat_death"
    OVER_FERTILIZATION_DEATH = "over_fertilization_death"
    REPLANTED = "replanted"
    HARVESTED = "harvested"


@dataclass
class TableUpdate:
    """Result of one tick for one table.

    Attributes:
        outcome: Main transition of the tick.
        harvested: Plants removed by harvest.
        drought_deaths: Plants lost to drought.
        crowded_out: Plants displaced by crowding.
        replanted: Whether fresh seedlings were planted.
    """

    outcome: TableOutcome
    harvested: int = 0
    drought_deaths: int = 0
    crowded_out: int = 0
    replanted: bool = False


def replant(table: TableState, day: int) -> None:
    """Reset a table to a full crop of seedlings.

    Args:
        table: Table to reset in place.
        day: Simulated day of planting.
    """
    table.plant_count = FULL_TABLE_PLANTS
    table.plant_size = SEEDLING_SIZE
    table.soil_fertility = min(
        REPLANT_FERTILITY_CAP, table.soil_fertility + REPLANT_FERTILITY_BOOST
    )
    table.planted_day = day
    table.over_fertilized_minutes = 0
    logger.info("Replanting table %s: new seedlings on day %d", table.position, day)


def apply_crowding(table: TableState) -> int:
    """Remove plants that no longer fit on the table.

    Returns:
        Number of plants removed.
    """
    allowed = crowded_population(table.plant_count, table.plant_size)
    removed = table.plant_count - allowed
    if removed > 0:
        table.plant_count = allowed
        logger.debug(
            "Table %s: removed %d plants (too crowded)", table.position, removed
        )
    return max(0, removed)


class TableGrowthEngine:
    """Per-minute crop update for a table.

    The engine is stateless; the over-fertilization counter lives on the
    table (``TableState.over_fertilized_minutes``).
    """

    def update(
        self, table: TableState, greenhouse: GreenhouseState, day: int
    ) -> TableUpdate:
        """Advance one table by one minute.

        Args:
            table: Table to update in place.
            greenhouse: Owning greenhouse, already updated for this minute.
            day: Current simulated day (recorded on replant).

        Returns:
            TableUpdate describing the transition.
        """
        if table.plant_count <= 0 or table.plant_size <= 0:
            return TableUpdate(TableOutcome.DORMANT)

        if greenhouse.temperature > DEATH_TEMPERATURE:
            self._kill(table)
            logger.info(
                "Table %s: all plants died from heat (%.1f°C)",
                table.position,
                greenhouse.temperature,
            )
            return TableUpdate(TableOutcome.HEAT_DEATH)

        if table.soil_fertility > OPTIMAL_FERTILITY_MAX:
            table.over_fertilized_minutes += 1
            if table.over_fertilized_minutes >= OVER_FERTILIZATION_DEATH_MINUTES:
                self._kill(table)
                table.over_fertilized_minutes = 0
                logger.info(
                    "Table %s: all plants died from over-fertilization", table.position
                )
                return TableUpdate(TableOutcome.OVER_FERTILIZATION_DEATH)
        else:
            table.over_fertilized_minutes = 0

        self._update_soil(table, greenhouse)

        growth = growth_rate(
            table.soil_moisture,
            table.soil_fertility,
            greenhouse.light_intensity,
            table.art_light,
            greenhouse.temperature,
        )
        if growth > 0:
            table.plant_size += growth

        result = TableUpdate(TableOutcome.GREW)

        if table.soil_moisture < DROUGHT_MOISTURE:
            result.drought_deaths = min(table.plant_count, drought_losses(table.plant_count))
            table.plant_count -= result.drought_deaths
            logger.debug(
                "Table %s: %d plants dying from drought, %d remaining",
                table.position,
                result.drought_deaths,
                table.plant_count,
            )

        if table.plant_count < REPLANT_THRESHOLD:
            replant(table, day)
            result.outcome = TableOutcome.REPLANTED
            result.replanted = True
            return result

        table.temperature = greenhouse.temperature

        if table.plant_size >= HARVEST_SIZE and table.soil_moisture <= HARVEST_MAX_MOISTURE:
            result.harvested, result.replanted = self._harvest(table, day)
            result.outcome = TableOutcome.HARVESTED

        result.crowded_out = apply_crowding(table)
        return result

    def _kill(self, table: TableState) -> None:
        table.plant_count = 0
        table.plant_size = 0.0

    def _update_soil(self, table: TableState, greenhouse: GreenhouseState) -> None:
        if table.water:
            table.soil_moisture = min(
                MAX_SOIL_MOISTURE, table.soil_moisture + WATER_INCREASE_RATE
            )
            if table.fertilizer:
                table.soil_fertility = min(
                    MAX_SOIL_FERTILITY, table.soil_fertility + FERTILIZER_RATE
                )
        else:
            loss = evaporation_rate(greenhouse.temperature, greenhouse.humidity)
            table.soil_moisture = max(0.0, table.soil_moisture - loss)

        # Decays after any fertilizer added above
        if table.soil_fertility > 0:
            table.soil_fertility = max(0.0, table.soil_fertility - FERTILIZER_DECAY)

    def _harvest(self, table: TableState, day: int) -> tuple[int, bool]:
        harvested = harvest_count(table.plant_count)
        logger.info(
            "Harvest on table %s: %d plants at %.1fcm",
            table.position,
            harvested,
            table.plant_size,
        )
        table.plant_count -= harvested
        # A full harvest leaves exactly the 5 % remnant, which is replanted
        if table.plant_count <= REPLANT_THRESHOLD:
            replant(table, day)
            return harvested, True
        return harvested, False
