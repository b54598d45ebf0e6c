"""Greenhouse climate engine.

Once per simulated minute each greenhouse's light, temperature and humidity
are recomputed from its shading, its fan, and the outside climate of the day:

1. Sunlight through the shading screen
2. Ventilation (fan on) or light heating (fan off)
3. Humidity ceiling and hard climate bounds
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from growhouse_sim.physics.climate import (
    clamp_climate,
    light_heat_per_minute,
    light_intensity,
    ventilated_humidity,
    ventilated_temperature,
)

if TYPE_CHECKING:
    from growhouse_sim.core.state import GreenhouseState
    from growhouse_sim.simulation.dataset import EnvironmentRecord

logger = logging.getLogger(__name__)


class GreenhouseEnvironmentEngine:
    """Per-minute climate update for a greenhouse.

    The engine is stateless; the ventilation timer lives on the greenhouse
    (``GreenhouseState.ventilation_start``).
    """

    def update(
        self,
        greenhouse: GreenhouseState,
        record: EnvironmentRecord,
        minute: int,
    ) -> None:
        """Advance one greenhouse's climate by one minute.

        Args:
            greenhouse: Greenhouse to update in place.
            record: Outside climate of the current simulated day.
            minute: Simulated minutes since day 0 (``SimulationClock.total_minutes``).
        """
        greenhouse.light_intensity = light_intensity(greenhouse.shading)

        if greenhouse.fan:
            self._ventilate(greenhouse, record, minute)
        else:
            greenhouse.ventilation_start = None
            greenhouse.temperature += light_heat_per_minute(greenhouse.light_intensity)

        greenhouse.temperature, greenhouse.humidity = clamp_climate(
            greenhouse.temperature, greenhouse.humidity
        )

    def _ventilate(
        self,
        greenhouse: GreenhouseState,
        record: EnvironmentRecord,
        minute: int,
    ) -> None:
        if greenhouse.ventilation_start is None:
            greenhouse.ventilation_start = minute
            logger.debug(
                "%s: ventilation started at minute %d", greenhouse.name, minute
            )

        elapsed = minute - greenhouse.ventilation_start

        greenhouse.temperature = ventilated_temperature(
            greenhouse.temperature, record.tavg, elapsed
        )
        greenhouse.humidity = ventilated_humidity(greenhouse.humidity, elapsed)
