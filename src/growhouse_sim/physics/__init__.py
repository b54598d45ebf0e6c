"""Physics module for greenhouse climate and crop calculations.

This module provides the per-minute model formulas:
- Greenhouse climate (light from shading, lamp heat, ventilation, clamping)
- Plant growth factors, evaporation, drought, harvest and crowding

All functions are pure; units are degrees Celsius, percent, lux and
centimetres.
"""

from growhouse_sim.physics.climate import (
    clamp_climate,
    light_heat_per_minute,
    light_intensity,
    ventilated_humidity,
    ventilated_temperature,
)
from growhouse_sim.physics.plants import (
    crowded_population,
    drought_losses,
    evaporation_rate,
    fertility_factor,
    growth_rate,
    harvest_count,
    light_factor,
    max_plants_for_size,
    moisture_factor,
    temperature_factor,
)

__all__ = [
    # Climate
    "light_intensity",
    "light_heat_per_minute",
    "ventilated_temperature",
    "ventilated_humidity",
    "clamp_climate",
    # Plants
    "moisture_factor",
    "fertility_factor",
    "light_factor",
    "temperature_factor",
    "growth_rate",
    "evaporation_rate",
    "max_plants_for_size",
    "crowded_population",
    "drought_losses",
    "harvest_count",
]
