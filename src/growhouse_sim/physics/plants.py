"""Plant growth response curves and population rules.

This module implements the pure functions behind the table growth model:
- Piecewise-linear growth factors for moisture, fertility, light, temperature
- Combined growth rate
- Soil evaporation
- Table capacity as plants grow (crowding)
- Drought and harvest counts

Each growth factor is 1.0 inside its optimal band and falls off linearly
outside it. All functions are side-effect free.
"""

from __future__ import annotations

import math

from growhouse_sim.physics.constants import (
    BASE_GROWTH_RATE,
    DEATH_TEMPERATURE,
    DROUGHT_DEATH_FRACTION,
    EVAPORATION_RATE,
    FULL_TABLE_PLANTS,
    HARVEST_FRACTION,
    HIGH_GROWTH_TEMPERATURE,
    MATURE_PLANT_SPACING,
    MIN_EXCESS_LIGHT_FACTOR,
    MIN_GROWTH_TEMPERATURE,
    OPTIMAL_FERTILITY_MAX,
    OPTIMAL_FERTILITY_MIN,
    OPTIMAL_LIGHT_MAX,
    OPTIMAL_LIGHT_MIN,
    OPTIMAL_MOISTURE_MAX,
    OPTIMAL_MOISTURE_MIN,
    OPTIMAL_TEMPERATURE,
    OVER_FERTILITY_SPAN,
    REPLANT_THRESHOLD,
    SEEDLING_SIZE,
)

# =============================================================================
# Growth factors
# =============================================================================


def moisture_factor(moisture: float) -> float:
    """Growth factor for soil moisture.

    Args:
        moisture: Soil moisture in %.

    Returns:
        1.0 in [50, 80]; ``moisture / 50`` below; ``(100 - moisture) / 20``
        above, floored at 0.

    Examples:
        >>> moisture_factor(25.0)
        0.5
        >>> moisture_factor(90.0)
        0.5
    """
    if OPTIMAL_MOISTURE_MIN <= moisture <= OPTIMAL_MOISTURE_MAX:
        return 1.0
    if moisture < OPTIMAL_MOISTURE_MIN:
        return moisture / OPTIMAL_MOISTURE_MIN
    return max(0.0, (100.0 - moisture) / (100.0 - OPTIMAL_MOISTURE_MAX))


def fertility_factor(fertility: float) -> float:
    """Growth factor for soil fertility.

    Args:
        fertility: Soil fertility in %.

    Returns:
        1.0 in [60, 100]; ``fertility / 60`` below; above 100 the factor
        drops linearly to 0 at 150.
    """
    if OPTIMAL_FERTILITY_MIN <= fertility <= OPTIMAL_FERTILITY_MAX:
        return 1.0
    if fertility < OPTIMAL_FERTILITY_MIN:
        return fertility / OPTIMAL_FERTILITY_MIN
    return max(0.0, 1.0 - (fertility - OPTIMAL_FERTILITY_MAX) / OVER_FERTILITY_SPAN)


def light_factor(house_light: float, table_light: float) -> float:
    """Growth factor for the total light a table receives.

    Args:
        house_light: Sunlight inside the greenhouse in lux.
        table_light: Table lamp output in lumens.

    Returns:
        1.0 in [400, 800]; ``total / 400`` below; ``800 / total`` above,
        never less than 0.5.
    """
    total = house_light + table_light
    if OPTIMAL_LIGHT_MIN <= total <= OPTIMAL_LIGHT_MAX:
        return 1.0
    if total < OPTIMAL_LIGHT_MIN:
        return total / OPTIMAL_LIGHT_MIN
    return max(MIN_EXCESS_LIGHT_FACTOR, OPTIMAL_LIGHT_MAX / total)


def temperature_factor(temperature: float) -> float:
    """Growth factor for air temperature.

    Growth starts at 5 °C, peaks at 22 °C, declines to 0 at 40 °C on the
    main ramp, and the tail above 40 °C approaches 0 at the 60 °C death
    threshold.

    Args:
        temperature: Air temperature in °C.

    Returns:
        Factor in [0, 1].

    Examples:
        >>> temperature_factor(22.0)
        1.0
        >>> temperature_factor(4.9)
        0.0
    """
    if temperature < MIN_GROWTH_TEMPERATURE:
        return 0.0
    if temperature < OPTIMAL_TEMPERATURE:
        return (temperature - MIN_GROWTH_TEMPERATURE) / (
            OPTIMAL_TEMPERATURE - MIN_GROWTH_TEMPERATURE
        )
    if temperature <= HIGH_GROWTH_TEMPERATURE:
        return 1.0 - (temperature - OPTIMAL_TEMPERATURE) / (
            HIGH_GROWTH_TEMPERATURE - OPTIMAL_TEMPERATURE
        )
    return max(
        0.0,
        1.0
        - (temperature - HIGH_GROWTH_TEMPERATURE)
        / (DEATH_TEMPERATURE - HIGH_GROWTH_TEMPERATURE),
    )


def growth_rate(
    moisture: float,
    fertility: float,
    house_light: float,
    table_light: float,
    temperature: float,
) -> float:
    """Plant growth for one minute in cm.

    Product of the base rate (0.2 cm/min) and all four growth factors.
    """
    return (
        BASE_GROWTH_RATE
        * moisture_factor(moisture)
        * fertility_factor(fertility)
        * light_factor(house_light, table_light)
        * temperature_factor(temperature)
    )


# =============================================================================
# Soil
# =============================================================================


def evaporation_rate(temperature: float, humidity: float) -> float:
    """Soil moisture lost in one minute without watering, in %.

    Increases with temperature above 10 °C and decreases with humidity.

    Examples:
        >>> evaporation_rate(50.0, 0.0)
        0.6
        >>> evaporation_rate(10.0, 0.0)
        0.0
    """
    temp_factor = max(0.0, (temperature - 10.0) / 40.0)
    humidity_factor = max(0.0, 1.0 - humidity / 100.0)
    return EVAPORATION_RATE * temp_factor * humidity_factor


# =============================================================================
# Population
# =============================================================================


def max_plants_for_size(plant_size: float) -> int:
    """Maximum number of plants a table holds at a given plant size.

    A table holds 480 seedlings; mature plants need 15x15 cm each, so the
    capacity shrinks with the square of the size ratio. Never below the
    replant threshold.

    Examples:
        >>> max_plants_for_size(2.0)
        480
        >>> max_plants_for_size(30.0)
        120
    """
    if plant_size <= SEEDLING_SIZE:
        return FULL_TABLE_PLANTS
    ratio = plant_size / MATURE_PLANT_SPACING
    return max(REPLANT_THRESHOLD, math.floor(FULL_TABLE_PLANTS / (ratio * ratio)))


def crowded_population(plant_count: int, plant_size: float) -> int:
    """Population after removing plants pushed out by crowding."""
    return min(plant_count, max_plants_for_size(plant_size))


def drought_losses(plant_count: int) -> int:
    """Plants that die in one drought minute (1 %, rounded up).

    Examples:
        >>> drought_losses(1000)
        10
        >>> drought_losses(1)
        1
    """
    if plant_count <= 0:
        return 0
    return math.ceil(plant_count * DROUGHT_DEATH_FRACTION)


def harvest_count(plant_count: int) -> int:
    """Plants removed by a harvest (95 %, rounded down).

    Examples:
        >>> harvest_count(480)
        456
    """
    if plant_count <= 0:
        return 0
    return math.floor(plant_count * HARVEST_FRACTION)
