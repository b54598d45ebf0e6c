"""Greenhouse climate calculations.

This module implements the per-minute climate relations of a greenhouse:
- Sunlight reaching the tables through the shading screen
- Heating of unventilated air by light
- Ventilation pull toward outside temperature and humidity
- Hard climate limits
"""

from __future__ import annotations

from growhouse_sim.physics.constants import (
    BASE_LIGHT_INTENSITY,
    LIGHT_HEAT_COEFFICIENT,
    MAX_GREENHOUSE_TEMPERATURE,
    MAX_HUMIDITY,
    MIN_GREENHOUSE_TEMPERATURE,
    OUTSIDE_HUMIDITY_REFERENCE,
    VENTILATION_EXCHANGE_TIME,
    VENTILATION_HUMIDITY_PULL,
    VENTILATION_TEMPERATURE_PULL,
)


def light_intensity(shading: float, base_light: float = BASE_LIGHT_INTENSITY) -> int:
    """Sunlight reaching the tables in lux.

    Args:
        shading: Shading screen closure in % (0-100).
        base_light: Light outside the screen in lux.

    Returns:
        Light intensity rounded to whole lux.

    Examples:
        >>> light_intensity(25.0)
        750
    """
    return round(base_light * (1.0 - shading / 100.0))


def light_heat_per_minute(intensity: float) -> float:
    """Temperature rise of unventilated air for one minute of light, in °C.

    3 °C per 500 lux, spread over an hour.
    """
    return intensity * LIGHT_HEAT_COEFFICIENT / 60.0


def ventilated_temperature(
    temperature: float, outside_temperature: float, elapsed: int
) -> float:
    """Air temperature after one minute of fan operation.

    Until the air has been exchanged once (30 minutes) the fan has no effect
    on temperature; afterwards 10 % of the gap to the outside closes each
    minute.
    """
    if elapsed < VENTILATION_EXCHANGE_TIME:
        return temperature
    return temperature - (temperature - outside_temperature) * VENTILATION_TEMPERATURE_PULL


def ventilated_humidity(humidity: float, elapsed: int) -> float:
    """Air humidity after one minute of fan operation.

    The pull toward the outside reference ramps in with the time the fan has
    been running.
    """
    gap = humidity - OUTSIDE_HUMIDITY_REFERENCE
    return humidity - gap * (elapsed / VENTILATION_EXCHANGE_TIME) * VENTILATION_HUMIDITY_PULL


def clamp_climate(temperature: float, humidity: float) -> tuple[float, float]:
    """Apply the humidity ceiling and the hard climate bounds.

    Humidity above 85 % escapes first; then temperature is clamped to
    [0, 70] °C and humidity to [0, 100] %.

    Returns:
        Tuple of (temperature, humidity).
    """
    humidity = min(humidity, MAX_HUMIDITY)
    temperature = max(MIN_GREENHOUSE_TEMPERATURE, min(MAX_GREENHOUSE_TEMPERATURE, temperature))
    humidity = max(0.0, min(100.0, humidity))
    return temperature, humidity
