"""Simulated clock and speed control.

Simulated time advances in whole minutes, one per tick. How much real time a
tick takes is a separate concern: the speed multiplier shortens the tick
interval without touching the per-minute transition math.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any

from growhouse_sim.core.errors import ValidationError
from growhouse_sim.physics.constants import (
    DEFAULT_BASE_TICK_INTERVAL_MS,
    DEFAULT_START_DAY,
    MAX_SPEED,
    MIN_TICK_INTERVAL_MS,
    MINUTES_PER_DAY,
)

logger = logging.getLogger(__name__)


def validate_speed(multiplier: float) -> float:
    """Check a speed multiplier is a number in (0, 1000].

    Raises:
        ValidationError: If the multiplier is out of range or not a number.
    """
    if isinstance(multiplier, bool) or not isinstance(multiplier, (int, float)):
        msg = f"Speed must be a number, got {multiplier!r}"
        raise ValidationError(msg)
    if math.isnan(multiplier) or not 0 < multiplier <= MAX_SPEED:
        msg = f"Speed {multiplier} outside valid range (0, {MAX_SPEED:g}]"
        raise ValidationError(msg)
    return float(multiplier)


def tick_interval_for_speed(base_tick_interval_ms: float, multiplier: float) -> float:
    """Real time per simulated minute at a given speed, in ms (at least 1).

    Examples:
        >>> tick_interval_for_speed(100.0, 10)
        10.0
        >>> tick_interval_for_speed(100.0, 1000)
        1.0
    """
    return max(MIN_TICK_INTERVAL_MS, base_tick_interval_ms / multiplier)


@dataclass(frozen=True)
class ClockStatus:
    """Snapshot of the clock for status queries.

    Attributes:
        speed: Current speed multiplier.
        tick_interval_ms: Real time per simulated minute in ms.
        current_day: Simulated day.
        current_minute: Simulated minute of day (0-1439).
    """

    speed: float
    tick_interval_ms: float
    current_day: int
    current_minute: int

    def to_dict(self) -> dict[str, Any]:
        """Convert status to dictionary for serialization."""
        return {
            "speed": self.speed,
            "tickIntervalMs": self.tick_interval_ms,
            "currentDay": self.current_day,
            "currentMinute": self.current_minute,
        }


class SimulationClock:
    """Simulated day and minute-of-day counters plus the tick cadence.

    The clock itself never sleeps; it only computes how long a driver should
    wait between ticks.
    """

    def __init__(
        self,
        start_day: int = DEFAULT_START_DAY,
        base_tick_interval_ms: float = DEFAULT_BASE_TICK_INTERVAL_MS,
        speed: float = 1.0,
        minute_of_day: int = 0,
    ) -> None:
        """Initialize clock.

        Args:
            start_day: Simulated day to start on.
            base_tick_interval_ms: Real time per simulated minute at 1x.
            speed: Initial speed multiplier.
            minute_of_day: Initial minute of day.

        Raises:
            ValueError: If the start values are out of range.
            ValidationError: If the speed is out of range.
        """
        if start_day < 0:
            msg = f"Start day cannot be negative, got {start_day}"
            raise ValueError(msg)
        if base_tick_interval_ms <= 0:
            msg = f"Base tick interval must be positive, got {base_tick_interval_ms}"
            raise ValueError(msg)
        if not 0 <= minute_of_day < MINUTES_PER_DAY:
            msg = f"Minute of day {minute_of_day} outside valid range [0, {MINUTES_PER_DAY})"
            raise ValueError(msg)

        self._current_day = start_day
        self._minute_of_day = minute_of_day
        self._base_tick_interval_ms = float(base_tick_interval_ms)
        self._speed = validate_speed(speed)
        self._tick_interval_ms = tick_interval_for_speed(
            self._base_tick_interval_ms, self._speed
        )

    @property
    def current_day(self) -> int:
        """Simulated day counter."""
        return self._current_day

    @property
    def minute_of_day(self) -> int:
        """Simulated minute of the current day (0-1439)."""
        return self._minute_of_day

    @property
    def speed(self) -> float:
        """Speed multiplier."""
        return self._speed

    @property
    def base_tick_interval_ms(self) -> float:
        """Real time per simulated minute at 1x speed."""
        return self._base_tick_interval_ms

    @property
    def tick_interval_ms(self) -> float:
        """Effective real time per simulated minute."""
        return self._tick_interval_ms

    @property
    def tick_interval_seconds(self) -> float:
        """Effective real time per simulated minute in seconds."""
        return self._tick_interval_ms / 1000.0

    @property
    def total_minutes(self) -> int:
        """Simulated minutes since day 0."""
        return self._current_day * MINUTES_PER_DAY + self._minute_of_day

    def advance_one_minute(self) -> bool:
        """Advance simulated time by one minute.

        Returns:
            True if the day rolled over.
        """
        self._minute_of_day += 1
        if self._minute_of_day >= MINUTES_PER_DAY:
            self._minute_of_day = 0
            self._current_day += 1
            return True
        return False

    def set_speed(self, multiplier: float) -> float:
        """Change the speed multiplier.

        The simulated day and minute are left untouched; only the tick
        interval changes.

        Args:
            multiplier: New multiplier in (0, 1000].

        Returns:
            New effective tick interval in ms.

        Raises:
            ValidationError: If the multiplier is out of range.
        """
        self._speed = validate_speed(multiplier)
        self._tick_interval_ms = tick_interval_for_speed(
            self._base_tick_interval_ms, self._speed
        )
        logger.info(
            "Simulation speed set to %gx (%gms per minute)",
            self._speed,
            self._tick_interval_ms,
        )
        return self._tick_interval_ms

    def status(self) -> ClockStatus:
        """Snapshot of speed, interval, day and minute."""
        return ClockStatus(
            speed=self._speed,
            tick_interval_ms=self._tick_interval_ms,
            current_day=self._current_day,
            current_minute=self._minute_of_day,
        )
