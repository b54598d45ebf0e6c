"""Tests for the greenhouse climate engine."""

from __future__ import annotations

import numpy as np
import pytest

from growhouse_sim.core.state import GreenhouseState
from growhouse_sim.simulation.dataset import EnvironmentRecord
from growhouse_sim.simulation.environment import GreenhouseEnvironmentEngine


@pytest.fixture
def climate_engine() -> GreenhouseEnvironmentEngine:
    """Climate engine under test."""
    return GreenhouseEnvironmentEngine()


class TestLightAndHeat:
    """Tests for the fan-off branch."""

    def test_sunlight_from_shading(
        self,
        climate_engine: GreenhouseEnvironmentEngine,
        greenhouse: GreenhouseState,
        mild_record: EnvironmentRecord,
    ) -> None:
        """Light intensity follows the shading screen."""
        greenhouse.shading = 25.0
        climate_engine.update(greenhouse, mild_record, 0)
        assert greenhouse.light_intensity == 750

    def test_light_warms_still_air(
        self,
        climate_engine: GreenhouseEnvironmentEngine,
        greenhouse: GreenhouseState,
        mild_record: EnvironmentRecord,
    ) -> None:
        """Full sun warms the greenhouse by 0.1 °C per minute."""
        climate_engine.update(greenhouse, mild_record, 0)
        assert greenhouse.temperature == pytest.approx(20.1)
        assert greenhouse.humidity == 60.0

    def test_full_shade_no_heat(
        self,
        climate_engine: GreenhouseEnvironmentEngine,
        greenhouse: GreenhouseState,
        mild_record: EnvironmentRecord,
    ) -> None:
        """A closed screen keeps the temperature constant."""
        greenhouse.shading = 100.0
        climate_engine.update(greenhouse, mild_record, 0)
        assert greenhouse.light_intensity == 0
        assert greenhouse.temperature == 20.0

    def test_temperature_ceiling(
        self,
        climate_engine: GreenhouseEnvironmentEngine,
        greenhouse: GreenhouseState,
        mild_record: EnvironmentRecord,
    ) -> None:
        """Temperature is clamped at 70 °C."""
        greenhouse.temperature = 69.95
        climate_engine.update(greenhouse, mild_record, 0)
        assert greenhouse.temperature == 70.0

    def test_humidity_ceiling(
        self,
        climate_engine: GreenhouseEnvironmentEngine,
        greenhouse: GreenhouseState,
        mild_record: EnvironmentRecord,
    ) -> None:
        """Humidity above 85 % escapes."""
        greenhouse.humidity = 95.0
        climate_engine.update(greenhouse, mild_record, 0)
        assert greenhouse.humidity == 85.0


class TestVentilation:
    """Tests for the fan-on branch."""

    def test_fan_start_recorded(
        self,
        climate_engine: GreenhouseEnvironmentEngine,
        greenhouse: GreenhouseState,
        mild_record: EnvironmentRecord,
    ) -> None:
        """The first ventilated minute records the start and adds no heat."""
        greenhouse.fan = True
        climate_engine.update(greenhouse, mild_record, 300)
        assert greenhouse.ventilation_start == 300
        assert greenhouse.temperature == 20.0

    def test_temperature_pull_after_exchange(
        self,
        climate_engine: GreenhouseEnvironmentEngine,
        greenhouse: GreenhouseState,
        mild_record: EnvironmentRecord,
    ) -> None:
        """After 30 minutes the air is pulled toward the outside average."""
        greenhouse.fan = True
        for minute in range(300, 330):
            climate_engine.update(greenhouse, mild_record, minute)
        assert greenhouse.temperature == 20.0

        climate_engine.update(greenhouse, mild_record, 330)
        assert greenhouse.temperature == pytest.approx(20.0 - (20.0 - 12.0) * 0.1)

    def test_humidity_pull(
        self,
        climate_engine: GreenhouseEnvironmentEngine,
        greenhouse: GreenhouseState,
        mild_record: EnvironmentRecord,
    ) -> None:
        """Humid air is pulled toward 60 % as the fan keeps running."""
        greenhouse.fan = True
        greenhouse.humidity = 80.0
        climate_engine.update(greenhouse, mild_record, 0)
        assert greenhouse.humidity == 80.0
        climate_engine.update(greenhouse, mild_record, 30)
        assert greenhouse.humidity == pytest.approx(79.0)

    def test_fan_off_clears_marker(
        self,
        climate_engine: GreenhouseEnvironmentEngine,
        greenhouse: GreenhouseState,
        mild_record: EnvironmentRecord,
    ) -> None:
        """Switching the fan off resets the ventilation timer."""
        greenhouse.fan = True
        climate_engine.update(greenhouse, mild_record, 10)
        greenhouse.fan = False
        climate_engine.update(greenhouse, mild_record, 11)
        assert greenhouse.ventilation_start is None

        greenhouse.fan = True
        climate_engine.update(greenhouse, mild_record, 50)
        assert greenhouse.ventilation_start == 50

    def test_ventilation_across_midnight(
        self,
        climate_engine: GreenhouseEnvironmentEngine,
        greenhouse: GreenhouseState,
        mild_record: EnvironmentRecord,
    ) -> None:
        """Elapsed fan time keeps counting across a day boundary."""
        greenhouse.fan = True
        greenhouse.ventilation_start = 100 * 1440 + 1430
        greenhouse.temperature = 30.0
        climate_engine.update(greenhouse, mild_record, 101 * 1440 + 20)
        # 30 minutes elapsed across midnight: pull applies
        assert greenhouse.temperature == pytest.approx(30.0 - 18.0 * 0.1)

    def test_fan_running_a_full_day(
        self,
        climate_engine: GreenhouseEnvironmentEngine,
        greenhouse: GreenhouseState,
        mild_record: EnvironmentRecord,
    ) -> None:
        """A fan left on for 24 hours still pulls the temperature."""
        greenhouse.fan = True
        greenhouse.ventilation_start = 100 * 1440 + 100
        greenhouse.temperature = 30.0
        greenhouse.humidity = 70.0
        climate_engine.update(greenhouse, mild_record, 101 * 1440 + 100)

        assert greenhouse.ventilation_start == 100 * 1440 + 100
        assert greenhouse.temperature == pytest.approx(30.0 - 18.0 * 0.1)
        # 1440 elapsed minutes: 10 points above 60 % times 48 x 0.05
        assert greenhouse.humidity == pytest.approx(70.0 - 10.0 * 48 * 0.05)


class TestClimateBounds:
    """Randomized checks of the post-update climate box."""

    def test_bounds_hold(
        self,
        climate_engine: GreenhouseEnvironmentEngine,
        mild_record: EnvironmentRecord,
        rng: np.random.Generator,
    ) -> None:
        """Temperature stays in [0, 70] and humidity in [0, 85] after updates."""
        for _ in range(50):
            greenhouse = GreenhouseState(
                id=1,
                name="G1",
                temperature=float(rng.uniform(0.0, 70.0)),
                humidity=float(rng.uniform(0.0, 100.0)),
                shading=float(rng.uniform(0.0, 100.0)),
                fan=bool(rng.integers(0, 2)),
            )
            for minute in range(0, 600, 7):
                climate_engine.update(greenhouse, mild_record, minute)
                assert 0.0 <= greenhouse.temperature <= 70.0
                assert 0.0 <= greenhouse.humidity <= 85.0
