"""Tests for state management classes."""

from __future__ import annotations

import pytest

from growhouse_sim.core.state import (
    GreenhouseState,
    TableState,
    create_greenhouse,
    create_table,
)


class TestTableState:
    """Tests for TableState dataclass."""

    def test_default_creation(self) -> None:
        """A new table holds a full crop of seedlings."""
        table = TableState(id=1, position="G1T1")
        assert table.plant_count == 480
        assert table.plant_size == 2.0
        assert table.soil_moisture == 80.0
        assert table.soil_fertility == 100.0
        assert table.art_light == 0.0
        assert table.water is False
        assert table.fertilizer is False
        assert table.over_fertilized_minutes == 0

    def test_invalid_plant_count(self) -> None:
        """Error on plant count above a full table."""
        with pytest.raises(ValueError, match="Plant count"):
            TableState(id=1, position="G1T1", plant_count=481)

    def test_invalid_moisture(self) -> None:
        """Error on moisture outside [0, 100]."""
        with pytest.raises(ValueError, match="moisture"):
            TableState(id=1, position="G1T1", soil_moisture=101.0)

    def test_invalid_fertility(self) -> None:
        """Error on fertility outside [0, 150]."""
        with pytest.raises(ValueError, match="fertility"):
            TableState(id=1, position="G1T1", soil_fertility=-1.0)

    def test_invalid_light(self) -> None:
        """Error on lamp output above 2000."""
        with pytest.raises(ValueError, match="light"):
            TableState(id=1, position="G1T1", art_light=2500.0)

    def test_is_dead(self) -> None:
        """Empty tables and zero-size crops are dead."""
        assert not TableState(id=1, position="G1T1").is_dead
        assert TableState(id=1, position="G1T1", plant_count=0).is_dead
        assert TableState(id=1, position="G1T1", plant_size=0.0).is_dead

    def test_to_dict(self) -> None:
        """Serialization uses camelCase keys."""
        data = TableState(id=3, position="G2T3", planted_day=100).to_dict()
        assert data["id"] == 3
        assert data["position"] == "G2T3"
        assert data["plantCount"] == 480
        assert data["plantSize"] == 2.0
        assert data["soilMoisture"] == 80.0
        assert data["soilFertility"] == 100.0
        assert data["artLight"] == 0.0
        assert data["plantedDate"] == 100


class TestGreenhouseState:
    """Tests for GreenhouseState dataclass."""

    def test_default_creation(self) -> None:
        """A new greenhouse starts at the seed climate."""
        greenhouse = GreenhouseState(id=1, name="G1")
        assert greenhouse.light_intensity == 500.0
        assert greenhouse.temperature == 20.0
        assert greenhouse.humidity == 60.0
        assert greenhouse.fan is False
        assert greenhouse.shading == 0.0
        assert greenhouse.ventilation_start is None

    def test_invalid_shading(self) -> None:
        """Error on shading above 100 %."""
        with pytest.raises(ValueError, match="Shading"):
            GreenhouseState(id=1, name="G1", shading=120.0)

    def test_duplicate_tables(self) -> None:
        """Error on two tables sharing an id."""
        tables = [TableState(id=1, position="G1T1"), TableState(id=1, position="G1T1")]
        with pytest.raises(ValueError, match="Duplicate"):
            GreenhouseState(id=1, name="G1", tables=tables)

    def test_get_table(self, greenhouse: GreenhouseState) -> None:
        """Tables are found by id."""
        table = greenhouse.get_table(2)
        assert table is not None
        assert table.position == "G1T2"
        assert greenhouse.get_table(99) is None

    def test_living_plants(self, greenhouse: GreenhouseState) -> None:
        """Living plants sum over all tables."""
        assert greenhouse.living_plants == 960
        greenhouse.tables[0].plant_count = 0
        assert greenhouse.living_plants == 480

    def test_to_dict_includes_tables(self, greenhouse: GreenhouseState) -> None:
        """Serialization nests the tables."""
        data = greenhouse.to_dict()
        assert data["name"] == "G1"
        assert data["lightIntensity"] == 500.0
        assert [t["position"] for t in data["tables"]] == ["G1T1", "G1T2"]


class TestFactories:
    """Tests for create_table and create_greenhouse."""

    def test_create_table_position(self) -> None:
        """Position label combines greenhouse and table ids."""
        table = create_table(4, 8, planted_day=100)
        assert table.position == "G4T8"
        assert table.planted_day == 100

    def test_create_greenhouse(self) -> None:
        """Tables are numbered from 1."""
        greenhouse = create_greenhouse(2, 8, planted_day=0)
        assert greenhouse.name == "G2"
        assert [t.id for t in greenhouse.tables] == list(range(1, 9))
