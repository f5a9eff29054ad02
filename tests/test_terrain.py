"""Tests for terrain categories and the cost model."""

import math
from dataclasses import replace

import pytest
from py_terrain.core.terrain import (
    DEFAULT_TERRAIN_COST,
    TERRAIN_DEFINITIONS,
    TerrainType,
    UnknownTerrainError,
    all_terrain_names,
    cost_table,
    get_terrain_cost,
    terrain_intensity,
    terrain_order,
    terrain_range,
    validate_terrain_definitions,
)


class TestTerrainTable:
    """Test the shipped terrain table."""

    def test_boundaries_strictly_increase(self):
        """Boundaries rise from water to snow."""
        boundaries = [TERRAIN_DEFINITIONS[t].boundary for t in terrain_order()]
        assert all(a < b for a, b in zip(boundaries, boundaries[1:]))

    def test_default_table_is_valid(self):
        validate_terrain_definitions(TERRAIN_DEFINITIONS)

    def test_water_is_impassable(self):
        assert math.isinf(TERRAIN_DEFINITIONS[TerrainType.WATER].cost)
        assert not TERRAIN_DEFINITIONS[TerrainType.WATER].passable

    def test_passable_costs_at_least_one(self):
        for terrain in TerrainType:
            if terrain == TerrainType.WATER:
                continue
            cost = TERRAIN_DEFINITIONS[terrain].cost
            assert 1.0 <= cost < math.inf

    def test_costs_rise_with_elevation_above_land(self):
        """Land is cheapest and costs never drop from land up to snow."""
        costs = [
            TERRAIN_DEFINITIONS[t].cost
            for t in (TerrainType.LAND, TerrainType.HILLS, TerrainType.MOUNTAIN, TerrainType.SNOW)
        ]
        assert costs == sorted(costs)
        assert TERRAIN_DEFINITIONS[TerrainType.LAND].cost == min(
            d.cost for d in TERRAIN_DEFINITIONS.values()
        )

    def test_terrain_order_and_names(self):
        assert all_terrain_names() == ["water", "sand", "land", "hills", "mountain", "snow"]
        assert terrain_order()[0] == TerrainType.WATER
        assert terrain_order()[-1] == TerrainType.SNOW


class TestTableValidation:
    """Test detection of malformed terrain tables."""

    def test_out_of_order_boundaries_rejected(self):
        bad = dict(TERRAIN_DEFINITIONS)
        bad[TerrainType.LAND] = replace(bad[TerrainType.LAND], boundary=0.80)
        with pytest.raises(ValueError, match="Boundary"):
            validate_terrain_definitions(bad)

    def test_duplicate_boundaries_rejected(self):
        bad = dict(TERRAIN_DEFINITIONS)
        bad[TerrainType.SAND] = replace(bad[TerrainType.SAND], boundary=0.40)
        with pytest.raises(ValueError):
            validate_terrain_definitions(bad)

    def test_missing_category_rejected(self):
        bad = dict(TERRAIN_DEFINITIONS)
        del bad[TerrainType.SNOW]
        with pytest.raises(ValueError, match="snow"):
            validate_terrain_definitions(bad)

    def test_non_positive_cost_rejected(self):
        bad = dict(TERRAIN_DEFINITIONS)
        bad[TerrainType.HILLS] = replace(bad[TerrainType.HILLS], cost=0.0)
        with pytest.raises(ValueError, match="hills"):
            validate_terrain_definitions(bad)


class TestCostLookup:
    """Test cost lookup by label."""

    def test_lookup_by_name_and_enum(self):
        assert get_terrain_cost("land") == 1.0
        assert get_terrain_cost("Mountain") == 4.0
        assert get_terrain_cost(TerrainType.SAND) == 3.0
        assert get_terrain_cost(int(TerrainType.SNOW)) == 5.0

    def test_unknown_label_costs_like_land(self):
        assert get_terrain_cost("lava") == DEFAULT_TERRAIN_COST
        assert get_terrain_cost(42) == DEFAULT_TERRAIN_COST

    def test_cost_table_indexed_by_terrain(self):
        table = cost_table()
        assert len(table) == len(TerrainType)
        assert math.isinf(table[TerrainType.WATER])
        assert table[TerrainType.HILLS] == 2.0

    def test_from_name(self):
        assert TerrainType.from_name(" Hills ") == TerrainType.HILLS
        with pytest.raises(UnknownTerrainError):
            TerrainType.from_name("lava")


class TestTerrainIntensity:
    """Test position of values within category ranges."""

    def test_range_edges(self):
        assert terrain_range(TerrainType.WATER) == (0.0, 0.40)
        assert terrain_range(TerrainType.SNOW) == (0.85, 0.95)

    def test_intensity(self):
        assert terrain_intensity(0.0, "water") == pytest.approx(0.0)
        assert terrain_intensity(0.20, "water") == pytest.approx(0.5)
        assert terrain_intensity(0.55, TerrainType.LAND) == pytest.approx(0.5)

    def test_unknown_terrain_intensity(self):
        assert terrain_intensity(0.5, "lava") == 0.0
