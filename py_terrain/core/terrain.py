"""
Terrain categories and the movement cost model.

This module defines:
- The six terrain categories in elevation order
- Per-category elevation boundaries, movement costs and display colours
- Cost lookup with a Land-equivalent fallback for unknown labels
- Validation of terrain tables before they are used for classification
"""

import math
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, Mapping, Tuple, Union

import numpy as np

# Movement cost of impassable terrain. Never entered by the search.
IMPASSABLE = math.inf

# Cost applied to labels that are not part of the terrain table
DEFAULT_TERRAIN_COST = 1.0


class UnknownTerrainError(KeyError):
    """Raised when a terrain name is not one of the known categories."""


class TerrainType(IntEnum):
    """Terrain categories, ordered by ascending elevation."""

    WATER = 0
    SAND = 1
    LAND = 2
    HILLS = 3
    MOUNTAIN = 4
    SNOW = 5

    @property
    def label(self) -> str:
        return self.name.lower()

    @classmethod
    def from_name(cls, name: Union[str, "TerrainType"]) -> "TerrainType":
        """Parse a category name such as ``"hills"`` (case-insensitive)."""
        if isinstance(name, TerrainType):
            return name
        try:
            return cls[str(name).strip().upper()]
        except KeyError:
            raise UnknownTerrainError(name) from None


@dataclass(frozen=True)
class RGB:
    r: int
    g: int
    b: int


@dataclass(frozen=True)
class TerrainDefinition:
    """Properties of one terrain category."""

    terrain: TerrainType
    boundary: float  # elevation cutoff below which this category applies
    cost: float  # movement cost, IMPASSABLE for never traversable
    base_color: RGB
    color_variation: RGB

    @property
    def name(self) -> str:
        return self.terrain.label

    @property
    def passable(self) -> bool:
        return not math.isinf(self.cost)


TERRAIN_BOUNDARIES = {
    TerrainType.WATER: 0.40,
    TerrainType.SAND: 0.45,
    TerrainType.LAND: 0.65,
    TerrainType.HILLS: 0.75,
    TerrainType.MOUNTAIN: 0.85,
    TerrainType.SNOW: 0.95,
}

TERRAIN_DEFINITIONS: Dict[TerrainType, TerrainDefinition] = {
    TerrainType.WATER: TerrainDefinition(
        TerrainType.WATER,
        TERRAIN_BOUNDARIES[TerrainType.WATER],
        IMPASSABLE,
        base_color=RGB(20, 60, 120),
        color_variation=RGB(40, 80, 100),
    ),
    TerrainType.SAND: TerrainDefinition(
        TerrainType.SAND,
        TERRAIN_BOUNDARIES[TerrainType.SAND],
        3.0,
        base_color=RGB(200, 180, 100),
        color_variation=RGB(55, 75, 50),
    ),
    TerrainType.LAND: TerrainDefinition(
        TerrainType.LAND,
        TERRAIN_BOUNDARIES[TerrainType.LAND],
        1.0,
        base_color=RGB(50, 120, 50),
        color_variation=RGB(100, 100, 50),
    ),
    TerrainType.HILLS: TerrainDefinition(
        TerrainType.HILLS,
        TERRAIN_BOUNDARIES[TerrainType.HILLS],
        2.0,
        base_color=RGB(160, 140, 100),
        color_variation=RGB(60, 50, 40),
    ),
    TerrainType.MOUNTAIN: TerrainDefinition(
        TerrainType.MOUNTAIN,
        TERRAIN_BOUNDARIES[TerrainType.MOUNTAIN],
        4.0,
        base_color=RGB(120, 100, 80),
        color_variation=RGB(60, 40, 30),
    ),
    TerrainType.SNOW: TerrainDefinition(
        TerrainType.SNOW,
        TERRAIN_BOUNDARIES[TerrainType.SNOW],
        5.0,
        base_color=RGB(200, 220, 240),
        color_variation=RGB(55, 35, 15),
    ),
}


def validate_terrain_definitions(
    definitions: Mapping[TerrainType, TerrainDefinition]
) -> None:
    """
    Check that a terrain table can drive classification.

    Every category must be present, boundaries must strictly increase in
    category order and finite costs must be positive.

    Raises:
        ValueError: if the table is malformed
    """
    missing = [t.label for t in TerrainType if t not in definitions]
    if missing:
        raise ValueError(f"Terrain table is missing categories: {', '.join(missing)}")

    previous = None
    for terrain in TerrainType:
        definition = definitions[terrain]
        if definition.terrain is not terrain:
            raise ValueError(
                f"Definition for {terrain.label} describes {definition.terrain.label}"
            )
        if previous is not None and not definition.boundary > previous.boundary:
            raise ValueError(
                f"Boundary of {terrain.label} ({definition.boundary}) must be greater "
                f"than boundary of {previous.name} ({previous.boundary})"
            )
        if math.isnan(definition.cost) or definition.cost <= 0:
            raise ValueError(f"Cost of {terrain.label} must be positive, got {definition.cost}")
        previous = definition


validate_terrain_definitions(TERRAIN_DEFINITIONS)


def terrain_order() -> List[TerrainType]:
    """Categories in enumeration (ascending elevation) order."""
    return list(TerrainType)


def all_terrain_names() -> List[str]:
    return [t.label for t in TerrainType]


def get_terrain_cost(
    terrain: Union[str, int, TerrainType],
    definitions: Mapping[TerrainType, TerrainDefinition] = TERRAIN_DEFINITIONS,
) -> float:
    """
    Movement cost for a terrain label.

    Unknown labels fall back to DEFAULT_TERRAIN_COST instead of failing.
    """
    try:
        if isinstance(terrain, str):
            key = TerrainType.from_name(terrain)
        else:
            key = TerrainType(terrain)
    except (UnknownTerrainError, ValueError):
        return DEFAULT_TERRAIN_COST
    definition = definitions.get(key)
    return definition.cost if definition is not None else DEFAULT_TERRAIN_COST


def cost_table(
    definitions: Mapping[TerrainType, TerrainDefinition] = TERRAIN_DEFINITIONS,
) -> np.ndarray:
    """Movement costs indexed by TerrainType value."""
    return np.array([get_terrain_cost(t, definitions) for t in TerrainType], dtype=np.float64)


def terrain_range(
    terrain: TerrainType,
    definitions: Mapping[TerrainType, TerrainDefinition] = TERRAIN_DEFINITIONS,
) -> Tuple[float, float]:
    """Elevation interval [lower, upper] covered by a category."""
    lower = 0.0 if terrain == TerrainType.WATER else definitions[TerrainType(terrain - 1)].boundary
    return lower, definitions[terrain].boundary


def terrain_intensity(
    value: float,
    terrain: Union[str, TerrainType],
    definitions: Mapping[TerrainType, TerrainDefinition] = TERRAIN_DEFINITIONS,
) -> float:
    """
    Position of an elevation value inside its category's range.

    0.0 at the lower boundary, 1.0 at the upper one. Presentation layers use
    this to shade cells; unknown categories give 0.0.
    """
    try:
        key = TerrainType.from_name(terrain)
    except UnknownTerrainError:
        return 0.0
    lower, upper = terrain_range(key, definitions)
    return (value - lower) / (upper - lower)
