"""
Terrain classification of elevation fields.

This module implements:
- Threshold classification of elevations into terrain categories
- Filtered classification when only some categories are enabled
- The beach exception placing sand next to water
- Nearest-midpoint fallback for cells whose natural category is disabled
"""

from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
import structlog
from scipy import ndimage

from .noise_field import ElevationField, InvalidDimensionsError
from .terrain import (
    TERRAIN_DEFINITIONS,
    TerrainDefinition,
    TerrainType,
    UnknownTerrainError,
    cost_table,
    terrain_range,
    validate_terrain_definitions,
)

logger = structlog.get_logger()

# Cells within this Euclidean distance of water may become beach
BEACH_RADIUS = 1

# Category used everywhere when no category is enabled
FALLBACK_TERRAIN = TerrainType.LAND

Visibility = Union[Mapping[str, bool], Iterable[Union[str, TerrainType]]]


@dataclass(frozen=True, eq=False)
class TerrainGrid:
    """
    Immutable grid of terrain categories.

    ``codes`` has shape (height, width), holds TerrainType values and is
    indexed ``codes[y, x]``.
    """

    codes: np.ndarray

    def __post_init__(self):
        raw = np.asarray(self.codes)
        if raw.ndim != 2 or raw.size == 0:
            raise InvalidDimensionsError(
                f"Terrain codes must be a non-empty 2D grid, got shape {raw.shape}"
            )
        if not np.issubdtype(raw.dtype, np.integer):
            raise UnknownTerrainError(f"terrain codes must be integers, got {raw.dtype}")
        invalid = (raw < min(TerrainType)) | (raw > max(TerrainType))
        if invalid.any():
            raise UnknownTerrainError(int(raw[invalid][0]))
        # Own a read-only copy so callers cannot change the grid during a search
        codes = np.array(raw, dtype=np.int8)
        codes.setflags(write=False)
        object.__setattr__(self, "codes", codes)

    @property
    def width(self) -> int:
        return self.codes.shape[1]

    @property
    def height(self) -> int:
        return self.codes.shape[0]

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def at(self, x: int, y: int) -> TerrainType:
        return TerrainType(int(self.codes[y, x]))

    def costs(
        self, definitions: Mapping[TerrainType, TerrainDefinition] = TERRAIN_DEFINITIONS
    ) -> np.ndarray:
        """Per-cell movement cost, indexed ``[y, x]``."""
        return cost_table(definitions)[self.codes]

    def counts(self) -> Dict[str, int]:
        """Number of cells per category name, including absent categories."""
        found = Counter(self.codes.ravel().tolist())
        return {t.label: found.get(int(t), 0) for t in TerrainType}

    def to_names(self) -> List[List[str]]:
        labels = [t.label for t in TerrainType]
        return [[labels[code] for code in row] for row in self.codes.tolist()]

    def __eq__(self, other):
        if not isinstance(other, TerrainGrid):
            return NotImplemented
        return np.array_equal(self.codes, other.codes)

    @classmethod
    def filled(cls, width: int, height: int, terrain: TerrainType) -> "TerrainGrid":
        if width <= 0 or height <= 0:
            raise InvalidDimensionsError(f"Grid must be at least 1x1, got {width}x{height}")
        return cls(np.full((height, width), int(terrain), dtype=np.int8))

    @classmethod
    def from_names(cls, rows: Sequence[Sequence[Union[str, TerrainType]]]) -> "TerrainGrid":
        """
        Build a grid from rows of category names.

        Raises:
            UnknownTerrainError: for names outside the six categories
            InvalidDimensionsError: for empty or ragged input
        """
        if not rows or not rows[0]:
            raise InvalidDimensionsError("Terrain rows must not be empty")
        width = len(rows[0])
        if any(len(row) != width for row in rows):
            raise InvalidDimensionsError("Terrain rows must all have the same length")
        codes = np.array(
            [[int(TerrainType.from_name(name)) for name in row] for row in rows],
            dtype=np.int8,
        )
        return cls(codes)


def parse_visibility(visibility: Optional[Visibility]) -> Optional[Tuple[TerrainType, ...]]:
    """
    Normalize a visibility setting into the active categories.

    Accepts a mapping of category names to booleans (names left out count as
    disabled), an iterable of enabled categories or a single category name.
    ``None`` means no filter.
    The result is in category enumeration order.

    Raises:
        UnknownTerrainError: for names outside the six categories
    """
    if visibility is None:
        return None
    if isinstance(visibility, (str, TerrainType)):
        visibility = [visibility]
    if isinstance(visibility, Mapping):
        enabled = {TerrainType.from_name(name) for name, on in visibility.items() if on}
        # Validate disabled names too
        for name in visibility:
            TerrainType.from_name(name)
    else:
        enabled = {TerrainType.from_name(name) for name in visibility}
    return tuple(t for t in TerrainType if t in enabled)


class TerrainClassifier:
    """Maps elevation fields to terrain grids."""

    def __init__(
        self,
        definitions: Optional[Mapping[TerrainType, TerrainDefinition]] = None,
        beach_radius: int = BEACH_RADIUS,
    ):
        """
        Initialize terrain classifier.

        Args:
            definitions: Terrain table, defaults to TERRAIN_DEFINITIONS
            beach_radius: Distance in cells within which sand may replace land near water

        Raises:
            ValueError: if the terrain table is malformed
        """
        self.definitions = definitions if definitions is not None else TERRAIN_DEFINITIONS
        validate_terrain_definitions(self.definitions)
        self.beach_radius = beach_radius
        self.boundaries = np.array(
            [self.definitions[t].boundary for t in TerrainType], dtype=np.float64
        )
        self.midpoints = np.array(
            [sum(terrain_range(t, self.definitions)) / 2 for t in TerrainType],
            dtype=np.float64,
        )

    def natural_terrain(self, values: np.ndarray) -> np.ndarray:
        """
        Category each elevation receives when every category is enabled.

        The category is the first whose boundary the value is strictly below;
        values at or above the top boundary are snow.
        """
        codes = np.searchsorted(self.boundaries, values, side="right")
        return np.minimum(codes, int(TerrainType.SNOW)).astype(np.int8)

    def classify_value(self, value: float) -> TerrainType:
        return TerrainType(int(self.natural_terrain(np.asarray([value]))[0]))

    def _beach_footprint(self) -> np.ndarray:
        r = self.beach_radius
        dy, dx = np.mgrid[-r : r + 1, -r : r + 1]
        footprint = dx * dx + dy * dy <= r * r
        footprint[r, r] = False
        return footprint

    def near_water(self, values: np.ndarray) -> np.ndarray:
        """Cells with a water-level neighbour within the beach radius."""
        water = values < self.definitions[TerrainType.WATER].boundary
        if self.beach_radius <= 0:
            return np.zeros_like(water)
        return ndimage.binary_dilation(water, structure=self._beach_footprint())

    def nearest_active(self, values: np.ndarray, active: Sequence[TerrainType]) -> np.ndarray:
        """
        Active category whose range midpoint is closest to each value.

        Ties resolve to the category listed first in ``active``.
        """
        candidates = np.array([int(t) for t in active], dtype=np.int8)
        distances = np.abs(values[np.newaxis, :, :] - self.midpoints[candidates][:, None, None])
        return candidates[np.argmin(distances, axis=0)]

    def classify(
        self, field: ElevationField, visibility: Optional[Visibility] = None
    ) -> TerrainGrid:
        """
        Classify every cell of an elevation field.

        Args:
            field: Normalized elevation field
            visibility: Enabled categories (see parse_visibility); None keeps all

        Returns:
            TerrainGrid with the same dimensions as the field
        """
        values = field.values
        active = parse_visibility(visibility)

        if active is None:
            logger.debug("Classifying terrain", mode="default")
            return TerrainGrid(self.natural_terrain(values))

        if len(active) == 0:
            logger.debug("Classifying terrain", mode="fallback", terrain=FALLBACK_TERRAIN.label)
            return TerrainGrid.filled(field.width, field.height, FALLBACK_TERRAIN)

        if len(active) == 1:
            logger.debug("Classifying terrain", mode="single", terrain=active[0].label)
            return TerrainGrid.filled(field.width, field.height, active[0])

        logger.debug("Classifying terrain", mode="filtered", active=[t.label for t in active])
        natural = self.natural_terrain(values)
        is_active = np.isin(natural, [int(t) for t in active])
        result = np.where(is_active, natural, self.nearest_active(values, active))

        if TerrainType.SAND in active:
            beach = (~is_active) & (natural == TerrainType.LAND) & self.near_water(values)
            result = np.where(beach, np.int8(TerrainType.SAND), result)

        return TerrainGrid(result.astype(np.int8))


def classify(
    field: ElevationField,
    visibility: Optional[Visibility] = None,
    definitions: Optional[Mapping[TerrainType, TerrainDefinition]] = None,
) -> TerrainGrid:
    """Classify a field with a one-off TerrainClassifier."""
    return TerrainClassifier(definitions).classify(field, visibility)
