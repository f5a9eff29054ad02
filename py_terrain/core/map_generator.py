"""
Terrain map generation.

Ties the elevation generator and the classifier together: one call
produces the noise map, the terrain grid derived from it and the seed that
reproduces both.
"""

from dataclasses import dataclass
from typing import Optional

import structlog

from .classifier import TerrainClassifier, TerrainGrid, Visibility
from .noise_field import ElevationField, NoiseConfig, NoiseFieldGenerator
from .pathfinding import PathResult, find_path

logger = structlog.get_logger()


@dataclass(frozen=True)
class TerrainData:
    """Generated elevation field and terrain grid."""

    elevation: ElevationField
    terrain: TerrainGrid

    @property
    def seed(self) -> Optional[str]:
        return self.elevation.seed

    @property
    def width(self) -> int:
        return self.terrain.width

    @property
    def height(self) -> int:
        return self.terrain.height

    def find_path(self, start_x: int, start_y: int, end_x: int, end_y: int) -> PathResult:
        return find_path(start_x, start_y, end_x, end_y, self.terrain)


def generate_terrain(
    width: int,
    height: int,
    visibility: Optional[Visibility] = None,
    seed: Optional[str] = None,
    noise_config: Optional[NoiseConfig] = None,
    classifier: Optional[TerrainClassifier] = None,
) -> TerrainData:
    """
    Generate a terrain map.

    Args:
        width: Map width in cells
        height: Map height in cells
        visibility: Enabled categories, as a name -> bool mapping or an
            iterable of categories; None enables all of them
        seed: Seed string; a fresh one is drawn per call when omitted
        noise_config: Noise parameters, defaults to NoiseConfig()
        classifier: Classifier to use, defaults to TerrainClassifier()

    Raises:
        InvalidDimensionsError: if width or height is not positive
        UnknownTerrainError: if visibility names an unknown category
    """
    elevation = NoiseFieldGenerator(noise_config).generate(width, height, seed)
    terrain = (classifier or TerrainClassifier()).classify(elevation, visibility)
    logger.debug("Terrain classified", seed=elevation.seed, counts=terrain.counts())
    return TerrainData(elevation, terrain)
