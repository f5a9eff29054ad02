"""
Core terrain generation and pathfinding functionality.
"""

from .terrain import (
    TERRAIN_DEFINITIONS,
    TerrainDefinition,
    TerrainType,
    UnknownTerrainError,
    get_terrain_cost,
    validate_terrain_definitions,
)
from .noise_field import ElevationField, InvalidDimensionsError, NoiseConfig, NoiseFieldGenerator
from .classifier import TerrainClassifier, TerrainGrid, classify, parse_visibility
from .pathfinding import IndexedBinaryHeap, PathResult, SearchNode, find_path
from .map_generator import TerrainData, generate_terrain

__all__ = ['TERRAIN_DEFINITIONS', 'TerrainDefinition', 'TerrainType', 'UnknownTerrainError',
           'get_terrain_cost', 'validate_terrain_definitions',
           'ElevationField', 'InvalidDimensionsError', 'NoiseConfig', 'NoiseFieldGenerator',
           'TerrainClassifier', 'TerrainGrid', 'classify', 'parse_visibility',
           'IndexedBinaryHeap', 'PathResult', 'SearchNode', 'find_path',
           'TerrainData', 'generate_terrain']
