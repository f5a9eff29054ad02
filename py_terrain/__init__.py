"""Procedural terrain generation and least-cost route finding."""

from .core import (
    ElevationField,
    InvalidDimensionsError,
    PathResult,
    TerrainData,
    TerrainGrid,
    TerrainType,
    find_path,
    generate_terrain,
)

__version__ = "0.1.0"

__all__ = ['ElevationField', 'InvalidDimensionsError', 'PathResult', 'TerrainData',
           'TerrainGrid', 'TerrainType', 'find_path', 'generate_terrain']
