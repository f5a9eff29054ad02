"""
Elevation field generation from fractal simplex noise.

Each call to ``NoiseFieldGenerator.generate`` samples a simplex noise
surface at a seed-dependent offset, sums several octaves of it and then
stretches the result so that the lowest cell is exactly 0.0 and the highest
exactly 1.0. The stretch guarantees that every terrain boundary in [0, 1] is
reachable whatever the seed.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np
import structlog
from noise import snoise2

from ..utils.random import get_prng, make_seed

logger = structlog.get_logger()

# Noise offsets are drawn from [-OFFSET_RANGE, OFFSET_RANGE). Kept small enough
# for the single precision arithmetic of the simplex implementation.
OFFSET_RANGE = 1024.0


class InvalidDimensionsError(ValueError):
    """Raised when a field is requested with non-positive width or height."""


@dataclass
class NoiseConfig:
    """Configuration for elevation field generation."""

    zoom: float = 50.0
    octaves: int = 4
    persistence: float = 0.5
    lacunarity: float = 2.0

    @classmethod
    def from_settings(cls, settings) -> "NoiseConfig":
        return cls(
            zoom=settings.noise_zoom,
            octaves=settings.noise_octaves,
            persistence=settings.noise_persistence,
            lacunarity=settings.noise_lacunarity,
        )


@dataclass(frozen=True, eq=False)
class ElevationField:
    """
    Normalized elevation grid.

    ``values`` has shape (height, width), is indexed ``values[y, x]`` and is
    read-only.
    """

    values: np.ndarray
    seed: Optional[str] = None

    @property
    def width(self) -> int:
        return self.values.shape[1]

    @property
    def height(self) -> int:
        return self.values.shape[0]

    def at(self, x: int, y: int) -> float:
        return float(self.values[y, x])

    @classmethod
    def from_array(cls, values, seed: Optional[str] = None) -> "ElevationField":
        """Wrap an existing 2D array (rows of cells) without renormalizing it."""
        array = np.array(values, dtype=np.float64)
        if array.ndim != 2 or array.size == 0:
            raise InvalidDimensionsError(
                f"Elevation values must be a non-empty 2D grid, got shape {array.shape}"
            )
        array.setflags(write=False)
        return cls(array, seed)


def _check_dimensions(width, height) -> None:
    for name, value in (("width", width), ("height", height)):
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
            raise InvalidDimensionsError(f"{name} must be an integer, got {value!r}")
        if value <= 0:
            raise InvalidDimensionsError(f"{name} must be positive, got {value}")


def normalize_field(raw: np.ndarray) -> np.ndarray:
    """
    Stretch values so that min maps to 0.0 and max to 1.0.

    A constant field has no range to stretch and maps to all zeros.
    """
    min_value = float(raw.min())
    max_value = float(raw.max())
    if max_value == min_value:
        return np.zeros_like(raw, dtype=np.float64)
    normalized = (raw - min_value) / (max_value - min_value)
    # Guard the exact endpoints against rounding
    return np.clip(normalized, 0.0, 1.0)


class NoiseFieldGenerator:
    """Generates normalized elevation fields from fractal simplex noise."""

    def __init__(self, config: Optional[NoiseConfig] = None):
        self.config = config or NoiseConfig()

    def fractal_noise(self, x: float, y: float, offset_x: float, offset_y: float) -> float:
        """
        Sum of octaves at one point, remapped from [-1, 1] to [0, 1].

        Args:
            x, y: Coordinates already divided by the zoom factor
            offset_x, offset_y: Seed-dependent translation of the noise surface
        """
        value = 0.0
        amplitude = 1.0
        frequency = 1.0
        max_value = 0.0

        for _ in range(self.config.octaves):
            value += amplitude * snoise2(x * frequency + offset_x, y * frequency + offset_y)
            max_value += amplitude
            amplitude *= self.config.persistence
            frequency *= self.config.lacunarity

        return (value / max_value + 1) / 2

    def generate(self, width: int, height: int, seed: Optional[str] = None) -> ElevationField:
        """
        Generate a normalized elevation field.

        Args:
            width: Number of columns, must be positive
            height: Number of rows, must be positive
            seed: Seed string; a fresh one is drawn when omitted

        Returns:
            ElevationField spanning exactly [0, 1]

        Raises:
            InvalidDimensionsError: if width or height is not a positive integer
        """
        _check_dimensions(width, height)
        seed = seed if seed is not None else make_seed()
        prng = get_prng(seed)
        offset_x = prng.uniform(-OFFSET_RANGE, OFFSET_RANGE)
        offset_y = prng.uniform(-OFFSET_RANGE, OFFSET_RANGE)

        zoom = self.config.zoom
        raw = np.empty((height, width), dtype=np.float64)
        for y in range(height):
            for x in range(width):
                raw[y, x] = self.fractal_noise(x / zoom, y / zoom, offset_x, offset_y)

        logger.debug(
            "Raw elevation generated",
            width=width,
            height=height,
            seed=seed,
            raw_min=float(raw.min()),
            raw_max=float(raw.max()),
        )

        values = normalize_field(raw)
        values.setflags(write=False)
        logger.info("Elevation field generated", width=width, height=height, seed=seed)
        return ElevationField(values, seed)


def generate_elevation(
    width: int,
    height: int,
    seed: Optional[str] = None,
    config: Optional[NoiseConfig] = None,
) -> ElevationField:
    """Convenience wrapper around NoiseFieldGenerator.generate."""
    return NoiseFieldGenerator(config).generate(width, height, seed)
