"""Configuration management."""

import os
from pathlib import Path

from dotenv import dotenv_values
from pydantic import Field
from pydantic_settings import BaseSettings

# Load .env for local/dev environments only where values are missing from the environment
BASE_DIR = Path(__file__).resolve().parent.parent
env_file = BASE_DIR / ".env"

if env_file.exists():
    file_env = dotenv_values(env_file)
    missing_keys = {k: v for k, v in file_env.items() if k not in os.environ and v is not None}
    for k, v in missing_keys.items():
        os.environ[k] = v


class Settings(BaseSettings):
    """Application settings pulled from environment variables."""

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (plain or json)")

    # Map Generation Configuration
    default_map_width: int = Field(default=300, description="Default map width in cells")
    default_map_height: int = Field(default=300, description="Default map height in cells")
    max_map_width: int = Field(default=2000, description="Max allowed map width")
    max_map_height: int = Field(default=2000, description="Max allowed map height")

    # Noise Configuration
    noise_zoom: float = Field(default=50.0, gt=0, description="Cell coordinates are divided by this")
    noise_octaves: int = Field(default=4, ge=1, description="Number of fractal octaves")
    noise_persistence: float = Field(default=0.5, gt=0, description="Amplitude factor per octave")
    noise_lacunarity: float = Field(default=2.0, gt=0, description="Frequency factor per octave")

    # Classification Configuration
    beach_radius: int = Field(default=1, ge=0, description="Beach exception radius in cells")

    class Config:
        env_prefix = "TERRAIN_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


# Instantiate singleton settings object
settings = Settings()
