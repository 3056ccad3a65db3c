"""Procedural game map generation.

Generates a height field from seeded gradient noise, classifies it into
terrain, scatters resource points, and validates the result for diversity,
spacing and walkable connectivity, retrying with a new seed on failure.
"""

from .classification import classify_terrain, smooth_terrain
from .config import (
    GenerationConfig,
    NoiseConfig,
    ResourceConfig,
    TerrainThresholds,
    ValidationConfig,
    find_config,
    load_config,
)
from .exceptions import GenerationFailedError, MapGenError
from .game_map import GameMap
from .generator import MapGenerator, build_map, generate_map
from .noise import NoiseField, generate_height_field
from .persistence import load_map, save_map
from .placement import place_resources
from .resources import ResourcePoint
from .terrain_types import ResourceType, TerrainCategory
from .validation import ValidationResult, validate_map

__all__ = [
    # Types
    "TerrainCategory",
    "ResourceType",
    "ResourcePoint",
    "GameMap",
    # Config
    "GenerationConfig",
    "NoiseConfig",
    "TerrainThresholds",
    "ResourceConfig",
    "ValidationConfig",
    "load_config",
    "find_config",
    # Pipeline
    "NoiseField",
    "generate_height_field",
    "classify_terrain",
    "smooth_terrain",
    "place_resources",
    "validate_map",
    "ValidationResult",
    "MapGenerator",
    "build_map",
    "generate_map",
    # Persistence
    "save_map",
    "load_map",
    # Exceptions
    "MapGenError",
    "GenerationFailedError",
]
