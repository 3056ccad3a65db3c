"""Shared test fixtures for map generation tests."""

import numpy as np
import pytest

from mapgen.config import GenerationConfig
from mapgen.game_map import GameMap
from mapgen.terrain_types import TerrainCategory

W = TerrainCategory.WATER
S = TerrainCategory.SAND
G = TerrainCategory.GRASS
F = TerrainCategory.FOREST
M = TerrainCategory.MOUNTAIN
R = TerrainCategory.ROCK


def make_map(terrain, resources=(), seed: int = 1) -> GameMap:
    """Build a GameMap around a hand-written terrain grid."""
    terrain = np.asarray(terrain, dtype=np.uint8)
    height, width = terrain.shape
    return GameMap(
        width=width,
        height=height,
        seed=seed,
        height_field=np.zeros((height, width), dtype=np.float32),
        terrain=terrain,
        resources=tuple(resources),
    )


@pytest.fixture
def banded_terrain() -> np.ndarray:
    """20x20 grid in four horizontal bands: water, sand, grass, forest.

    Each band covers 25% of the map and the walkable bands touch.
    """
    terrain = np.empty((20, 20), dtype=np.uint8)
    terrain[0:5, :] = W
    terrain[5:10, :] = S
    terrain[10:15, :] = G
    terrain[15:20, :] = F
    return terrain


@pytest.fixture
def banded_map(banded_terrain: np.ndarray) -> GameMap:
    return make_map(banded_terrain)


@pytest.fixture
def map_factory():
    """Factory building a GameMap from a terrain grid and resources."""
    return make_map


@pytest.fixture
def small_config() -> GenerationConfig:
    """50x50 configuration with a fixed seed."""
    return GenerationConfig(width=50, height=50, seed=42)
