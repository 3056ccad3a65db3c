"""Terrain categories and resource types."""

from enum import Enum, IntEnum


class TerrainCategory(IntEnum):
    """Terrain categories, ordered by the height thresholds that produce them.

    Values double as the uint8 storage value in terrain grids.
    """

    WATER = 0
    SAND = 1
    GRASS = 2
    FOREST = 3
    MOUNTAIN = 4
    ROCK = 5

    @property
    def walkable(self) -> bool:
        """Whether the cell counts towards the walkable area."""
        return self in _WALKABLE_CATEGORIES

    @property
    def resource_eligible(self) -> bool:
        """Whether resource points may be placed on this category."""
        return self in _RESOURCE_CATEGORIES


class ResourceType(str, Enum):
    """Types of harvestable resource points."""

    WOOD = "wood"
    STONE = "stone"
    METAL = "metal"
    FOOD = "food"
    WATER = "water"


# Define sets for O(1) lookup
_WALKABLE_CATEGORIES = frozenset({
    TerrainCategory.SAND,
    TerrainCategory.GRASS,
    TerrainCategory.FOREST,
    TerrainCategory.MOUNTAIN,
})

_RESOURCE_CATEGORIES = frozenset({
    TerrainCategory.SAND,
    TerrainCategory.GRASS,
    TerrainCategory.FOREST,
    TerrainCategory.MOUNTAIN,
})

WALKABLE_VALUES: tuple[int, ...] = tuple(sorted(int(c) for c in _WALKABLE_CATEGORIES))
RESOURCE_VALUES: tuple[int, ...] = tuple(sorted(int(c) for c in _RESOURCE_CATEGORIES))
