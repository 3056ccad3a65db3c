"""The generated map value object."""

from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray

from .resources import ResourcePoint
from .terrain_types import WALKABLE_VALUES, TerrainCategory


@dataclass(frozen=True, eq=False)
class GameMap:
    """A generated map: height field, terrain grid and resource points.

    Arrays have shape (height, width) and are indexed [y, x]. They are copied
    on construction and made read-only; a map is replaced, never edited.
    Only ResourcePoint.amount changes afterwards, through extraction.

    With NoiseConfig.equalize on (the default), height_field holds each
    cell's height rank scaled to [0, 1], not the raw noise value: the k-th
    lowest of n cells reads k / (n - 1). Order between cells is the noise
    order, so comparisons and thresholds behave as on raw heights, but the
    values are uniformly distributed.
    """

    width: int
    height: int
    seed: int
    height_field: NDArray[np.float32]
    terrain: NDArray[np.uint8]
    resources: tuple[ResourcePoint, ...] = ()
    noise_seed: int | None = None
    attempts: int = 1
    _walkable: NDArray[np.bool_] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        shape = (self.height, self.width)
        if self.width < 1 or self.height < 1:
            raise ValueError(f"Map dimensions must be positive, got {self.width}x{self.height}")

        height_field = np.array(self.height_field, dtype=np.float32)
        terrain = np.array(self.terrain, dtype=np.uint8)
        if height_field.shape != shape:
            raise ValueError(f"height_field shape {height_field.shape} != {shape}")
        if terrain.shape != shape:
            raise ValueError(f"terrain shape {terrain.shape} != {shape}")

        walkable = np.isin(terrain, WALKABLE_VALUES)
        for arr in (height_field, terrain, walkable):
            arr.setflags(write=False)

        object.__setattr__(self, "height_field", height_field)
        object.__setattr__(self, "terrain", terrain)
        object.__setattr__(self, "resources", tuple(self.resources))
        object.__setattr__(self, "_walkable", walkable)
        if self.noise_seed is None:
            object.__setattr__(self, "noise_seed", self.seed)

    @property
    def size(self) -> int:
        return self.width * self.height

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def terrain_at(self, x: int, y: int) -> TerrainCategory:
        """Terrain category at (x, y); cells outside the map read as rock."""
        if not self.in_bounds(x, y):
            return TerrainCategory.ROCK
        return TerrainCategory(int(self.terrain[y, x]))

    def height_at(self, x: int, y: int) -> float:
        """Height at (x, y).

        Raises:
            IndexError: If (x, y) is outside the map.
        """
        if not self.in_bounds(x, y):
            raise IndexError(f"({x}, {y}) outside {self.width}x{self.height} map")
        return float(self.height_field[y, x])

    def is_walkable(self, x: int, y: int) -> bool:
        return self.in_bounds(x, y) and bool(self._walkable[y, x])

    def walkable_mask(self) -> NDArray[np.bool_]:
        """Read-only boolean mask of walkable cells."""
        return self._walkable

    def category_counts(self) -> dict[TerrainCategory, int]:
        """Cell count of every category present on the map."""
        counts = np.bincount(self.terrain.ravel(), minlength=len(TerrainCategory))
        return {
            category: int(counts[category])
            for category in TerrainCategory
            if counts[category] > 0
        }
