"""Terrain classification: height thresholds and incompatible-pair smoothing."""

import numpy as np
from numpy.typing import NDArray
from scipy import ndimage

from .config import TerrainThresholds
from .terrain_types import TerrainCategory

# Pairs that must not sit next to each other; checked in both directions
INCOMPATIBLE_PAIRS: frozenset[tuple[TerrainCategory, TerrainCategory]] = frozenset({
    (TerrainCategory.WATER, TerrainCategory.MOUNTAIN),
    (TerrainCategory.WATER, TerrainCategory.ROCK),
    (TerrainCategory.SAND, TerrainCategory.FOREST),
})

_CATEGORY_COUNT = len(TerrainCategory)

_INCOMPATIBLE = np.zeros((_CATEGORY_COUNT, _CATEGORY_COUNT), dtype=bool)
for _a, _b in INCOMPATIBLE_PAIRS:
    _INCOMPATIBLE[_a, _b] = True
    _INCOMPATIBLE[_b, _a] = True

# 8-connected, exclude center
_NEIGHBOR_KERNEL = np.array([[1, 1, 1], [1, 0, 1], [1, 1, 1]], dtype=np.int32)


def is_incompatible(a: TerrainCategory, b: TerrainCategory) -> bool:
    """Whether two categories form an incompatible pair (either order)."""
    return bool(_INCOMPATIBLE[a, b])


def classify_terrain(
    height_field: NDArray[np.floating],
    thresholds: TerrainThresholds,
) -> NDArray[np.uint8]:
    """Classify each cell by height.

    A cell gets the lowest category whose threshold exceeds its height;
    heights at or above the last threshold are rock.

    Args:
        height_field: Heights in [0, 1].
        thresholds: Category cut points.

    Returns:
        2D array of TerrainCategory values as uint8.
    """
    cuts = np.asarray(thresholds.cut_points(), dtype=np.float64)
    categories = np.searchsorted(cuts, np.asarray(height_field, dtype=np.float64), side="right")
    return categories.astype(np.uint8)


def neighbor_counts(terrain: NDArray[np.uint8]) -> NDArray[np.int32]:
    """Count each category among the 8 neighbors of every cell.

    Args:
        terrain: Terrain grid.

    Returns:
        Array of shape (categories, height, width).
    """
    return np.stack([
        ndimage.convolve(
            (terrain == category).astype(np.int32),
            _NEIGHBOR_KERNEL,
            mode="constant",
            cval=0,
        )
        for category in TerrainCategory
    ])


def majority_category(terrain: NDArray[np.uint8]) -> NDArray[np.uint8]:
    """Most common neighbor category per cell; ties go to the lowest category."""
    return np.argmax(neighbor_counts(terrain), axis=0).astype(np.uint8)


def smooth_terrain(terrain: NDArray[np.uint8]) -> NDArray[np.uint8]:
    """Replace interior cells that clash with their neighborhood majority.

    Single pass: every cell is judged against the input grid and the result
    goes to a new array, so the outcome does not depend on visiting order.
    Boundary rows and columns are left as they are.

    Args:
        terrain: Classified terrain grid.

    Returns:
        Smoothed copy of the grid.
    """
    majority = majority_category(terrain)

    replace = _INCOMPATIBLE[terrain, majority]
    replace[0, :] = False
    replace[-1, :] = False
    replace[:, 0] = False
    replace[:, -1] = False

    result = terrain.copy()
    result[replace] = majority[replace]
    return result


def generate_terrain(
    height_field: NDArray[np.floating],
    thresholds: TerrainThresholds,
) -> NDArray[np.uint8]:
    """Classify a height field and apply one smoothing pass."""
    return smooth_terrain(classify_terrain(height_field, thresholds))
