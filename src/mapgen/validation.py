"""Post-generation validation: diversity, spacing, connectivity."""

import logging
from collections.abc import Sequence

import numpy as np
from numpy.typing import NDArray
from scipy.spatial.distance import pdist

from .config import GenerationConfig, ValidationConfig
from .game_map import GameMap
from .resources import ResourcePoint
from .terrain_types import TerrainCategory

logger = logging.getLogger(__name__)


class ValidationResult:
    """Result of map validation."""

    def __init__(self) -> None:
        self.errors: list[str] = []
        self.warnings: list[str] = []
        self.stats: dict[str, float] = {}
        self.passed = True

    def add_error(self, message: str) -> None:
        """Add validation error."""
        self.errors.append(message)
        self.passed = False

    def add_warning(self, message: str) -> None:
        """Add validation warning."""
        self.warnings.append(message)

    def __bool__(self) -> bool:
        return self.passed


def validate_map(
    game_map: GameMap,
    config: GenerationConfig | None = None,
) -> ValidationResult:
    """Validate a generated map against the acceptance criteria.

    Args:
        game_map: Map to check.
        config: Generation configuration; defaults apply when omitted.

    Returns:
        ValidationResult with any errors/warnings.
    """
    config = config or GenerationConfig()
    criteria = config.validation
    result = ValidationResult()

    # Check 1: Enough distinct categories, none too rare or too dominant
    _check_terrain_diversity(game_map.terrain, criteria, result)

    # Check 2: Resource points keep their distance
    _check_resource_spacing(game_map.resources, config.resources.min_distance, result)

    # Check 3: Walkable area is one connected region
    if criteria.enable_connectivity_check:
        _check_connectivity(game_map.walkable_mask(), criteria.min_connected_fraction, result)
    else:
        result.add_warning("Connectivity check disabled")

    # Check 4: Enough of the map is walkable at all
    _check_walkable_ratio(game_map.walkable_mask(), criteria.min_walkable_ratio, result)

    if result.passed:
        logger.debug(f"Map validation passed (seed {game_map.noise_seed})")
    else:
        logger.info(
            f"Map validation failed for seed {game_map.noise_seed} "
            f"with {len(result.errors)} errors"
        )
        for error in result.errors:
            logger.info(f"  - {error}")

    for warning in result.warnings:
        logger.warning(f"  - {warning}")

    return result


def category_fractions(terrain: NDArray[np.uint8]) -> dict[TerrainCategory, float]:
    """Share of the map held by each present category."""
    total = terrain.size
    counts = np.bincount(terrain.ravel(), minlength=len(TerrainCategory))
    return {
        category: counts[category] / total
        for category in TerrainCategory
        if counts[category] > 0
    }


def flood_fill(
    walkable: NDArray[np.bool_],
    visited: NDArray[np.bool_],
    start_x: int,
    start_y: int,
) -> int:
    """Mark and count the 4-connected walkable region containing a cell.

    Iterative, stack based. Cells already visited are not counted again.

    Args:
        walkable: Boolean mask of walkable cells.
        visited: Mask updated in place with every cell reached.
        start_x: Starting column.
        start_y: Starting row.

    Returns:
        Number of newly visited cells.
    """
    height, width = walkable.shape
    stack = [(start_x, start_y)]
    count = 0

    while stack:
        x, y = stack.pop()

        if x < 0 or x >= width or y < 0 or y >= height:
            continue
        if visited[y, x] or not walkable[y, x]:
            continue

        visited[y, x] = True
        count += 1

        stack.append((x + 1, y))
        stack.append((x - 1, y))
        stack.append((x, y + 1))
        stack.append((x, y - 1))

    return count


def largest_component_size(walkable: NDArray[np.bool_]) -> int:
    """Size of the largest 4-connected walkable region."""
    visited = np.zeros(walkable.shape, dtype=bool)
    largest = 0

    for y, x in np.argwhere(walkable):
        if visited[y, x]:
            continue
        largest = max(largest, flood_fill(walkable, visited, int(x), int(y)))

    return largest


def _check_terrain_diversity(
    terrain: NDArray[np.uint8],
    criteria: ValidationConfig,
    result: ValidationResult,
) -> None:
    """Check category count and the share of each present category."""
    fractions = category_fractions(terrain)
    result.stats["categories"] = len(fractions)

    if len(fractions) < criteria.min_categories:
        result.add_error(
            f"Only {len(fractions)} terrain categories, need {criteria.min_categories}"
        )

    for category, fraction in fractions.items():
        if fraction < criteria.min_category_fraction:
            result.add_error(
                f"{category.name.lower()} covers {fraction:.1%}, "
                f"below {criteria.min_category_fraction:.0%}"
            )
        elif fraction > criteria.max_category_fraction:
            result.add_error(
                f"{category.name.lower()} covers {fraction:.1%}, "
                f"above {criteria.max_category_fraction:.0%}"
            )


def _check_resource_spacing(
    resources: Sequence[ResourcePoint],
    min_distance: float,
    result: ValidationResult,
) -> None:
    """Check every pair of resource points is far enough apart."""
    if not resources:
        result.add_warning("No resource points placed")
        return

    if len(resources) < 2:
        return

    positions = np.array([r.position for r in resources], dtype=np.float64)
    distances = pdist(positions)
    closest = float(distances.min())
    result.stats["closest_resources"] = closest

    too_close = int(np.sum(distances < min_distance))
    if too_close:
        result.add_error(
            f"{too_close} resource pairs closer than {min_distance} "
            f"(closest {closest:.2f})"
        )


def _check_connectivity(
    walkable: NDArray[np.bool_],
    min_fraction: float,
    result: ValidationResult,
) -> None:
    """Check the largest walkable region holds most walkable cells."""
    walkable_count = int(np.sum(walkable))
    largest = largest_component_size(walkable)

    connected = largest / walkable_count if walkable_count else 1.0
    result.stats["connected_fraction"] = connected

    if largest < walkable_count * min_fraction:
        result.add_error(
            f"Largest walkable region holds {connected:.1%} of walkable cells, "
            f"need {min_fraction:.0%}"
        )


def _check_walkable_ratio(
    walkable: NDArray[np.bool_],
    min_ratio: float,
    result: ValidationResult,
) -> None:
    """Check enough of the map is walkable."""
    ratio = float(np.mean(walkable))
    result.stats["walkable_ratio"] = ratio

    if ratio < min_ratio:
        result.add_error(f"Walkable area {ratio:.1%} below {min_ratio:.0%}")
