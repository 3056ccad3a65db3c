"""Resource placement: rejection sampling with minimum spacing."""

import logging
from collections.abc import Mapping

import numpy as np

from .config import ResourceConfig
from .game_map import GameMap
from .resources import ResourcePoint
from .rng import RandomStream
from .terrain_types import RESOURCE_VALUES, ResourceType

logger = logging.getLogger(__name__)

DEFAULT_AMOUNT = 100


def find_resource_position(
    eligible: np.ndarray,
    placed: np.ndarray,
    min_distance: float,
    rng: RandomStream,
    max_attempts: int = 100,
) -> tuple[int, int] | None:
    """Rejection-sample a free cell for one resource point.

    Args:
        eligible: Boolean mask of cells that may hold a resource.
        placed: Array of shape (n, 2) with (x, y) of points placed so far.
        min_distance: Minimum distance to every placed point.
        rng: Random number generator.
        max_attempts: Candidates to draw before giving up.

    Returns:
        (x, y) of the accepted cell, or None if no candidate was accepted.
    """
    height, width = eligible.shape

    for _ in range(max_attempts):
        x = int(rng.integers(width))
        y = int(rng.integers(height))

        if not eligible[y, x]:
            continue

        if len(placed):
            dx = placed[:, 0] - x
            dy = placed[:, 1] - y
            if np.any(np.sqrt(dx * dx + dy * dy) < min_distance):
                continue

        return x, y

    return None


def select_resource_type(
    weights: Mapping[ResourceType, float],
    rng: RandomStream,
) -> ResourceType:
    """Draw a resource type with probability weight / total weight.

    Non-positive weights are ignored; with no positive weight every type is
    equally likely.
    """
    candidates = [(rtype, w) for rtype, w in weights.items() if w > 0]
    if not candidates:
        candidates = [(rtype, 1.0) for rtype in ResourceType]

    total = sum(w for _, w in candidates)
    roll = rng.random() * total

    cumulative = 0.0
    for rtype, w in candidates:
        cumulative += w
        if roll <= cumulative:
            return rtype

    return candidates[-1][0]


def draw_amount(
    resource_type: ResourceType,
    amount_ranges: Mapping[ResourceType, tuple[int, int]],
    rng: RandomStream,
) -> int:
    """Draw a starting amount uniformly from the type's inclusive range."""
    low, high = amount_ranges.get(resource_type, (DEFAULT_AMOUNT, DEFAULT_AMOUNT))
    if low > high:
        low, high = high, low
    return int(rng.integers(low, high + 1))


def place_resources(
    game_map: GameMap,
    config: ResourceConfig,
    rng: RandomStream,
) -> list[ResourcePoint]:
    """Scatter resource points over eligible terrain.

    Aims for floor(width * height * density) points. Slots that find no free
    cell within the allowed attempts are skipped, so crowded or mostly
    ineligible maps end up with fewer points.

    Args:
        game_map: Map whose terrain decides eligibility.
        config: Placement parameters.
        rng: Random number generator.

    Returns:
        Placed resource points in placement order.
    """
    target = max(0, int(game_map.width * game_map.height * config.density))
    eligible = np.isin(game_map.terrain, RESOURCE_VALUES)
    max_attempts = max(1, config.max_attempts)

    placed = np.zeros((target, 2), dtype=np.float64)
    resources: list[ResourcePoint] = []
    skipped = 0

    for _ in range(target):
        position = find_resource_position(
            eligible,
            placed[: len(resources)],
            config.min_distance,
            rng,
            max_attempts=max_attempts,
        )
        if position is None:
            skipped += 1
            continue

        x, y = position
        resource_type = select_resource_type(config.type_weights, rng)
        amount = draw_amount(resource_type, config.amount_ranges, rng)
        quality = float(rng.random())

        placed[len(resources)] = (x, y)
        resources.append(
            ResourcePoint(
                x=float(x),
                y=float(y),
                resource_type=resource_type,
                amount=amount,
                quality=quality,
            )
        )

    if skipped:
        logger.debug(f"Skipped {skipped} of {target} resource slots (no free cell)")

    return resources
