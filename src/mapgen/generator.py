"""Main map generation orchestration."""

import logging
from dataclasses import replace

import numpy as np

from .classification import generate_terrain
from .config import GenerationConfig
from .exceptions import GenerationFailedError
from .game_map import GameMap
from .noise import generate_height_field
from .placement import place_resources
from .rng import PLACEMENT_STREAM, entropy_seed, make_rng
from .terrain_types import TerrainCategory
from .validation import ValidationResult, validate_map

logger = logging.getLogger(__name__)


def build_map(
    config: GenerationConfig,
    seed: int,
    requested_seed: int | None = None,
    attempt: int = 1,
) -> GameMap:
    """Run one generation pass without validation.

    Args:
        config: Generation configuration (already sanitized).
        seed: Seed for this attempt's noise and placement.
        requested_seed: Seed recorded on the map; defaults to `seed`.
        attempt: Attempt number recorded on the map.

    Returns:
        The generated map.
    """
    width, height = config.width, config.height

    logger.debug(f"Stage A: Generating {width}x{height} height field (seed {seed})")
    height_field = generate_height_field(width, height, seed, config.noise)

    logger.debug("Stage B: Classifying and smoothing terrain...")
    terrain = generate_terrain(height_field, config.terrain)

    game_map = GameMap(
        width=width,
        height=height,
        seed=seed if requested_seed is None else requested_seed,
        height_field=height_field,
        terrain=terrain,
        noise_seed=seed,
        attempts=attempt,
    )

    logger.debug("Stage C: Placing resources...")
    rng = make_rng(seed, PLACEMENT_STREAM)
    resources = place_resources(game_map, config.resources, rng)

    logger.debug(f"Placed {len(resources)} resources")
    return replace(game_map, resources=tuple(resources))


class MapGenerator:
    """Generates validated maps, retrying with the next seed on failure.

    The generator's own seed is only used for configs that ask for seed 0.
    """

    def __init__(self, seed: int | None = None):
        self._current_seed = seed if seed else entropy_seed()

    @property
    def current_seed(self) -> int:
        return self._current_seed

    def set_seed(self, seed: int) -> None:
        """Set the seed used for configs with seed 0."""
        self._current_seed = seed if seed else entropy_seed()

    def generate(self, config: GenerationConfig) -> GameMap:
        """Generate a map that passes validation.

        Each failed attempt is discarded and the next one uses seed + 1, up to
        config.max_attempts attempts in total.

        Args:
            config: Generation configuration.

        Returns:
            The first map that passed validation. Its `seed` is the requested
            seed; `noise_seed` and `attempts` describe the accepted attempt.

        Raises:
            GenerationFailedError: If every attempt failed validation.
        """
        config = config.sanitized()
        base_seed = config.seed or self._current_seed

        logger.info(
            f"Generating {config.width}x{config.height} map with seed {base_seed}"
        )

        seed = base_seed
        result: ValidationResult | None = None

        for attempt in range(1, config.max_attempts + 1):
            game_map = build_map(config, seed, requested_seed=base_seed, attempt=attempt)
            result = validate_map(game_map, config)

            if result.passed:
                logger.info(
                    f"Map accepted on attempt {attempt} (noise seed {seed}, "
                    f"{len(game_map.resources)} resources)"
                )
                _log_terrain_stats(game_map)
                return game_map

            logger.warning(
                f"Attempt {attempt}/{config.max_attempts} with seed {seed} "
                f"failed validation: {'; '.join(result.errors)}"
            )
            seed += 1

        raise GenerationFailedError(base_seed, config.max_attempts, result)

    def validate(
        self,
        game_map: GameMap,
        config: GenerationConfig | None = None,
    ) -> ValidationResult:
        """Validate a map against a configuration's acceptance criteria."""
        return validate_map(game_map, config)


def generate_map(config: GenerationConfig) -> GameMap:
    """Generate a validated map with a fresh MapGenerator."""
    return MapGenerator().generate(config)


def _log_terrain_stats(game_map: GameMap) -> None:
    """Log terrain generation statistics."""
    total = game_map.size
    counts = np.bincount(game_map.terrain.ravel(), minlength=len(TerrainCategory))

    logger.info(f"Terrain stats ({total:,} tiles):")
    for category in TerrainCategory:
        count = int(counts[category])
        pct = count / total * 100
        logger.info(f"  {category.name.lower()}: {count:,} ({pct:.1f}%)")
