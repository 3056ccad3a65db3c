"""Map generation configuration models and TOML loading."""

import logging
import tomllib
from pathlib import Path

from pydantic import BaseModel, Field

from .terrain_types import ResourceType

logger = logging.getLogger(__name__)

MIN_FREQUENCY = 1e-3


class NoiseConfig(BaseModel):
    """Multi-octave gradient noise parameters."""

    frequency: float = Field(default=0.05, description="Base sampling frequency per tile")
    octaves: int = Field(default=4, description="Number of octaves for fBm")
    persistence: float = Field(default=0.5, description="Amplitude multiplier per octave")
    lacunarity: float = Field(default=2.0, description="Frequency multiplier per octave")
    amplitude: float = Field(default=1.0, description="Amplitude of the first octave")
    offset_x: float = Field(default=0.0, description="Sample offset along x in tiles")
    offset_y: float = Field(default=0.0, description="Sample offset along y in tiles")
    equalize: bool = Field(
        default=True,
        description="Remap heights to a uniform distribution (order preserving)",
    )


class TerrainThresholds(BaseModel):
    """Upper height bound of each category; anything above mountain is rock."""

    water: float = Field(default=0.3, description="Heights below this are water")
    sand: float = Field(default=0.4, description="Heights below this are sand")
    grass: float = Field(default=0.6, description="Heights below this are grass")
    forest: float = Field(default=0.75, description="Heights below this are forest")
    mountain: float = Field(default=0.9, description="Heights below this are mountain")

    def cut_points(self) -> tuple[float, ...]:
        """Cut points in ascending order, one per category below rock."""
        return tuple(sorted((self.water, self.sand, self.grass, self.forest, self.mountain)))

    def is_ordered(self) -> bool:
        raw = (self.water, self.sand, self.grass, self.forest, self.mountain)
        return raw == self.cut_points()


def _default_type_weights() -> dict[ResourceType, float]:
    return {
        ResourceType.WOOD: 0.3,
        ResourceType.STONE: 0.25,
        ResourceType.METAL: 0.15,
        ResourceType.FOOD: 0.2,
        ResourceType.WATER: 0.1,
    }


def _default_amount_ranges() -> dict[ResourceType, tuple[int, int]]:
    return {
        ResourceType.WOOD: (50, 200),
        ResourceType.STONE: (100, 300),
        ResourceType.METAL: (25, 100),
        ResourceType.FOOD: (30, 150),
        ResourceType.WATER: (1000, 5000),
    }


class ResourceConfig(BaseModel):
    """Resource point placement parameters."""

    density: float = Field(default=0.01, description="Resource points per tile")
    min_distance: float = Field(
        default=5.0, description="Minimum Euclidean distance between resource points"
    )
    max_attempts: int = Field(
        default=100, description="Rejection-sampling attempts per resource slot"
    )
    type_weights: dict[ResourceType, float] = Field(
        default_factory=_default_type_weights,
        description="Relative weight of each resource type (need not sum to 1)",
    )
    amount_ranges: dict[ResourceType, tuple[int, int]] = Field(
        default_factory=_default_amount_ranges,
        description="Inclusive [min, max] starting amount per resource type",
    )


class ValidationConfig(BaseModel):
    """Acceptance criteria for a generated map."""

    enable_connectivity_check: bool = Field(
        default=True, description="Run the flood-fill connectivity check"
    )
    min_walkable_ratio: float = Field(
        default=0.4, description="Minimum fraction of all cells that are walkable"
    )
    min_categories: int = Field(
        default=3, description="Minimum number of distinct terrain categories"
    )
    min_category_fraction: float = Field(
        default=0.05, description="Minimum share of each present category"
    )
    max_category_fraction: float = Field(
        default=0.6, description="Maximum share of each present category"
    )
    min_connected_fraction: float = Field(
        default=0.9,
        description="Share of walkable cells the largest component must hold",
    )


class GenerationConfig(BaseModel):
    """Complete map generation configuration."""

    width: int = Field(default=100, description="Map width in tiles")
    height: int = Field(default=100, description="Map height in tiles")
    seed: int = Field(default=0, description="Random seed (0 = pick one)")
    max_attempts: int = Field(
        default=10, description="Generation attempts before giving up"
    )

    noise: NoiseConfig = Field(default_factory=NoiseConfig)
    terrain: TerrainThresholds = Field(default_factory=TerrainThresholds)
    resources: ResourceConfig = Field(default_factory=ResourceConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)

    def sanitized(self) -> "GenerationConfig":
        """Return a copy with degenerate values clamped to safe minimums.

        Odd configurations are corrected rather than rejected; each correction
        is logged as a warning.
        """
        update: dict = {}

        if self.width < 1:
            logger.warning(f"Clamping width {self.width} to 1")
            update["width"] = 1
        if self.height < 1:
            logger.warning(f"Clamping height {self.height} to 1")
            update["height"] = 1
        if self.max_attempts < 1:
            logger.warning(f"Clamping max_attempts {self.max_attempts} to 1")
            update["max_attempts"] = 1

        noise_update: dict = {}
        if self.noise.octaves < 1:
            logger.warning(f"Clamping octaves {self.noise.octaves} to 1")
            noise_update["octaves"] = 1
        if self.noise.frequency <= 0:
            logger.warning(
                f"Clamping frequency {self.noise.frequency} to {MIN_FREQUENCY}"
            )
            noise_update["frequency"] = MIN_FREQUENCY
        if self.noise.amplitude <= 0:
            logger.warning(f"Clamping amplitude {self.noise.amplitude} to 1.0")
            noise_update["amplitude"] = 1.0
        if noise_update:
            update["noise"] = self.noise.model_copy(update=noise_update)

        if not self.terrain.is_ordered():
            logger.warning(
                f"Terrain thresholds are not ascending, using {self.terrain.cut_points()}"
            )

        if self.resources.max_attempts < 1:
            logger.warning(
                f"Clamping placement attempts {self.resources.max_attempts} to 1"
            )
            update["resources"] = self.resources.model_copy(update={"max_attempts": 1})

        if not update:
            return self
        return self.model_copy(update=update)


def load_config(config_path: Path) -> GenerationConfig:
    """Load generation configuration from a TOML file.

    Args:
        config_path: Path to the TOML config file.

    Returns:
        Parsed GenerationConfig.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        tomllib.TOMLDecodeError: If TOML is malformed.
    """
    with open(config_path, "rb") as f:
        data = tomllib.load(f)
    return GenerationConfig.model_validate(data)


def _configs_dir() -> Path:
    return Path(__file__).parent.parent.parent / "configs"


def find_config(name: str) -> Path:
    """Find a config file by name.

    Searches in the following order:
    1. Exact path if name contains path separator or ends with .toml
    2. configs/{name}.toml
    3. configs/{name}

    Args:
        name: Config name or path.

    Returns:
        Path to the config file.

    Raises:
        FileNotFoundError: If config file is not found.
    """
    if "/" in name or name.endswith(".toml"):
        path = Path(name)
        if path.exists():
            return path
        raise FileNotFoundError(f"Config file not found: {name}")

    configs_dir = _configs_dir()

    config_path = configs_dir / f"{name}.toml"
    if config_path.exists():
        return config_path

    config_path = configs_dir / name
    if config_path.exists():
        return config_path

    raise FileNotFoundError(
        f"Config '{name}' not found in {configs_dir}. "
        f"Available configs: {list_configs()}"
    )


def list_configs() -> list[str]:
    """List available config names."""
    configs_dir = _configs_dir()
    if not configs_dir.exists():
        return []
    return sorted(p.stem for p in configs_dir.glob("*.toml"))
