"""Map persistence: save and load generated maps."""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

import numpy as np

from .game_map import GameMap
from .resources import ResourcePoint
from .terrain_types import ResourceType

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1


def save_map(path: Path, game_map: GameMap) -> Path:
    """Save a generated map to disk.

    Uses numpy's compressed .npz format for efficient storage.

    Args:
        path: Output path; ".npz" is appended when missing.
        game_map: Map to save.

    Returns:
        Path of the written file.
    """
    if path.suffix != ".npz":
        path = path.with_name(path.name + ".npz")

    resources_data = [
        {
            "x": r.x,
            "y": r.y,
            "resource_type": r.resource_type.value,
            "amount": r.amount,
            "quality": r.quality,
            "exhausted": r.exhausted,
        }
        for r in game_map.resources
    ]

    metadata = {
        "version": FORMAT_VERSION,
        "seed": game_map.seed,
        "noise_seed": game_map.noise_seed,
        "attempts": game_map.attempts,
        "width": game_map.width,
        "height": game_map.height,
        "generated_at": datetime.now(timezone.utc).isoformat(),
    }

    np.savez_compressed(
        path,
        height_field=game_map.height_field,
        terrain=game_map.terrain,
        resources=np.frombuffer(json.dumps(resources_data).encode("utf-8"), dtype=np.uint8),
        metadata=np.frombuffer(json.dumps(metadata).encode("utf-8"), dtype=np.uint8),
    )

    file_size = path.stat().st_size / 1024
    logger.info(f"Saved map to {path} ({file_size:.1f} KB)")
    return path


def load_map(path: Path) -> GameMap:
    """Load a map from disk.

    Args:
        path: Path to .npz file.

    Returns:
        The stored GameMap.

    Raises:
        FileNotFoundError: If file doesn't exist.
        ValueError: If file format is invalid.
    """
    if not path.exists():
        raise FileNotFoundError(f"Map file not found: {path}")

    with np.load(path) as data:
        for key in ("height_field", "terrain", "metadata"):
            if key not in data:
                raise ValueError(f"Invalid map file: missing '{key}' array")

        height_field = data["height_field"]
        terrain = data["terrain"]
        metadata = json.loads(data["metadata"].tobytes().decode("utf-8"))

        if "resources" in data:
            resources_data = json.loads(data["resources"].tobytes().decode("utf-8"))
        else:
            resources_data = []

    if metadata.get("version") != FORMAT_VERSION:
        raise ValueError(f"Unsupported map file version: {metadata.get('version')}")

    resources = [
        ResourcePoint(
            x=r["x"],
            y=r["y"],
            resource_type=ResourceType(r["resource_type"]),
            amount=r["amount"],
            quality=r["quality"],
            exhausted=r["exhausted"],
        )
        for r in resources_data
    ]

    height, width = terrain.shape
    logger.info(f"Loaded map from {path}: {width}x{height}")

    return GameMap(
        width=width,
        height=height,
        seed=metadata["seed"],
        height_field=height_field,
        terrain=terrain,
        resources=tuple(resources),
        noise_seed=metadata.get("noise_seed"),
        attempts=metadata.get("attempts", 1),
    )
