"""Command-line interface for map generation."""

import argparse
import logging
import sys
import time
from pathlib import Path

import numpy as np
import structlog
from numpy.typing import NDArray

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for map generation."""
    parser = argparse.ArgumentParser(
        description="Generate a playable procedural map"
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Config name (from configs/) or path to a TOML file",
    )
    parser.add_argument(
        "--width", type=int, default=None, help="Map width (overrides config)"
    )
    parser.add_argument(
        "--height", type=int, default=None, help="Map height (overrides config)"
    )
    parser.add_argument(
        "--seed", type=int, default=None, help="Random seed, 0 picks one (overrides config)"
    )
    parser.add_argument(
        "--max-attempts",
        type=int,
        default=None,
        help="Generation attempts before giving up (overrides config)",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=str,
        default="saves/map.npz",
        help="Output path (default: saves/map.npz)",
    )
    parser.add_argument(
        "--debug-images",
        type=str,
        default=None,
        help="Directory to save debug images (optional)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Verbose logging"
    )

    args = parser.parse_args(argv)

    # Configure logging
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )

    # Import here to avoid slow startup for --help
    from .config import GenerationConfig, find_config, list_configs, load_config
    from .exceptions import GenerationFailedError
    from .generator import MapGenerator
    from .persistence import save_map

    if args.config:
        try:
            config = load_config(find_config(args.config))
        except FileNotFoundError as e:
            print(f"Error: {e}", file=sys.stderr)
            print(f"Available configs: {', '.join(list_configs()) or 'none'}", file=sys.stderr)
            return 1
    else:
        config = GenerationConfig()

    overrides = {
        "width": args.width,
        "height": args.height,
        "seed": args.seed,
        "max_attempts": args.max_attempts,
    }
    config = config.model_copy(update={k: v for k, v in overrides.items() if v is not None})

    output_path = Path(args.output)

    print(f"Generating {config.width}x{config.height} map with seed {config.seed or 'random'}")
    print(f"Output: {output_path}")
    print()

    generator = MapGenerator()

    start_time = time.time()
    try:
        game_map = generator.generate(config)
    except GenerationFailedError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    gen_time = time.time() - start_time

    print()
    print(
        f"Generation complete in {gen_time:.2f}s "
        f"(seed {game_map.seed}, attempt {game_map.attempts}, "
        f"{len(game_map.resources)} resources)"
    )

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path = save_map(output_path, game_map)
    print(f"Saved to {output_path}")

    if args.debug_images:
        _dump_debug_images(
            Path(args.debug_images),
            height_field=game_map.height_field,
            terrain=game_map.terrain,
            walkable=game_map.walkable_mask(),
        )

    return 0


def _dump_debug_images(output_dir: Path, **arrays: NDArray) -> None:
    """Save arrays as images for debugging.

    Args:
        output_dir: Directory to save images.
        **arrays: Named arrays to save.
    """
    try:
        import matplotlib.pyplot as plt
    except ImportError:
        logger.warning("matplotlib not available, skipping debug images")
        return

    output_dir.mkdir(parents=True, exist_ok=True)

    for name, arr in arrays.items():
        fig, ax = plt.subplots(figsize=(10, 10))

        if arr.dtype == bool:
            ax.imshow(arr, cmap="binary")
        elif arr.dtype == np.uint8:
            ax.imshow(arr, cmap="tab10", vmin=0, vmax=9)
        else:
            ax.imshow(arr, cmap="terrain")

        ax.set_title(name)
        ax.axis("off")

        fig.savefig(output_dir / f"{name}.png", dpi=150, bbox_inches="tight")
        plt.close(fig)

    logger.info(f"Debug images saved to {output_dir}")


if __name__ == "__main__":
    sys.exit(main())
