"""Tests for configuration models and loading."""

import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from mapgen.config import (
    MIN_FREQUENCY,
    GenerationConfig,
    NoiseConfig,
    ResourceConfig,
    TerrainThresholds,
    find_config,
    list_configs,
    load_config,
)
from mapgen.terrain_types import ResourceType


class TestDefaults:
    def test_generation_defaults(self) -> None:
        config = GenerationConfig()
        assert (config.width, config.height) == (100, 100)
        assert config.seed == 0
        assert config.max_attempts == 10
        assert config.validation.min_walkable_ratio == 0.4
        assert config.validation.enable_connectivity_check

    def test_threshold_defaults(self) -> None:
        assert TerrainThresholds().cut_points() == (0.3, 0.4, 0.6, 0.75, 0.9)

    def test_resource_defaults(self) -> None:
        config = ResourceConfig()
        assert set(config.type_weights) == set(ResourceType)
        assert config.amount_ranges[ResourceType.WATER] == (1000, 5000)

    def test_default_factories_not_shared(self) -> None:
        a = ResourceConfig()
        b = ResourceConfig()
        a.type_weights[ResourceType.WOOD] = 9.0
        assert b.type_weights[ResourceType.WOOD] == 0.3

    def test_bad_type_rejected(self) -> None:
        with pytest.raises(ValidationError):
            GenerationConfig(width="wide")


class TestSanitized:
    """Degenerate values are clamped with a warning."""

    def test_clean_config_unchanged(self) -> None:
        config = GenerationConfig()
        assert config.sanitized() is config

    def test_clamps(self, caplog) -> None:
        config = GenerationConfig(
            width=0,
            height=-3,
            max_attempts=0,
            noise=NoiseConfig(octaves=0, frequency=0.0, amplitude=-1.0),
            resources=ResourceConfig(max_attempts=0),
        )
        with caplog.at_level(logging.WARNING, logger="mapgen.config"):
            fixed = config.sanitized()

        assert (fixed.width, fixed.height) == (1, 1)
        assert fixed.max_attempts == 1
        assert fixed.noise.octaves == 1
        assert fixed.noise.frequency == MIN_FREQUENCY
        assert fixed.noise.amplitude == 1.0
        assert fixed.resources.max_attempts == 1
        assert len(caplog.records) == 7
        # The original is left alone
        assert config.width == 0

    def test_unordered_thresholds_warn(self, caplog) -> None:
        config = GenerationConfig(terrain=TerrainThresholds(water=0.5, sand=0.4))
        with caplog.at_level(logging.WARNING, logger="mapgen.config"):
            config.sanitized()
        assert "not ascending" in caplog.text


class TestLoading:
    """Tests for TOML loading and config lookup."""

    def test_load_config(self, tmp_path: Path) -> None:
        path = tmp_path / "custom.toml"
        path.write_text(
            "width = 40\n"
            "seed = 7\n"
            "[noise]\n"
            "octaves = 2\n"
            "[resources.amount_ranges]\n"
            "metal = [1, 2]\n"
        )
        config = load_config(path)
        assert config.width == 40
        assert config.height == 100
        assert config.seed == 7
        assert config.noise.octaves == 2
        assert config.noise.frequency == 0.05
        assert config.resources.amount_ranges == {ResourceType.METAL: (1, 2)}

    def test_load_missing(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.toml")

    def test_bundled_default_matches_model(self) -> None:
        assert load_config(find_config("default")) == GenerationConfig()

    def test_list_configs(self) -> None:
        names = list_configs()
        assert names == sorted(names)
        assert {"default", "large", "lowlands"} <= set(names)

    @pytest.mark.parametrize("name", ["default", "large", "lowlands"])
    def test_bundled_configs_load(self, name: str) -> None:
        config = load_config(find_config(name))
        assert config.width > 0
        assert config.terrain.is_ordered()

    def test_find_by_path(self, tmp_path: Path) -> None:
        path = tmp_path / "x.toml"
        path.write_text("width = 10\n")
        assert find_config(str(path)) == path

    def test_find_missing(self) -> None:
        with pytest.raises(FileNotFoundError, match="not found"):
            find_config("no-such-config")
        with pytest.raises(FileNotFoundError):
            find_config("missing/path.toml")
