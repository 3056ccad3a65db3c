"""Tests for terrain classification and smoothing."""

import numpy as np
import pytest

from mapgen.classification import (
    classify_terrain,
    generate_terrain,
    is_incompatible,
    majority_category,
    smooth_terrain,
)
from mapgen.config import TerrainThresholds
from mapgen.terrain_types import TerrainCategory

W = TerrainCategory.WATER
S = TerrainCategory.SAND
G = TerrainCategory.GRASS
F = TerrainCategory.FOREST
M = TerrainCategory.MOUNTAIN
R = TerrainCategory.ROCK


class TestClassifyTerrain:
    """Tests for threshold classification."""

    @pytest.mark.parametrize(
        "height,expected",
        [
            (0.0, W),
            (0.29, W),
            (0.3, S),
            (0.39, S),
            (0.5, G),
            (0.7, F),
            (0.8, M),
            (0.9, R),
            (1.0, R),
        ],
    )
    def test_default_thresholds(self, height: float, expected: TerrainCategory) -> None:
        field = np.array([[height]], dtype=np.float64)
        assert classify_terrain(field, TerrainThresholds())[0, 0] == expected

    def test_output_shape_and_dtype(self) -> None:
        field = np.random.default_rng(1).random((12, 30)).astype(np.float32)
        terrain = classify_terrain(field, TerrainThresholds())
        assert terrain.shape == (12, 30)
        assert terrain.dtype == np.uint8

    def test_valid_category_values(self) -> None:
        field = np.linspace(0, 1, 100).reshape(10, 10)
        terrain = classify_terrain(field, TerrainThresholds())
        assert set(np.unique(terrain)) <= {c.value for c in TerrainCategory}

    def test_monotonic_in_height(self) -> None:
        """Higher cells never get a lower category."""
        field = np.linspace(0, 1, 500).reshape(1, 500)
        terrain = classify_terrain(field, TerrainThresholds())
        assert np.all(np.diff(terrain.astype(int)) >= 0)

    def test_unordered_thresholds_sorted(self) -> None:
        thresholds = TerrainThresholds(water=0.4, sand=0.3)
        field = np.array([[0.35]])
        assert not thresholds.is_ordered()
        assert classify_terrain(field, thresholds)[0, 0] == S

    def test_all_above_last_threshold_is_rock(self) -> None:
        thresholds = TerrainThresholds(water=0.1, sand=0.2, grass=0.3, forest=0.4, mountain=0.5)
        field = np.full((4, 4), 0.75)
        assert np.all(classify_terrain(field, thresholds) == R)


class TestIncompatiblePairs:
    def test_pairs_symmetric(self) -> None:
        assert is_incompatible(W, M) and is_incompatible(M, W)
        assert is_incompatible(W, R) and is_incompatible(R, W)
        assert is_incompatible(S, F) and is_incompatible(F, S)

    def test_neighbouring_heights_compatible(self) -> None:
        assert not is_incompatible(W, S)
        assert not is_incompatible(G, F)
        assert not is_incompatible(M, R)
        assert not is_incompatible(G, G)


class TestMajorityCategory:
    def test_majority_of_neighbors(self) -> None:
        terrain = np.array(
            [
                [G, G, G],
                [G, W, F],
                [F, F, G],
            ],
            dtype=np.uint8,
        )
        assert majority_category(terrain)[1, 1] == G

    def test_ties_go_to_lowest_category(self) -> None:
        terrain = np.array(
            [
                [F, F, F],
                [F, W, S],
                [S, S, S],
            ],
            dtype=np.uint8,
        )
        # 4 forest, 4 sand neighbors
        assert majority_category(terrain)[1, 1] == S


class TestSmoothTerrain:
    """Tests for the single smoothing pass."""

    def test_incompatible_cell_replaced(self) -> None:
        terrain = np.full((5, 5), M, dtype=np.uint8)
        terrain[2, 2] = W
        result = smooth_terrain(terrain)
        assert result[2, 2] == M

    def test_compatible_cell_kept(self) -> None:
        terrain = np.full((5, 5), G, dtype=np.uint8)
        terrain[2, 2] = W
        result = smooth_terrain(terrain)
        assert result[2, 2] == W

    def test_sand_in_forest_replaced(self) -> None:
        terrain = np.full((3, 3), F, dtype=np.uint8)
        terrain[1, 1] = S
        assert smooth_terrain(terrain)[1, 1] == F

    def test_boundary_untouched(self) -> None:
        terrain = np.full((5, 5), M, dtype=np.uint8)
        terrain[0, 2] = W
        terrain[2, 0] = W
        terrain[4, 4] = W
        result = smooth_terrain(terrain)
        assert result[0, 2] == W
        assert result[2, 0] == W
        assert result[4, 4] == W

    def test_input_not_modified(self) -> None:
        terrain = np.full((5, 5), M, dtype=np.uint8)
        terrain[2, 2] = W
        original = terrain.copy()
        smooth_terrain(terrain)
        np.testing.assert_array_equal(terrain, original)

    def test_reads_original_neighborhood(self) -> None:
        """A replacement does not feed into its neighbors' decisions."""
        terrain = np.array(
            [
                [W, W, W, W, W],
                [W, M, M, M, W],
                [W, M, W, M, W],
                [W, M, M, M, W],
                [W, W, W, W, W],
            ],
            dtype=np.uint8,
        )
        result = smooth_terrain(terrain)

        # Edge-middle mountains tie 4 water to 4 mountain; water wins the tie
        assert result[1, 2] == W
        assert result[2, 1] == W
        # Corner mountains see 6 water, 2 mountain
        assert result[1, 1] == W
        # Center water still sees the original ring of mountain and flips,
        # even though that ring has become water in the output
        assert result[2, 2] == M

    def test_tiny_grids(self) -> None:
        for shape in [(1, 1), (1, 5), (2, 2)]:
            terrain = np.zeros(shape, dtype=np.uint8)
            np.testing.assert_array_equal(smooth_terrain(terrain), terrain)


class TestGenerateTerrain:
    def test_classify_then_smooth(self) -> None:
        field = np.random.default_rng(3).random((16, 16))
        thresholds = TerrainThresholds()
        expected = smooth_terrain(classify_terrain(field, thresholds))
        np.testing.assert_array_equal(generate_terrain(field, thresholds), expected)
