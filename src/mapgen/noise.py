"""Gradient noise generation for height fields.

Provides a seeded Perlin noise basis, fractal Brownian motion over it,
and rank equalization of the resulting field.
"""

import numpy as np
from numpy.typing import NDArray

from .config import MIN_FREQUENCY, NoiseConfig
from .rng import PERMUTATION_STREAM, make_rng

PERMUTATION_SIZE = 256


def make_permutation(seed: int) -> NDArray[np.int64]:
    """Build the gradient lookup permutation for a seed.

    Fisher-Yates shuffle of 0..255 driven by the seed's permutation stream,
    so the same seed gives the same table on every platform.

    Args:
        seed: Noise seed.

    Returns:
        Array holding a permutation of 0..255.
    """
    rng = make_rng(seed, PERMUTATION_STREAM)
    perm = np.arange(PERMUTATION_SIZE, dtype=np.int64)

    for i in range(PERMUTATION_SIZE - 1, 0, -1):
        j = rng.integers(i + 1)
        perm[i], perm[j] = perm[j], perm[i]

    return perm


def _fade(t: NDArray[np.float64]) -> NDArray[np.float64]:
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


def _lerp(
    t: NDArray[np.float64], a: NDArray[np.float64], b: NDArray[np.float64]
) -> NDArray[np.float64]:
    return a + t * (b - a)


def _grad(
    hashes: NDArray[np.int64], x: NDArray[np.float64], y: NDArray[np.float64]
) -> NDArray[np.float64]:
    """Dot product of the hashed gradient with the offset vector."""
    h = hashes & 15
    u = np.where(h < 8, x, y)
    v = np.where(h < 4, y, np.where((h == 12) | (h == 14), x, 0.0))
    return np.where((h & 1) == 0, u, -u) + np.where((h & 2) == 0, v, -v)


class NoiseField:
    """Seeded 2D Perlin noise.

    The permutation table is built once per instance; instances share no
    state, so separate seeds can be sampled independently.
    """

    def __init__(self, seed: int):
        self.seed = seed
        self.permutation = make_permutation(seed)
        # Doubled so that hashed lookups never need wrapping
        self._table = np.concatenate([self.permutation, self.permutation])

    def perlin(
        self, x: NDArray[np.float64], y: NDArray[np.float64]
    ) -> NDArray[np.float64]:
        """Sample Perlin noise at arrays of coordinates.

        Args:
            x: X sample coordinates.
            y: Y sample coordinates (broadcast against x).

        Returns:
            Noise values roughly in [-1, 1]; exactly 0 at lattice points.
        """
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)

        x_floor = np.floor(x)
        y_floor = np.floor(y)
        xi = x_floor.astype(np.int64) & 255
        yi = y_floor.astype(np.int64) & 255

        xr = x - x_floor
        yr = y - y_floor
        u = _fade(xr)
        v = _fade(yr)

        p = self._table
        a = p[xi] + yi
        b = p[xi + 1] + yi

        return _lerp(
            v,
            _lerp(u, _grad(p[a], xr, yr), _grad(p[b], xr - 1.0, yr)),
            _lerp(u, _grad(p[a + 1], xr, yr - 1.0), _grad(p[b + 1], xr - 1.0, yr - 1.0)),
        )

    def value(self, x: float, y: float) -> float:
        """Sample a single point of the basis noise."""
        return float(self.perlin(np.float64(x), np.float64(y)))

    def fbm(
        self,
        x: NDArray[np.float64],
        y: NDArray[np.float64],
        config: NoiseConfig,
    ) -> NDArray[np.float64]:
        """Sum octaves of noise at the given sample coordinates.

        Each octave multiplies amplitude by persistence and frequency by
        lacunarity. The sum is divided by the accumulated amplitude.

        Args:
            x: Already-scaled X sample coordinates.
            y: Already-scaled Y sample coordinates.
            config: Noise parameters.

        Returns:
            Normalized noise values roughly in [-1, 1].
        """
        octaves = max(1, config.octaves)
        amplitude = config.amplitude if config.amplitude > 0 else 1.0

        result = np.zeros(np.broadcast(x, y).shape, dtype=np.float64)
        frequency = 1.0
        max_amplitude = 0.0

        for _ in range(octaves):
            result += self.perlin(x * frequency, y * frequency) * amplitude
            max_amplitude += amplitude
            amplitude *= config.persistence
            frequency *= config.lacunarity

        result /= max_amplitude
        return result

    def generate(self, width: int, height: int, config: NoiseConfig) -> NDArray[np.float32]:
        """Generate a height field normalized to [0, 1].

        Args:
            width: Output width in tiles.
            height: Output height in tiles.
            config: Noise parameters.

        Returns:
            Array of shape (height, width).
        """
        width = max(1, width)
        height = max(1, height)
        frequency = config.frequency if config.frequency > 0 else MIN_FREQUENCY

        xs = (np.arange(width, dtype=np.float64) + config.offset_x) * frequency
        ys = (np.arange(height, dtype=np.float64) + config.offset_y) * frequency
        sample_x, sample_y = np.meshgrid(xs, ys)

        noise = self.fbm(sample_x, sample_y, config)

        # [-1, 1] -> [0, 1]
        field = np.clip((noise + 1.0) * 0.5, 0.0, 1.0)

        if config.equalize:
            return equalize(field)
        return field.astype(np.float32)


def equalize(field: NDArray[np.floating]) -> NDArray[np.float32]:
    """Remap a field to a uniform [0, 1] distribution, preserving cell order.

    Ties are broken by cell index so the result is deterministic.

    Args:
        field: Input 2D field.

    Returns:
        Field where the k-th lowest cell holds k / (n - 1).
    """
    flat = np.asarray(field).ravel()
    order = np.argsort(flat, kind="stable")

    ranks = np.empty(flat.size, dtype=np.float64)
    ranks[order] = np.arange(flat.size, dtype=np.float64)
    if flat.size > 1:
        ranks /= flat.size - 1

    return ranks.reshape(np.shape(field)).astype(np.float32)


def generate_height_field(
    width: int,
    height: int,
    seed: int,
    config: NoiseConfig,
) -> NDArray[np.float32]:
    """Generate the height field for one seed.

    Pure function of its arguments: identical inputs give a bit-identical
    result.
    """
    return NoiseField(seed).generate(width, height, config)
