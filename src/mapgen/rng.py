"""Seed-keyed random number streams.

Every random draw in the pipeline comes from a stream built here from the
attempt seed and a stream id, so no stage shares state with another and no
stage touches numpy's global random state.

Streams read raw 64-bit words from numpy's SFC64 bit generator and reduce
them with fixed arithmetic. The raw output of a bit generator is stable
across numpy releases; the Generator sampling methods are not, so they are
not used here.
"""

import numpy as np

_SEED_MASK = 0xFFFFFFFFFFFFFFFF
_WARMUP_ROUNDS = 12
_BUFFER_SIZE = 256

# Stream ids
PERMUTATION_STREAM = 0
PLACEMENT_STREAM = 1


def seed_key(seed: int) -> int:
    """Fold an arbitrary Python int (negative included) into 64 bits."""
    return seed & _SEED_MASK


class RandomStream:
    """Deterministic draws from one stream of one seed.

    The SFC64 state starts as (key, stream, key, 1) and is advanced 12 rounds
    before the first draw. Reductions:

    - integers(low, high): low + (word * (high - low)) >> 64
    - random(): (word >> 11) * 2**-53

    Offers the subset of the numpy Generator interface the pipeline needs.
    """

    def __init__(self, seed: int, stream: int = PERMUTATION_STREAM):
        self.seed = seed
        self.stream = stream

        key = seed_key(seed)
        self.bit_generator = np.random.SFC64(0)
        self.bit_generator.state = {
            "bit_generator": "SFC64",
            "state": {"state": [key, seed_key(stream), key, 1]},
            "has_uint32": 0,
            "uinteger": 0,
        }
        self.bit_generator.random_raw(_WARMUP_ROUNDS)

        self._buffer: list[int] = []

    def raw(self) -> int:
        """Next raw 64-bit word."""
        if not self._buffer:
            words = self.bit_generator.random_raw(_BUFFER_SIZE).tolist()
            words.reverse()
            self._buffer = words
        return self._buffer.pop()

    def integers(self, low: int, high: int | None = None) -> int:
        """Integer in [low, high), or in [0, low) when high is omitted."""
        if high is None:
            low, high = 0, low
        span = high - low
        if span <= 0:
            raise ValueError(f"Empty range [{low}, {high})")
        return low + ((self.raw() * span) >> 64)

    def random(self) -> float:
        """Float in [0, 1) with 53 bits of precision."""
        return (self.raw() >> 11) * (1.0 / 9007199254740992.0)


def make_rng(seed: int, stream: int = PERMUTATION_STREAM) -> RandomStream:
    """Create the random stream for one stage of one seed.

    Args:
        seed: Attempt seed.
        stream: Stream id, so that different stages draw independent values.

    Returns:
        A fresh RandomStream.
    """
    return RandomStream(seed, stream)


def entropy_seed() -> int:
    """Pick a fresh nonzero 31-bit seed from OS entropy."""
    seed = int(np.random.SeedSequence().entropy) & 0x7FFFFFFF
    return seed or 1
