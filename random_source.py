from __future__ import annotations

import random
from typing import Tuple


class RangeError(ValueError):
    pass


class RandomSource:
    """A splittable source of randomness.

    Each source owns a private `random.Random` seeded from an integer, so
    two sources built from the same seed produce the same draws. `split`
    seeds two fresh sources from the parent's stream: after a split the
    children share nothing, which is what lets every trial (and every part
    of a composite generator) own its own stream.
    """

    def __init__(self, seed: int) -> None:
        self._seed = seed
        self._random = random.Random(seed)

    @property
    def seed(self) -> int:
        return self._seed

    def split(self) -> Tuple[RandomSource, RandomSource]:
        left = RandomSource(self._random.getrandbits(64))
        right = RandomSource(self._random.getrandbits(64))
        return left, right

    def next_in_range(self, low: int, high: int) -> int:
        if low > high:
            raise RangeError(f"empty range: {low=} {high=}")
        return self._random.randint(low, high)

    def next_float(self) -> float:
        return self._random.random()

    def __repr__(self) -> str:
        return f"RandomSource(seed={self._seed})"
