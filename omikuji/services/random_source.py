# omikuji/services/random_source.py

import random
from typing import Callable, Optional, TypeVar

from ..core.errors import InvalidInputError

T = TypeVar("T")


class RandomSource:
    """Produces floats in [0, 1). The only source of entropy used during a draw."""

    def next(self) -> float:
        raise NotImplementedError


class AmbientRandomSource(RandomSource):
    """Non-reproducible source backed by the platform's randomness (seeded from os.urandom)."""

    def __init__(self):
        self._rng = random.Random()

    def next(self) -> float:
        return self._rng.random()


def validate_seed(seed: str) -> str:
    if not isinstance(seed, str) or not seed:
        raise InvalidInputError(f"Seed must be a non-empty string, got {seed!r}", code="invalid_seed")
    return seed


class SeededRandomSource(RandomSource):
    """
    Reproducible source. Two instances built from the same seed return the same
    sequence for the same number of calls.

    `random.Random` hashes str seeds through SHA-512, so the sequence is stable
    across processes and is not affected by PYTHONHASHSEED.
    """

    def __init__(self, seed: str):
        self.seed = validate_seed(seed)
        self._rng = random.Random(seed)

    def next(self) -> float:
        return self._rng.random()


def make_source(seed: Optional[str] = None) -> RandomSource:
    if seed is None:
        return AmbientRandomSource()
    return SeededRandomSource(seed)


def reproducible(seed: str, fn: Callable[[RandomSource], T]) -> T:
    """Runs `fn` with a freshly seeded source and returns its result."""
    return fn(SeededRandomSource(seed))
