"""
Random number port for the simulation engine.

Every probabilistic rule draws from a ``RandomSource``: any object with a
``random()`` method returning a float in [0, 1). ``random.Random`` satisfies
it, so seeded games use the standard generator, while tests can substitute
``SequenceRandom`` to script exact draws.

All integer draws are derived from uniform floats so that a scripted source
controls every outcome.
"""

from __future__ import annotations

import math
import random
from typing import Iterable, Optional, Protocol, runtime_checkable


@runtime_checkable
class RandomSource(Protocol):
    """Interface for a uniform [0, 1) random source."""

    def random(self) -> float:
        """Return the next uniform float in [0, 1)."""
        ...


class SequenceRandom:
    """
    Replays a fixed list of uniform draws.

    Useful for reproducing a specific combat roll or device event in tests.
    Raises IndexError when the script runs out, unless a ``fallback`` value
    was given, which is then returned for every further draw.
    """

    def __init__(self, values: Iterable[float], fallback: Optional[float] = None):
        self._values = list(values)
        for value in self._values:
            if not 0.0 <= value < 1.0:
                raise ValueError(f"Scripted draw {value} outside [0, 1)")
        self._index = 0
        self.fallback = fallback

    @property
    def draws_made(self) -> int:
        """Number of values consumed so far."""
        return self._index

    @property
    def remaining(self) -> int:
        return max(0, len(self._values) - self._index)

    def random(self) -> float:
        if self._index >= len(self._values):
            if self.fallback is None:
                raise IndexError("Scripted random sequence exhausted")
            self._index += 1
            return self.fallback
        value = self._values[self._index]
        self._index += 1
        return value


def create_rng(seed: Optional[int] = None) -> random.Random:
    """
    Create the engine's random source.

    Args:
        seed: Fixed seed for a reproducible game, or None to seed from
            system entropy.
    """
    return random.Random(seed)


def random_index(rng: RandomSource, count: int) -> int:
    """Uniform integer in [0, count) derived from one uniform draw."""
    return int(math.floor(rng.random() * count))


def random_coordinate(rng: RandomSource, size: int = 8) -> int:
    """Uniform 1-based grid coordinate in [1, size]."""
    return random_index(rng, size) + 1
