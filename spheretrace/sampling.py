"""
Random sample sources.

The renderer only needs two things from a random number generator:
uniform values in [0, 1) and uniform values in an arbitrary [min, max)
range. Anything implementing RandomSource can be plugged in.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Optional
import numpy as np


class RandomSource(ABC):
    """Abstract source of independent uniform samples."""

    @abstractmethod
    def uniform01(self) -> float:
        """Return a uniform sample in [0, 1)."""
        pass

    def uniform_range(self, min_val: float, max_val: float) -> float:
        """Return a uniform sample in [min_val, max_val)."""
        return min_val + (max_val - min_val) * self.uniform01()


class NumpyRandomSource(RandomSource):
    """RandomSource backed by a numpy Generator."""

    __slots__ = ('seed', '_rng')

    def __init__(self, seed: Optional[int | np.random.SeedSequence] = None):
        """Create a source.

        Args:
            seed: Integer seed or SeedSequence (None = fresh OS entropy)
        """
        self.seed = seed
        self._rng = np.random.default_rng(seed)

    def uniform01(self) -> float:
        return float(self._rng.random())

    def uniform_range(self, min_val: float, max_val: float) -> float:
        return float(self._rng.uniform(min_val, max_val))

    def spawn(self, count: int) -> list[NumpyRandomSource]:
        """Derive `count` statistically independent child sources.

        Children depend only on the parent's seed and their position, so
        the same seed always yields the same children.
        """
        if isinstance(self.seed, np.random.SeedSequence):
            seq = self.seed
        else:
            seq = np.random.SeedSequence(self.seed)
        return [NumpyRandomSource(child) for child in seq.spawn(count)]

    def __repr__(self) -> str:
        return f"NumpyRandomSource(seed={self.seed!r})"


_default_source: Optional[RandomSource] = None


def default_source() -> RandomSource:
    """Return the process-wide fallback source, creating it on first use."""
    global _default_source
    if _default_source is None:
        _default_source = NumpyRandomSource()
    return _default_source
