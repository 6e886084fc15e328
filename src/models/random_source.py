"""
Random Sources
===============
A random source exposes a single capability: the next standard-normal
draw. The simulator accepts any object with a ``standard_normal()``
method, so tests can substitute a fixed sequence.

Author: Jose Orlando Bobadilla Fuentes | CQF
"""

import numpy as np
from typing import Iterable, Optional, Protocol


class RandomSource(Protocol):
    def standard_normal(self) -> float:
        ...


class NumpyNormalSource:
    """
    Seeded source backed by a numpy Generator.

    Parameters
    ----------
    seed : int or None
        None draws fresh OS entropy (non-deterministic).
    bit_generator : str
        Name of a numpy BitGenerator ("PCG64", "MT19937", "Philox", "SFC64").
    """

    def __init__(self, seed: Optional[int] = None,
                 bit_generator: str = "PCG64"):
        self.seed = seed
        self.bit_generator = bit_generator
        engine = getattr(np.random, bit_generator)
        self._rng = np.random.Generator(engine(seed))

    def standard_normal(self) -> float:
        return float(self._rng.standard_normal())

    def standard_normal_array(self, size: int) -> np.ndarray:
        return self._rng.standard_normal(size)


class FixedSequenceSource:
    """Replays a given sequence of draws; raises once it is exhausted."""

    def __init__(self, values: Iterable[float]):
        self._values = [float(v) for v in values]
        self._pos = 0

    @property
    def consumed(self) -> int:
        return self._pos

    def standard_normal(self) -> float:
        if self._pos >= len(self._values):
            raise IndexError(
                f"Fixed sequence exhausted after {len(self._values)} draws")
        value = self._values[self._pos]
        self._pos += 1
        return value
