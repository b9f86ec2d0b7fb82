"""Uniform random sources consumed by the velocity initializer."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import numpy as np


@runtime_checkable
class UniformSource(Protocol):
    """Anything that can draw a uniform float from [low, high)."""

    def sample(self, low: float, high: float) -> float: ...


class NumpyUniformSource:
    """
    UniformSource backed by a NumPy Generator.

    Attributes:
        seed: Seed used to create the generator (None for OS entropy).
    """

    def __init__(self, seed: int | None = None) -> None:
        self.seed = seed
        self._rng = np.random.default_rng(seed)

    def sample(self, low: float, high: float) -> float:
        """Draw one value uniformly from [low, high)."""
        return float(self._rng.uniform(low, high))
