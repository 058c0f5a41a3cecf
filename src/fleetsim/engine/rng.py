"""Random sources for the stochastic engines.

Every stochastic function takes an injected source with a ``random()``
method returning a uniform float in [0, 1).  ``numpy.random.Generator``
and ``random.Random`` both qualify; tests pass fixed-sequence stubs.
"""

from __future__ import annotations

from typing import Protocol

import numpy as np


class UniformSource(Protocol):
    def random(self) -> float: ...


def make_rng(seed: int | None = None) -> np.random.Generator:
    """Seeded NumPy generator; ``seed=None`` gives a non-reproducible one."""
    return np.random.default_rng(seed)


def ensure_rng(rng: UniformSource | None) -> UniformSource:
    return rng if rng is not None else make_rng()


def draw_uniform(rng: UniformSource, low: float, high: float) -> float:
    """One uniform draw in [low, high) from a single ``rng.random()`` call."""
    return low + (high - low) * float(rng.random())
