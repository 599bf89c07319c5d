"""Injectable random sources for stochastic components.

Poisson firing, layout jitter and measurement noise all draw from a
:class:`RandomSource` handed to them at construction time, so a test can
swap in a seeded or scripted source without touching global RNG state.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

import torch


class RandomSource(ABC):
    """Abstract source of uniform random numbers.

    Implementations only need :meth:`uniform`; every other distribution in
    the package (Gaussian noise, integer choices) is derived from it.
    """

    @abstractmethod
    def uniform(self) -> float:
        """Return a uniform sample from the half-open interval ``[0, 1)``."""
        ...

    def reset_state(self) -> None:
        """Restore the source to its initial state (no-op by default)."""
        pass

    def randint(self, high: int) -> int:
        """Return an integer uniformly drawn from ``[0, high)``."""
        return min(int(self.uniform() * high), high - 1)


class TorchRandomSource(RandomSource):
    """Uniform samples from a per-instance ``torch.Generator``.

    A private generator keeps the global torch RNG untouched, mirroring the
    noise modules of the pipeline.

    Args:
        seed: Optional seed. When omitted the generator is seeded from a
            non-deterministic source and :meth:`reset_state` is a no-op.
    """

    def __init__(self, seed: Optional[int] = None) -> None:
        self.seed = seed
        self._generator = torch.Generator()
        if seed is not None:
            self._generator.manual_seed(seed)
        else:
            self._generator.seed()

    def uniform(self) -> float:
        return torch.rand(1, generator=self._generator, dtype=torch.float64).item()

    def reset_state(self) -> None:
        """Re-seed the generator so the sample sequence restarts."""
        if self.seed is not None:
            self._generator.manual_seed(self.seed)
