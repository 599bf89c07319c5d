"""
filters/noise.py
----------------
Additive measurement noise for electrode potentials.
Implements Gaussian white noise drawn with the Box-Muller transform from an
injectable uniform random source.
"""

from __future__ import annotations

import logging
import math
from typing import Optional

from ephysforge.utils.random_source import RandomSource, TorchRandomSource

logger = logging.getLogger(__name__)


def box_muller(rng: RandomSource) -> float:
    """Draw one standard-normal sample from two independent uniforms.

    ``z = sqrt(-2 ln u1) · cos(2π u2)``. ``u1`` is taken from ``(0, 1]`` so
    the logarithm stays finite.
    """
    u1 = 1.0 - rng.uniform()
    u2 = rng.uniform()
    return math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)


class MeasurementNoise:
    """Gaussian recording noise with an amplitude set in microvolts.

    Samples are returned in millivolts so they can be added directly to
    field potentials.

    Args:
        level: Standard deviation in µV. Negative or non-finite values are
            clamped to 0.
        rng: Uniform random source; a fresh :class:`TorchRandomSource` when
            omitted.
    """

    def __init__(self, level: float = 50.0, rng: Optional[RandomSource] = None) -> None:
        self.rng = rng if rng is not None else TorchRandomSource()
        self._level = 0.0
        self.level = level

    @property
    def level(self) -> float:
        """Noise amplitude in µV."""
        return self._level

    @level.setter
    def level(self, value: float) -> None:
        value = float(value)
        if not math.isfinite(value) or value < 0.0:
            logger.warning("Noise level %r is not a finite non-negative number; clamping to 0", value)
            value = 0.0
        self._level = value

    def sample(self) -> float:
        """Return one noise sample in mV (exactly 0 when the level is 0)."""
        if self._level <= 0.0:
            return 0.0
        return box_muller(self.rng) * (self._level / 1000.0)

    def reset_state(self) -> None:
        """Rewind the underlying random source."""
        self.rng.reset_state()
