"""Signal conditioning for simulated electrode channels.

This module implements the per-channel band-pass filter applied to
differentially referenced electrode potentials, plus the Gaussian
measurement noise injected by the field solver.

Filters:
    BandPassFilter: Cascaded RC high-pass / low-pass band-pass
    FilterMode: raw / lfp / spike channel conditioning modes
    MeasurementNoise: Box-Muller Gaussian recording noise

Example:
    >>> from ephysforge.filters import BandPassFilter
    >>> bp = BandPassFilter(low_cutoff=300, high_cutoff=6000, dt=0.0005)
    >>> y = bp.process(0.1)
"""

from ephysforge.filters.base import BaseFilter
from ephysforge.filters.bandpass import (
    BandPassFilter,
    FilterMode,
    FILTER_MODE_CUTOFFS,
)
from ephysforge.filters.functional import low_pass, high_pass
from ephysforge.filters.noise import MeasurementNoise, box_muller

__all__ = [
    "BaseFilter",
    "BandPassFilter",
    "FilterMode",
    "FILTER_MODE_CUTOFFS",
    "low_pass",
    "high_pass",
    "MeasurementNoise",
    "box_muller",
]
