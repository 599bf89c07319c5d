"""Cascaded RC band-pass filter used to condition electrode channels.

The band-pass is built from two single-pole low-pass accumulators rather
than a designed biquad:

1. High-pass at ``low_cutoff`` via subtraction, ``hp = x - LP_low(x)``.
2. Low-pass at ``high_cutoff``, ``y = LP_high(hp)``.

The passband is not flat, but the recurrence is cheap, unconditionally
stable for positive cutoffs and keeps its state across calls. The stage
order (high-pass first) is part of the numerical contract.

Filter modes map onto cutoff pairs:

* ``lfp``   -> 1 Hz to 300 Hz
* ``spike`` -> 300 Hz to 6 kHz
* ``raw``   -> conditioner bypassed entirely
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional, Sequence, Tuple, Union

import torch

from .base import BaseFilter
from .functional import low_pass


class FilterMode(str, Enum):
    """Channel conditioning modes exposed to the UI."""

    RAW = "raw"
    LFP = "lfp"
    SPIKE = "spike"


FILTER_MODE_CUTOFFS: Dict[FilterMode, Tuple[float, float]] = {
    FilterMode.LFP: (1.0, 300.0),
    FilterMode.SPIKE: (300.0, 6000.0),
}


class BandPassFilter(BaseFilter):
    r"""Multi-channel band-pass made of two cascaded single-pole filters.

    Per channel ``c`` and sample ``x``:

    * ``s_hp[c] <- s_hp[c] + α(f_low)  · (x - s_hp[c])``
    * ``hp = x - s_hp[c]``
    * ``s_lp[c] <- s_lp[c] + α(f_high) · (hp - s_lp[c])``
    * ``y = s_lp[c]``

    with ``α(f) = dt / (1/(2πf) + dt)``. A cutoff of ``0``/``None`` turns
    the corresponding stage into a pass-through.

    Cutoffs are plain attributes and may be changed between samples; the
    accumulators are left alone, so a change produces a bounded transient
    instead of a reset.

    Args:
        low_cutoff: High-pass corner in Hz (removes content below it).
        high_cutoff: Low-pass corner in Hz (removes content above it).
        dt: Sample interval in seconds.
        num_channels: Number of independent channels.
    """

    def __init__(
        self,
        low_cutoff: Optional[float] = 300.0,
        high_cutoff: Optional[float] = 6000.0,
        dt: float = 0.0005,
        num_channels: int = 1,
    ) -> None:
        super().__init__(dt=dt, num_channels=num_channels)
        self.low_cutoff = low_cutoff
        self.high_cutoff = high_cutoff
        self.lp_high_state = torch.zeros(num_channels, dtype=torch.float64)
        self.lp_low_state = torch.zeros(num_channels, dtype=torch.float64)

    def forward(
        self,
        x: torch.Tensor,
        dt: Optional[float] = None,
    ) -> torch.Tensor:
        """Filter one sample per channel.

        Args:
            x: ``[num_channels]`` tensor (a scalar broadcasts to all
                channels).
            dt: Optional sample-interval override in seconds.

        Returns:
            ``[num_channels]`` band-passed tensor.
        """
        step = self.dt if dt is None else dt
        x = torch.as_tensor(x, dtype=torch.float64)

        if self.low_cutoff:
            self.lp_high_state = low_pass(x, self.lp_high_state, step, self.low_cutoff)
            high_passed = x - self.lp_high_state
        else:
            high_passed = x

        if self.high_cutoff:
            self.lp_low_state = low_pass(high_passed, self.lp_low_state, step, self.high_cutoff)
            return self.lp_low_state.clone()
        return high_passed.expand_as(self.lp_low_state).clone()

    def process(
        self, sample: Union[float, Sequence[float], torch.Tensor]
    ) -> Union[float, list]:
        """Filter one sample, returning the same kind that was passed in.

        A float in gives a float out (single-channel filters); a sequence
        or tensor gives a list with one value per channel.
        """
        scalar = isinstance(sample, (int, float))
        out = self.forward(torch.as_tensor(sample, dtype=torch.float64))
        if scalar and out.numel() == 1:
            return out.item()
        return out.tolist()

    def reset_state(self) -> None:
        """Zero both low-pass accumulators on every channel."""
        self.lp_high_state = torch.zeros(self.num_channels, dtype=torch.float64)
        self.lp_low_state = torch.zeros(self.num_channels, dtype=torch.float64)

    reset = reset_state

    def set_cutoffs(self, low_cutoff: Optional[float], high_cutoff: Optional[float]) -> None:
        """Change both corners without touching the filter state."""
        self.low_cutoff = low_cutoff
        self.high_cutoff = high_cutoff

    def apply_mode(self, mode: Union[FilterMode, str]) -> None:
        """Reset state and load the cutoff pair for ``mode``.

        ``raw`` only resets; the engine bypasses the filter in that mode.
        """
        mode = FilterMode(mode)
        self.reset_state()
        if mode in FILTER_MODE_CUTOFFS:
            self.set_cutoffs(*FILTER_MODE_CUTOFFS[mode])

    def to_dict(self) -> Dict[str, Any]:
        return {
            "low_cutoff": self.low_cutoff,
            "high_cutoff": self.high_cutoff,
            "dt": self.dt,
            "num_channels": self.num_channels,
        }
