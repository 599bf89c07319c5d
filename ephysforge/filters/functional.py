"""Single-pole RC filter primitives.

Both functions accept Python floats or ``torch`` tensors, so the same law
drives scalar reference checks and the vectorised multi-channel filter.

The low-pass update is the discrete RC recurrence

* ``y[i] = y[i-1] + alpha * (x[i] - y[i-1])``
* ``alpha = dt / (rc + dt)`` with ``rc = 1 / (2 * pi * f_c)``
"""

from __future__ import annotations

import math
from typing import Optional, TypeVar, Union

import torch

Signal = TypeVar("Signal", float, torch.Tensor)


def smoothing_factor(dt: float, cutoff: float) -> float:
    """Return ``alpha`` for a single-pole low-pass at ``cutoff`` Hz."""
    rc = 1.0 / (2.0 * math.pi * cutoff)
    return dt / (rc + dt)


def low_pass(
    current: Signal,
    previous: Union[float, torch.Tensor],
    dt: float,
    cutoff: Optional[float],
) -> Signal:
    """Advance a single-pole low-pass filter by one sample.

    Args:
        current: New input sample(s).
        previous: Previous filter output (the accumulator state).
        dt: Sample interval in seconds.
        cutoff: Cutoff frequency in Hz. ``0`` or ``None`` disables the
            stage and returns ``current`` unchanged.

    Returns:
        The new filter output, same kind as ``current``.
    """
    if not cutoff:
        return current
    alpha = smoothing_factor(dt, cutoff)
    return previous + alpha * (current - previous)


def high_pass(
    current: Signal,
    previous_lp: Union[float, torch.Tensor],
    dt: float,
    cutoff: Optional[float],
) -> Signal:
    """High-pass by low-pass subtraction, ``HP = x - LP(x)``.

    A degenerate cutoff makes the stage a pass-through rather than
    subtracting the signal from itself.
    """
    if not cutoff:
        return current
    return current - low_pass(current, previous_lp, dt, cutoff)
