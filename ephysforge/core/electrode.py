"""Recording electrodes and tetrode geometry.

An :class:`Electrode` is a point sensor with a fixed-length FIFO trace.
A :class:`Tetrode` is four electrodes arranged in a diamond around a
movable centre, the way four twisted wires sit around a bundle axis.
"""

from __future__ import annotations

import math
from collections import deque
from typing import List, Optional, Sequence, Tuple

import numpy as np

Point = Tuple[float, float, float]

# Diamond offsets (in units of the wire spacing), Ch1..Ch4
TETRODE_OFFSETS: Tuple[Tuple[float, float], ...] = ((0.0, -1.0), (1.0, 0.0), (0.0, 1.0), (-1.0, 0.0))


def _validate_point(x: float, y: float, z: float) -> Point:
    point = (float(x), float(y), float(z))
    if not all(math.isfinite(c) for c in point):
        raise ValueError(f"Electrode position must be finite, got {point}")
    return point


class Electrode:
    """Point electrode with a bounded voltage history.

    The history is pre-filled with zeros and always holds exactly
    ``history_length`` samples, newest last; each :meth:`record` drops the
    oldest sample.

    Args:
        x, y, z: Position in µm.
        name: Display name.
        history_length: Number of samples kept.
    """

    def __init__(
        self,
        x: float,
        y: float,
        z: float = 0.0,
        name: str = "",
        history_length: int = 500,
    ) -> None:
        self.position: Point = _validate_point(x, y, z)
        self.name = name
        self.voltage = 0.0
        self._history: deque = deque([0.0] * history_length, maxlen=history_length)

    @property
    def history_length(self) -> int:
        return self._history.maxlen

    @property
    def history(self) -> List[float]:
        """Copy of the trace in mV, oldest first."""
        return list(self._history)

    def history_array(self) -> np.ndarray:
        """Trace as a float64 NumPy array, oldest first."""
        return np.fromiter(self._history, dtype=np.float64, count=len(self._history))

    def set_position(self, x: float, y: float, z: float = 0.0) -> None:
        self.position = _validate_point(x, y, z)

    def record(self, value: float) -> None:
        """Append ``value`` (mV) and make it the current voltage."""
        self.voltage = float(value)
        self._history.append(self.voltage)

    def clear_history(self) -> None:
        self.voltage = 0.0
        self._history.extend([0.0] * self.history_length)

    def __repr__(self) -> str:
        return f"Electrode(name={self.name!r}, position={self.position})"


class Tetrode:
    """Four electrodes in a diamond of half-width ``spacing`` around ``center``.

    Wire offsets relative to the centre are fixed:
    ``Ch1 (0, -d)``, ``Ch2 (d, 0)``, ``Ch3 (0, d)``, ``Ch4 (-d, 0)``.

    Args:
        center: ``(x, y, z)`` of the bundle axis in µm.
        spacing: Distance ``d`` of each wire from the centre in µm.
        history_length: Samples kept per channel.
    """

    def __init__(
        self,
        center: Sequence[float] = (1250.0, -1000.0, 0.0),
        spacing: float = 12.0,
        history_length: int = 500,
    ) -> None:
        self.spacing = float(spacing)
        self.center: Point = _validate_point(*center)
        self.electrodes: List[Electrode] = [
            Electrode(0.0, 0.0, 0.0, f"Ch{i + 1}", history_length)
            for i in range(len(TETRODE_OFFSETS))
        ]
        self._place()

    def _place(self) -> None:
        cx, cy, cz = self.center
        for electrode, (ox, oy) in zip(self.electrodes, TETRODE_OFFSETS):
            electrode.set_position(cx + ox * self.spacing, cy + oy * self.spacing, cz)

    def set_center(self, offset: Optional[float] = None, depth: Optional[float] = None) -> None:
        """Move the bundle; ``offset`` is the x (medio-lateral) coordinate,
        ``depth`` the y coordinate. ``None`` keeps the current value."""
        cx, cy, cz = self.center
        if offset is not None:
            cx = offset
        if depth is not None:
            cy = depth
        self.center = _validate_point(cx, cy, cz)
        self._place()

    def positions(self) -> List[Point]:
        return [e.position for e in self.electrodes]

    def __len__(self) -> int:
        return len(self.electrodes)

    def __iter__(self):
        return iter(self.electrodes)

    def __getitem__(self, idx: int) -> Electrode:
        return self.electrodes[idx]
