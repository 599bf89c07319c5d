"""Threshold spike detection over simultaneous tetrode channels.

Extracellular spikes show up as negative deflections, so an event is a
frame where the most negative channel dips below ``-threshold``. A
refractory debounce keeps one spike from being counted on consecutive
frames.

Amplitudes are the absolute instantaneous channel values at detection
time, not a windowed peak. At the frame cadence detection lands close to
the trough, and the per-channel ratios (which is what cluster plots show)
are preserved.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple

import numpy as np


@dataclass(frozen=True)
class SpikeRecord:
    """One detected event.

    Attributes:
        time: Simulation time of detection in seconds.
        amplitudes: Absolute voltage per channel in mV.
    """
    time: float
    amplitudes: Tuple[float, ...]


class SpikeRecordBuffer:
    """Most-recent-N store of spike records, oldest evicted first."""

    def __init__(self, capacity: int = 200) -> None:
        self._records: deque = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._records.maxlen

    def append(self, record: SpikeRecord) -> None:
        self._records.append(record)

    def clear(self) -> None:
        self._records.clear()

    def as_array(self) -> np.ndarray:
        """Amplitudes as a ``[num_records, num_channels]`` array."""
        if not self._records:
            return np.zeros((0, 0), dtype=np.float64)
        return np.array([r.amplitudes for r in self._records], dtype=np.float64)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[SpikeRecord]:
        return iter(list(self._records))

    def __getitem__(self, idx: int) -> SpikeRecord:
        return self._records[idx]


class SpikeDetector:
    """Negative-threshold detector with a refractory debounce.

    Args:
        threshold: Magnitude in mV; a frame is a candidate when its most
            negative channel is below ``-threshold`` (default 50 µV).
        refractory_period: Seconds that must elapse after an emitted event
            before another one is accepted (default 2 ms).
    """

    def __init__(self, threshold: float = 0.05, refractory_period: float = 0.002) -> None:
        self.threshold = threshold
        self.refractory_period = refractory_period
        self.last_spike_time: Optional[float] = None

    def scan(self, voltages: Sequence[float], time: float) -> Optional[SpikeRecord]:
        """Check one frame of channel voltages (mV) taken at ``time`` (s).

        Returns:
            A :class:`SpikeRecord` when an event is emitted, else ``None``.
        """
        if len(voltages) == 0 or min(voltages) >= -self.threshold:
            return None
        if (
            self.last_spike_time is not None
            and time - self.last_spike_time <= self.refractory_period
        ):
            return None
        self.last_spike_time = time
        return SpikeRecord(time=time, amplitudes=tuple(abs(float(v)) for v in voltages))

    def reset(self) -> None:
        """Forget the previous event so the next candidate is accepted."""
        self.last_spike_time = None
