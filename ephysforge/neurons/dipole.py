import math
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from ephysforge.neurons.base import BaseCurrentSource, Point
from ephysforge.utils.random_source import RandomSource, TorchRandomSource


# Spike waveform, seconds / nA
SPIKE_DURATION = 0.005
SPIKE_AMPLITUDE = 800.0
SPIKE_CENTER = 0.001
SPIKE_SIGMA = 0.0005
AHP_RATIO = 0.25
AHP_CENTER = 0.003
AHP_SIGMA = 0.001


class NeuronType(str, Enum):
    """Cell classes with their dipole length (µm) and default rate (Hz)."""

    PYRAMIDAL = "pyramidal"
    INTERNEURON = "interneuron"

    @property
    def dendrite_length(self) -> float:
        return 100.0 if self is NeuronType.INTERNEURON else 300.0

    @property
    def default_firing_rate(self) -> float:
        return 20.0 if self is NeuronType.INTERNEURON else 5.0


class SpikeState(str, Enum):
    RESTING = "resting"
    SPIKING = "spiking"


def spike_waveform(t_rel: float) -> float:
    """Somatic current (nA) ``t_rel`` seconds after spike onset.

    Sum of a large negative Gaussian (depolarisation, peak at 1 ms) and a
    positive Gaussian a quarter of its size (after-hyperpolarisation, peak
    at 3 ms).
    """
    current = -SPIKE_AMPLITUDE * math.exp(
        -((t_rel - SPIKE_CENTER) ** 2) / (2.0 * SPIKE_SIGMA * SPIKE_SIGMA)
    )
    current += (SPIKE_AMPLITUDE * AHP_RATIO) * math.exp(
        -((t_rel - AHP_CENTER) ** 2) / (2.0 * AHP_SIGMA * AHP_SIGMA)
    )
    return current


class DipoleNeuron(BaseCurrentSource):
    r"""Two-compartment neuron emitting a stereotyped somatic spike current.

    The soma sits at ``(x, y, z)`` and the apical dendrite at
    ``(x, y - L, z)`` where ``L`` depends on the cell type (300 µm for
    pyramidal cells, 100 µm for interneurons).

    Each call to :meth:`advance` moves the internal clock by ``dt``:

    - Resting: fire with probability ``min(rate · dt, 1)`` (discrete
      homogeneous Poisson process).
    - Spiking: ``t_rel = clock - spike_time``. Past 5 ms the cell returns
      to rest with zero current; otherwise ``I_soma = spike_waveform(t_rel)``
      and ``I_dend = -I_soma`` (return current).

    Currents are non-zero only while spiking.

    Args:
        x, y, z: Soma position in µm.
        neuron_type: ``"pyramidal"`` or ``"interneuron"``.
        base_firing_rate: Poisson rate in Hz; the type default when omitted.
        rng: Uniform random source for the firing draw.
    """

    def __init__(
        self,
        x: float,
        y: float,
        z: float = 0.0,
        neuron_type="pyramidal",
        base_firing_rate: Optional[float] = None,
        rng: Optional[RandomSource] = None,
    ):
        self.neuron_type = NeuronType(neuron_type)
        self.soma_pos: Point = (float(x), float(y), float(z))
        self.dendrite_pos: Point = (
            float(x),
            float(y) - self.neuron_type.dendrite_length,
            float(z),
        )
        self.rng = rng if rng is not None else TorchRandomSource()

        self.time = 0.0
        self._base_firing_rate = 0.0
        self.base_firing_rate = (
            self.neuron_type.default_firing_rate
            if base_firing_rate is None
            else base_firing_rate
        )
        self.state = SpikeState.RESTING
        self.spike_time = 0.0
        self.soma_current = 0.0
        self.dendrite_current = 0.0

    @property
    def base_firing_rate(self) -> float:
        return self._base_firing_rate

    @base_firing_rate.setter
    def base_firing_rate(self, rate: float) -> None:
        # negative or NaN rates mean "silent"
        rate = float(rate)
        self._base_firing_rate = rate if rate > 0.0 else 0.0

    @property
    def is_spiking(self) -> bool:
        return self.state is SpikeState.SPIKING

    def advance(self, dt: float) -> None:
        self.time += dt

        if self.state is SpikeState.RESTING:
            probability = min(self._base_firing_rate * dt, 1.0)
            if probability > 0.0 and self.rng.uniform() < probability:
                self.fire()

        if self.state is SpikeState.SPIKING:
            t_rel = self.time - self.spike_time
            if t_rel > SPIKE_DURATION:
                self.state = SpikeState.RESTING
                self.soma_current = 0.0
                self.dendrite_current = 0.0
            else:
                current = spike_waveform(t_rel)
                self.soma_current = current
                self.dendrite_current = -current

    def fire(self) -> None:
        """Force spike onset now; re-arms the waveform if already spiking."""
        self.state = SpikeState.SPIKING
        self.spike_time = self.time

    def reset_state(self) -> None:
        self.time = 0.0
        self.state = SpikeState.RESTING
        self.spike_time = 0.0
        self.soma_current = 0.0
        self.dendrite_current = 0.0

    def compartment_positions(self) -> Tuple[Point, Point]:
        return self.soma_pos, self.dendrite_pos

    def compartment_currents(self) -> Tuple[float, float]:
        return self.soma_current, self.dendrite_current

    def to_dict(self) -> Dict[str, Any]:
        x, y, z = self.soma_pos
        return {
            "x": x,
            "y": y,
            "z": z,
            "neuron_type": self.neuron_type.value,
            "base_firing_rate": self.base_firing_rate,
        }

    def __repr__(self) -> str:
        return (
            f"DipoleNeuron(soma={self.soma_pos}, type={self.neuron_type.value}, "
            f"rate={self.base_firing_rate:.2f}Hz, state={self.state.value})"
        )
