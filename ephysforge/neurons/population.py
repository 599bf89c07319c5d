"""Neuron population layout and bulk operations.

The default layout reproduces a slab of hippocampal CA1: cells packed at a
cell-body spacing along the medio-lateral axis of the pyramidal layer, with
a minority of fast-spiking interneurons and a small depth jitter per cell.
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, List, NamedTuple, Optional, Sequence

import torch

from ephysforge.config.schema import PopulationConfig
from ephysforge.neurons.base import BaseCurrentSource, Point
from ephysforge.neurons.dipole import DipoleNeuron, NeuronType
from ephysforge.utils.random_source import RandomSource, TorchRandomSource

logger = logging.getLogger(__name__)


class NeuronSnapshot(NamedTuple):
    """Read-only per-frame view of one neuron for renderers."""

    soma: Point
    dendrite: Point
    neuron_type: str
    is_spiking: bool


class NeuronPopulation:
    """Ordered, mutable collection of current sources.

    The population is the only owner of the neuron objects; the engine and
    the field solver read it, and regeneration swaps the whole list.

    Args:
        neurons: Initial sources (empty by default).
        rng: Random source shared by layout generation, bursts and every
            generated neuron's Poisson draw.
    """

    def __init__(
        self,
        neurons: Optional[Iterable[BaseCurrentSource]] = None,
        rng: Optional[RandomSource] = None,
    ) -> None:
        self.rng = rng if rng is not None else TorchRandomSource()
        self.neurons: List[BaseCurrentSource] = list(neurons or [])

    @classmethod
    def from_config(
        cls, config: PopulationConfig, rng: Optional[RandomSource] = None
    ) -> "NeuronPopulation":
        """Create and lay out a population from ``config``."""
        population = cls(rng=rng)
        population.generate(config)
        return population

    def generate(self, config: PopulationConfig) -> None:
        """Replace every neuron with a freshly randomised layer.

        Cells sit at the centre of each ``spacing``-wide slot between
        ``ml_start`` and ``ml_end``. Each cell is an interneuron with
        probability ``interneuron_fraction``; depth and base rate are
        jittered uniformly around the layer depth and the type's rate.
        """
        rng = self.rng
        count = int((config.ml_end - config.ml_start) // config.spacing)
        neurons: List[BaseCurrentSource] = []
        for i in range(count):
            x = config.ml_start + i * config.spacing + config.spacing / 2.0
            if rng.uniform() < config.interneuron_fraction:
                neuron_type = NeuronType.INTERNEURON
                y = config.layer_depth + (rng.uniform() - 0.5) * config.interneuron_jitter
                rate = config.interneuron_rate + (rng.uniform() - 0.5) * config.interneuron_rate_spread
            else:
                neuron_type = NeuronType.PYRAMIDAL
                y = config.layer_depth + (rng.uniform() - 0.5) * config.pyramidal_jitter
                rate = config.pyramidal_rate + (rng.uniform() - 0.5) * config.pyramidal_rate_spread
            neurons.append(
                DipoleNeuron(x, y, 0.0, neuron_type, base_firing_rate=rate, rng=rng)
            )
        self.neurons = neurons
        logger.debug(
            "Generated %d neurons (%d interneurons)",
            len(neurons),
            sum(1 for n in neurons if n.neuron_type is NeuronType.INTERNEURON),
        )

    def replace(self, neurons: Iterable[BaseCurrentSource]) -> None:
        """Swap in an explicit list of sources."""
        self.neurons = list(neurons)

    def advance(self, dt: float) -> None:
        for neuron in self.neurons:
            neuron.advance(dt)

    def set_base_firing_rate(self, rate: float) -> None:
        """Set the same Poisson rate (Hz) on every neuron that has one."""
        for neuron in self.neurons:
            if hasattr(neuron, "base_firing_rate"):
                neuron.base_firing_rate = rate

    def fire(self, indices: Iterable[int]) -> List[int]:
        """Force-fire the neurons at ``indices``; unknown indices are skipped.

        Returns:
            Indices that were actually fired.
        """
        fired = []
        for idx in indices:
            if 0 <= idx < len(self.neurons) and hasattr(self.neurons[idx], "fire"):
                self.neurons[idx].fire()
                fired.append(idx)
        return fired

    def trigger_burst(self, count: int = 3, pool: int = 10) -> List[int]:
        """Synchronously fire ``count`` distinct cells chosen from the first ``pool``."""
        candidates = list(range(pool))
        # partial Fisher-Yates
        for i in range(min(count, pool)):
            j = i + self.rng.randint(pool - i)
            candidates[i], candidates[j] = candidates[j], candidates[i]
        return self.fire(candidates[: min(count, pool)])

    def reset_state(self) -> None:
        for neuron in self.neurons:
            neuron.reset_state()

    def snapshot(self) -> List[NeuronSnapshot]:
        """Per-frame read-only view (positions, type, spiking flag)."""
        snapshots = []
        for neuron in self.neurons:
            positions = neuron.compartment_positions()
            snapshots.append(
                NeuronSnapshot(
                    soma=positions[0],
                    dendrite=positions[-1],
                    neuron_type=getattr(getattr(neuron, "neuron_type", None), "value", "unknown"),
                    is_spiking=bool(getattr(neuron, "is_spiking", False)),
                )
            )
        return snapshots

    def source_positions(self) -> torch.Tensor:
        """All compartment positions stacked as a ``[n_sources, 3]`` tensor."""
        return sources_to_tensors(self.neurons)[0]

    def source_currents(self) -> torch.Tensor:
        """All compartment currents as a ``[n_sources]`` tensor (nA)."""
        return sources_to_tensors(self.neurons)[1]

    def __len__(self) -> int:
        return len(self.neurons)

    def __iter__(self) -> Iterator[BaseCurrentSource]:
        return iter(self.neurons)

    def __getitem__(self, idx: int) -> BaseCurrentSource:
        return self.neurons[idx]


def sources_to_tensors(sources: Sequence[BaseCurrentSource]):
    """Flatten ``sources`` into ``(positions [S, 3], currents [S])`` tensors."""
    positions: List[Point] = []
    currents: List[float] = []
    for source in sources:
        positions.extend(source.compartment_positions())
        currents.extend(source.compartment_currents())
    if not positions:
        return (
            torch.zeros((0, 3), dtype=torch.float64),
            torch.zeros(0, dtype=torch.float64),
        )
    return (
        torch.tensor(positions, dtype=torch.float64),
        torch.tensor(currents, dtype=torch.float64),
    )
