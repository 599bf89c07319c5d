"""Fixed-timestep simulation driver for extracellular recording.

This module provides the single owner of all mutable simulation state
(neuron population, field solver, tetrode, reference electrode, channel
filter, spike detector and record buffer). Renderers read from it; UI
controls call its setter methods. Nothing else mutates that state.

Per rendered frame, while Running, the engine executes
``steps_per_frame`` sub-steps of length ``dt``:

1. advance every neuron,
2. evaluate the field at the reference and at each tetrode wire,
3. subtract the reference (differential referencing),
4. band-pass each channel unless the filter mode is ``raw``,
5. on the final sub-step only: append to each electrode history and scan
   the channel vector for a spike.

While Paused, neurons are frozen; the engine only refreshes
``static_signals`` so a moved electrode still shows the standing field.

The engine is single-threaded. Setters are plain last-writer-wins
assignments; callers driving it from several threads must serialise
access to the whole engine.

Example:
    >>> from ephysforge.config.schema import EphysForgeConfig
    >>> from ephysforge.core.simulation_engine import SimulationEngine
    >>> engine = SimulationEngine(EphysForgeConfig())
    >>> records = engine.run(num_frames=400)
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, List, Optional, Sequence

import torch

from ephysforge.config.schema import EphysForgeConfig
from ephysforge.core.detection import SpikeDetector, SpikeRecord, SpikeRecordBuffer
from ephysforge.core.electrode import Electrode, Tetrode
from ephysforge.filters.bandpass import FilterMode
from ephysforge.neurons.base import BaseCurrentSource
from ephysforge.neurons.population import NeuronPopulation, NeuronSnapshot
from ephysforge.register_components import register_all
from ephysforge.registry import FILTER_REGISTRY
from ephysforge.solvers import get_solver
from ephysforge.utils.random_source import RandomSource, TorchRandomSource

logger = logging.getLogger(__name__)

# Ensure components are registered
register_all()


class SimulationEngine:
    """Simulation context and frame loop.

    Attributes:
        config: Configuration the engine was built from.
        rng: Random source shared by firing, noise and layout.
        population: Neuron population.
        solver: Field solver.
        tetrode: Four recording electrodes.
        reference: Reference electrode.
        filter: Four-channel band-pass conditioner.
        detector: Spike detector.
        spike_records: Bounded buffer of emitted spike records.
        filter_mode: Active channel conditioning mode.
        running: ``True`` while Running, ``False`` while Paused.
    """

    def __init__(
        self,
        config: Optional[EphysForgeConfig] = None,
        rng: Optional[RandomSource] = None,
    ):
        """Build the simulation context from ``config``.

        Args:
            config: Simulation configuration (defaults when omitted).
            rng: Random source; seeded from ``config.simulation.seed`` when
                omitted.
        """
        self.config = config or EphysForgeConfig()
        sim_cfg = self.config.simulation
        self.rng = rng if rng is not None else TorchRandomSource(sim_cfg.seed)

        self.dt = sim_cfg.dt
        self.steps_per_frame = sim_cfg.steps_per_frame
        self.running = sim_cfg.running
        self._step_count = 0

        self.population = NeuronPopulation.from_config(self.config.population, rng=self.rng)

        solver_cfg = self.config.physics.to_dict()
        solver_cfg["rng"] = self.rng
        self.solver = get_solver(solver_cfg)

        elec_cfg = self.config.electrodes
        self.tetrode = Tetrode(
            center=elec_cfg.center,
            spacing=elec_cfg.spacing,
            history_length=elec_cfg.history_length,
        )
        self.reference = Electrode(*elec_cfg.reference, name="Ref",
                                   history_length=elec_cfg.history_length)

        self.filter = FILTER_REGISTRY.create(
            "bandpass", dt=self.dt, num_channels=len(self.tetrode)
        )
        self.filter_mode = FilterMode.RAW
        self.set_filter_mode(self.config.filter.mode)

        det_cfg = self.config.detector
        self.detector = SpikeDetector(det_cfg.threshold, det_cfg.refractory_period)
        self.spike_records = SpikeRecordBuffer(det_cfg.max_records)

        num_channels = len(self.tetrode)
        self.last_raw_signals: List[float] = [0.0] * num_channels
        self.last_signals: List[float] = [0.0] * num_channels
        self.static_signals: List[float] = [0.0] * num_channels

    # ------------------------------------------------------------------
    # Frame loop
    # ------------------------------------------------------------------

    @property
    def time(self) -> float:
        """Simulation time in seconds."""
        return self._step_count * self.dt

    def _differential_signals(self) -> List[float]:
        sources = self.population.neurons
        ref_potential = self.solver.potential_at(self.reference.position, sources)
        self.reference.voltage = ref_potential
        return [
            self.solver.potential_at(electrode.position, sources) - ref_potential
            for electrode in self.tetrode
        ]

    def _substep(self) -> List[float]:
        self.population.advance(self.dt)
        self._step_count += 1

        raw = self._differential_signals()
        self.last_raw_signals = raw
        if self.filter_mode is FilterMode.RAW:
            signals = raw
        else:
            signals = self.filter.process(raw)
        self.last_signals = signals
        return signals

    def step_frame(self) -> Optional[SpikeRecord]:
        """Advance one rendered frame.

        Returns:
            The spike record emitted on this frame, if any. Always ``None``
            while Paused.
        """
        if not self.running:
            self.static_signals = self._differential_signals()
            return None

        signals: List[float] = []
        for _ in range(self.steps_per_frame):
            signals = self._substep()

        if not all(math.isfinite(v) for v in signals):
            logger.warning("Non-finite channel values at t=%.4fs: %s", self.time, signals)

        for electrode, value in zip(self.tetrode, signals):
            electrode.record(value)

        record = self.detector.scan(signals, self.time)
        if record is not None:
            self.spike_records.append(record)
        return record

    def run(self, num_frames: int) -> List[SpikeRecord]:
        """Drive ``num_frames`` frames headlessly and return emitted records."""
        records = []
        for _ in range(num_frames):
            record = self.step_frame()
            if record is not None:
                records.append(record)
        return records

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def set_noise_level(self, level: float) -> None:
        """Measurement noise in µV; negative values are clamped to 0."""
        self.solver.noise_level = level

    def set_array_position(
        self, offset: Optional[float] = None, depth: Optional[float] = None
    ) -> None:
        """Recentre the tetrode at medio-lateral ``offset`` and/or ``depth`` (µm)."""
        self.tetrode.set_center(offset, depth)

    def set_reference_position(self, x: float, y: float, z: float = 0.0) -> None:
        self.reference.set_position(x, y, z)

    def set_reference_depth(self, depth_mm: float) -> None:
        """Slide the reference along y, keeping its x and z (depth in mm)."""
        x, _, z = self.reference.position
        self.reference.set_position(x, depth_mm * 1000.0, z)

    def set_filter_mode(self, mode) -> None:
        """Switch conditioning mode; always resets the filter state.

        Raises:
            ValueError: If ``mode`` is not ``raw``, ``lfp`` or ``spike``.
        """
        mode = FilterMode(mode)
        self.filter.apply_mode(mode)
        self.filter_mode = mode
        logger.debug(
            "Filter mode %s (low=%s Hz, high=%s Hz)",
            mode.value, self.filter.low_cutoff, self.filter.high_cutoff,
        )

    def set_base_firing_rate(self, rate: float, co_fire_probability: float = 0.0) -> List[int]:
        """Set every neuron's Poisson rate (Hz).

        With probability ``co_fire_probability`` a synchronous burst is
        triggered as well.

        Returns:
            Indices of neurons fired by the burst (empty if none).
        """
        self.population.set_base_firing_rate(rate)
        if co_fire_probability > 0.0 and self.rng.uniform() < co_fire_probability:
            return self.trigger_burst()
        return []

    def fire_neurons(self, indices: Iterable[int]) -> List[int]:
        """Force-fire a subset of neurons; returns the indices fired."""
        return self.population.fire(indices)

    def trigger_burst(self, count: int = 3, pool: int = 10) -> List[int]:
        fired = self.population.trigger_burst(count, pool)
        logger.debug("Co-firing burst on neurons %s", fired)
        return fired

    def regenerate_population(self) -> None:
        """Lay out a fresh population and clear the spike records."""
        self.population.generate(self.config.population)
        self.spike_records.clear()
        logger.info("Regenerated population with %d neurons", len(self.population))

    def set_neurons(self, neurons: Sequence[BaseCurrentSource]) -> None:
        """Replace the population with explicit sources (clears records)."""
        self.population.replace(neurons)
        self.spike_records.clear()

    def pause(self) -> None:
        self.running = False

    def resume(self) -> None:
        self.running = True

    def toggle_running(self) -> bool:
        self.running = not self.running
        return self.running

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def neurons(self) -> List[NeuronSnapshot]:
        return self.population.snapshot()

    @property
    def electrodes(self) -> List[Electrode]:
        return list(self.tetrode)

    @property
    def noise_level(self) -> float:
        return self.solver.noise_level

    def potential_at(self, point: Sequence[float]) -> float:
        """Raw (unreferenced) potential at ``point`` in mV."""
        return self.solver.potential_at(point, self.population.neurons)

    def field_map(
        self,
        xs: Sequence[float],
        ys: Sequence[float],
        z: float = 0.0,
    ) -> torch.Tensor:
        """Raw potential on a grid, ``[len(ys), len(xs)]`` in mV."""
        xs_t = torch.as_tensor(xs, dtype=torch.float64)
        ys_t = torch.as_tensor(ys, dtype=torch.float64)
        yy, xx = torch.meshgrid(ys_t, xs_t, indexing="ij")
        points = torch.stack([xx, yy, torch.full_like(xx, float(z))], dim=-1).reshape(-1, 3)
        values = self.solver.potential_map(points, self.population.neurons)
        return values.reshape(len(ys_t), len(xs_t))
