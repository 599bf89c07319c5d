"""Canonical configuration schema for EphysForge.

This module defines the single configuration format consumed by the
simulation engine, the CLI and the tests. It round-trips through YAML:
``config.to_yaml()`` → file → ``EphysForgeConfig.from_yaml()`` gives an
equal config.

The canonical schema covers:
- Neuron population layout (CA1-style layer, type mix, jitter, rates)
- Field solver parameters (conductivity, noise, spatial decay)
- Tetrode and reference electrode geometry
- Channel filter mode and detector thresholds
- Simulation timing (dt, sub-steps per frame, seed)

Example:
    >>> from ephysforge.config.schema import EphysForgeConfig
    >>> config = EphysForgeConfig.from_dict(yaml_dict)
    >>> yaml_str = config.to_yaml()
    >>> config2 = EphysForgeConfig.from_yaml(yaml_str)
"""

from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional
import yaml


def _known_fields(cls, data: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in data.items() if k in cls.__dataclass_fields__}


@dataclass
class PopulationConfig:
    """Layout of the generated neuron population (all distances in µm).

    Attributes:
        ml_start: Medio-lateral start of the cell layer.
        ml_end: Medio-lateral end of the cell layer.
        spacing: Cell-body spacing; one cell per slot.
        layer_depth: Nominal soma depth of the pyramidal layer.
        interneuron_fraction: Probability that a slot holds an interneuron.
        pyramidal_jitter: Full width of the uniform depth jitter for
            pyramidal cells.
        interneuron_jitter: Full width of the depth jitter for interneurons.
        pyramidal_rate: Mean base firing rate of pyramidal cells (Hz).
        pyramidal_rate_spread: Full width of the uniform rate jitter (Hz).
        interneuron_rate: Mean base firing rate of interneurons (Hz).
        interneuron_rate_spread: Full width of the interneuron rate jitter.
    """
    ml_start: float = 1000.0
    ml_end: float = 1500.0
    spacing: float = 30.0
    layer_depth: float = -1200.0
    interneuron_fraction: float = 0.2
    pyramidal_jitter: float = 40.0
    interneuron_jitter: float = 20.0
    pyramidal_rate: float = 5.0
    pyramidal_rate_spread: float = 2.0
    interneuron_rate: float = 20.0
    interneuron_rate_spread: float = 5.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to plain dict for YAML serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> PopulationConfig:
        """Create from dict (e.g., from YAML)."""
        return cls(**_known_fields(cls, data))


@dataclass
class FieldConfig:
    """Volume-conduction parameters.

    Attributes:
        solver: Registered field solver name.
        conductivity: Medium conductivity σ in S/m.
        noise_level: Measurement noise standard deviation in µV.
        d10: Distance (µm) at which amplitude falls to 10% of its peak.
        min_distance: Singularity clamp radius in µm.
    """
    solver: str = "point_source"
    conductivity: float = 0.3
    noise_level: float = 50.0
    d10: float = 60.0
    min_distance: float = 10.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to plain dict for YAML serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> FieldConfig:
        """Create from dict (e.g., from YAML)."""
        return cls(**_known_fields(cls, data))


@dataclass
class ElectrodeConfig:
    """Tetrode and reference geometry (µm).

    Attributes:
        center: ``[x, y, z]`` centre of the tetrode diamond.
        spacing: Distance of each wire from the tetrode centre.
        reference: ``[x, y, z]`` position of the reference electrode.
        history_length: Samples kept per electrode trace.
    """
    center: List[float] = field(default_factory=lambda: [1250.0, -1000.0, 0.0])
    spacing: float = 12.0
    reference: List[float] = field(default_factory=lambda: [1450.0, -500.0, 0.0])
    history_length: int = 500

    def to_dict(self) -> Dict[str, Any]:
        """Convert to plain dict for YAML serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ElectrodeConfig:
        """Create from dict (e.g., from YAML)."""
        kwargs = _known_fields(cls, data)
        # Accept the 2D form used by the sliders
        for key in ("center", "reference"):
            if key in kwargs and len(kwargs[key]) == 2:
                kwargs[key] = list(kwargs[key]) + [0.0]
        return cls(**kwargs)


@dataclass
class FilterConfig:
    """Channel conditioning.

    Attributes:
        mode: ``raw``, ``lfp`` or ``spike``.
    """
    mode: str = "raw"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to plain dict for YAML serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> FilterConfig:
        """Create from dict (e.g., from YAML)."""
        return cls(**_known_fields(cls, data))


@dataclass
class DetectorConfig:
    """Threshold spike detection.

    Attributes:
        threshold: Detection threshold magnitude in mV (events are
            negative deflections below ``-threshold``).
        refractory_period: Minimum spacing between events in seconds.
        max_records: Capacity of the spike record buffer.
    """
    threshold: float = 0.05
    refractory_period: float = 0.002
    max_records: int = 200

    def to_dict(self) -> Dict[str, Any]:
        """Convert to plain dict for YAML serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> DetectorConfig:
        """Create from dict (e.g., from YAML)."""
        return cls(**_known_fields(cls, data))


@dataclass
class SimulationConfig:
    """Configuration for simulation execution.

    Attributes:
        dt: Sub-step length in seconds.
        steps_per_frame: Sub-steps executed per rendered frame.
        seed: Seed for the shared random source (None: non-deterministic).
        running: Whether the engine starts in the Running state.
    """
    dt: float = 0.0005
    steps_per_frame: int = 5
    seed: Optional[int] = None
    running: bool = True

    def to_dict(self) -> Dict[str, Any]:
        """Convert to plain dict for YAML serialization."""
        result = asdict(self)
        return {k: v for k, v in result.items() if v is not None}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> SimulationConfig:
        """Create from dict (e.g., from YAML)."""
        return cls(**_known_fields(cls, data))


@dataclass
class EphysForgeConfig:
    """Canonical configuration schema for EphysForge.

    Attributes:
        population: Neuron layout configuration.
        physics: Field solver configuration.
        electrodes: Tetrode and reference geometry.
        filter: Channel conditioning configuration.
        detector: Spike detector configuration.
        simulation: Timing configuration.
        metadata: Optional free-form metadata.
    """
    population: PopulationConfig = field(default_factory=PopulationConfig)
    physics: FieldConfig = field(default_factory=FieldConfig)
    electrodes: ElectrodeConfig = field(default_factory=ElectrodeConfig)
    filter: FilterConfig = field(default_factory=FilterConfig)
    detector: DetectorConfig = field(default_factory=DetectorConfig)
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to plain dict for YAML serialization.

        Returns:
            Dictionary suitable for yaml.dump().
        """
        return {
            "metadata": self.metadata,
            "population": self.population.to_dict(),
            "physics": self.physics.to_dict(),
            "electrodes": self.electrodes.to_dict(),
            "filter": self.filter.to_dict(),
            "detector": self.detector.to_dict(),
            "simulation": self.simulation.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> EphysForgeConfig:
        """Create from dict (e.g., from YAML).

        Args:
            data: Dictionary loaded from YAML.

        Returns:
            EphysForgeConfig instance.
        """
        return cls(
            population=PopulationConfig.from_dict(data.get("population") or {}),
            physics=FieldConfig.from_dict(data.get("physics") or {}),
            electrodes=ElectrodeConfig.from_dict(data.get("electrodes") or {}),
            filter=FilterConfig.from_dict(data.get("filter") or {}),
            detector=DetectorConfig.from_dict(data.get("detector") or {}),
            simulation=SimulationConfig.from_dict(data.get("simulation") or {}),
            metadata=data.get("metadata") or {},
        )

    def to_yaml(self) -> str:
        """Serialize to YAML string.

        Returns:
            YAML-formatted string.
        """
        return yaml.dump(
            self.to_dict(),
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
        )

    @classmethod
    def from_yaml(cls, yaml_str: str) -> EphysForgeConfig:
        """Load from YAML string.

        Args:
            yaml_str: YAML-formatted string.

        Returns:
            EphysForgeConfig instance.
        """
        data = yaml.safe_load(yaml_str)
        if not isinstance(data, dict):
            raise ValueError("YAML did not produce a dict")
        return cls.from_dict(data)
