"""EphysForge: a simulator of extracellular tetrode recordings.

A population of two-compartment model neurons fires stochastically; a
volume-conduction model turns their currents into potentials at movable
electrodes; the differential channels are band-pass filtered and scanned
for spikes. Rendering and UI widgets are external collaborators that read
engine state and call its setter methods.

Key Components:
    - neurons: Dipole current sources and population layout
    - solvers: Point-source field solver with spatial decay and noise
    - filters: Cascaded RC band-pass filter and measurement noise
    - core: Electrodes, spike detection and the simulation engine
    - config: Dataclass/YAML configuration schema
    - cli: Command-line interface for headless runs

Example:
    >>> from ephysforge import SimulationEngine, EphysForgeConfig
    >>> engine = SimulationEngine(EphysForgeConfig())
    >>> engine.set_filter_mode("spike")
    >>> records = engine.run(num_frames=400)
"""

__version__ = "0.1.0"
__author__ = "EphysForge Contributors"
__license__ = "MIT"

from ephysforge.config.schema import EphysForgeConfig
from ephysforge.neurons.dipole import DipoleNeuron, NeuronType
from ephysforge.neurons.population import NeuronPopulation
from ephysforge.solvers.point_source import PointSourceFieldSolver
from ephysforge.filters.bandpass import BandPassFilter, FilterMode
from ephysforge.core.electrode import Electrode, Tetrode
from ephysforge.core.detection import SpikeDetector, SpikeRecord
from ephysforge.core.simulation_engine import SimulationEngine
from ephysforge.utils.random_source import RandomSource, TorchRandomSource

__all__ = [
    "__version__",
    "__author__",
    "__license__",
    "EphysForgeConfig",
    "DipoleNeuron",
    "NeuronType",
    "NeuronPopulation",
    "PointSourceFieldSolver",
    "BandPassFilter",
    "FilterMode",
    "Electrode",
    "Tetrode",
    "SpikeDetector",
    "SpikeRecord",
    "SimulationEngine",
    "RandomSource",
    "TorchRandomSource",
]
