"""Core module of the extracellular recording simulator.

Modules:
    electrode: Point electrodes with FIFO traces and tetrode geometry
    detection: Threshold spike detector and bounded spike record buffer
    simulation_engine: Fixed-timestep driver owning all simulation state

The core ties neurons (current sources), solvers (volume conduction) and
filters (channel conditioning) together into one frame loop.
"""

from .electrode import Electrode, Tetrode, TETRODE_OFFSETS
from .detection import SpikeDetector, SpikeRecord, SpikeRecordBuffer
from .simulation_engine import SimulationEngine

__all__ = [
    "Electrode",
    "Tetrode",
    "TETRODE_OFFSETS",
    "SpikeDetector",
    "SpikeRecord",
    "SpikeRecordBuffer",
    "SimulationEngine",
]
