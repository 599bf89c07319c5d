"""Auto-registration of the built-in EphysForge components.

Example:
    >>> from ephysforge.register_components import register_all
    >>> register_all()
    >>> from ephysforge.registry import FILTER_REGISTRY
    >>> bp = FILTER_REGISTRY.create("bandpass", low_cutoff=300, high_cutoff=6000)
"""

from ephysforge.registry import (
    NEURON_REGISTRY,
    FILTER_REGISTRY,
    SOLVER_REGISTRY,
)

from ephysforge.neurons.dipole import DipoleNeuron
from ephysforge.filters.bandpass import BandPassFilter
from ephysforge.solvers.point_source import PointSourceFieldSolver


def register_all() -> None:
    """Register every built-in component; safe to call repeatedly."""
    NEURON_REGISTRY.register("dipole", DipoleNeuron)
    NEURON_REGISTRY.register("Dipole", DipoleNeuron)  # Alias

    FILTER_REGISTRY.register("bandpass", BandPassFilter)
    FILTER_REGISTRY.register("BandPass", BandPassFilter)  # Alias

    SOLVER_REGISTRY.register("point_source", PointSourceFieldSolver)
