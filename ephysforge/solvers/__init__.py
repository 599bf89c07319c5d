"""Volume-conduction field solvers for EphysForge.

This package turns neuron compartment currents into extracellular
potentials. It includes:

- BaseFieldSolver: Abstract base class defining the solver interface
- PointSourceFieldSolver: Point-source superposition with exponential
  spatial decay and additive Gaussian measurement noise (default)

Example:
    >>> from ephysforge.solvers import get_solver
    >>> solver = get_solver({'type': 'point_source', 'noise_level': 0.0})
    >>> solver.potential_at((1250.0, -1000.0, 0.0), [])
    0.0
"""

from typing import Dict, Any

from .base import BaseFieldSolver
from .point_source import PointSourceFieldSolver


# Public API exports
__all__ = [
    'BaseFieldSolver',
    'PointSourceFieldSolver',
    'get_solver',
]


def get_solver(config: Dict[str, Any]) -> BaseFieldSolver:
    """Factory function to create a field solver from a configuration dict.

    Args:
        config: Dictionary containing solver configuration. The solver
                name is read from ``'type'`` (or ``'solver'``, the key used
                by :class:`~ephysforge.config.schema.FieldConfig`); the
                remaining keys are passed to the solver's ``from_config``.

    Returns:
        Configured solver instance (BaseFieldSolver subclass).

    Raises:
        ValueError: If the solver type is missing or unknown.

    Example:
        >>> solver = get_solver({'type': 'point_source', 'd10': 60.0})
        >>> isinstance(solver, PointSourceFieldSolver)
        True
    """
    from ephysforge.registry import SOLVER_REGISTRY
    from ephysforge.register_components import register_all

    register_all()

    solver_type = config.get('type', config.get('solver'))
    if solver_type is None:
        raise ValueError(
            "Solver configuration must include a 'type' field. "
            f"Valid types are: {SOLVER_REGISTRY.list_registered()}"
        )

    solver_type = solver_type.lower()
    if not SOLVER_REGISTRY.is_registered(solver_type):
        raise ValueError(
            f"Unknown solver type: {solver_type}. "
            f"Valid types are: {SOLVER_REGISTRY.list_registered()}"
        )
    return SOLVER_REGISTRY.get_class(solver_type).from_config(config)
