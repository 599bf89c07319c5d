"""Base field-solver interface for EphysForge.

A field solver turns the instantaneous compartment currents of every
source into an extracellular potential at query points. Solvers are
configured from dictionaries so the YAML config can select them by name.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, Sequence

import torch

from ephysforge.neurons.base import BaseCurrentSource


class BaseFieldSolver(ABC):
    """Abstract base class for volume-conduction solvers.

    All solvers take the sources as a single, possibly empty, ordered
    collection and return potentials in millivolts.

    Attributes:
        noise_level: Measurement noise amplitude in µV. The only parameter
            that may change after construction.
    """

    @property
    @abstractmethod
    def noise_level(self) -> float:
        ...

    @abstractmethod
    def potential_at(
        self,
        point: Sequence[float],
        sources: Iterable[BaseCurrentSource],
    ) -> float:
        """Potential (mV) at one point, including one noise sample.

        Args:
            point: ``(x, y, z)`` in µm.
            sources: Current sources to superpose; may be empty.

        Returns:
            Potential in mV.
        """
        pass

    @abstractmethod
    def potential_map(
        self,
        points: torch.Tensor,
        sources: Iterable[BaseCurrentSource],
    ) -> torch.Tensor:
        """Potentials (mV) at a batch of points.

        Args:
            points: ``[num_points, 3]`` tensor in µm.
            sources: Current sources to superpose; may be empty.

        Returns:
            ``[num_points]`` tensor, one independent noise sample per point.
        """
        pass

    @classmethod
    @abstractmethod
    def from_config(cls, config: Dict[str, Any]) -> 'BaseFieldSolver':
        """Create a solver from a configuration dictionary."""
        pass

    def to_dict(self) -> Dict[str, Any]:
        """Serialise solver parameters to a dictionary."""
        return {'type': self.__class__.__name__, 'noise_level': self.noise_level}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(noise_level={self.noise_level})"
