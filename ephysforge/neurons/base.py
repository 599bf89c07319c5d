"""Abstract base class for extracellular current sources in EphysForge.

Any model that injects current into the extracellular medium (the dipole
neuron, or a user-defined source) should inherit from
:class:`BaseCurrentSource` so the field solver and the population can treat
sources uniformly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Tuple

Point = Tuple[float, float, float]


class BaseCurrentSource(ABC):
    """Abstract base class for point-compartment current sources.

    All sources must:
    1. Implement ``advance(dt)`` to step their internal clock and currents
    2. Implement ``reset_state()`` to return to rest
    3. Expose compartment positions (µm) and currents (nA) as equal-length
       tuples, in matching order
    4. Provide ``from_config()`` / ``to_dict()`` for YAML round trips

    Currents obey charge conservation for a closed source: the compartment
    currents of a single source sum to zero.
    """

    @abstractmethod
    def advance(self, dt: float) -> None:
        """Advance the source by ``dt`` seconds."""
        ...

    @abstractmethod
    def reset_state(self) -> None:
        """Return to the resting state with zero current."""
        ...

    @abstractmethod
    def compartment_positions(self) -> Tuple[Point, ...]:
        """Positions of every current-carrying compartment in µm."""
        ...

    @abstractmethod
    def compartment_currents(self) -> Tuple[float, ...]:
        """Instantaneous compartment currents in nA."""
        ...

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "BaseCurrentSource":
        """Construct a source from a configuration dictionary."""
        return cls(**config)

    def to_dict(self) -> Dict[str, Any]:
        """Serialise source parameters to a dictionary."""
        return {}
