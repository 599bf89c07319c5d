"""Abstract base class for signal conditioners in EphysForge.

All per-channel filters should inherit from :class:`BaseFilter` so the
simulation engine, the YAML config and the component registry can treat
them interchangeably.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import torch
import torch.nn as nn


class BaseFilter(nn.Module, ABC):
    """Abstract base class for stateful sample-by-sample filters.

    All filters must:
    1. Inherit from ``nn.Module`` (for PyTorch compatibility)
    2. Implement ``forward()`` for filtering one multi-channel sample
    3. Implement ``reset_state()`` to zero internal accumulators
    4. Provide ``from_config()`` class method for YAML instantiation
    5. Provide ``to_dict()`` method for serialization

    Attributes:
        dt: Sample interval in seconds.
        num_channels: Number of independent channels filtered in parallel.

    Example:
        >>> class Gain(BaseFilter):
        ...     def forward(self, x, dt=None):
        ...         return 2.0 * x
        ...
        ...     def reset_state(self):
        ...         pass
    """

    def __init__(self, dt: float = 0.0005, num_channels: int = 1) -> None:
        """Initialise the filter.

        Args:
            dt: Sample interval in seconds.
            num_channels: Number of channels sharing this filter's settings.
        """
        super().__init__()
        self.dt = dt
        self.num_channels = num_channels

    @abstractmethod
    def forward(
        self,
        x: torch.Tensor,
        dt: Optional[float] = None,
    ) -> torch.Tensor:
        """Filter one sample per channel.

        Args:
            x: Input tensor of shape ``[num_channels]``.
            dt: Optional override for the sample interval (seconds).

        Returns:
            Filtered tensor of shape ``[num_channels]``.
        """
        ...

    @abstractmethod
    def reset_state(self) -> None:
        """Zero all internal filter state."""
        ...

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "BaseFilter":
        """Construct a filter instance from a configuration dictionary.

        Args:
            config: Dictionary of filter parameters (typically from YAML).

        Returns:
            Initialised filter instance.
        """
        return cls(**config)

    def to_dict(self) -> Dict[str, Any]:
        """Serialise filter parameters to a dictionary."""
        return {"dt": self.dt, "num_channels": self.num_channels}
