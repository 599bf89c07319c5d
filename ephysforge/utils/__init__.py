"""
Shared utilities for the recording simulator.

Currently hosts the injectable random sources used by every stochastic
component.
"""

from .random_source import RandomSource, TorchRandomSource

__all__ = ["RandomSource", "TorchRandomSource"]
