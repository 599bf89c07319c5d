"""
Test configuration and fixtures for the extracellular recording simulator.
"""
import os
import sys
from pathlib import Path

import pytest
import torch

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("OMP_NUM_THREADS", "1")
os.environ.setdefault("MKL_NUM_THREADS", "1")

try:
    torch.set_num_threads(1)
except Exception:  # pragma: no cover - fallback when backend disallows
    pass

from ephysforge.config.schema import EphysForgeConfig  # noqa: E402
from ephysforge.utils.random_source import RandomSource  # noqa: E402

FIXTURES = Path(__file__).resolve().parent / "fixtures"


class ScriptedRandomSource(RandomSource):
    """Replays a fixed list of uniforms, cycling when exhausted."""

    def __init__(self, values):
        self.values = list(values)
        self._idx = 0

    def uniform(self) -> float:
        value = self.values[self._idx % len(self.values)]
        self._idx += 1
        return value

    def reset_state(self) -> None:
        self._idx = 0


@pytest.fixture
def scripted_rng():
    """Factory for a deterministic random source."""
    return ScriptedRandomSource


@pytest.fixture
def quiet_config():
    """Seeded configuration with zero measurement noise and raw channels."""
    config = EphysForgeConfig()
    config.physics.noise_level = 0.0
    config.filter.mode = "raw"
    config.simulation.seed = 1
    return config


@pytest.fixture
def quiet_config_path():
    return FIXTURES / "quiet_config.yml"
