"""Configuration schema and YAML helpers."""

from ephysforge.config.schema import (
    EphysForgeConfig,
    PopulationConfig,
    FieldConfig,
    ElectrodeConfig,
    FilterConfig,
    DetectorConfig,
    SimulationConfig,
)
from ephysforge.config.yaml_utils import load_yaml, load_config

__all__ = [
    "EphysForgeConfig",
    "PopulationConfig",
    "FieldConfig",
    "ElectrodeConfig",
    "FilterConfig",
    "DetectorConfig",
    "SimulationConfig",
    "load_yaml",
    "load_config",
]
