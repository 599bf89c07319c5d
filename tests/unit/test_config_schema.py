"""Tests for the canonical configuration schema and YAML loading."""

from __future__ import annotations

import io

import pytest

from ephysforge.config.schema import (
    DetectorConfig,
    EphysForgeConfig,
    ElectrodeConfig,
    FieldConfig,
    PopulationConfig,
    SimulationConfig,
)
from ephysforge.config.yaml_utils import load_config, load_yaml


class TestDefaults:

    def test_physics_defaults(self):
        cfg = FieldConfig()
        assert cfg.solver == "point_source"
        assert cfg.conductivity == 0.3
        assert cfg.noise_level == 50.0
        assert cfg.d10 == 60.0
        assert cfg.min_distance == 10.0

    def test_timing_defaults(self):
        cfg = SimulationConfig()
        assert cfg.dt == 0.0005
        assert cfg.steps_per_frame == 5

    def test_detector_defaults(self):
        cfg = DetectorConfig()
        assert (cfg.threshold, cfg.refractory_period, cfg.max_records) == (0.05, 0.002, 200)

    def test_electrode_defaults_are_independent(self):
        a, b = ElectrodeConfig(), ElectrodeConfig()
        a.center[0] = 0.0
        assert b.center == [1250.0, -1000.0, 0.0]


class TestRoundTrip:

    def test_yaml_round_trip(self):
        cfg = EphysForgeConfig()
        cfg.filter.mode = "spike"
        cfg.simulation.seed = 9
        cfg.population.interneuron_fraction = 0.5
        cfg.metadata = {"description": "round trip"}
        assert EphysForgeConfig.from_yaml(cfg.to_yaml()) == cfg

    def test_seed_omitted_when_none(self):
        assert "seed" not in SimulationConfig().to_dict()

    def test_partial_dict_keeps_defaults(self):
        cfg = EphysForgeConfig.from_dict({"physics": {"noise_level": 5.0}})
        assert cfg.physics.noise_level == 5.0
        assert cfg.physics.d10 == 60.0
        assert cfg.population == PopulationConfig()

    def test_unknown_keys_ignored(self):
        cfg = EphysForgeConfig.from_dict({"detector": {"threshold": 0.1, "window": 3}})
        assert cfg.detector.threshold == 0.1

    def test_two_dimensional_positions_extended(self):
        cfg = ElectrodeConfig.from_dict({"center": [1200.0, -1100.0], "reference": [0.0, 0.0]})
        assert cfg.center == [1200.0, -1100.0, 0.0]
        assert cfg.reference == [0.0, 0.0, 0.0]

    def test_from_yaml_rejects_non_mapping(self):
        with pytest.raises(ValueError):
            EphysForgeConfig.from_yaml("- 1\n- 2\n")


class TestYamlLoading:

    def test_load_yaml_rejects_duplicate_keys(self):
        yaml_text = """
        physics:
          noise_level: 10.0
          noise_level: 20.0
        """
        with pytest.raises(ValueError, match="Duplicate key"):
            load_yaml(io.StringIO(yaml_text))

    def test_load_config_from_file(self, quiet_config_path):
        cfg = load_config(quiet_config_path)
        assert cfg.physics.noise_level == 0.0
        assert cfg.simulation.seed == 1

    def test_load_config_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yml")

    def test_load_config_empty_file(self, tmp_path):
        path = tmp_path / "empty.yml"
        path.write_text("")
        assert load_config(path) == EphysForgeConfig()

    def test_load_config_non_mapping(self, tmp_path):
        path = tmp_path / "list.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ValueError):
            load_config(path)
