"""Unit tests for the point-source field solver."""

import math

import pytest
import torch

from ephysforge.neurons import DipoleNeuron
from ephysforge.solvers import BaseFieldSolver, PointSourceFieldSolver, get_solver
from ephysforge.utils.random_source import TorchRandomSource

DT = 0.0005


def _spiking_neuron(x=0.0, y=0.0):
    """Pyramidal cell one millisecond into its spike."""
    n = DipoleNeuron(x, y, 0.0, "pyramidal", base_firing_rate=0.0)
    n.fire()
    n.advance(DT)
    n.advance(DT)
    return n


def _expected(solver, point, neuron):
    total = 0.0
    for pos, current in zip(neuron.compartment_positions(), neuron.compartment_currents()):
        r = math.dist(point, pos)
        total += solver.k * current / max(r, solver.min_distance) * math.exp(-r / solver.decay_length)
    return total


@pytest.fixture
def solver():
    return PointSourceFieldSolver(noise_level=0.0, rng=TorchRandomSource(0))


class TestConstants:

    def test_coupling_constant(self, solver):
        assert solver.k == pytest.approx(1.0 / (4.0 * math.pi * 0.3))

    def test_decay_length(self, solver):
        assert solver.decay_length == pytest.approx(60.0 / math.log(10.0))
        assert solver.decay_length == pytest.approx(26.06, abs=0.01)

    def test_is_base_solver(self, solver):
        assert isinstance(solver, BaseFieldSolver)


class TestPotential:

    def test_no_sources_gives_zero(self, solver):
        assert solver.potential_at((1.0, 2.0, 3.0), []) == 0.0

    def test_resting_neuron_gives_zero(self, solver):
        n = DipoleNeuron(0.0, 0.0, 0.0, base_firing_rate=0.0)
        assert solver.potential_at((30.0, 0.0, 0.0), [n]) == 0.0

    def test_matches_closed_form(self, solver):
        n = _spiking_neuron()
        point = (30.0, 0.0, 0.0)
        assert solver.potential_at(point, [n]) == pytest.approx(_expected(solver, point, n))

    def test_negative_near_soma_during_trough(self, solver):
        n = _spiking_neuron()
        assert solver.potential_at((30.0, 0.0, 0.0), [n]) < -1.0

    def test_monotonic_decay(self, solver):
        n = _spiking_neuron()
        magnitudes = [abs(solver.potential_at((r, 0.0, 0.0), [n])) for r in (15.0, 30.0, 60.0, 120.0)]
        assert magnitudes == sorted(magnitudes, reverse=True)

    def test_clamped_at_source(self, solver):
        n = _spiking_neuron()
        value = solver.potential_at(n.soma_pos, [n])
        assert math.isfinite(value)
        assert value == pytest.approx(_expected(solver, n.soma_pos, n))

    def test_clamp_only_affects_inverse_distance(self, solver):
        n = _spiking_neuron()
        at_five = solver.potential_at((5.0, 0.0, 0.0), [n])
        at_zero = solver.potential_at((0.0, 0.0, 0.0), [n])
        # same 1/r_min term, extra decay at 5 µm
        assert abs(at_five) < abs(at_zero)

    def test_superposition(self, solver):
        a = _spiking_neuron(0.0, 0.0)
        b = _spiking_neuron(40.0, 0.0)
        point = (20.0, 5.0, 0.0)
        both = solver.potential_at(point, [a, b])
        assert both == pytest.approx(solver.potential_at(point, [a]) + solver.potential_at(point, [b]))

    def test_potential_map_matches_potential_at(self, solver):
        neurons = [_spiking_neuron(0.0, 0.0), _spiking_neuron(50.0, -20.0)]
        points = torch.tensor(
            [[10.0, 0.0, 0.0], [25.0, -10.0, 0.0], [0.0, -300.0, 0.0], [60.0, 30.0, 5.0]],
            dtype=torch.float64,
        )
        values = solver.potential_map(points, neurons)
        assert values.shape == (4,)
        for point, value in zip(points.tolist(), values.tolist()):
            assert value == pytest.approx(solver.potential_at(point, neurons))

    def test_potential_map_without_sources(self, solver):
        values = solver.potential_map(torch.zeros(5, 3), [])
        assert torch.count_nonzero(values) == 0


class TestNoise:

    def test_noise_statistics(self):
        solver = PointSourceFieldSolver(noise_level=50.0, rng=TorchRandomSource(7))
        samples = torch.tensor(
            [solver.potential_at((0.0, 0.0, 0.0), []) for _ in range(4000)], dtype=torch.float64
        )
        assert abs(samples.mean().item()) < 0.005
        assert samples.std().item() == pytest.approx(0.05, rel=0.1)

    def test_negative_noise_clamped(self, solver):
        solver.noise_level = -5.0
        assert solver.noise_level == 0.0

    def test_noise_level_setter(self, solver):
        solver.noise_level = 20.0
        assert solver.noise_level == 20.0


class TestGetSolver:

    def test_point_source_by_type(self):
        s = get_solver({"type": "point_source", "noise_level": 0.0, "d10": 30.0})
        assert isinstance(s, PointSourceFieldSolver)
        assert s.d10 == 30.0

    def test_solver_key_and_case(self):
        s = get_solver({"solver": "POINT_SOURCE", "noise_level": 0.0})
        assert isinstance(s, PointSourceFieldSolver)

    def test_missing_type(self):
        with pytest.raises(ValueError, match="type"):
            get_solver({})

    def test_unknown_type(self):
        with pytest.raises(ValueError, match="Unknown solver"):
            get_solver({"type": "finite_element"})

    def test_to_dict_round_trip(self):
        s = PointSourceFieldSolver(conductivity=0.5, noise_level=10.0, d10=80.0)
        clone = get_solver(s.to_dict())
        assert clone.to_dict() == s.to_dict()
