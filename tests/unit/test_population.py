"""Unit tests for population layout and bulk operations."""

import pytest
import torch

from ephysforge.config.schema import PopulationConfig
from ephysforge.neurons import DipoleNeuron, NeuronPopulation, NeuronType
from ephysforge.neurons.population import sources_to_tensors
from ephysforge.utils.random_source import TorchRandomSource


@pytest.fixture
def population():
    return NeuronPopulation.from_config(PopulationConfig(), rng=TorchRandomSource(0))


class TestLayout:
    """CA1-style layer generation."""

    def test_default_count(self, population):
        assert len(population) == 16

    def test_slot_centres(self, population):
        xs = [n.soma_pos[0] for n in population]
        assert xs == [1015.0 + 30.0 * i for i in range(16)]

    def test_depth_and_rate_ranges(self, population):
        for n in population:
            y = n.soma_pos[1]
            if n.neuron_type is NeuronType.PYRAMIDAL:
                assert -1220.0 <= y <= -1180.0
                assert 4.0 <= n.base_firing_rate <= 6.0
            else:
                assert -1210.0 <= y <= -1190.0
                assert 17.5 <= n.base_firing_rate <= 22.5

    def test_interneuron_fraction_extremes(self):
        rng = TorchRandomSource(1)
        all_pyr = NeuronPopulation.from_config(PopulationConfig(interneuron_fraction=0.0), rng=rng)
        assert all(n.neuron_type is NeuronType.PYRAMIDAL for n in all_pyr)

        all_int = NeuronPopulation.from_config(PopulationConfig(interneuron_fraction=1.0), rng=rng)
        assert all(n.neuron_type is NeuronType.INTERNEURON for n in all_int)

    def test_same_seed_same_layout(self):
        a = NeuronPopulation.from_config(PopulationConfig(), rng=TorchRandomSource(3))
        b = NeuronPopulation.from_config(PopulationConfig(), rng=TorchRandomSource(3))
        assert [n.to_dict() for n in a] == [n.to_dict() for n in b]

    def test_generate_replaces_neurons(self, population):
        before = list(population.neurons)
        population.generate(PopulationConfig(ml_end=1090.0))
        assert len(population) == 3
        assert all(n not in before for n in population)

    def test_empty_range(self):
        pop = NeuronPopulation.from_config(PopulationConfig(ml_end=1000.0), rng=TorchRandomSource(0))
        assert len(pop) == 0


class TestBulkOperations:

    def test_fire_skips_unknown_indices(self, population):
        fired = population.fire([0, 99, -1])
        assert fired == [0]
        assert population[0].is_spiking

    def test_trigger_burst_distinct(self, population):
        fired = population.trigger_burst()
        assert len(fired) == 3
        assert len(set(fired)) == 3
        assert all(0 <= i < 10 for i in fired)
        assert all(population[i].is_spiking for i in fired)

    def test_trigger_burst_scripted(self, scripted_rng):
        pop = NeuronPopulation(
            [DipoleNeuron(float(i), 0.0, base_firing_rate=0.0) for i in range(12)],
            rng=scripted_rng([0.0]),
        )
        assert pop.trigger_burst() == [0, 1, 2]

    def test_trigger_burst_small_population(self):
        pop = NeuronPopulation([DipoleNeuron(0.0, 0.0, base_firing_rate=0.0)], rng=TorchRandomSource(0))
        assert pop.trigger_burst() in ([], [0])

    def test_set_base_firing_rate(self, population):
        population.set_base_firing_rate(12.5)
        assert all(n.base_firing_rate == 12.5 for n in population)

    def test_snapshot(self, population):
        population.fire([2])
        snap = population.snapshot()
        assert len(snap) == 16
        assert snap[2].is_spiking
        assert not snap[3].is_spiking
        assert snap[0].soma == population[0].soma_pos
        assert snap[0].dendrite == population[0].dendrite_pos
        assert snap[0].neuron_type in ("pyramidal", "interneuron")

    def test_reset_state(self, population):
        population.fire([0, 1])
        population.advance(0.0005)
        population.reset_state()
        assert not any(n.is_spiking for n in population)


class TestSourceTensors:

    def test_shapes(self, population):
        positions, currents = sources_to_tensors(population.neurons)
        assert positions.shape == (32, 3)
        assert currents.shape == (32,)
        assert positions.dtype == torch.float64

    def test_empty(self):
        positions, currents = sources_to_tensors([])
        assert positions.shape == (0, 3)
        assert currents.shape == (0,)

    def test_currents_follow_neurons(self):
        n = DipoleNeuron(0.0, 0.0, base_firing_rate=0.0)
        pop = NeuronPopulation([n], rng=TorchRandomSource(0))
        pop.fire([0])
        pop.advance(0.0005)
        currents = pop.source_currents()
        assert currents[0].item() == pytest.approx(n.soma_current)
        assert currents[1].item() == pytest.approx(-n.soma_current)
