"""Neuron current-source models for extracellular recording.

This module contains the current-generating side of the simulator: each
neuron is a two-compartment dipole whose somatic spike current is balanced
by an equal and opposite dendritic return current.

Available Models:
    DipoleNeuron: Poisson-firing soma/dendrite dipole with a Gaussian spike
    NeuronPopulation: Layout generation and bulk commands for many sources

Example:
    >>> from ephysforge.neurons import DipoleNeuron
    >>> neuron = DipoleNeuron(1250.0, -1200.0, 0.0, "pyramidal")
    >>> neuron.fire()
    >>> neuron.advance(0.0005)
"""

from .base import BaseCurrentSource
from .dipole import DipoleNeuron, NeuronType, SpikeState, spike_waveform
from .population import NeuronPopulation, NeuronSnapshot, sources_to_tensors

__all__ = [
    "BaseCurrentSource",
    "DipoleNeuron",
    "NeuronType",
    "SpikeState",
    "spike_waveform",
    "NeuronPopulation",
    "NeuronSnapshot",
    "sources_to_tensors",
]
