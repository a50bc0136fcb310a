"""
Neuron models for liquidstate.

Four variants behind one interface (Neuron):
- InputAnalogNeuron, InputSpikingNeuron: entry points of external stimuli
- ReservoirAnalogNeuron, ReservoirSpikingNeuron: the recurrent population
"""

from __future__ import annotations

from liquidstate.components.neurons.activation import (
    SPIKE,
    ActivationFunction,
    IdentityActivation,
    SigmoidActivation,
    SimpleIFActivation,
    TanhActivation,
    create_activation,
)
from liquidstate.components.neurons.input_neurons import InputAnalogNeuron, InputSpikingNeuron
from liquidstate.components.neurons.neuron import (
    FiringRate,
    Neuron,
    NeuronPlacement,
    NeuronStatistics,
)
from liquidstate.components.neurons.reservoir_neurons import (
    ReservoirAnalogNeuron,
    ReservoirSpikingNeuron,
)

__all__ = [
    # Activations
    "SPIKE",
    "ActivationFunction",
    "TanhActivation",
    "SigmoidActivation",
    "IdentityActivation",
    "SimpleIFActivation",
    "create_activation",
    # Neurons
    "Neuron",
    "NeuronPlacement",
    "NeuronStatistics",
    "FiringRate",
    "InputAnalogNeuron",
    "InputSpikingNeuron",
    "ReservoirAnalogNeuron",
    "ReservoirSpikingNeuron",
]
