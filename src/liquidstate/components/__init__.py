"""
Reservoir building blocks: neurons, synapses and spike coding.
"""

from __future__ import annotations

from liquidstate.components.coding import SignalConverter
from liquidstate.components.neurons import (
    InputAnalogNeuron,
    InputSpikingNeuron,
    Neuron,
    NeuronPlacement,
    ReservoirAnalogNeuron,
    ReservoirSpikingNeuron,
    create_activation,
)
from liquidstate.components.synapses import PostSynapticDecay, PreSynapticPlasticity, Synapse

__all__ = [
    "SignalConverter",
    "Neuron",
    "NeuronPlacement",
    "InputAnalogNeuron",
    "InputSpikingNeuron",
    "ReservoirAnalogNeuron",
    "ReservoirSpikingNeuron",
    "create_activation",
    "Synapse",
    "PreSynapticPlasticity",
    "PostSynapticDecay",
]
