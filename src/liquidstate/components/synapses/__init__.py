"""
Synapse components: transport and adaptive efficacy.
"""

from __future__ import annotations

from liquidstate.components.synapses.stp import PostSynapticDecay, PreSynapticPlasticity
from liquidstate.components.synapses.synapse import Synapse

__all__ = [
    "Synapse",
    "PreSynapticPlasticity",
    "PostSynapticDecay",
]
