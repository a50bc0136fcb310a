"""
Configuration dataclasses for liquidstate.

Every config validates itself in __post_init__ and raises
ConfigurationError before any neuron, synapse or readout unit is built.
"""

from __future__ import annotations

from liquidstate.config.base import BaseConfig
from liquidstate.config.readout_config import PreprocessorConfig, ReadoutLayerConfig
from liquidstate.config.reservoir_config import (
    NeuronGroupConfig,
    PoolConfig,
    ReservoirConfig,
)
from liquidstate.config.synapse_config import SynapseDynamicsConfig, SynapseDynamicsType

__all__ = [
    "BaseConfig",
    "SynapseDynamicsConfig",
    "SynapseDynamicsType",
    "NeuronGroupConfig",
    "PoolConfig",
    "ReservoirConfig",
    "ReadoutLayerConfig",
    "PreprocessorConfig",
]
