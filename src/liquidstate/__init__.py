"""
liquidstate - reservoir computing (echo state / liquid state machines).

A fixed, randomly wired population of analog or spiking neurons is driven
by external input; its predictors feed a cross-validated readout ensemble,
the only trained part of the system.
"""

from __future__ import annotations

__version__ = "0.1.0"

from liquidstate.config import (
    NeuronGroupConfig,
    PoolConfig,
    PreprocessorConfig,
    ReadoutLayerConfig,
    ReservoirConfig,
    SynapseDynamicsConfig,
    SynapseDynamicsType,
)
from liquidstate.constants import FeedingMode, NeuronRole, SignalType, TaskType
from liquidstate.errors import (
    ConfigurationError,
    InvariantViolationError,
    LiquidStateError,
    SignalCodingError,
)
from liquidstate.readout import ReadoutLayer, RidgeRegressionTrainer, ValidationBundle
from liquidstate.reservoir import NeuralPreprocessor, Reservoir, ReservoirBuilder
from liquidstate.state_machine import StateMachine, TrainingResult

__all__ = [
    "__version__",
    # Configuration
    "ReservoirConfig",
    "PoolConfig",
    "NeuronGroupConfig",
    "SynapseDynamicsConfig",
    "SynapseDynamicsType",
    "ReadoutLayerConfig",
    "PreprocessorConfig",
    # Enums
    "NeuronRole",
    "SignalType",
    "TaskType",
    "FeedingMode",
    # Errors
    "LiquidStateError",
    "ConfigurationError",
    "InvariantViolationError",
    "SignalCodingError",
    # Core
    "Reservoir",
    "ReservoirBuilder",
    "NeuralPreprocessor",
    "ReadoutLayer",
    "RidgeRegressionTrainer",
    "ValidationBundle",
    "StateMachine",
    "TrainingResult",
]
