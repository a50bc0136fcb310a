"""
Shared enumerations and protocol constants.

Kept in one module so that configuration dataclasses and components can both
refer to them without import cycles.
"""

from __future__ import annotations

from enum import Enum


class NeuronRole(Enum):
    """Role of a neuron; determines the sign of its outgoing synapses."""

    INPUT = "input"
    EXCITATORY = "excitatory"
    INHIBITORY = "inhibitory"


class SignalType(Enum):
    """Kind of output signal an activation (and so a neuron) produces."""

    ANALOG = "analog"  # Continuous output
    SPIKING = "spiking"  # Binary output derived from a membrane-like state


class TaskType(Enum):
    """Readout task type."""

    FORECAST = "forecast"  # Regression / time-series prediction
    CLASSIFICATION = "classification"  # Binary decision per output field
    HYBRID = "hybrid"  # Regression treated like forecast for partitioning


class FeedingMode(Enum):
    """How external samples are fed into the reservoir."""

    CONTINUOUS = "continuous"  # One long time series, state carried over
    PATTERNED = "patterned"  # Independent patterns, state reset per pattern


# =============================================================================
# Readout cross-validation bounds
# =============================================================================

MAX_NUM_OF_FOLDS = 100
MAX_RATIO_OF_TEST_DATA = 1.0 / 3.0
MIN_LENGTH_OF_TEST_DATASET = 2

# =============================================================================
# Spike-train coding bounds (the pattern must fit a double's mantissa)
# =============================================================================

MIN_CODING_FRACTIONS = 1
MAX_CODING_FRACTIONS = 53


__all__ = [
    "NeuronRole",
    "SignalType",
    "TaskType",
    "FeedingMode",
    "MAX_NUM_OF_FOLDS",
    "MAX_RATIO_OF_TEST_DATA",
    "MIN_LENGTH_OF_TEST_DATASET",
    "MIN_CODING_FRACTIONS",
    "MAX_CODING_FRACTIONS",
]
