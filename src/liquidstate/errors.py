"""
Custom exception classes and validation utilities for liquidstate.

This module provides:
1. Hierarchical exception classes for different error categories
2. Validation helpers used by configuration dataclasses and constructors
3. Consistent error message formatting

Exception Hierarchy:
====================
LiquidStateError (base) - Base exception for all liquidstate errors
├── ConfigurationError - Invalid configuration parameters
├── InvariantViolationError - Protocol misuse at runtime
└── SignalCodingError - Analog/spike coding protocol violation

None of these errors is recoverable. Each one means the caller built or
drove a component in a way that cannot produce correct results.
"""

from __future__ import annotations

from typing import Any

# =============================================================================
# Exception Hierarchy
# =============================================================================


class LiquidStateError(Exception):
    """Base exception for all liquidstate errors.

    All custom exceptions inherit from this class, enabling code to catch
    liquidstate errors specifically.
    """


class ConfigurationError(LiquidStateError):
    """Invalid configuration parameters.

    Raised at build time when configuration values are out of valid range or
    incompatible with each other (activation/neuron kind mismatch, zero
    synapse weight, test ratio too large, too few samples of a class...).
    """


class InvariantViolationError(LiquidStateError):
    """A component was used out of protocol.

    Examples: computing with a readout layer that was never built, or mixing
    continuous and patterned feeding on the same preprocessor.
    """


class SignalCodingError(LiquidStateError):
    """Numeric coding protocol violation.

    Raised e.g. when more bits are fetched from a spike-train coder than
    were encoded.
    """


# =============================================================================
# Validation helpers
# =============================================================================


def validate_positive(value: Any, name: str) -> None:
    """Raise ConfigurationError unless value > 0."""
    if not value > 0:
        raise ConfigurationError(f"{name} must be positive, got {value}")


def validate_non_negative(value: Any, name: str) -> None:
    """Raise ConfigurationError unless value >= 0."""
    if not value >= 0:
        raise ConfigurationError(f"{name} must be non-negative, got {value}")


def validate_range(value: Any, low: float, high: float, name: str) -> None:
    """Raise ConfigurationError unless low <= value <= high."""
    if not low <= value <= high:
        raise ConfigurationError(f"{name} must be in [{low}, {high}], got {value}")


def validate_probability(value: Any, name: str) -> None:
    """Raise ConfigurationError unless value is in [0, 1]."""
    validate_range(value, 0.0, 1.0, name)


def validate_interval(low: float, high: float, name: str) -> None:
    """Raise ConfigurationError unless low <= high."""
    if low > high:
        raise ConfigurationError(f"{name} has min {low} greater than max {high}")


__all__ = [
    "LiquidStateError",
    "ConfigurationError",
    "InvariantViolationError",
    "SignalCodingError",
    "validate_positive",
    "validate_non_negative",
    "validate_range",
    "validate_probability",
    "validate_interval",
]
