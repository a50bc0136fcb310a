"""
Closed numeric intervals.

Every signal in the reservoir lives in a bounded range: stimuli are bounded
to [-1, 1], activation outputs to the activation's declared range, and
synapses rescale signals between the source and target ranges.
"""

from __future__ import annotations

from dataclasses import dataclass

from liquidstate.errors import ConfigurationError


@dataclass(frozen=True)
class Interval:
    """Closed interval [min, max].

    Attributes:
        min: Lower bound (inclusive)
        max: Upper bound (inclusive)
    """

    min: float
    max: float

    def __post_init__(self) -> None:
        if self.min > self.max:
            raise ConfigurationError(
                f"Interval min {self.min} is greater than max {self.max}"
            )

    @property
    def span(self) -> float:
        """Width of the interval."""
        return self.max - self.min

    @property
    def mid(self) -> float:
        """Midpoint of the interval."""
        return self.min + self.span / 2.0

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max

    def bound(self, value: float) -> float:
        """Clamp value into the interval."""
        if value < self.min:
            return self.min
        if value > self.max:
            return self.max
        return value

    def rescale(self, value: float, source: Interval) -> float:
        """Linearly map value from the source interval into this one.

        Example:
            >>> Interval(0.0, 1.0).rescale(0.5, Interval(-1.0, 1.0))
            0.75
        """
        if source.span == 0:
            return self.mid
        return self.min + (value - source.min) / source.span * self.span


# Bounds of the total stimulation any neuron accepts
STIMULI_RANGE = Interval(-1.0, 1.0)

# Normalized [0, 1] range used for rescaled internal states and rates
UNIT_RANGE = Interval(0.0, 1.0)


__all__ = ["Interval", "STIMULI_RANGE", "UNIT_RANGE"]
