"""
Activation Functions - scalar stimulus to output signal.

An activation maps the bounded stimulus of a neuron to its output signal and
exposes an internal state together with the range that state lives in.

Two kinds exist:
- ANALOG: continuous, stateless output (tanh, sigmoid, identity)
- SPIKING: binary output produced by an integrate-and-fire membrane whose
  potential is the internal state

Reservoir neurons check the kind of the activation they are given and refuse
a mismatch at construction time.

Usage:
======
    act = create_activation("tanh")
    act = create_activation("simple_if", resistance=10.0, decay_rate=0.1)
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Callable, Dict

from liquidstate.constants import SignalType
from liquidstate.errors import ConfigurationError, validate_non_negative, validate_positive
from liquidstate.utils.interval import STIMULI_RANGE, UNIT_RANGE, Interval

# Output value of a spiking activation when it fires
SPIKE = 1.0


class ActivationFunction(ABC):
    """Base class of all activation functions."""

    signal_type: SignalType

    @property
    @abstractmethod
    def output_range(self) -> Interval:
        """Range of values compute() can return."""

    @property
    @abstractmethod
    def internal_state(self) -> float:
        """Current internal state (last output for analog activations)."""

    @property
    @abstractmethod
    def internal_state_range(self) -> Interval:
        """Range the internal state lives in."""

    @abstractmethod
    def compute(self, x: float) -> float:
        """Compute the output signal for stimulus x."""

    @abstractmethod
    def reset(self) -> None:
        """Restore the initial internal state."""


class _AnalogActivation(ActivationFunction):
    """Stateless activation; the internal state is the last output."""

    signal_type = SignalType.ANALOG
    _range: Interval = STIMULI_RANGE

    def __init__(self) -> None:
        self._state = 0.0

    @property
    def output_range(self) -> Interval:
        return self._range

    @property
    def internal_state(self) -> float:
        return self._state

    @property
    def internal_state_range(self) -> Interval:
        return self._range

    def compute(self, x: float) -> float:
        self._state = self._range.bound(self._function(x))
        return self._state

    def reset(self) -> None:
        self._state = 0.0

    @abstractmethod
    def _function(self, x: float) -> float:
        ...


class TanhActivation(_AnalogActivation):
    """Hyperbolic tangent, output in [-1, 1]."""

    _range = STIMULI_RANGE

    def _function(self, x: float) -> float:
        return math.tanh(x)


class SigmoidActivation(_AnalogActivation):
    """Logistic function, output in [0, 1]."""

    _range = UNIT_RANGE

    def _function(self, x: float) -> float:
        return 1.0 / (1.0 + math.exp(-x))


class IdentityActivation(_AnalogActivation):
    """Identity bounded to [-1, 1]."""

    _range = STIMULI_RANGE

    def _function(self, x: float) -> float:
        return x


class SimpleIFActivation(ActivationFunction):
    """Simple integrate-and-fire membrane.

    Each cycle the membrane potential decays towards the rest potential (0)
    and integrates the stimulus scaled by the membrane resistance:

        v = v * (1 - decay_rate) + resistance * x

    When v reaches the firing threshold the activation emits a spike (1.0)
    and v is clamped at the threshold. On the following cycle v drops to the
    reset potential and stimulation is ignored for `refractory_periods`
    cycles.

    Args:
        resistance: Membrane resistance (stimulus gain)
        decay_rate: Fraction of the potential lost per cycle, in [0, 1]
        reset_potential: Potential after a spike
        firing_threshold: Potential at which the membrane fires
        refractory_periods: Cycles after a spike during which input is ignored
    """

    signal_type = SignalType.SPIKING
    _output_range = UNIT_RANGE

    def __init__(
        self,
        resistance: float = 15.0,
        decay_rate: float = 0.05,
        reset_potential: float = 5.0,
        firing_threshold: float = 20.0,
        refractory_periods: int = 1,
    ) -> None:
        validate_positive(resistance, "resistance")
        if not 0.0 <= decay_rate <= 1.0:
            raise ConfigurationError(f"decay_rate must be in [0, 1], got {decay_rate}")
        validate_positive(firing_threshold, "firing_threshold")
        validate_non_negative(refractory_periods, "refractory_periods")
        self.resistance = resistance
        self.decay_rate = decay_rate
        self.rest_potential = 0.0
        self.reset_potential = abs(reset_potential)
        self.firing_threshold = abs(firing_threshold)
        if self.reset_potential >= self.firing_threshold:
            raise ConfigurationError(
                f"reset_potential ({reset_potential}) must be below firing_threshold "
                f"({firing_threshold})"
            )
        self.refractory_periods = refractory_periods
        self._state_range = Interval(self.rest_potential, self.firing_threshold)
        self.reset()

    @property
    def output_range(self) -> Interval:
        return self._output_range

    @property
    def internal_state(self) -> float:
        return self._membrane

    @property
    def internal_state_range(self) -> Interval:
        return self._state_range

    def reset(self) -> None:
        self._membrane = self.rest_potential
        self._in_refractory = False
        self._refractory_period = 0

    def compute(self, x: float) -> float:
        x = STIMULI_RANGE.bound(x)
        if self._membrane >= self.firing_threshold:
            self._membrane = self.reset_potential
            self._refractory_period = 0
            self._in_refractory = True
        if self._in_refractory:
            self._refractory_period += 1
            if self._refractory_period > self.refractory_periods:
                self._refractory_period = 0
                self._in_refractory = False
            else:
                x = 0.0

        self._membrane = self.rest_potential + (self._membrane - self.rest_potential) * (
            1.0 - self.decay_rate
        )
        self._membrane += self.resistance * x
        if self._membrane >= self.firing_threshold:
            self._membrane = self.firing_threshold
            return SPIKE
        # Negative stimulation cannot push the membrane below rest
        self._membrane = max(self._membrane, self.rest_potential)
        return 0.0


_ACTIVATIONS: Dict[str, Callable[..., ActivationFunction]] = {
    "tanh": TanhActivation,
    "sigmoid": SigmoidActivation,
    "identity": IdentityActivation,
    "simple_if": SimpleIFActivation,
}


def create_activation(name: str, **params) -> ActivationFunction:
    """Create an activation function by name.

    Args:
        name: One of "tanh", "sigmoid", "identity", "simple_if"
        **params: Constructor parameters of the activation

    Raises:
        ConfigurationError: Unknown name or invalid parameters
    """
    try:
        factory = _ACTIVATIONS[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown activation '{name}'. Choose from: {sorted(_ACTIVATIONS)}"
        ) from None
    try:
        return factory(**params)
    except TypeError as exc:
        raise ConfigurationError(f"Invalid parameters for activation '{name}': {exc}") from exc


__all__ = [
    "SPIKE",
    "ActivationFunction",
    "TanhActivation",
    "SigmoidActivation",
    "IdentityActivation",
    "SimpleIFActivation",
    "create_activation",
]
