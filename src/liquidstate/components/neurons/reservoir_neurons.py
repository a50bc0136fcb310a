"""
Reservoir neurons - the untrained recurrent population.

ReservoirAnalogNeuron
    output = r * output_prev + (1 - r) * activation(stimuli), r in [0, 1)
    primary predictor = output, secondary predictor = output^2

ReservoirSpikingNeuron
    output = spike (0 or 1) of an integrate-and-fire activation
    primary predictor = membrane state rescaled to [0, 1]
    secondary predictor = exponential firing-rate estimate

Both refuse an activation of the wrong kind at construction time.
"""

from __future__ import annotations

from liquidstate.components.neurons.activation import ActivationFunction
from liquidstate.components.neurons.neuron import FiringRate, Neuron, NeuronPlacement
from liquidstate.constants import NeuronRole, SignalType
from liquidstate.errors import ConfigurationError
from liquidstate.utils.interval import UNIT_RANGE, Interval


class _ReservoirNeuron(Neuron):
    """Common construction checks of reservoir neurons."""

    def __init__(
        self,
        placement: NeuronPlacement,
        role: NeuronRole,
        activation: ActivationFunction,
        bias: float = 0.0,
        use_secondary_predictor: bool = False,
    ) -> None:
        if role == NeuronRole.INPUT:
            raise ConfigurationError(
                f"Reservoir neuron {placement.flat_idx} cannot have the input role"
            )
        if activation.signal_type != self.signal_type:
            raise ConfigurationError(
                f"{self.__class__.__name__} requires a {self.signal_type.value} activation, "
                f"got {activation.__class__.__name__} ({activation.signal_type.value})"
            )
        super().__init__(placement, role, bias, use_secondary_predictor)
        self.activation = activation

    @property
    def output_range(self) -> Interval:
        return self.activation.output_range

    @property
    def normalized_state(self) -> float:
        return UNIT_RANGE.rescale(
            self.activation.internal_state, self.activation.internal_state_range
        )

    def reset(self, statistics: bool = False) -> None:
        super().reset(statistics)
        self.activation.reset()


class ReservoirAnalogNeuron(_ReservoirNeuron):
    """Analog reservoir neuron with optional retainment (leaky integration).

    Args:
        placement: Identity of the neuron
        role: EXCITATORY or INHIBITORY
        activation: Analog activation function
        bias: Constant stimulation
        retainment: Share r of the previous output kept each cycle, in [0, 1)
        use_secondary_predictor: Also emit output^2
    """

    signal_type = SignalType.ANALOG

    def __init__(
        self,
        placement: NeuronPlacement,
        role: NeuronRole,
        activation: ActivationFunction,
        bias: float = 0.0,
        retainment: float = 0.0,
        use_secondary_predictor: bool = False,
    ) -> None:
        if not 0.0 <= retainment < 1.0:
            raise ConfigurationError(f"retainment must be in [0, 1), got {retainment}")
        super().__init__(placement, role, activation, bias, use_secondary_predictor)
        self.retainment = retainment

    @property
    def primary_predictor(self) -> float:
        return self._output

    @property
    def secondary_predictor(self) -> float:
        return self._output * self._output

    def _compute_output(self) -> float:
        activated = self.activation.compute(self._stimuli)
        r = self.retainment
        return r * self._output + (1.0 - r) * activated


class ReservoirSpikingNeuron(_ReservoirNeuron):
    """Spiking reservoir neuron.

    Args:
        placement: Identity of the neuron
        role: EXCITATORY or INHIBITORY
        activation: Spiking activation function
        bias: Constant stimulation
        use_secondary_predictor: Also emit the firing-rate estimate
        firing_rate_decay: Decay of the firing-rate estimate
    """

    signal_type = SignalType.SPIKING

    def __init__(
        self,
        placement: NeuronPlacement,
        role: NeuronRole,
        activation: ActivationFunction,
        bias: float = 0.0,
        use_secondary_predictor: bool = False,
        firing_rate_decay: float = 0.9,
    ) -> None:
        super().__init__(placement, role, activation, bias, use_secondary_predictor)
        self.firing_rate = FiringRate(firing_rate_decay)

    @property
    def primary_predictor(self) -> float:
        return self.normalized_state

    @property
    def secondary_predictor(self) -> float:
        return self.firing_rate.rate

    def _compute_output(self) -> float:
        spike = self.activation.compute(self._stimuli)
        self.firing_rate.update(spike > 0)
        return spike

    def reset(self, statistics: bool = False) -> None:
        super().reset(statistics)
        self.firing_rate.reset()


__all__ = ["ReservoirAnalogNeuron", "ReservoirSpikingNeuron"]
