"""
Input neurons - entry points of external stimuli.

Input neurons have no internal dynamics and produce no predictors:

- InputAnalogNeuron passes the bounded stimulus through as its output.
- InputSpikingNeuron encodes the bounded stimulus into an N-bit pulse
  train and emits one bit per cycle. The train restarts with every new
  external sample (new_sample) and whenever it is exhausted.
"""

from __future__ import annotations

from typing import List

from liquidstate.components.coding.signal_converter import SignalConverter
from liquidstate.components.neurons.neuron import Neuron, NeuronPlacement
from liquidstate.constants import NeuronRole, SignalType
from liquidstate.utils.interval import STIMULI_RANGE, UNIT_RANGE, Interval


class _InputNeuron(Neuron):
    """Input neurons always have the INPUT role and no predictors."""

    def __init__(self, placement: NeuronPlacement) -> None:
        super().__init__(placement, NeuronRole.INPUT, bias=0.0)

    @property
    def num_predictors(self) -> int:
        return 0

    def predictors(self) -> List[float]:
        return []


class InputAnalogNeuron(_InputNeuron):
    """Passes the bounded external stimulus through unchanged."""

    signal_type = SignalType.ANALOG

    @property
    def output_range(self) -> Interval:
        return STIMULI_RANGE

    @property
    def normalized_state(self) -> float:
        return UNIT_RANGE.rescale(self._output, STIMULI_RANGE)

    def _compute_output(self) -> float:
        return self._stimuli


class InputSpikingNeuron(_InputNeuron):
    """Emits the stimulus as a fixed-length binary pulse train.

    Args:
        placement: Identity of the neuron
        coding_fractions: Bits per encoded value (clamped to [1, 53])
    """

    signal_type = SignalType.SPIKING

    def __init__(self, placement: NeuronPlacement, coding_fractions: int) -> None:
        super().__init__(placement)
        self.converter = SignalConverter(STIMULI_RANGE, coding_fractions)
        self._refill = True

    def new_sample(self) -> None:
        """Restart the pulse train from the next stimulus."""
        self._refill = True

    @property
    def output_range(self) -> Interval:
        return UNIT_RANGE

    @property
    def normalized_state(self) -> float:
        return UNIT_RANGE.rescale(self._stimuli, STIMULI_RANGE)

    def _compute_output(self) -> float:
        if self._refill or self.converter.num_pending_fractions == 0:
            self.converter.encode(self._stimuli)
            self._refill = False
        return float(self.converter.fetch_bit())

    def reset(self, statistics: bool = False) -> None:
        super().reset(statistics)
        self.converter = SignalConverter(STIMULI_RANGE, self.converter.coding_fractions)
        self._refill = True


__all__ = ["InputAnalogNeuron", "InputSpikingNeuron"]
