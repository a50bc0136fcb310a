"""Neuron base class and shared neuron types.

Every neuron follows a strict two-phase update per simulation cycle:

**Phase 1 - new_stimuli(external, internal)**:
    Stores ``stimuli = bound(external + internal + bias)`` into [-1, 1].
    Pure write, nothing is computed.

**Phase 2 - new_state(collect_statistics)**:
    Computes the new output signal from the stored stimuli and updates the
    signal counters (and optionally statistics).

The reservoir calls phase 1 on *all* neurons before phase 2 on any neuron,
so synapses always read the settled outputs of the previous cycle.

**Signal counters**:
====================
A neuron output *qualifies* as a signal when it is non-zero. Two counters
drive adaptive synapses:

- ``no_signal_cycles``: -1 until the first qualifying output, 0 on a
  qualifying output, incremented on every other cycle.
- ``signal_interval``: cycles between the last two qualifying outputs
  (1 when firing on consecutive cycles), -1 until two have occurred.

**Predictors**:
===============
Reservoir neurons expose a primary predictor and, when enabled, a secondary
(augmented) predictor. Input neurons expose none.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List

from liquidstate.constants import NeuronRole, SignalType
from liquidstate.errors import validate_probability
from liquidstate.mixins.resettable_mixin import ResettableMixin
from liquidstate.utils.interval import STIMULI_RANGE, Interval
from liquidstate.utils.stats import RunningStat

# =============================================================================
# SHARED TYPES
# =============================================================================


@dataclass(frozen=True)
class NeuronPlacement:
    """Immutable identity of a neuron inside the reservoir.

    Attributes:
        pool_id: Index of the pool (-1 for input neurons)
        flat_idx: Index of the neuron in the reservoir-wide neuron order
        x, y, z: Coordinates in the pool's 3-D grid
    """

    pool_id: int
    flat_idx: int
    x: int = 0
    y: int = 0
    z: int = 0

    def distance_to(self, other: NeuronPlacement) -> float:
        """Euclidean distance between grid coordinates."""
        return math.sqrt(
            (self.x - other.x) ** 2 + (self.y - other.y) ** 2 + (self.z - other.z) ** 2
        )


@dataclass
class NeuronStatistics:
    """Running statistics of one neuron.

    Attributes:
        stimuli_stat: Bounded total stimuli
        state_stat: Internal state rescaled to [0, 1]
        output_stat: Output signal
        signal_stat: 1 for qualifying outputs, 0 otherwise (its mean is
            the signal frequency)
    """

    stimuli_stat: RunningStat = field(default_factory=RunningStat)
    state_stat: RunningStat = field(default_factory=RunningStat)
    output_stat: RunningStat = field(default_factory=RunningStat)
    signal_stat: RunningStat = field(default_factory=RunningStat)

    def update(self, stimuli: float, state: float, output: float) -> None:
        self.stimuli_stat.add_sample(stimuli)
        self.state_stat.add_sample(state)
        self.output_stat.add_sample(output)
        self.signal_stat.add_sample(0.0 if output == 0 else 1.0)

    @property
    def signal_frequency(self) -> float:
        return self.signal_stat.mean

    def reset(self) -> None:
        for stat in (self.stimuli_stat, self.state_stat, self.output_stat, self.signal_stat):
            stat.reset()


class FiringRate:
    """Exponentially weighted firing-rate estimate in [0, 1].

    rate <- decay * rate + (1 - decay) * spike
    """

    def __init__(self, decay: float = 0.9) -> None:
        validate_probability(decay, "decay")
        self.decay = decay
        self.rate = 0.0

    def update(self, spike: bool) -> float:
        self.rate = self.decay * self.rate + (1.0 - self.decay) * (1.0 if spike else 0.0)
        return self.rate

    def reset(self) -> None:
        self.rate = 0.0


# =============================================================================
# NEURON BASE
# =============================================================================


class Neuron(ResettableMixin, ABC):
    """Shared interface of all neuron variants.

    Subclasses implement ``_compute_output()`` (and the predictor
    properties); the counters, stimuli handling and statistics live here.

    Args:
        placement: Identity of the neuron
        role: INPUT, EXCITATORY or INHIBITORY
        bias: Constant added to the stimuli every cycle
        use_secondary_predictor: Emit the secondary predictor
    """

    signal_type: SignalType

    def __init__(
        self,
        placement: NeuronPlacement,
        role: NeuronRole,
        bias: float = 0.0,
        use_secondary_predictor: bool = False,
    ) -> None:
        self.placement = placement
        self.role = role
        self.bias = float(bias)
        self.use_secondary_predictor = use_secondary_predictor
        self.statistics = NeuronStatistics()
        self._stimuli = 0.0
        self._output = 0.0
        self._no_signal_cycles = -1
        self._signal_interval = -1

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    @abstractmethod
    def output_range(self) -> Interval:
        """Range of the output signal."""

    @property
    def stimuli(self) -> float:
        return self._stimuli

    @property
    def output_signal(self) -> float:
        return self._output

    @property
    def no_signal_cycles(self) -> int:
        return self._no_signal_cycles

    @property
    def signal_interval(self) -> int:
        return self._signal_interval

    @property
    def primary_predictor(self) -> float:
        return 0.0

    @property
    def secondary_predictor(self) -> float:
        return 0.0

    @property
    def num_predictors(self) -> int:
        return 2 if self.use_secondary_predictor else 1

    def predictors(self) -> List[float]:
        """Predictor values in readout order (primary, then secondary)."""
        if self.use_secondary_predictor:
            return [self.primary_predictor, self.secondary_predictor]
        return [self.primary_predictor]

    @property
    def normalized_state(self) -> float:
        """Internal state rescaled to [0, 1]."""
        return 0.0

    # -------------------------------------------------------------------------
    # Two-phase update
    # -------------------------------------------------------------------------

    def new_sample(self) -> None:
        """Called before the first cycle of every external sample."""

    def new_stimuli(self, external: float, internal: float) -> None:
        """Store the bounded total stimulation for the next new_state()."""
        self._stimuli = STIMULI_RANGE.bound(external + internal + self.bias)

    def new_state(self, collect_statistics: bool = False) -> None:
        """Compute the output signal from the stored stimuli."""
        self._output = self._compute_output()
        if self._output != 0:
            if self._no_signal_cycles >= 0:
                self._signal_interval = self._no_signal_cycles + 1
            self._no_signal_cycles = 0
        elif self._no_signal_cycles >= 0:
            self._no_signal_cycles += 1
        if collect_statistics:
            self.statistics.update(self._stimuli, self.normalized_state, self._output)

    @abstractmethod
    def _compute_output(self) -> float:
        ...

    def reset(self, statistics: bool = False) -> None:
        self._stimuli = 0.0
        self._output = 0.0
        self._no_signal_cycles = -1
        self._signal_interval = -1
        if statistics:
            self.statistics.reset()

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(idx={self.placement.flat_idx}, "
            f"role={self.role.value}, output={self._output:.4g})"
        )


__all__ = [
    "NeuronPlacement",
    "NeuronStatistics",
    "FiringRate",
    "Neuron",
]
