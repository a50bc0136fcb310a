"""
Reservoir - synchronous cycle driver.

One discrete cycle runs three strictly separated phases over the whole
population:

1. **Stimulate**: every neuron receives its accumulated stimuli. Input
   neurons get the external input, reservoir neurons the sum of their
   incoming synapses' weighted signals, computed from the outputs settled
   in the *previous* cycle (respecting delay buffers).
2. **Settle**: every neuron computes its new output and counters.
3. **Adapt**: every adaptive synapse recomputes its efficacy from the
   just-settled counters, for use in the next Stimulate phase.

No neuron or synapse may observe a cycle-t output before all neurons have
settled cycle t; changing this order changes simulation results.

The predictor vector returned by compute() is the sole hand-off to the
readout layer: primary (+ optional secondary) predictor of every reservoir
neuron, in neuron order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Union

import numpy as np
import torch

from liquidstate.components.coding.spike_utils import (
    compute_firing_rate,
    compute_spike_count,
    is_silent,
)
from liquidstate.components.neurons.neuron import Neuron
from liquidstate.components.synapses.synapse import Synapse
from liquidstate.constants import SignalType
from liquidstate.errors import ConfigurationError, InvariantViolationError
from liquidstate.mixins.resettable_mixin import ResettableMixin
from liquidstate.utils.interval import STIMULI_RANGE, Interval
from liquidstate.utils.stats import RunningStat

InputVector = Union[Sequence[float], np.ndarray, torch.Tensor]


@dataclass
class PoolStatistics:
    """Aggregated neuron and synapse statistics of one pool.

    Each RunningStat aggregates the per-neuron (or per-synapse) means.
    firing_rate, spike_count and silent describe the spiking neurons'
    outputs of the last cycle.
    """

    pool_id: int
    num_neurons: int = 0
    num_spiking: int = 0
    stimuli: RunningStat = field(default_factory=RunningStat)
    state: RunningStat = field(default_factory=RunningStat)
    output: RunningStat = field(default_factory=RunningStat)
    signal_frequency: RunningStat = field(default_factory=RunningStat)
    efficacy: RunningStat = field(default_factory=RunningStat)
    firing_rate: float = 0.0
    spike_count: int = 0
    silent: bool = False


@dataclass
class ReservoirStatistics:
    """Snapshot of reservoir-wide statistics."""

    pools: List[PoolStatistics]
    num_synapses: int
    num_adaptive_synapses: int


class Reservoir(ResettableMixin):
    """Neuron population and its synapses, driven cycle by cycle.

    Args:
        input_neurons: One neuron per external input field, in field order
        reservoir_neurons: Recurrent population, in predictor order
        synapses: Every synapse; targets must be reservoir neurons
        input_range: Range of the raw external input values
        cycles_per_sample: Cycles run by compute() per external sample
        dtype: dtype of the returned predictor tensors
    """

    def __init__(
        self,
        input_neurons: Sequence[Neuron],
        reservoir_neurons: Sequence[Neuron],
        synapses: Sequence[Synapse],
        input_range: Interval = STIMULI_RANGE,
        cycles_per_sample: int = 1,
        dtype: torch.dtype = torch.float64,
    ) -> None:
        if not input_neurons:
            raise ConfigurationError("Reservoir needs at least one input neuron")
        if cycles_per_sample < 1:
            raise ConfigurationError(f"cycles_per_sample must be >= 1, got {cycles_per_sample}")
        self.input_neurons = list(input_neurons)
        self.reservoir_neurons = list(reservoir_neurons)
        self.synapses = list(synapses)
        self.input_range = input_range
        self.cycles_per_sample = cycles_per_sample
        self.dtype = dtype

        index: Dict[int, int] = {id(n): i for i, n in enumerate(self.reservoir_neurons)}
        self._incoming: List[List[Synapse]] = [[] for _ in self.reservoir_neurons]
        for synapse in self.synapses:
            target_idx = index.get(id(synapse.target))
            if target_idx is None:
                raise ConfigurationError(
                    f"{synapse!r} targets a neuron outside the reservoir population"
                )
            self._incoming[target_idx].append(synapse)
        self._adaptive = [s for s in self.synapses if s.is_adaptive]

    @property
    def num_inputs(self) -> int:
        return len(self.input_neurons)

    @property
    def num_predictors(self) -> int:
        return sum(n.num_predictors for n in self.reservoir_neurons)

    def incoming(self, neuron_idx: int) -> List[Synapse]:
        """Synapses targeting reservoir neuron ``neuron_idx``."""
        return list(self._incoming[neuron_idx])

    # -------------------------------------------------------------------------
    # Simulation
    # -------------------------------------------------------------------------

    def _to_stimuli(self, input_vector: InputVector) -> List[float]:
        values = torch.as_tensor(input_vector, dtype=torch.float64).flatten().tolist()
        if len(values) != self.num_inputs:
            raise InvariantViolationError(
                f"Expected {self.num_inputs} input values, got {len(values)}"
            )
        return [STIMULI_RANGE.rescale(v, self.input_range) for v in values]

    def cycle(self, stimuli: Sequence[float], collect_statistics: bool = False) -> None:
        """Run one Stimulate -> Settle -> Adapt cycle.

        Args:
            stimuli: External stimuli per input neuron, already in [-1, 1]
            collect_statistics: Update neuron and synapse statistics

        Raises:
            InvariantViolationError: Stimuli length does not match the input neurons
        """
        if len(stimuli) != self.num_inputs:
            raise InvariantViolationError(
                f"Expected {self.num_inputs} stimuli, got {len(stimuli)}"
            )
        # Stimulate
        for neuron, value in zip(self.input_neurons, stimuli):
            neuron.new_stimuli(value, 0.0)
        for neuron, incoming in zip(self.reservoir_neurons, self._incoming):
            internal = 0.0
            for synapse in incoming:
                internal += synapse.get_weighted_signal(collect_statistics)
            neuron.new_stimuli(0.0, internal)

        # Settle
        for neuron in self.input_neurons:
            neuron.new_state(collect_statistics)
        for neuron in self.reservoir_neurons:
            neuron.new_state(collect_statistics)

        # Adapt
        for synapse in self._adaptive:
            synapse.adjust()

    def compute(
        self,
        input_vector: InputVector,
        cycles: Optional[int] = None,
        collect_statistics: bool = False,
    ) -> torch.Tensor:
        """Feed one external sample and return the predictor vector.

        Args:
            input_vector: Raw input values in ``input_range``, one per input neuron
            cycles: Cycles to run (default: cycles_per_sample)
            collect_statistics: Update neuron and synapse statistics

        Raises:
            InvariantViolationError: Input length does not match the input neurons
        """
        stimuli = self._to_stimuli(input_vector)
        for neuron in self.input_neurons:
            neuron.new_sample()
        for _ in range(self.cycles_per_sample if cycles is None else cycles):
            self.cycle(stimuli, collect_statistics)
        return self.predictors()

    def predictors(self) -> torch.Tensor:
        values: List[float] = []
        for neuron in self.reservoir_neurons:
            values.extend(neuron.predictors())
        return torch.tensor(values, dtype=self.dtype)

    def output_signals(self) -> torch.Tensor:
        """Current output signal of every reservoir neuron."""
        return torch.tensor(
            [n.output_signal for n in self.reservoir_neurons], dtype=torch.float64
        )

    def reset(self, statistics: bool = False) -> None:
        for neuron in self.input_neurons:
            neuron.reset(statistics)
        for neuron in self.reservoir_neurons:
            neuron.reset(statistics)
        for synapse in self.synapses:
            synapse.reset(statistics)

    # -------------------------------------------------------------------------
    # Diagnostics
    # -------------------------------------------------------------------------

    def collect_statistics(self) -> ReservoirStatistics:
        """Aggregate neuron and synapse statistics per pool."""
        pools: Dict[int, PoolStatistics] = {}
        spikes: Dict[int, List[float]] = {}
        for neuron, incoming in zip(self.reservoir_neurons, self._incoming):
            pool_id = neuron.placement.pool_id
            stats = pools.setdefault(pool_id, PoolStatistics(pool_id=pool_id))
            stats.num_neurons += 1
            stats.stimuli.add_sample(neuron.statistics.stimuli_stat.mean)
            stats.state.add_sample(neuron.statistics.state_stat.mean)
            stats.output.add_sample(neuron.statistics.output_stat.mean)
            stats.signal_frequency.add_sample(neuron.statistics.signal_frequency)
            for synapse in incoming:
                if synapse.efficacy_stat.num_of_samples > 0:
                    stats.efficacy.add_sample(synapse.efficacy_stat.mean)
            if neuron.signal_type == SignalType.SPIKING:
                stats.num_spiking += 1
                spikes.setdefault(pool_id, []).append(neuron.output_signal)
        for pool_id, pool_spikes in spikes.items():
            spike_vector = torch.tensor(pool_spikes)
            pools[pool_id].firing_rate = compute_firing_rate(spike_vector)
            pools[pool_id].spike_count = compute_spike_count(spike_vector)
            pools[pool_id].silent = is_silent(spike_vector)
        return ReservoirStatistics(
            pools=[pools[k] for k in sorted(pools)],
            num_synapses=len(self.synapses),
            num_adaptive_synapses=len(self._adaptive),
        )


__all__ = ["Reservoir", "ReservoirStatistics", "PoolStatistics", "InputVector"]
