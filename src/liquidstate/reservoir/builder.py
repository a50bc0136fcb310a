"""
Reservoir topology builder.

Turns a ReservoirConfig into a wired Reservoir:

1. One input neuron per input field (analog pass-through or spike coder).
2. Per pool, neurons on a 3-D grid; excitatory/inhibitory roles assigned by
   ratio in random order; each neuron drawn from a neuron group by relative
   share, with bias and retainment drawn uniformly from the group ranges.
3. Input synapses: each input neuron feeds a random subset of every pool.
4. Internal synapses: a random subset of the neuron pairs of every pool,
   with weight and delay drawn from the pool ranges.

All randomness comes from one np.random.Generator, so a fixed seed builds
an identical reservoir.
"""

from __future__ import annotations

import itertools
import logging
from typing import List, Optional, Tuple

import numpy as np

from liquidstate.components.neurons.activation import create_activation
from liquidstate.components.neurons.input_neurons import InputAnalogNeuron, InputSpikingNeuron
from liquidstate.components.neurons.neuron import Neuron, NeuronPlacement
from liquidstate.components.neurons.reservoir_neurons import (
    ReservoirAnalogNeuron,
    ReservoirSpikingNeuron,
)
from liquidstate.components.synapses.synapse import Synapse
from liquidstate.config.reservoir_config import NeuronGroupConfig, PoolConfig, ReservoirConfig
from liquidstate.constants import NeuronRole, SignalType
from liquidstate.reservoir.reservoir import Reservoir
from liquidstate.utils.interval import Interval

logger = logging.getLogger(__name__)


class ReservoirBuilder:
    """Builds a Reservoir from its configuration.

    Args:
        config: Reservoir configuration
        generator: Random source (default: seeded from config.seed)
    """

    def __init__(
        self,
        config: ReservoirConfig,
        generator: Optional[np.random.Generator] = None,
    ) -> None:
        self.config = config
        self.rng = generator if generator is not None else config.make_generator()

    def build(self) -> Reservoir:
        cfg = self.config
        input_neurons = self._create_input_neurons()
        reservoir_neurons: List[Neuron] = []
        pool_members: List[List[Neuron]] = []
        for pool_id, pool in enumerate(cfg.pools):
            members = self._create_pool_neurons(pool_id, pool, len(reservoir_neurons))
            pool_members.append(members)
            reservoir_neurons.extend(members)

        synapses: List[Synapse] = []
        for members in pool_members:
            synapses.extend(self._connect_inputs(input_neurons, members))
        for pool, members in zip(cfg.pools, pool_members):
            synapses.extend(self._interconnect(pool, members))

        reservoir = Reservoir(
            input_neurons,
            reservoir_neurons,
            synapses,
            input_range=Interval(*cfg.input_range),
            cycles_per_sample=cfg.cycles_per_sample,
            dtype=cfg.get_torch_dtype(),
        )
        logger.info(
            f"Built reservoir: {len(input_neurons)} inputs, {len(reservoir_neurons)} neurons "
            f"in {len(cfg.pools)} pool(s), {len(synapses)} synapses, "
            f"{reservoir.num_predictors} predictors"
        )
        return reservoir

    # -------------------------------------------------------------------------
    # Neurons
    # -------------------------------------------------------------------------

    def _create_input_neurons(self) -> List[Neuron]:
        neurons: List[Neuron] = []
        for idx, _ in enumerate(self.config.input_fields):
            placement = NeuronPlacement(pool_id=-1, flat_idx=idx)
            if self.config.input_signal_type == SignalType.SPIKING:
                neurons.append(InputSpikingNeuron(placement, self.config.coding_fractions))
            else:
                neurons.append(InputAnalogNeuron(placement))
        return neurons

    def _assign_roles(self, pool: PoolConfig) -> List[NeuronRole]:
        num_excitatory = int(round(pool.size * pool.excitatory_ratio))
        roles = [NeuronRole.EXCITATORY] * num_excitatory
        roles += [NeuronRole.INHIBITORY] * (pool.size - num_excitatory)
        order = self.rng.permutation(pool.size)
        return [roles[i] for i in order]

    def _assign_groups(self, pool: PoolConfig) -> List[NeuronGroupConfig]:
        shares = np.array([g.relative_share for g in pool.neuron_groups], dtype=float)
        choice = self.rng.choice(len(pool.neuron_groups), size=pool.size, p=shares / shares.sum())
        return [pool.neuron_groups[i] for i in choice]

    def _create_pool_neurons(self, pool_id: int, pool: PoolConfig, first_idx: int) -> List[Neuron]:
        roles = self._assign_roles(pool)
        groups = self._assign_groups(pool)
        dim_x, dim_y, dim_z = pool.dim
        neurons: List[Neuron] = []
        coords = itertools.product(range(dim_x), range(dim_y), range(dim_z))
        for local_idx, (x, y, z) in enumerate(coords):
            group = groups[local_idx]
            placement = NeuronPlacement(pool_id, first_idx + local_idx, x, y, z)
            activation = create_activation(group.activation, **group.activation_params)
            bias = self.rng.uniform(*group.bias_range)
            if group.signal_type == SignalType.SPIKING:
                neuron: Neuron = ReservoirSpikingNeuron(
                    placement,
                    roles[local_idx],
                    activation,
                    bias=bias,
                    use_secondary_predictor=group.use_secondary_predictor,
                )
            else:
                neuron = ReservoirAnalogNeuron(
                    placement,
                    roles[local_idx],
                    activation,
                    bias=bias,
                    retainment=self.rng.uniform(*group.retainment_range),
                    use_secondary_predictor=group.use_secondary_predictor,
                )
            neurons.append(neuron)
        return neurons

    # -------------------------------------------------------------------------
    # Synapses
    # -------------------------------------------------------------------------

    def _draw_weight(self, weight_range: Tuple[float, float]) -> float:
        low, high = weight_range
        weight = self.rng.uniform(low, high)
        # A zero weight would be rejected by Synapse
        return weight if weight != 0 else high

    def _connect_inputs(self, input_neurons: List[Neuron], members: List[Neuron]) -> List[Synapse]:
        cfg = self.config
        count = max(1, int(round(cfg.input_connection_density * len(members))))
        synapses: List[Synapse] = []
        for source in input_neurons:
            for target_idx in sorted(self.rng.choice(len(members), size=count, replace=False)):
                synapses.append(
                    Synapse(source, members[target_idx], self._draw_weight(cfg.input_weight_range))
                )
        return synapses

    def _interconnect(self, pool: PoolConfig, members: List[Neuron]) -> List[Synapse]:
        pairs = [
            (i, j)
            for i in range(len(members))
            for j in range(len(members))
            if pool.allow_self_connection or i != j
        ]
        count = int(round(pool.interconnection_density * len(pairs)))
        if count == 0:
            return []
        low_delay, high_delay = pool.delay_range
        synapses: List[Synapse] = []
        for pair_idx in sorted(self.rng.choice(len(pairs), size=count, replace=False)):
            i, j = pairs[pair_idx]
            synapses.append(
                Synapse(
                    members[i],
                    members[j],
                    self._draw_weight(pool.weight_range),
                    delay=int(self.rng.integers(low_delay, high_delay + 1)),
                    dynamics=pool.dynamics,
                )
            )
        return synapses


def build_reservoir(
    config: ReservoirConfig, generator: Optional[np.random.Generator] = None
) -> Reservoir:
    """Convenience wrapper around ReservoirBuilder."""
    return ReservoirBuilder(config, generator).build()


__all__ = ["ReservoirBuilder", "build_reservoir"]
