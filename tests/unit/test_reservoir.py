"""
Tests for the reservoir cycle driver and topology builder.
"""

import math

import numpy as np
import pytest
import torch

from liquidstate.components.neurons import (
    InputAnalogNeuron,
    InputSpikingNeuron,
    NeuronPlacement,
    ReservoirAnalogNeuron,
    ReservoirSpikingNeuron,
    IdentityActivation,
    SimpleIFActivation,
)
from liquidstate.components.synapses import Synapse
from liquidstate.config import (
    PoolConfig,
    ReservoirConfig,
    SynapseDynamicsConfig,
    SynapseDynamicsType,
)
from liquidstate.constants import NeuronRole, SignalType
from liquidstate.errors import ConfigurationError, InvariantViolationError
from liquidstate.reservoir import Reservoir, ReservoirBuilder, build_reservoir
from liquidstate.utils import Interval


def _chain():
    """input -> a -> b, identity activations, unit weights."""
    inp = InputAnalogNeuron(NeuronPlacement(-1, 0))
    a = ReservoirAnalogNeuron(NeuronPlacement(0, 0), NeuronRole.EXCITATORY, IdentityActivation())
    b = ReservoirAnalogNeuron(NeuronPlacement(0, 1), NeuronRole.EXCITATORY, IdentityActivation())
    synapses = [Synapse(inp, a, 1.0), Synapse(a, b, 1.0)]
    return Reservoir([inp], [a, b], synapses), inp, a, b


@pytest.mark.unit
class TestCycleOrdering:

    def test_signal_advances_one_hop_per_cycle(self):
        """Synapses read outputs settled in the previous cycle."""
        reservoir, inp, a, b = _chain()

        reservoir.cycle([0.5])
        assert inp.output_signal == 0.5
        assert a.output_signal == 0.0
        assert b.output_signal == 0.0

        reservoir.cycle([0.5])
        assert a.output_signal == pytest.approx(0.5)
        assert b.output_signal == 0.0

        reservoir.cycle([0.5])
        assert b.output_signal == pytest.approx(0.5)

    def test_mutual_connection_is_order_independent(self):
        """Swapping neuron order must not change results."""
        def run(order):
            inp = InputAnalogNeuron(NeuronPlacement(-1, 0))
            a = ReservoirAnalogNeuron(NeuronPlacement(0, 0), NeuronRole.EXCITATORY, IdentityActivation())
            b = ReservoirAnalogNeuron(NeuronPlacement(0, 1), NeuronRole.INHIBITORY, IdentityActivation())
            synapses = [Synapse(inp, a, 0.8), Synapse(a, b, 0.5), Synapse(b, a, 0.5)]
            neurons = [a, b] if order else [b, a]
            reservoir = Reservoir([inp], neurons, synapses)
            for value in [0.3, -0.2, 0.9, 0.1]:
                reservoir.cycle([value])
            return a.output_signal, b.output_signal

        assert run(True) == run(False)


@pytest.mark.unit
class TestReservoirCompute:

    def test_predictor_vector(self):
        reservoir, _, a, b = _chain()
        predictors = reservoir.compute([0.5], cycles=3)
        assert isinstance(predictors, torch.Tensor)
        assert predictors.dtype == torch.float64
        assert predictors.shape == (reservoir.num_predictors,) == (2,)
        assert predictors.tolist() == [a.output_signal, b.output_signal]

    def test_input_is_rescaled_from_input_range(self):
        inp = InputAnalogNeuron(NeuronPlacement(-1, 0))
        a = ReservoirAnalogNeuron(NeuronPlacement(0, 0), NeuronRole.EXCITATORY, IdentityActivation())
        reservoir = Reservoir([inp], [a], [Synapse(inp, a, 1.0)], input_range=Interval(0.0, 10.0))
        reservoir.compute([7.5])
        assert inp.output_signal == pytest.approx(0.5)

    def test_input_length_mismatch(self):
        reservoir, *_ = _chain()
        with pytest.raises(InvariantViolationError):
            reservoir.compute([0.1, 0.2])

    def test_synapse_to_input_neuron_rejected(self):
        inp = InputAnalogNeuron(NeuronPlacement(-1, 0))
        a = ReservoirAnalogNeuron(NeuronPlacement(0, 0), NeuronRole.EXCITATORY, IdentityActivation())
        with pytest.raises(ConfigurationError):
            Reservoir([inp], [a], [Synapse(a, inp, 1.0)])

    def test_cycle_stimuli_length_mismatch(self):
        reservoir, inp, *_ = _chain()
        reservoir.cycle([0.5])
        with pytest.raises(InvariantViolationError):
            reservoir.cycle([])
        assert inp.output_signal == 0.5

    def test_reset_twice_equals_once(self, small_reservoir_config):
        reservoir = build_reservoir(small_reservoir_config)
        for value in [0.2, -0.4, 0.9]:
            reservoir.compute([value])
        reservoir.reset(False)
        once = reservoir.predictors()
        reservoir.reset(False)
        assert torch.equal(reservoir.predictors(), once)

    def test_reset_replays_identically(self, small_reservoir_config):
        reservoir = build_reservoir(small_reservoir_config)
        inputs = [0.2, -0.4, 0.9, 0.0, 0.5]
        first = [reservoir.compute([v]) for v in inputs]
        reservoir.reset(False)
        second = [reservoir.compute([v]) for v in inputs]
        for x, y in zip(first, second):
            assert torch.equal(x, y)


@pytest.mark.unit
class TestCycleDynamics:
    """Per-cycle synapse adaptation and per-sample input coding."""

    def test_target_stimuli_follow_adapted_efficacy(self):
        dynamics = SynapseDynamicsConfig.from_type(SynapseDynamicsType.FULL)
        inp = InputAnalogNeuron(NeuronPlacement(-1, 0))
        a = ReservoirSpikingNeuron(NeuronPlacement(0, 0), NeuronRole.EXCITATORY, SimpleIFActivation())
        b = ReservoirSpikingNeuron(NeuronPlacement(0, 1), NeuronRole.EXCITATORY, SimpleIFActivation())
        a_to_b = Synapse(a, b, 0.8, delay=1, dynamics=dynamics)
        reservoir = Reservoir([inp], [a, b], [Synapse(inp, a, 1.0), a_to_b])
        assert a_to_b.pre_synaptic is not None and a_to_b.post_synaptic is not None

        eff_pre, eff_post = 1.0, 1.0
        u, r = dynamics.resting_efficacy, 1.0
        in_flight = (0.0, 1.0)
        delivered_efficacies = []
        pre_values, post_values = set(), set()
        b_fired = False
        for _ in range(30):
            # Stimulate: push a's previous output, deliver the one pushed last cycle
            pushed = (a.output_signal * 0.8 * eff_pre, eff_pre)
            delivered, delivered_pre = in_flight
            expected_stimuli = max(-1.0, min(1.0, delivered * eff_post))
            if delivered != 0:
                delivered_efficacies.append(delivered_pre * eff_post)
            in_flight = pushed

            reservoir.cycle([1.0], collect_statistics=True)
            assert b.stimuli == pytest.approx(expected_stimuli)

            # Adapt from the counters settled in this cycle
            if a.output_signal != 0:
                leak = a.signal_interval
                if leak < 0:
                    eff_pre = 1.0
                else:
                    x = math.exp(-leak / dynamics.tau_facilitation)
                    u = x + dynamics.resting_efficacy * (1 - x)
                    y = math.exp(-leak / dynamics.tau_recovery)
                    r = r * (1 - u) * y + (1 - y)
                    eff_pre = u * r
            leak_target = b.no_signal_cycles
            eff_post = 1.0 if leak_target < 0 else math.exp(-leak_target / dynamics.tau_decay)
            assert a_to_b.efficacy == pytest.approx(eff_pre * eff_post)
            pre_values.add(round(eff_pre, 9))
            post_values.add(round(eff_post, 9))
            b_fired = b_fired or b.output_signal != 0

        assert b_fired
        assert min(pre_values) < 1.0
        assert min(post_values) < 1.0
        stat = a_to_b.efficacy_stat
        assert stat.num_of_samples == len(delivered_efficacies)
        assert stat.mean == pytest.approx(sum(delivered_efficacies) / len(delivered_efficacies))

    def test_equal_samples_restart_input_train(self):
        inp = InputSpikingNeuron(NeuronPlacement(-1, 0), coding_fractions=4)
        a = ReservoirAnalogNeuron(NeuronPlacement(0, 0), NeuronRole.EXCITATORY, IdentityActivation())
        reservoir = Reservoir([inp], [a], [Synapse(inp, a, 1.0)])
        # 0.6 -> 0b1100; each sample emits its first two bits
        for _ in range(2):
            reservoir.compute([0.6], cycles=2)
            assert inp.output_signal == 1.0
            assert inp.converter.num_pending_fractions == 2


@pytest.mark.unit
class TestBuilder:

    def test_structure(self, small_reservoir_config):
        reservoir = ReservoirBuilder(small_reservoir_config).build()
        assert reservoir.num_inputs == 1
        assert len(reservoir.reservoir_neurons) == 18
        assert reservoir.cycles_per_sample == 2
        roles = [n.role for n in reservoir.reservoir_neurons]
        assert roles.count(NeuronRole.EXCITATORY) == round(18 * 0.75)
        placements = {(n.placement.x, n.placement.y, n.placement.z) for n in reservoir.reservoir_neurons}
        assert len(placements) == 18

    def test_synapse_signs_follow_roles(self, small_reservoir_config):
        reservoir = ReservoirBuilder(small_reservoir_config).build()
        for synapse in reservoir.synapses:
            if synapse.source.role == NeuronRole.INHIBITORY:
                assert synapse.weight < 0
            else:
                assert synapse.weight > 0
            assert 0 <= synapse.delay <= 2

    def test_same_seed_builds_identical_reservoir(self, small_reservoir_config):
        def run():
            reservoir = ReservoirBuilder(small_reservoir_config).build()
            return [reservoir.compute([v]) for v in np.sin(np.linspace(0, 6, 30))]

        for x, y in zip(run(), run()):
            assert torch.equal(x, y)

    def test_injected_generator(self, small_reservoir_config):
        a = ReservoirBuilder(small_reservoir_config, np.random.default_rng(1)).build()
        b = ReservoirBuilder(small_reservoir_config, np.random.default_rng(1)).build()
        assert [s.weight for s in a.synapses] == [s.weight for s in b.synapses]

    def test_spiking_input(self):
        cfg = ReservoirConfig(
            seed=1, input_signal_type=SignalType.SPIKING, coding_fractions=4,
            pools=[PoolConfig(dim=(2, 2, 2))],
        )
        reservoir = build_reservoir(cfg)
        reservoir.compute([0.3], cycles=4)
        assert reservoir.input_neurons[0].signal_type == SignalType.SPIKING

    def test_dynamics_make_spiking_synapses_adaptive(self, small_reservoir_config):
        small_reservoir_config.pools[0].dynamics = SynapseDynamicsConfig()
        reservoir = build_reservoir(small_reservoir_config)
        spiking = [
            s for s in reservoir.synapses
            if s.source.role != NeuronRole.INPUT
            and (isinstance(s.source, ReservoirSpikingNeuron) or isinstance(s.target, ReservoirSpikingNeuron))
        ]
        assert spiking
        assert all(s.is_adaptive for s in spiking)


@pytest.mark.unit
def test_collect_statistics(small_reservoir_config):
    reservoir = build_reservoir(small_reservoir_config)
    for value in np.linspace(-1, 1, 20):
        reservoir.compute([value], collect_statistics=True)
    stats = reservoir.collect_statistics()
    assert len(stats.pools) == 1
    pool = stats.pools[0]
    assert pool.num_neurons == 18
    assert pool.output.num_of_samples == 18
    assert 0.0 <= pool.firing_rate <= 1.0
    assert pool.num_spiking > 0
    assert pool.spike_count == round(pool.firing_rate * pool.num_spiking)
    assert pool.silent == (pool.spike_count == 0)
    assert stats.num_synapses == len(reservoir.synapses)
