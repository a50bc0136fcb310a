"""
Synapse - weighted, delayed, adaptive signal transport.

A synapse connects exactly one source neuron to one target neuron.

Transport (Stimulate phase, once per cycle):
    signal = source.output_signal           settled output of the last cycle
    target_range.rescale(signal, source_range) * weight * efficacy_pre
is pushed into a delay ring buffer of capacity delay + 1; the value pushed
``delay`` cycles ago is delivered, multiplied by the current efficacy_post.
The efficacy_pre a value was pushed with travels beside it, so efficacy
statistics describe the signal actually delivered.

Adaptation (Adapt phase, once per cycle after every neuron settled):
    efficacy_pre  <- PreSynapticPlasticity.update(source.signal_interval)
                     on cycles where the source emitted a signal
    efficacy_post <- PostSynapticDecay.efficacy(target.no_signal_cycles)

The weight sign is fixed by the source role: INPUT and EXCITATORY sources
yield positive weights, INHIBITORY sources negative ones.
"""

from __future__ import annotations

from typing import Optional

from liquidstate.components.neurons.neuron import Neuron
from liquidstate.components.synapses.stp import PostSynapticDecay, PreSynapticPlasticity
from liquidstate.config.synapse_config import SynapseDynamicsConfig
from liquidstate.constants import NeuronRole, SignalType
from liquidstate.errors import ConfigurationError
from liquidstate.mixins.resettable_mixin import ResettableMixin
from liquidstate.utils.delay_buffer import SignalDelayBuffer
from liquidstate.utils.stats import RunningStat


class Synapse(ResettableMixin):
    """Connection between two neurons.

    Args:
        source: Source neuron
        target: Target neuron
        weight: Weight magnitude (its sign is ignored, must not be 0)
        delay: Transmission delay in cycles (>= 0)
        dynamics: Adaptive efficacy parameters (None = static synapse)

    Raises:
        ConfigurationError: Zero weight or negative delay
    """

    def __init__(
        self,
        source: Neuron,
        target: Neuron,
        weight: float,
        delay: int = 0,
        dynamics: Optional[SynapseDynamicsConfig] = None,
    ) -> None:
        if weight == 0:
            raise ConfigurationError(
                f"Synapse {source.placement.flat_idx}->{target.placement.flat_idx} "
                f"has zero weight"
            )
        if delay < 0:
            raise ConfigurationError(f"Synapse delay must be >= 0, got {delay}")

        self.source = source
        self.target = target
        magnitude = abs(float(weight))
        self.weight = -magnitude if source.role == NeuronRole.INHIBITORY else magnitude
        self.delay = int(delay)
        self.dynamics = dynamics

        self.pre_synaptic: Optional[PreSynapticPlasticity] = None
        self.post_synaptic: Optional[PostSynapticDecay] = None
        if dynamics is not None:
            if dynamics.apply_pre_synaptic and source.signal_type == SignalType.SPIKING:
                self.pre_synaptic = PreSynapticPlasticity(
                    dynamics.tau_facilitation,
                    dynamics.tau_recovery,
                    dynamics.resting_efficacy,
                )
            if dynamics.apply_post_synaptic and target.signal_type == SignalType.SPIKING:
                self.post_synaptic = PostSynapticDecay(dynamics.tau_decay)

        self._buffer = SignalDelayBuffer(self.delay)
        self._efficacy_buffer = SignalDelayBuffer(self.delay, initial=1.0)
        self._efficacy_pre = 1.0
        self._efficacy_post = 1.0
        self.efficacy_stat = RunningStat()

    @property
    def is_adaptive(self) -> bool:
        return self.pre_synaptic is not None or self.post_synaptic is not None

    @property
    def efficacy(self) -> float:
        """Combined efficacy applied to a signal emitted now with no delay."""
        return self._efficacy_pre * self._efficacy_post

    def get_weighted_signal(self, collect_statistics: bool = False) -> float:
        """Push the source's settled signal and deliver the delayed one.

        Must be called exactly once per cycle: every call advances the
        delay buffer.
        """
        rescaled = self.target.output_range.rescale(
            self.source.output_signal, self.source.output_range
        )
        delivered = self._buffer.push(rescaled * self.weight * self._efficacy_pre)
        delivered_pre = self._efficacy_buffer.push(self._efficacy_pre)
        if delivered == 0:
            return 0.0
        if collect_statistics:
            self.efficacy_stat.add_sample(delivered_pre * self._efficacy_post)
        return delivered * self._efficacy_post

    def adjust(self) -> None:
        """Recompute efficacy from the endpoints' just-settled counters."""
        if self.pre_synaptic is not None and self.source.output_signal != 0:
            self._efficacy_pre = self.pre_synaptic.update(self.source.signal_interval)
        if self.post_synaptic is not None:
            self._efficacy_post = self.post_synaptic.efficacy(self.target.no_signal_cycles)

    def reset(self, statistics: bool = False) -> None:
        self._buffer.reset()
        self._efficacy_buffer.reset()
        self._efficacy_pre = 1.0
        self._efficacy_post = 1.0
        if self.pre_synaptic is not None:
            self.pre_synaptic.reset()
        if statistics:
            self.reset_statistics(["efficacy_stat"])

    def __repr__(self) -> str:
        return (
            f"Synapse({self.source.placement.flat_idx}->{self.target.placement.flat_idx}, "
            f"weight={self.weight:.4g}, delay={self.delay})"
        )


__all__ = ["Synapse"]
