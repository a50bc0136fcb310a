"""
Adaptive synapse efficacy.

Two independent mechanisms, both driven by the "cycles since last signal"
counters of the endpoint neurons and both active only when that endpoint is
spiking:

1. PRE-SYNAPTIC SHORT-TERM PLASTICITY (Tsodyks-Markram style)
   Updated on every cycle the source neuron emits a signal, with ``leak``
   = cycles between the source's last two signals:

       x = exp(-leak / tau_f)
       u = x + U0 * (1 - x)           utilization, rises with recent firing
       y = exp(-leak / tau_r)
       R = R * (1 - u) * y + (1 - y)  available resources, deplete and recover
       efficacy_pre = u * R

   Frequent firing (small leak) drives u towards 1 and depletes R, so a
   burst is progressively attenuated; long pauses let R recover to 1 and u
   relax towards U0.

2. POST-SYNAPTIC DECAY

       efficacy_post = exp(-leak_target / tau_d)

A leak of -1 (no signal yet) leaves the corresponding efficacy at 1.
"""

from __future__ import annotations

import math

from liquidstate.errors import ConfigurationError, validate_positive


class PreSynapticPlasticity:
    """Utilization/resource state of one synapse.

    Args:
        tau_facilitation: Facilitation time constant tau_f (cycles)
        tau_recovery: Recovery time constant tau_r (cycles)
        resting_efficacy: Resting utilization U0 in (0, 1]
    """

    def __init__(
        self,
        tau_facilitation: float,
        tau_recovery: float,
        resting_efficacy: float,
    ) -> None:
        validate_positive(tau_facilitation, "tau_facilitation")
        validate_positive(tau_recovery, "tau_recovery")
        if not 0.0 < resting_efficacy <= 1.0:
            raise ConfigurationError(
                f"resting_efficacy must be in (0, 1], got {resting_efficacy}"
            )
        self.tau_facilitation = tau_facilitation
        self.tau_recovery = tau_recovery
        self.resting_efficacy = resting_efficacy
        self.reset()

    def reset(self) -> None:
        self.utilization = self.resting_efficacy
        self.available_fraction = 1.0
        self.efficacy = 1.0

    def update(self, leak: int) -> float:
        """Advance the state by one source signal and return efficacy_pre.

        A negative leak (fewer than two source signals so far) skips
        adaptation and yields efficacy 1.
        """
        if leak < 0:
            self.efficacy = 1.0
            return self.efficacy
        x = math.exp(-leak / self.tau_facilitation)
        self.utilization = x + self.resting_efficacy * (1.0 - x)
        y = math.exp(-leak / self.tau_recovery)
        self.available_fraction = self.available_fraction * (1.0 - self.utilization) * y + (1.0 - y)
        self.efficacy = self.utilization * self.available_fraction
        return self.efficacy


class PostSynapticDecay:
    """Efficacy decaying with the target neuron's silence.

    Args:
        tau_decay: Decay time constant tau_d (cycles)
    """

    def __init__(self, tau_decay: float) -> None:
        validate_positive(tau_decay, "tau_decay")
        self.tau_decay = tau_decay

    def efficacy(self, leak: int) -> float:
        if leak < 0:
            return 1.0
        return math.exp(-leak / self.tau_decay)


__all__ = ["PreSynapticPlasticity", "PostSynapticDecay"]
