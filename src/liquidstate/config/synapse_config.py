"""
Synapse dynamics configuration.

Adaptive synapses combine two independent efficacy mechanisms:

1. PRE-SYNAPTIC SHORT-TERM PLASTICITY (Tsodyks-Markram style)
   - u: utilization, rises with recent source firing (facilitation)
   - R: available resource fraction, depleted by use, recovers over time
   - efficacy_pre = u * R

2. POST-SYNAPTIC DECAY
   - efficacy_post = exp(-leak_target / tau_decay)

Both are driven by "cycles since last signal" counters of the endpoint
neurons and only apply when that endpoint is spiking.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from liquidstate.errors import ConfigurationError, validate_positive


class SynapseDynamicsType(Enum):
    """Predefined synapse dynamics."""

    STATIC = "static"  # Efficacy fixed at 1
    FACILITATING = "facilitating"  # Low resting efficacy, slow facilitation decay
    DEPRESSING = "depressing"  # High resting efficacy, slow recovery
    DECAYING = "decaying"  # Post-synaptic decay only
    FULL = "full"  # Pre-synaptic STP and post-synaptic decay


@dataclass
class SynapseDynamicsConfig:
    """Configuration of adaptive synapse efficacy.

    Attributes:
        tau_facilitation: Facilitation time constant in cycles (tau_f)
        tau_recovery: Resource recovery time constant in cycles (tau_r)
        resting_efficacy: Resting utilization U0 in (0, 1]
        tau_decay: Post-synaptic decay time constant in cycles (tau_d)
        apply_pre_synaptic: Enable pre-synaptic STP
        apply_post_synaptic: Enable post-synaptic decay
    """

    tau_facilitation: float = 500.0
    tau_recovery: float = 5.0
    resting_efficacy: float = 0.5
    tau_decay: float = 10.0
    apply_pre_synaptic: bool = True
    apply_post_synaptic: bool = True

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        validate_positive(self.tau_facilitation, "tau_facilitation")
        validate_positive(self.tau_recovery, "tau_recovery")
        validate_positive(self.tau_decay, "tau_decay")
        if not 0.0 < self.resting_efficacy <= 1.0:
            raise ConfigurationError(
                f"resting_efficacy must be in (0, 1], got {self.resting_efficacy}"
            )

    @property
    def is_static(self) -> bool:
        return not (self.apply_pre_synaptic or self.apply_post_synaptic)

    @classmethod
    def from_type(cls, dynamics_type: SynapseDynamicsType) -> SynapseDynamicsConfig:
        """Create config from a predefined dynamics type."""
        if dynamics_type == SynapseDynamicsType.FACILITATING:
            return cls(tau_facilitation=200.0, tau_recovery=2.0, resting_efficacy=0.15,
                       apply_post_synaptic=False)
        elif dynamics_type == SynapseDynamicsType.DEPRESSING:
            return cls(tau_facilitation=20.0, tau_recovery=40.0, resting_efficacy=0.5,
                       apply_post_synaptic=False)
        elif dynamics_type == SynapseDynamicsType.DECAYING:
            return cls(apply_pre_synaptic=False)
        elif dynamics_type == SynapseDynamicsType.FULL:
            return cls()
        else:  # STATIC
            return cls(apply_pre_synaptic=False, apply_post_synaptic=False)


__all__ = ["SynapseDynamicsType", "SynapseDynamicsConfig"]
