"""
Reservoir Configuration.

Declarative description of a reservoir instance: the input layer, one or
more 3-D pools of neurons split into neuron groups, and the wiring rules
the builder uses to create synapses.

These dataclasses are consumed by ReservoirBuilder; nothing here allocates
neurons or synapses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from liquidstate.config.base import BaseConfig
from liquidstate.config.synapse_config import SynapseDynamicsConfig
from liquidstate.constants import (
    MAX_CODING_FRACTIONS,
    MIN_CODING_FRACTIONS,
    SignalType,
)
from liquidstate.errors import (
    ConfigurationError,
    validate_interval,
    validate_non_negative,
    validate_positive,
    validate_probability,
)


@dataclass
class NeuronGroupConfig:
    """A homogeneous group of neurons inside a pool.

    Attributes:
        name: Group name (diagnostics only)
        signal_type: ANALOG or SPIKING; must match the activation kind
        relative_share: Weight of this group when assigning pool neurons
        activation: Activation factory name (see create_activation)
        activation_params: Keyword arguments for the activation factory
        bias_range: Uniform range the neuron bias is drawn from
        retainment_range: Uniform range of the analog retainment ratio
        use_secondary_predictor: Emit the secondary predictor too
    """

    name: str = "group"
    signal_type: SignalType = SignalType.ANALOG
    relative_share: float = 1.0
    activation: str = "tanh"
    activation_params: Dict[str, Any] = field(default_factory=dict)
    bias_range: Tuple[float, float] = (0.0, 0.0)
    retainment_range: Tuple[float, float] = (0.0, 0.0)
    use_secondary_predictor: bool = False

    def __post_init__(self) -> None:
        validate_positive(self.relative_share, f"{self.name}.relative_share")
        validate_interval(*self.bias_range, f"{self.name}.bias_range")
        validate_interval(*self.retainment_range, f"{self.name}.retainment_range")
        low, high = self.retainment_range
        if low < 0.0 or high >= 1.0:
            raise ConfigurationError(
                f"{self.name}.retainment_range must lie in [0, 1), got {self.retainment_range}"
            )
        if self.signal_type == SignalType.SPIKING and high > 0.0:
            raise ConfigurationError(
                f"{self.name}: retainment applies only to analog neurons"
            )


@dataclass
class PoolConfig:
    """A 3-D grid of reservoir neurons with random interconnections.

    Attributes:
        name: Pool name
        dim: Grid dimensions (x, y, z); pool size is their product
        excitatory_ratio: Fraction of excitatory neurons (rest inhibitory)
        neuron_groups: Groups the pool neurons are drawn from
        interconnection_density: Fraction of possible neuron pairs connected
        weight_range: Uniform range of synapse weight magnitudes
        delay_range: Inclusive integer range of synapse delays (cycles)
        dynamics: Adaptive efficacy of internal synapses (None = static)
        allow_self_connection: Permit a neuron to synapse onto itself
    """

    name: str = "pool"
    dim: Tuple[int, int, int] = (5, 5, 4)
    excitatory_ratio: float = 0.8
    neuron_groups: List[NeuronGroupConfig] = field(
        default_factory=lambda: [NeuronGroupConfig()]
    )
    interconnection_density: float = 0.1
    weight_range: Tuple[float, float] = (0.0, 1.0)
    delay_range: Tuple[int, int] = (0, 0)
    dynamics: Optional[SynapseDynamicsConfig] = None
    allow_self_connection: bool = False

    def __post_init__(self) -> None:
        if len(self.dim) != 3 or any(d <= 0 for d in self.dim):
            raise ConfigurationError(f"{self.name}.dim must be 3 positive ints, got {self.dim}")
        validate_probability(self.excitatory_ratio, f"{self.name}.excitatory_ratio")
        validate_probability(self.interconnection_density, f"{self.name}.interconnection_density")
        validate_interval(*self.weight_range, f"{self.name}.weight_range")
        if self.weight_range[1] <= 0.0:
            raise ConfigurationError(f"{self.name}.weight_range must allow non-zero weights")
        validate_interval(*self.delay_range, f"{self.name}.delay_range")
        validate_non_negative(self.delay_range[0], f"{self.name}.delay_range")
        if not self.neuron_groups:
            raise ConfigurationError(f"{self.name} has no neuron groups")

    @property
    def size(self) -> int:
        x, y, z = self.dim
        return x * y * z


@dataclass
class ReservoirConfig(BaseConfig):
    """Complete reservoir instance configuration.

    Attributes:
        input_fields: Names of the external input fields (one input neuron each)
        input_signal_type: ANALOG passes stimuli through, SPIKING codes them
        input_range: Range of the external input values
        coding_fractions: Bits per value for spiking input neurons
        input_connection_density: Fraction of pool neurons each input feeds
        input_weight_range: Uniform range of input synapse weights
        pools: Reservoir pools
        cycles_per_sample: Internal cycles run per external sample
    """

    input_fields: List[str] = field(default_factory=lambda: ["input"])
    input_signal_type: SignalType = SignalType.ANALOG
    input_range: Tuple[float, float] = (-1.0, 1.0)
    coding_fractions: int = 8
    input_connection_density: float = 0.5
    input_weight_range: Tuple[float, float] = (0.0, 1.0)
    pools: List[PoolConfig] = field(default_factory=lambda: [PoolConfig()])
    cycles_per_sample: int = 1

    def _validate(self) -> None:
        super()._validate()
        if not self.input_fields:
            raise ConfigurationError("At least one input field is required")
        if len(set(self.input_fields)) != len(self.input_fields):
            raise ConfigurationError(f"Duplicate input field names: {self.input_fields}")
        validate_interval(*self.input_range, "input_range")
        if not MIN_CODING_FRACTIONS <= self.coding_fractions <= MAX_CODING_FRACTIONS:
            raise ConfigurationError(
                f"coding_fractions must be in [{MIN_CODING_FRACTIONS}, {MAX_CODING_FRACTIONS}], "
                f"got {self.coding_fractions}"
            )
        validate_probability(self.input_connection_density, "input_connection_density")
        validate_interval(*self.input_weight_range, "input_weight_range")
        if self.input_weight_range[1] <= 0.0:
            raise ConfigurationError("input_weight_range must allow non-zero weights")
        if not self.pools:
            raise ConfigurationError("At least one pool is required")
        validate_positive(self.cycles_per_sample, "cycles_per_sample")

    @property
    def num_of_neurons(self) -> int:
        return sum(pool.size for pool in self.pools)


__all__ = ["NeuronGroupConfig", "PoolConfig", "ReservoirConfig"]
