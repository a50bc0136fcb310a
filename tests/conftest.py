"""Shared test fixtures and configuration."""

import numpy as np
import pytest
import torch

from liquidstate.components.neurons import (
    InputAnalogNeuron,
    NeuronPlacement,
    ReservoirAnalogNeuron,
    ReservoirSpikingNeuron,
    SimpleIFActivation,
    TanhActivation,
)
from liquidstate.config import NeuronGroupConfig, PoolConfig, ReservoirConfig
from liquidstate.constants import NeuronRole, SignalType


@pytest.fixture(autouse=True)
def set_random_seed():
    """Ensure reproducible tests by setting all random seeds.

    This fixture runs automatically for every test. Components under test
    take their own seeded generators; this only pins global state.
    """
    torch.manual_seed(42)
    np.random.seed(42)


@pytest.fixture
def rng():
    """Seeded random source for components that accept a generator."""
    return np.random.default_rng(1234)


@pytest.fixture
def placement():
    return NeuronPlacement(pool_id=0, flat_idx=0)


@pytest.fixture
def input_neuron():
    return InputAnalogNeuron(NeuronPlacement(pool_id=-1, flat_idx=0))


@pytest.fixture
def analog_neuron():
    return ReservoirAnalogNeuron(
        NeuronPlacement(pool_id=0, flat_idx=0), NeuronRole.EXCITATORY, TanhActivation()
    )


@pytest.fixture
def spiking_neuron():
    return ReservoirSpikingNeuron(
        NeuronPlacement(pool_id=0, flat_idx=1),
        NeuronRole.EXCITATORY,
        SimpleIFActivation(resistance=15.0, decay_rate=0.05, reset_potential=5.0,
                           firing_threshold=20.0, refractory_periods=1),
    )


@pytest.fixture
def small_reservoir_config():
    """Mixed analog/spiking reservoir small enough for fast tests."""
    return ReservoirConfig(
        seed=7,
        input_fields=["x"],
        pools=[
            PoolConfig(
                name="pool",
                dim=(3, 3, 2),
                excitatory_ratio=0.75,
                neuron_groups=[
                    NeuronGroupConfig(
                        name="analog",
                        relative_share=2.0,
                        activation="tanh",
                        bias_range=(-0.05, 0.05),
                        retainment_range=(0.0, 0.5),
                        use_secondary_predictor=True,
                    ),
                    NeuronGroupConfig(
                        name="spiking",
                        signal_type=SignalType.SPIKING,
                        relative_share=1.0,
                        activation="simple_if",
                        activation_params={"resistance": 15.0, "decay_rate": 0.1},
                    ),
                ],
                interconnection_density=0.2,
                weight_range=(0.1, 1.0),
                delay_range=(0, 2),
            )
        ],
        cycles_per_sample=2,
    )
