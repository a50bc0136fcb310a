"""Tests for spike diagnostics helpers."""

import pytest
import torch

from liquidstate.components.coding import compute_firing_rate, compute_spike_count, is_silent


@pytest.mark.unit
def test_firing_rate():
    assert compute_firing_rate(torch.tensor([1, 0, 0, 1, 0])) == pytest.approx(0.4)
    assert compute_firing_rate(torch.tensor([])) == 0.0


@pytest.mark.unit
def test_spike_count_and_silence():
    spikes = torch.tensor([0.0, 1.0, 1.0])
    assert compute_spike_count(spikes) == 2
    assert not is_silent(spikes)
    assert is_silent(torch.zeros(4))
