"""
Spike Utility Functions.

Helpers for population-level diagnostics over binary spike vectors
(one entry per spiking neuron, 0 or 1).
"""

from __future__ import annotations

import torch


def compute_firing_rate(spikes: torch.Tensor) -> float:
    """Fraction of neurons firing in the population.

    Example:
        >>> compute_firing_rate(torch.tensor([1, 0, 0, 1, 0]))
        0.4

    Returns 0.0 for empty tensors.
    """
    if spikes.numel() == 0:
        return 0.0
    return (spikes != 0).double().mean().item()


def compute_spike_count(spikes: torch.Tensor) -> int:
    """Count total number of spikes in tensor."""
    return int((spikes != 0).sum().item())


def is_silent(spikes: torch.Tensor) -> bool:
    """True if no neuron of the population fired."""
    return compute_spike_count(spikes) == 0


__all__ = ["compute_firing_rate", "compute_spike_count", "is_silent"]
