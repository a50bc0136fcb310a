"""
Spike coding and spike utilities.

This module provides the analog-to-spike-train coder used by spiking input
neurons and spike diagnostics helpers.
"""

from __future__ import annotations

from liquidstate.components.coding.signal_converter import SignalConverter
from liquidstate.components.coding.spike_utils import (
    compute_firing_rate,
    compute_spike_count,
    is_silent,
)

__all__ = [
    # Coding
    "SignalConverter",
    # Utilities
    "compute_firing_rate",
    "compute_spike_count",
    "is_silent",
]
