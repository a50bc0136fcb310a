"""
Utility modules for liquidstate.

Shared numeric helpers: intervals, statistics accumulators, and the
synaptic delay ring buffer.
"""

from __future__ import annotations

from liquidstate.utils.delay_buffer import SignalDelayBuffer
from liquidstate.utils.interval import STIMULI_RANGE, UNIT_RANGE, Interval
from liquidstate.utils.stats import (
    BinDistribution,
    BinErrStat,
    RunningStat,
    WeightedAverage,
)

__all__ = [
    # Intervals
    "Interval",
    "STIMULI_RANGE",
    "UNIT_RANGE",
    # Statistics
    "RunningStat",
    "WeightedAverage",
    "BinDistribution",
    "BinErrStat",
    # Delay
    "SignalDelayBuffer",
]
