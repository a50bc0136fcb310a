"""
Circular Delay Buffer - Synaptic transmission delay.

This module provides a fixed-capacity ring buffer modeling deterministic
signal propagation latency in clock-driven reservoir simulation.

A signal pushed at cycle t is delivered at cycle t + delay. The buffer holds
exactly delay + 1 slots: the value written this cycle plus the delay values
still "on the road". Until the buffer has been filled once it delivers the
initial value (0 by default).
"""

from __future__ import annotations

import torch


class SignalDelayBuffer:
    """Circular buffer delaying a scalar signal by a fixed number of cycles.

    Memory: O(delay)
    Push: O(1)

    Args:
        delay: Delay in cycles (buffer size = delay + 1)
        dtype: Data type of the stored signals
        initial: Value held by empty slots
    """

    def __init__(self, delay: int, dtype: torch.dtype = torch.float64, initial: float = 0.0):
        if delay < 0:
            raise ValueError(f"delay must be >= 0, got {delay}")

        self.delay = delay
        self.capacity = delay + 1
        self.initial = initial

        self.buffer = torch.full((self.capacity,), initial, dtype=dtype)

        # Current write position (0 to delay, wraps around)
        self.ptr = 0

    def write(self, value: float) -> None:
        """Write a signal to the current buffer position."""
        self.buffer[self.ptr] = value

    def read(self) -> float:
        """Read the signal written `delay` cycles ago.

        With delay=0 this returns the value just written.
        """
        read_idx = (self.ptr - self.delay) % self.capacity
        return float(self.buffer[read_idx].item())

    def advance(self) -> None:
        """Advance to the next cycle. Call after write() and read()."""
        self.ptr = (self.ptr + 1) % self.capacity

    def push(self, value: float) -> float:
        """Write this cycle's signal and return the one due for delivery."""
        self.write(value)
        delivered = self.read()
        self.advance()
        return delivered

    def reset(self) -> None:
        """Drop all signals in flight."""
        self.buffer.fill_(self.initial)
        self.ptr = 0

    def __len__(self) -> int:
        return self.capacity


__all__ = ["SignalDelayBuffer"]
