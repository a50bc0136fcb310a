"""
Analog-to-spike-train coder.

A bounded analog value is rescaled to [0, 1] and quantized to an N-bit
integer (N = "coding fractions"). The integer is then emitted bit by bit,
most significant bit first, one bit per simulation cycle. Decoding inverts
the quantization.

    precision = 2^-N
    encode:  stored = min(floor(rescaled / precision), 2^N - 1)
    decode:  stored * precision * span + min

Round-trip error is bounded by precision * span of the analog range.

Example:
    >>> coder = SignalConverter(Interval(0.0, 1.0), 3)
    >>> coder.encode(0.625)
    >>> coder.bit_pattern()
    '101'
    >>> [coder.fetch_bit() for _ in range(3)]
    [1, 0, 1]
    >>> coder.decode()
    0.625
"""

from __future__ import annotations

import math
from typing import Sequence

from liquidstate.constants import MAX_CODING_FRACTIONS, MIN_CODING_FRACTIONS
from liquidstate.errors import ConfigurationError, SignalCodingError
from liquidstate.utils.interval import UNIT_RANGE, Interval


class SignalConverter:
    """Bidirectional analog value <-> N-bit pulse pattern coder.

    Args:
        analog_range: Range of the analog values to code
        coding_fractions: Number of bits N, clamped to [1, 53]
    """

    def __init__(self, analog_range: Interval, coding_fractions: int) -> None:
        self.analog_range = analog_range
        self.coding_fractions = max(
            min(int(coding_fractions), MAX_CODING_FRACTIONS), MIN_CODING_FRACTIONS
        )
        self.precision = 2.0 ** -self.coding_fractions
        self._max_stored = (1 << self.coding_fractions) - 1
        self._stored = 0
        self._pending = 0

    @property
    def num_pending_fractions(self) -> int:
        """Bits encoded but not yet fetched."""
        return self._pending

    @property
    def stored_value(self) -> int:
        return self._stored

    def encode(self, value: float) -> None:
        """Quantize an analog value and make all N bits pending."""
        if self.analog_range.span == 0:
            rescaled = 0.0
        else:
            rescaled = UNIT_RANGE.bound(
                (value - self.analog_range.min) / self.analog_range.span
            )
        self._stored = int(math.floor(min(rescaled / self.precision, self._max_stored)))
        self._pending = self.coding_fractions

    def encode_spike_train(self, bits: int) -> None:
        """Load an already coded N-bit pattern (extra high bits are dropped)."""
        self._stored = int(bits) & self._max_stored
        self._pending = self.coding_fractions

    def fetch_bit(self) -> int:
        """Pop the most significant pending bit.

        Raises:
            SignalCodingError: No bit is pending
        """
        if self._pending <= 0:
            raise SignalCodingError("No more spikes to be fetched")
        self._pending -= 1
        return (self._stored >> self._pending) & 1

    def decode(self) -> float:
        """Analog value represented by the stored pattern."""
        return self._stored * self.precision * self.analog_range.span + self.analog_range.min

    def bit_pattern(self) -> str:
        """Stored pattern as a string of N bits, most significant first."""
        return format(self._stored, f"0{self.coding_fractions}b")

    @staticmethod
    def mix(analog_range: Interval, values: Sequence[float], fractions: Sequence[int]) -> float:
        """Concatenate several coded values into one pattern and decode it.

        The first value contributes the most significant bits. Useful to build
        a single analog input carrying several coarse-grained signals.

        Raises:
            ConfigurationError: Length mismatch or too many bits in total
        """
        if len(values) != len(fractions):
            raise ConfigurationError(
                f"Got {len(values)} values but {len(fractions)} fraction counts"
            )
        total = sum(fractions)
        if total > MAX_CODING_FRACTIONS:
            raise ConfigurationError(
                f"Mixed pattern needs {total} bits, more than {MAX_CODING_FRACTIONS}"
            )
        pattern = 0
        for value, n in zip(values, fractions):
            coder = SignalConverter(analog_range, n)
            coder.encode(value)
            for _ in range(coder.coding_fractions):
                pattern = (pattern << 1) | coder.fetch_bit()
        mixed = SignalConverter(analog_range, total)
        mixed.encode_spike_train(pattern)
        return mixed.decode()


__all__ = ["SignalConverter"]
