"""
Statistics accumulators.

Small, allocation-free accumulators used for neuron/synapse diagnostics and
readout error reporting:

- RunningStat: count/sum/mean/min/max/variance of a scalar sample stream
- WeightedAverage: weighted mean of a scalar sample stream
- BinDistribution: class counts of a binary (thresholded) distribution
- BinErrStat: per-class misclassification statistics
"""

from __future__ import annotations

import copy
import math
from typing import Iterable, List, Tuple


class RunningStat:
    """Running statistics of a scalar sample stream (Welford's algorithm)."""

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self.num_of_samples = 0
        self.sum = 0.0
        self.min = math.nan
        self.max = math.nan
        self._mean = 0.0
        self._m2 = 0.0

    def add_sample(self, value: float) -> None:
        value = float(value)
        self.num_of_samples += 1
        self.sum += value
        if self.num_of_samples == 1:
            self.min = value
            self.max = value
        else:
            self.min = min(self.min, value)
            self.max = max(self.max, value)
        delta = value - self._mean
        self._mean += delta / self.num_of_samples
        self._m2 += delta * (value - self._mean)

    def add_samples(self, values: Iterable[float]) -> None:
        for value in values:
            self.add_sample(value)

    @property
    def mean(self) -> float:
        return self._mean if self.num_of_samples > 0 else 0.0

    @property
    def variance(self) -> float:
        """Population variance."""
        if self.num_of_samples == 0:
            return 0.0
        return self._m2 / self.num_of_samples

    @property
    def std(self) -> float:
        return math.sqrt(self.variance)

    @property
    def span(self) -> float:
        if self.num_of_samples == 0:
            return 0.0
        return self.max - self.min

    def copy(self) -> RunningStat:
        return copy.deepcopy(self)

    def __repr__(self) -> str:
        return (
            f"RunningStat(n={self.num_of_samples}, mean={self.mean:.6g}, "
            f"min={self.min:.6g}, max={self.max:.6g})"
        )


class WeightedAverage:
    """Weighted mean of a scalar sample stream."""

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self.sum_of_weights = 0.0
        self._weighted_sum = 0.0

    def add_sample(self, value: float, weight: float = 1.0) -> None:
        self._weighted_sum += float(value) * weight
        self.sum_of_weights += weight

    @property
    def avg(self) -> float:
        if self.sum_of_weights == 0:
            return 0.0
        return self._weighted_sum / self.sum_of_weights


class BinDistribution:
    """Binary distribution of values split at a border.

    Values >= bin_border fall into bin 1, the rest into bin 0.
    """

    def __init__(self, bin_border: float = 0.5) -> None:
        self.bin_border = bin_border
        self.num_of: List[int] = [0, 0]

    def bin_of(self, value: float) -> int:
        return 1 if value >= self.bin_border else 0

    def update(self, value: float) -> None:
        self.num_of[self.bin_of(value)] += 1

    def update_all(self, values: Iterable[float]) -> None:
        for value in values:
            self.update(value)

    @property
    def count(self) -> int:
        return self.num_of[0] + self.num_of[1]

    @property
    def bin_rates(self) -> Tuple[float, float]:
        if self.count == 0:
            return (0.0, 0.0)
        return (self.num_of[0] / self.count, self.num_of[1] / self.count)

    def copy(self) -> BinDistribution:
        return copy.deepcopy(self)


class BinErrStat:
    """Misclassification statistics against a binary border.

    bin_val_err_stat[0] collects errors on samples whose ideal value is in
    bin 0 (their mean is the false positive rate), bin_val_err_stat[1]
    errors on ideal bin-1 samples (false negative rate).
    """

    def __init__(self, bin_border: float = 0.5) -> None:
        self.bin_border = bin_border
        self.bin_val_err_stat = (RunningStat(), RunningStat())
        self.total_err_stat = RunningStat()

    def update(self, computed_value: float, ideal_value: float) -> None:
        ideal_bin = 1 if ideal_value >= self.bin_border else 0
        computed_bin = 1 if computed_value >= self.bin_border else 0
        err = 0.0 if ideal_bin == computed_bin else 1.0
        self.bin_val_err_stat[ideal_bin].add_sample(err)
        self.total_err_stat.add_sample(err)

    def update_all(self, computed: Iterable[float], ideal: Iterable[float]) -> None:
        for computed_value, ideal_value in zip(computed, ideal):
            self.update(computed_value, ideal_value)

    @property
    def false_positive_rate(self) -> float:
        return self.bin_val_err_stat[0].mean

    @property
    def false_negative_rate(self) -> float:
        return self.bin_val_err_stat[1].mean

    @property
    def num_of_errors(self) -> int:
        return int(round(self.total_err_stat.sum))

    def copy(self) -> BinErrStat:
        return copy.deepcopy(self)


__all__ = ["RunningStat", "WeightedAverage", "BinDistribution", "BinErrStat"]
