"""
Min-max predictor scaling.

Predictors of different neurons live in very different ranges (membrane
states, firing rates, squared outputs). The readout layer scales every
predictor column into [-1, 1] using the ranges seen at build time; constant
columns map to the middle of the range. The same map, fitted on one output
field's ideal values, lets the readout train on scaled targets and return
computed values in natural units (inverse_transform).
"""

from __future__ import annotations

from typing import Optional

import torch

from liquidstate.errors import InvariantViolationError
from liquidstate.utils.interval import STIMULI_RANGE, Interval


class FeatureScaler:
    """Per-column linear map from the fitted [min, max] into a target interval."""

    def __init__(self, target: Interval = STIMULI_RANGE) -> None:
        self.target = target
        self._min: Optional[torch.Tensor] = None
        self._span: Optional[torch.Tensor] = None

    @property
    def is_fitted(self) -> bool:
        return self._min is not None

    def fit(self, data: torch.Tensor) -> FeatureScaler:
        """Learn column ranges from [n, num_features] data."""
        self._min = data.min(dim=0).values
        self._span = data.max(dim=0).values - self._min
        return self

    def transform(self, data: torch.Tensor) -> torch.Tensor:
        if self._min is None or self._span is None:
            raise InvariantViolationError("FeatureScaler used before fit()")
        safe_span = torch.where(self._span > 0, self._span, torch.ones_like(self._span))
        unit = (data - self._min) / safe_span
        unit = torch.where(self._span > 0, unit, torch.full_like(unit, 0.5))
        return self.target.min + unit * self.target.span

    def inverse_transform(self, data: torch.Tensor) -> torch.Tensor:
        """Map scaled values back into the fitted column ranges."""
        if self._min is None or self._span is None:
            raise InvariantViolationError("FeatureScaler used before fit()")
        unit = (data - self.target.min) / self.target.span
        return self._min + unit * self._span


__all__ = ["FeatureScaler"]
