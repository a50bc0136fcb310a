"""
Neural preprocessor - turns raw input data into readout predictors.

Two feeding modes:

CONTINUOUS
    One long time series. The reservoir is reset once, every sample is fed
    in order and the state carries over from sample to sample. Predictors
    of the first ``boot_cycles`` samples are dropped while the reservoir
    settles into its input-driven regime. At inference time compute()
    simply continues the series.

PATTERNED
    Independent patterns, each a sequence of input vectors. The reservoir
    is reset before every pattern and the predictors are taken after the
    pattern's last vector.

A preprocessor is bound to one mode; calling an operation of the other
mode is an invariant violation.
"""

from __future__ import annotations

import logging
from typing import Sequence, Tuple

import torch

from liquidstate.config.readout_config import PreprocessorConfig
from liquidstate.constants import FeedingMode
from liquidstate.errors import ConfigurationError, InvariantViolationError
from liquidstate.reservoir.reservoir import InputVector, Reservoir, ReservoirStatistics

logger = logging.getLogger(__name__)


class NeuralPreprocessor:
    """Feeds data through a reservoir and collects predictor vectors.

    Args:
        reservoir: Built reservoir
        config: Feeding mode, boot cycles and input routing
    """

    def __init__(self, reservoir: Reservoir, config: PreprocessorConfig) -> None:
        self.reservoir = reservoir
        self.config = config

    @property
    def num_predictors(self) -> int:
        extra = self.reservoir.num_inputs if self.config.route_input_to_readout else 0
        return self.reservoir.num_predictors + extra

    def _require_mode(self, mode: FeedingMode) -> None:
        if self.config.feeding_mode != mode:
            raise InvariantViolationError(
                f"Preprocessor is configured for {self.config.feeding_mode.value} feeding, "
                f"cannot run {mode.value} feeding"
            )

    def _with_inputs(self, predictors: torch.Tensor, input_vector: InputVector) -> torch.Tensor:
        if not self.config.route_input_to_readout:
            return predictors
        raw = torch.as_tensor(input_vector, dtype=predictors.dtype).flatten()
        return torch.cat([predictors, raw])

    @staticmethod
    def _check_aligned(inputs: Sequence, outputs: Sequence) -> None:
        if len(inputs) != len(outputs):
            raise InvariantViolationError(
                f"Got {len(inputs)} input samples but {len(outputs)} output samples"
            )
        if len(inputs) == 0:
            raise InvariantViolationError("No samples to preprocess")

    # -------------------------------------------------------------------------
    # Training data
    # -------------------------------------------------------------------------

    def preprocess_time_series(
        self,
        inputs: Sequence[InputVector],
        outputs: Sequence[InputVector],
    ) -> Tuple[torch.Tensor, torch.Tensor]:
        """Feed a time series and return (predictors, ideal outputs).

        Returns:
            Predictors [n - boot_cycles, num_predictors] and aligned ideal
            outputs [n - boot_cycles, num_outputs]
        """
        self._require_mode(FeedingMode.CONTINUOUS)
        self._check_aligned(inputs, outputs)
        boot = self.config.boot_cycles
        if boot >= len(inputs):
            raise ConfigurationError(
                f"boot_cycles ({boot}) leaves no samples out of {len(inputs)}"
            )
        self.reservoir.reset(statistics=True)
        rows = []
        for i, input_vector in enumerate(inputs):
            predictors = self.reservoir.compute(input_vector, collect_statistics=True)
            if i >= boot:
                rows.append(self._with_inputs(predictors, input_vector))
        ideal = torch.stack(
            [torch.as_tensor(o, dtype=self.reservoir.dtype).flatten() for o in outputs[boot:]]
        )
        logger.info(
            f"Preprocessed time series: {len(inputs)} samples, {boot} boot, "
            f"{len(rows)} x {self.num_predictors} predictors"
        )
        return torch.stack(rows), ideal

    def preprocess_patterns(
        self,
        patterns: Sequence[Sequence[InputVector]],
        outputs: Sequence[InputVector],
    ) -> Tuple[torch.Tensor, torch.Tensor]:
        """Feed independent patterns and return (predictors, ideal outputs)."""
        self._require_mode(FeedingMode.PATTERNED)
        self._check_aligned(patterns, outputs)
        self.reservoir.reset(statistics=True)
        rows = [self._feed_pattern(pattern, collect_statistics=True) for pattern in patterns]
        ideal = torch.stack(
            [torch.as_tensor(o, dtype=self.reservoir.dtype).flatten() for o in outputs]
        )
        logger.info(
            f"Preprocessed {len(patterns)} patterns into "
            f"{len(rows)} x {self.num_predictors} predictors"
        )
        return torch.stack(rows), ideal

    def _feed_pattern(
        self, pattern: Sequence[InputVector], collect_statistics: bool = False
    ) -> torch.Tensor:
        if len(pattern) == 0:
            raise InvariantViolationError("Empty input pattern")
        self.reservoir.reset(statistics=False)
        predictors = None
        for input_vector in pattern:
            predictors = self.reservoir.compute(input_vector, collect_statistics=collect_statistics)
        # Routed inputs are the pattern's last vector
        return self._with_inputs(predictors, pattern[-1])

    # -------------------------------------------------------------------------
    # Inference
    # -------------------------------------------------------------------------

    def compute(self, data) -> torch.Tensor:
        """Predictors for one input vector (continuous) or one pattern (patterned)."""
        if self.config.feeding_mode == FeedingMode.CONTINUOUS:
            predictors = self.reservoir.compute(data)
            return self._with_inputs(predictors, data)
        return self._feed_pattern(data)

    def compute_continuous(self, input_vector: InputVector) -> torch.Tensor:
        self._require_mode(FeedingMode.CONTINUOUS)
        return self.compute(input_vector)

    def compute_pattern(self, pattern: Sequence[InputVector]) -> torch.Tensor:
        self._require_mode(FeedingMode.PATTERNED)
        return self.compute(pattern)

    def collect_statistics(self) -> ReservoirStatistics:
        return self.reservoir.collect_statistics()


__all__ = ["NeuralPreprocessor"]
