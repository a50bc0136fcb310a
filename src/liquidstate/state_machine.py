"""
State Machine - reservoir preprocessing plus trained readout.

    inputs -> NeuralPreprocessor (reservoir) -> predictors -> ReadoutLayer -> outputs

Training runs the preprocessor over the whole training data once and then
builds the readout layer on the collected predictors. Inference feeds one
input (continuous feeding) or one pattern (patterned feeding) and returns
the readout's output vector.

Usage:
======
    machine = StateMachine.from_config(reservoir_cfg, preprocessor_cfg, readout_cfg)
    result = machine.train_time_series(inputs, outputs)
    print(result.validation.mae())
    next_value = machine.compute(last_input)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np
import torch

from liquidstate.config.readout_config import PreprocessorConfig, ReadoutLayerConfig
from liquidstate.config.reservoir_config import ReservoirConfig
from liquidstate.errors import InvariantViolationError
from liquidstate.readout.readout_layer import ClusterErrorStatistics, ReadoutLayer, ValidationBundle
from liquidstate.readout.trainers import ReadoutTrainer, RidgeRegressionTrainer
from liquidstate.reservoir.builder import ReservoirBuilder
from liquidstate.reservoir.preprocessor import NeuralPreprocessor
from liquidstate.reservoir.reservoir import InputVector, ReservoirStatistics

logger = logging.getLogger(__name__)


@dataclass
class TrainingResult:
    """Outcome of StateMachine training."""

    validation: ValidationBundle
    cluster_statistics: List[ClusterErrorStatistics]
    reservoir_statistics: ReservoirStatistics
    num_predictors: int


class StateMachine:
    """Reservoir preprocessor and readout layer trained together.

    Args:
        preprocessor: Neural preprocessor wrapping a built reservoir
        readout_config: Readout layer configuration
        trainer: Readout network trainer (default: ridge regression)
        generator: Random source of the readout layer
    """

    def __init__(
        self,
        preprocessor: NeuralPreprocessor,
        readout_config: ReadoutLayerConfig,
        trainer: Optional[ReadoutTrainer] = None,
        generator: Optional[np.random.Generator] = None,
    ) -> None:
        self.preprocessor = preprocessor
        self.readout_layer = ReadoutLayer(readout_config, generator)
        self.trainer: ReadoutTrainer = trainer if trainer is not None else RidgeRegressionTrainer()

    @classmethod
    def from_config(
        cls,
        reservoir_config: ReservoirConfig,
        preprocessor_config: PreprocessorConfig,
        readout_config: ReadoutLayerConfig,
        trainer: Optional[ReadoutTrainer] = None,
    ) -> StateMachine:
        reservoir = ReservoirBuilder(reservoir_config).build()
        return cls(NeuralPreprocessor(reservoir, preprocessor_config), readout_config, trainer)

    @property
    def is_trained(self) -> bool:
        return self.readout_layer.is_built

    def _train(self, predictors: torch.Tensor, ideal: torch.Tensor) -> TrainingResult:
        validation = self.readout_layer.build(predictors, ideal, self.trainer)
        result = TrainingResult(
            validation=validation,
            cluster_statistics=self.readout_layer.cluster_error_statistics,
            reservoir_statistics=self.preprocessor.collect_statistics(),
            num_predictors=predictors.shape[1],
        )
        logger.info(
            f"State machine trained on {len(validation)} samples, "
            f"{result.num_predictors} predictors, MAE {validation.mae():.6g}"
        )
        return result

    def train_time_series(
        self, inputs: Sequence[InputVector], outputs: Sequence[InputVector]
    ) -> TrainingResult:
        """Train on one continuous time series."""
        predictors, ideal = self.preprocessor.preprocess_time_series(inputs, outputs)
        return self._train(predictors, ideal)

    def train_patterns(
        self, patterns: Sequence[Sequence[InputVector]], outputs: Sequence[InputVector]
    ) -> TrainingResult:
        """Train on independent input patterns."""
        predictors, ideal = self.preprocessor.preprocess_patterns(patterns, outputs)
        return self._train(predictors, ideal)

    def compute(self, data) -> torch.Tensor:
        """Output vector for one input vector or one pattern.

        Raises:
            InvariantViolationError: Called before training
        """
        if not self.is_trained:
            raise InvariantViolationError("State machine is not trained")
        return self.readout_layer.compute(self.preprocessor.compute(data))


__all__ = ["StateMachine", "TrainingResult"]
