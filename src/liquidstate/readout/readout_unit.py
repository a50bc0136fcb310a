"""
Readout unit - one trained network of a cross-validation fold.

A unit is immutable once created: the network plus its error statistics on
the fold's training and testing data. For classification tasks the binary
(misclassification) statistics are kept too.

Candidate selection (default ``is_better``):
- CLASSIFICATION: lower combined binary error wins; ties are broken by the
  testing error count, then the training error count, then the combined
  precision error.
- otherwise: lower combined precision error wins.

The combined error of a unit is the worse of its training and testing
errors, so a unit that merely memorizes its training data is not preferred.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from typing import Callable, Optional

import torch

from liquidstate.constants import TaskType
from liquidstate.errors import InvariantViolationError
from liquidstate.readout.trainers import FoldData, ReadoutNetwork, ReadoutTrainer
from liquidstate.utils.stats import BinErrStat, RunningStat

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReadoutUnit:
    """Trained network of one fold and its error statistics."""

    network: ReadoutNetwork
    fold_num: int
    task_type: TaskType
    training_error_stat: RunningStat
    testing_error_stat: RunningStat
    training_bin_error_stat: Optional[BinErrStat] = None
    testing_bin_error_stat: Optional[BinErrStat] = None

    @property
    def num_of_samples(self) -> int:
        """Training plus testing samples the unit was evaluated on."""
        return self.training_error_stat.num_of_samples + self.testing_error_stat.num_of_samples

    @property
    def combined_precision_error(self) -> float:
        return max(self.training_error_stat.mean, self.testing_error_stat.mean)

    @property
    def combined_binary_error(self) -> float:
        if self.training_bin_error_stat is None or self.testing_bin_error_stat is None:
            return 0.0
        return max(
            self.training_bin_error_stat.total_err_stat.mean,
            self.testing_bin_error_stat.total_err_stat.mean,
        )

    def compute(self, predictors: torch.Tensor) -> torch.Tensor:
        return self.network.compute(predictors)

    @classmethod
    def evaluate(
        cls,
        network: ReadoutNetwork,
        task_type: TaskType,
        fold: FoldData,
        bin_border: float,
    ) -> ReadoutUnit:
        """Wrap a network with its error statistics on the fold's data."""
        training_error, training_bin = _error_stats(
            network, fold.training_predictors, fold.training_ideal, task_type, bin_border
        )
        testing_error, testing_bin = _error_stats(
            network, fold.testing_predictors, fold.testing_ideal, task_type, bin_border
        )
        return cls(
            network=network,
            fold_num=fold.fold_num,
            task_type=task_type,
            training_error_stat=training_error,
            testing_error_stat=testing_error,
            training_bin_error_stat=training_bin,
            testing_bin_error_stat=testing_bin,
        )

    @classmethod
    def create_trained(
        cls,
        task_type: TaskType,
        fold: FoldData,
        trainer: ReadoutTrainer,
        bin_border: float = 0.5,
        is_better: Optional[Callable[[ReadoutUnit, ReadoutUnit], bool]] = None,
        max_candidates: Optional[int] = None,
    ) -> ReadoutUnit:
        """Train candidates for a fold and keep the best one.

        Args:
            task_type: Readout task type
            fold: Fold data
            trainer: Candidate network producer
            bin_border: Class threshold for binary error statistics
            is_better: Comparison (candidate, current_best) -> bool
            max_candidates: Stop after this many candidates (None = all)

        Raises:
            InvariantViolationError: The trainer produced no candidate
        """
        compare = is_better or default_is_better
        best: Optional[ReadoutUnit] = None
        candidates = itertools.islice(trainer.train(fold), max_candidates)
        for attempt, network in enumerate(candidates):
            unit = cls.evaluate(network, task_type, fold, bin_border)
            if best is None or compare(unit, best):
                best = unit
                logger.debug(
                    f"Field {fold.field_name} fold {fold.fold_num + 1}/{fold.num_folds}: "
                    f"attempt {attempt + 1} is best so far "
                    f"(precision error {unit.combined_precision_error:.6g})"
                )
        if best is None:
            raise InvariantViolationError(
                f"Trainer produced no network for field {fold.field_name} fold {fold.fold_num}"
            )
        return best


def _error_stats(
    network: ReadoutNetwork,
    predictors: torch.Tensor,
    ideal: torch.Tensor,
    task_type: TaskType,
    bin_border: float,
):
    computed = network.compute(predictors).reshape(-1).to(torch.float64)
    ideal = ideal.reshape(-1).to(torch.float64)
    error_stat = RunningStat()
    error_stat.add_samples((computed - ideal).abs().tolist())
    bin_stat = None
    if task_type == TaskType.CLASSIFICATION:
        bin_stat = BinErrStat(bin_border)
        bin_stat.update_all(computed.tolist(), ideal.tolist())
    return error_stat, bin_stat


def default_is_better(candidate: ReadoutUnit, current: ReadoutUnit) -> bool:
    """True if candidate should replace current as the fold's unit."""
    if candidate.task_type == TaskType.CLASSIFICATION:
        if candidate.combined_binary_error != current.combined_binary_error:
            return candidate.combined_binary_error < current.combined_binary_error
        for attr in ("testing_bin_error_stat", "training_bin_error_stat"):
            cand_errors = getattr(candidate, attr).total_err_stat.sum
            curr_errors = getattr(current, attr).total_err_stat.sum
            if cand_errors != curr_errors:
                return cand_errors < curr_errors
    return candidate.combined_precision_error < current.combined_precision_error


__all__ = ["ReadoutUnit", "default_is_better"]
