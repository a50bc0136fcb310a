"""
Readout networks and trainers.

The cross-validation driver does not know how a readout network is fitted.
It hands every fold's data to a trainer, which yields one or more candidate
networks; the driver evaluates each candidate and keeps the best one.

    trainer.train(fold) -> Iterator[ReadoutNetwork]
    network.compute(predictors) -> Tensor

Default implementation: closed-form ridge regression producing a
LinearReadoutNetwork, one candidate per regularization strength.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Protocol, Sequence

import numpy as np
import torch
import torch.nn as nn

from liquidstate.errors import ConfigurationError, validate_non_negative


@dataclass
class FoldData:
    """Data of one cross-validation fold for one output field.

    Attributes:
        fold_num: Index of the fold (its bundle is the test set)
        num_folds: Total number of folds
        field_idx: Index of the output field
        field_name: Name of the output field
        training_predictors: [n_train, num_predictors]
        training_ideal: [n_train]
        testing_predictors: [n_test, num_predictors]
        testing_ideal: [n_test]
        rng: Random source reserved for this fold
    """

    fold_num: int
    num_folds: int
    field_idx: int
    field_name: str
    training_predictors: torch.Tensor
    training_ideal: torch.Tensor
    testing_predictors: torch.Tensor
    testing_ideal: torch.Tensor
    rng: np.random.Generator

    @property
    def num_predictors(self) -> int:
        return self.training_predictors.shape[1]


class ReadoutNetwork(Protocol):
    """Trained mapping from predictors to one output value."""

    def compute(self, predictors: torch.Tensor) -> torch.Tensor:
        """[num_predictors] -> scalar tensor, or [n, num_predictors] -> [n]."""
        ...


class ReadoutTrainer(Protocol):
    """Produces candidate networks for one fold."""

    def train(self, fold: FoldData) -> Iterator[ReadoutNetwork]:
        ...


class LinearReadoutNetwork(nn.Module):
    """Single linear output unit: y = w . x + b."""

    def __init__(self, num_predictors: int, dtype: torch.dtype = torch.float64) -> None:
        super().__init__()
        self.linear = nn.Linear(num_predictors, 1, dtype=dtype)

    @classmethod
    def from_solution(cls, weights: torch.Tensor, bias: float) -> LinearReadoutNetwork:
        network = cls(weights.shape[0], dtype=weights.dtype)
        with torch.no_grad():
            network.linear.weight.copy_(weights.reshape(1, -1))
            network.linear.bias.fill_(bias)
        return network

    def forward(self, predictors: torch.Tensor) -> torch.Tensor:
        if predictors.dim() == 1:
            return self.linear(predictors.unsqueeze(0)).reshape(())
        return self.linear(predictors).squeeze(-1)

    def compute(self, predictors: torch.Tensor) -> torch.Tensor:
        with torch.no_grad():
            return self.forward(predictors.to(self.linear.weight.dtype))


class RidgeRegressionTrainer:
    """Closed-form ridge regression, one candidate per lambda.

    Solves min ||X w + b - y||^2 + lambda ||w||^2 (bias not regularized) as
    a least-squares problem on the augmented system.

    Args:
        lambdas: Regularization strengths to try, in order
    """

    def __init__(self, lambdas: Sequence[float] = (0.0, 1e-6, 1e-4, 1e-2, 1e-1, 1.0)) -> None:
        if not lambdas:
            raise ConfigurationError("RidgeRegressionTrainer needs at least one lambda")
        for lam in lambdas:
            validate_non_negative(lam, "lambda")
        self.lambdas = tuple(lambdas)

    def train(self, fold: FoldData) -> Iterator[LinearReadoutNetwork]:
        x = fold.training_predictors.to(torch.float64)
        y = fold.training_ideal.to(torch.float64).reshape(-1, 1)
        n, p = x.shape
        design = torch.cat([x, torch.ones(n, 1, dtype=torch.float64)], dim=1)
        for lam in self.lambdas:
            if lam > 0:
                penalty = torch.zeros(p, p + 1, dtype=torch.float64)
                penalty[:, :p] = torch.eye(p, dtype=torch.float64) * lam ** 0.5
                a = torch.cat([design, penalty], dim=0)
                b = torch.cat([y, torch.zeros(p, 1, dtype=torch.float64)], dim=0)
            else:
                a, b = design, y
            solution = torch.linalg.lstsq(a, b).solution.reshape(-1)
            yield LinearReadoutNetwork.from_solution(solution[:p], float(solution[p]))


__all__ = [
    "FoldData",
    "ReadoutNetwork",
    "ReadoutTrainer",
    "LinearReadoutNetwork",
    "RidgeRegressionTrainer",
]
