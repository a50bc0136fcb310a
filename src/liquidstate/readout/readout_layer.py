"""
Readout Layer - cross-validated ensemble per output field.

Build protocol:
1. Shuffle the samples once with the layer's random source; the same order
   is shared by every output field.
2. Per field, partition the shuffled samples into K disjoint bundles:
   - CLASSIFICATION: stratified. Each class (ideal >= bin_border or not)
     gives every bundle max(1, count // K) samples, leftovers go
     round-robin over the bundles.
   - otherwise: contiguous slices of the shuffled order, leftovers
     round-robin.
3. Fold f trains one ReadoutUnit on all bundles but f and tests it on f.
4. The field's cluster predicts by the weighted average of its units,
   weight = samples the unit was evaluated on.

With normalize_outputs, a field's units train on its ideal values scaled
into [-1, 1] (bin_border is mapped the same way) and the cluster maps its
output back into natural units.

K is config.num_folds when set, otherwise n // round(n * test_data_ratio)
capped at MAX_NUM_OF_FOLDS.

Every fold gets its own generator spawned from one np.random.SeedSequence,
so results depend only on the layer's seed and not on training order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np
import torch

from liquidstate.config.readout_config import ReadoutLayerConfig
from liquidstate.constants import MAX_NUM_OF_FOLDS, MIN_LENGTH_OF_TEST_DATASET, TaskType
from liquidstate.errors import ConfigurationError, InvariantViolationError
from liquidstate.readout.feature_scaler import FeatureScaler
from liquidstate.readout.readout_unit import ReadoutUnit
from liquidstate.readout.trainers import FoldData, ReadoutTrainer
from liquidstate.utils.stats import BinDistribution, BinErrStat, RunningStat, WeightedAverage

logger = logging.getLogger(__name__)


# =============================================================================
# RESULT TYPES
# =============================================================================


@dataclass
class ClusterErrorStatistics:
    """Error statistics of one cluster's ensemble over the full data set.

    Attributes:
        field_name: Output field of the cluster
        task_type: Readout task type
        num_of_units: Number of fold units in the cluster
        precision_error_stat: Absolute errors (its mean is the MAE)
        ideal_distribution: Class counts of the ideal values
        binary_error_stat: Misclassification statistics (classification only)
    """

    field_name: str
    task_type: TaskType
    num_of_units: int
    precision_error_stat: RunningStat = field(default_factory=RunningStat)
    ideal_distribution: Optional[BinDistribution] = None
    binary_error_stat: Optional[BinErrStat] = None

    @property
    def mae(self) -> float:
        return self.precision_error_stat.mean

    def update(self, computed: Sequence[float], ideal: Sequence[float]) -> None:
        for computed_value, ideal_value in zip(computed, ideal):
            self.precision_error_stat.add_sample(abs(computed_value - ideal_value))
        if self.binary_error_stat is not None:
            self.binary_error_stat.update_all(computed, ideal)
        if self.ideal_distribution is not None:
            self.ideal_distribution.update_all(ideal)

    def copy(self) -> ClusterErrorStatistics:
        return ClusterErrorStatistics(
            field_name=self.field_name,
            task_type=self.task_type,
            num_of_units=self.num_of_units,
            precision_error_stat=self.precision_error_stat.copy(),
            ideal_distribution=None if self.ideal_distribution is None else self.ideal_distribution.copy(),
            binary_error_stat=None if self.binary_error_stat is None else self.binary_error_stat.copy(),
        )


@dataclass
class ValidationBundle:
    """Ensemble outputs over the (shuffled) training data.

    Attributes:
        computed: [n, num_fields] ensemble outputs
        ideal: [n, num_fields] ideal outputs, same row order
    """

    computed: torch.Tensor
    ideal: torch.Tensor

    def mae(self, field_idx: Optional[int] = None) -> float:
        """Mean absolute error over all fields, or one field."""
        diff = (self.computed - self.ideal).abs()
        if field_idx is not None:
            diff = diff[:, field_idx]
        return float(diff.mean().item())

    def __len__(self) -> int:
        return self.computed.shape[0]


# =============================================================================
# CLUSTER
# =============================================================================


class ReadoutCluster:
    """Fold units of one output field combined by weighted averaging.

    With an output scaler the units were trained on scaled ideal values and
    the ensemble output is mapped back into natural units.
    """

    def __init__(
        self,
        field_name: str,
        units: List[ReadoutUnit],
        output_scaler: Optional[FeatureScaler] = None,
    ) -> None:
        self.field_name = field_name
        self.units = units
        self.output_scaler = output_scaler

    def _naturalize(self, values: torch.Tensor) -> torch.Tensor:
        if self.output_scaler is None:
            return values
        return self.output_scaler.inverse_transform(values)

    @property
    def num_of_units(self) -> int:
        return len(self.units)

    def compute(self, predictors: torch.Tensor) -> float:
        """Ensemble output for a single predictor vector."""
        average = WeightedAverage()
        for unit in self.units:
            average.add_sample(float(unit.compute(predictors)), unit.num_of_samples)
        return float(self._naturalize(torch.tensor(average.avg, dtype=torch.float64)))

    def compute_batch(self, predictors: torch.Tensor) -> torch.Tensor:
        """Ensemble outputs for [n, num_predictors] -> [n]."""
        outputs = torch.stack(
            [unit.compute(predictors).reshape(-1).to(torch.float64) for unit in self.units]
        )
        weights = torch.tensor(
            [float(unit.num_of_samples) for unit in self.units], dtype=torch.float64
        )
        return self._naturalize((weights.unsqueeze(1) * outputs).sum(dim=0) / weights.sum())


# =============================================================================
# PARTITIONING
# =============================================================================


def resolve_folds(num_samples: int, config: ReadoutLayerConfig) -> Tuple[int, int]:
    """Return (test_length, num_folds) for a data set.

    Raises:
        ConfigurationError: Test partition shorter than the minimum, or a
            fixed fold count leaving bundles shorter than the minimum
    """
    test_length = int(round(num_samples * config.test_data_ratio))
    if test_length < MIN_LENGTH_OF_TEST_DATASET:
        raise ConfigurationError(
            f"Test partition of {test_length} samples ({num_samples} x "
            f"{config.test_data_ratio}) is shorter than {MIN_LENGTH_OF_TEST_DATASET}"
        )
    if config.num_folds > 0:
        num_folds = config.num_folds
        if num_samples // num_folds < MIN_LENGTH_OF_TEST_DATASET:
            raise ConfigurationError(
                f"{num_folds} folds over {num_samples} samples leave fewer than "
                f"{MIN_LENGTH_OF_TEST_DATASET} test samples per fold"
            )
    else:
        num_folds = min(num_samples // test_length, MAX_NUM_OF_FOLDS)
    return test_length, num_folds


def _distribute(indices: Sequence[int], bundles: List[List[int]], quota: int) -> None:
    """Give every bundle `quota` consecutive indices, leftovers round-robin."""
    num_bundles = len(bundles)
    for b in range(num_bundles):
        bundles[b].extend(indices[b * quota:(b + 1) * quota])
    for i, idx in enumerate(indices[num_bundles * quota:]):
        bundles[i % num_bundles].append(idx)


def contiguous_split(num_samples: int, num_folds: int) -> List[List[int]]:
    """Split range(num_samples) into contiguous bundles."""
    bundles: List[List[int]] = [[] for _ in range(num_folds)]
    _distribute(list(range(num_samples)), bundles, num_samples // num_folds)
    return bundles


def stratified_split(ideal: Sequence[float], num_folds: int, bin_border: float) -> List[List[int]]:
    """Split sample indices so every bundle holds its share of each class.

    Raises:
        ConfigurationError: A class has fewer samples than there are folds
    """
    classes: Tuple[List[int], List[int]] = ([], [])
    for idx, value in enumerate(ideal):
        classes[1 if value >= bin_border else 0].append(idx)
    bundles: List[List[int]] = [[] for _ in range(num_folds)]
    for bin_idx, members in enumerate(classes):
        if len(members) < num_folds:
            raise ConfigurationError(
                f"Insufficient bin {bin_idx} samples: {len(members)} for {num_folds} folds"
            )
        _distribute(members, bundles, max(1, len(members) // num_folds))
    return bundles


# =============================================================================
# LAYER
# =============================================================================


class ReadoutLayer:
    """Cross-validated readout ensemble, one cluster per output field.

    Args:
        config: Readout configuration
        generator: Random source for the shuffle and fold seeding
            (default: seeded from config.seed)
    """

    def __init__(
        self,
        config: ReadoutLayerConfig,
        generator: Optional[np.random.Generator] = None,
    ) -> None:
        self.config = config
        self.rng = generator if generator is not None else config.make_generator()
        self.clusters: List[ReadoutCluster] = []
        self._cluster_stats: List[ClusterErrorStatistics] = []
        self._scaler: Optional[FeatureScaler] = None
        self._num_predictors = 0

    @property
    def is_built(self) -> bool:
        return bool(self.clusters)

    @property
    def cluster_error_statistics(self) -> List[ClusterErrorStatistics]:
        """Deep copies of the per-cluster error statistics."""
        self._require_built()
        return [stats.copy() for stats in self._cluster_stats]

    def _require_built(self) -> None:
        if not self.is_built:
            raise InvariantViolationError(
                "Readout layer is not built; call build() before compute()"
            )

    def _prepare(self, predictors: torch.Tensor) -> torch.Tensor:
        predictors = predictors.to(self.config.get_torch_dtype())
        if self._scaler is not None:
            predictors = self._scaler.transform(predictors)
        return predictors

    def build(
        self,
        predictors: torch.Tensor,
        ideal_outputs: torch.Tensor,
        trainer: ReadoutTrainer,
    ) -> ValidationBundle:
        """Train every cluster and return the ensemble's validation outputs.

        Args:
            predictors: [n, num_predictors]
            ideal_outputs: [n, num_fields]
            trainer: Candidate network producer

        Raises:
            ConfigurationError: Shape mismatch or fold bounds violated
        """
        cfg = self.config
        predictors = torch.as_tensor(predictors)
        ideal_outputs = torch.as_tensor(ideal_outputs, dtype=torch.float64)
        if ideal_outputs.dim() == 1:
            ideal_outputs = ideal_outputs.unsqueeze(1)
        if predictors.dim() != 2 or predictors.shape[1] == 0:
            raise ConfigurationError(f"Predictors must be [n, p>0], got {tuple(predictors.shape)}")
        num_samples = predictors.shape[0]
        if ideal_outputs.shape != (num_samples, len(cfg.output_field_names)):
            raise ConfigurationError(
                f"Ideal outputs must be [{num_samples}, {len(cfg.output_field_names)}], "
                f"got {tuple(ideal_outputs.shape)}"
            )
        _, num_folds = resolve_folds(num_samples, cfg)

        self.clusters = []
        self._cluster_stats = []
        self._num_predictors = predictors.shape[1]
        predictors = predictors.to(cfg.get_torch_dtype())
        self._scaler = FeatureScaler().fit(predictors) if cfg.normalize_predictors else None
        predictors = self._prepare(predictors)

        order = torch.as_tensor(self.rng.permutation(num_samples), dtype=torch.long)
        shuffled_predictors = predictors[order]
        shuffled_ideal = ideal_outputs[order]
        root_seed = np.random.SeedSequence(int(self.rng.integers(2**62)))
        field_seeds = root_seed.spawn(len(cfg.output_field_names))

        clusters: List[ReadoutCluster] = []
        stats: List[ClusterErrorStatistics] = []
        computed_columns = []
        for field_idx, field_name in enumerate(cfg.output_field_names):
            ideal = shuffled_ideal[:, field_idx]
            if cfg.task_type == TaskType.CLASSIFICATION:
                bundles = stratified_split(ideal.tolist(), num_folds, cfg.bin_border)
            else:
                bundles = contiguous_split(num_samples, num_folds)
            output_scaler = FeatureScaler().fit(ideal) if cfg.normalize_outputs else None
            if output_scaler is None:
                target, unit_border = ideal, cfg.bin_border
            else:
                target = output_scaler.transform(ideal)
                unit_border = float(
                    output_scaler.transform(torch.tensor(cfg.bin_border, dtype=torch.float64))
                )
            fold_seeds = field_seeds[field_idx].spawn(num_folds)
            units = []
            for fold_num in range(num_folds):
                test_idx = torch.tensor(bundles[fold_num], dtype=torch.long)
                train_idx = torch.tensor(
                    [i for b, bundle in enumerate(bundles) if b != fold_num for i in bundle],
                    dtype=torch.long,
                )
                fold = FoldData(
                    fold_num=fold_num,
                    num_folds=num_folds,
                    field_idx=field_idx,
                    field_name=field_name,
                    training_predictors=shuffled_predictors[train_idx],
                    training_ideal=target[train_idx],
                    testing_predictors=shuffled_predictors[test_idx],
                    testing_ideal=target[test_idx],
                    rng=np.random.default_rng(fold_seeds[fold_num]),
                )
                units.append(
                    ReadoutUnit.create_trained(
                        cfg.task_type,
                        fold,
                        trainer,
                        bin_border=unit_border,
                        max_candidates=cfg.regression_attempts,
                    )
                )
            cluster = ReadoutCluster(field_name, units, output_scaler)
            computed = cluster.compute_batch(shuffled_predictors)
            cluster_stats = ClusterErrorStatistics(
                field_name=field_name,
                task_type=cfg.task_type,
                num_of_units=num_folds,
            )
            if cfg.task_type == TaskType.CLASSIFICATION:
                cluster_stats.ideal_distribution = BinDistribution(cfg.bin_border)
                cluster_stats.binary_error_stat = BinErrStat(cfg.bin_border)
            cluster_stats.update(computed.tolist(), ideal.tolist())
            logger.info(
                f"Readout cluster '{field_name}': {num_folds} folds, "
                f"MAE {cluster_stats.mae:.6g}"
            )
            clusters.append(cluster)
            stats.append(cluster_stats)
            computed_columns.append(computed)

        self.clusters = clusters
        self._cluster_stats = stats
        return ValidationBundle(computed=torch.stack(computed_columns, dim=1), ideal=shuffled_ideal)

    def compute(self, predictors: torch.Tensor) -> torch.Tensor:
        """Output vector [num_fields] for one predictor vector.

        Raises:
            InvariantViolationError: Layer not built, or wrong predictor count
        """
        self._require_built()
        predictors = torch.as_tensor(predictors).reshape(-1)
        if predictors.shape[0] != self._num_predictors:
            raise InvariantViolationError(
                f"Expected {self._num_predictors} predictors, got {predictors.shape[0]}"
            )
        predictors = self._prepare(predictors)
        return torch.tensor(
            [cluster.compute(predictors) for cluster in self.clusters], dtype=torch.float64
        )


__all__ = [
    "ReadoutLayer",
    "ReadoutCluster",
    "ClusterErrorStatistics",
    "ValidationBundle",
    "resolve_folds",
    "contiguous_split",
    "stratified_split",
]
