"""
Readout: cross-validated ensemble training and inference.
"""

from __future__ import annotations

from liquidstate.readout.feature_scaler import FeatureScaler
from liquidstate.readout.readout_layer import (
    ClusterErrorStatistics,
    ReadoutCluster,
    ReadoutLayer,
    ValidationBundle,
    contiguous_split,
    resolve_folds,
    stratified_split,
)
from liquidstate.readout.readout_unit import ReadoutUnit, default_is_better
from liquidstate.readout.trainers import (
    FoldData,
    LinearReadoutNetwork,
    ReadoutNetwork,
    ReadoutTrainer,
    RidgeRegressionTrainer,
)

__all__ = [
    "ReadoutLayer",
    "ReadoutCluster",
    "ReadoutUnit",
    "default_is_better",
    "ClusterErrorStatistics",
    "ValidationBundle",
    "FoldData",
    "ReadoutNetwork",
    "ReadoutTrainer",
    "LinearReadoutNetwork",
    "RidgeRegressionTrainer",
    "FeatureScaler",
    "resolve_folds",
    "contiguous_split",
    "stratified_split",
]
