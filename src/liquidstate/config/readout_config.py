"""
Readout layer and preprocessing configuration.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from liquidstate.config.base import BaseConfig
from liquidstate.constants import MAX_NUM_OF_FOLDS, MAX_RATIO_OF_TEST_DATA, FeedingMode, TaskType
from liquidstate.errors import ConfigurationError, validate_non_negative, validate_positive


@dataclass
class ReadoutLayerConfig(BaseConfig):
    """Configuration of the cross-validated readout layer.

    Attributes:
        output_field_names: One readout cluster is trained per output field
        task_type: FORECAST, CLASSIFICATION or HYBRID
        test_data_ratio: Share of samples held out per fold (<= 1/3)
        num_folds: Fixed number of folds, or 0 to derive it from the ratio
        bin_border: Threshold splitting ideal values into classes
        regression_attempts: Maximum candidate networks evaluated per fold
        normalize_predictors: Min-max scale every predictor into [-1, 1]
        normalize_outputs: Train on ideal values scaled into [-1, 1] per field
    """

    output_field_names: List[str] = field(default_factory=lambda: ["output"])
    task_type: TaskType = TaskType.FORECAST
    test_data_ratio: float = 0.25
    num_folds: int = 0
    bin_border: float = 0.5
    regression_attempts: int = 10
    normalize_predictors: bool = True
    normalize_outputs: bool = False

    def _validate(self) -> None:
        super()._validate()
        if not self.output_field_names:
            raise ConfigurationError("At least one output field is required")
        if not 0.0 < self.test_data_ratio <= MAX_RATIO_OF_TEST_DATA:
            raise ConfigurationError(
                f"test_data_ratio must be in (0, {MAX_RATIO_OF_TEST_DATA:.4f}], "
                f"got {self.test_data_ratio}"
            )
        validate_non_negative(self.num_folds, "num_folds")
        if self.num_folds == 1:
            raise ConfigurationError("num_folds must be 0 (derived) or at least 2")
        if self.num_folds > MAX_NUM_OF_FOLDS:
            raise ConfigurationError(
                f"num_folds must not exceed {MAX_NUM_OF_FOLDS}, got {self.num_folds}"
            )
        validate_positive(self.regression_attempts, "regression_attempts")


@dataclass
class PreprocessorConfig:
    """Configuration of the neural preprocessor feeding the reservoir.

    Attributes:
        feeding_mode: CONTINUOUS time series or independent PATTERNED samples
        boot_cycles: Leading time-series samples whose predictors are dropped
        route_input_to_readout: Append raw input values to the predictors
    """

    feeding_mode: FeedingMode = FeedingMode.CONTINUOUS
    boot_cycles: int = 0
    route_input_to_readout: bool = False

    def __post_init__(self) -> None:
        validate_non_negative(self.boot_cycles, "boot_cycles")
        if self.feeding_mode == FeedingMode.PATTERNED and self.boot_cycles > 0:
            raise ConfigurationError("boot_cycles applies only to continuous feeding")


__all__ = ["ReadoutLayerConfig", "PreprocessorConfig"]
