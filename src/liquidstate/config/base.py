"""
Base Configuration Classes.

This module provides the base configuration class with the fields every
component configuration shares. All specific configs inherit from it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np
import torch

from liquidstate.errors import ConfigurationError


@dataclass
class BaseConfig:
    """Base configuration with common fields for all components.

    This provides standard fields that appear in almost every config:
    - dtype: Tensor data type for predictors and readout networks
    - seed: Random seed for reproducibility
    """

    dtype: str = "float64"
    """Data type for tensors: 'float32' or 'float64'."""

    seed: Optional[int] = None
    """Random seed for reproducibility. None = nondeterministic."""

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        """Validate configuration values. Subclasses extend this."""
        if self.dtype not in ("float32", "float64"):
            raise ConfigurationError(
                f"Unknown dtype '{self.dtype}'. Choose from: ['float32', 'float64']"
            )

    def get_torch_dtype(self) -> torch.dtype:
        """Get PyTorch dtype object."""
        return torch.float64 if self.dtype == "float64" else torch.float32

    def make_generator(self) -> np.random.Generator:
        """Create the seeded random source for this component."""
        return np.random.default_rng(self.seed)


__all__ = ["BaseConfig"]
