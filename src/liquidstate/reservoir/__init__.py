"""
Reservoir: cycle driver, topology builder and neural preprocessor.
"""

from __future__ import annotations

from liquidstate.reservoir.builder import ReservoirBuilder, build_reservoir
from liquidstate.reservoir.preprocessor import NeuralPreprocessor
from liquidstate.reservoir.reservoir import PoolStatistics, Reservoir, ReservoirStatistics

__all__ = [
    "Reservoir",
    "ReservoirStatistics",
    "PoolStatistics",
    "ReservoirBuilder",
    "build_reservoir",
    "NeuralPreprocessor",
]
