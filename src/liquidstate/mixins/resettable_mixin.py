"""
Resettable State Mixin for reservoir components.

Neurons and synapses are allocated once per reservoir build and then reused
for every training pass and inference run. Reset restores the dynamic state
without reallocation and, optionally, clears the running statistics.
"""

from __future__ import annotations

from typing import Iterable


class ResettableMixin:
    """Mixin for components with resettable state.

    Usage:
        class MyNeuron(ResettableMixin):
            def reset(self, statistics: bool = False) -> None:
                self._output = 0.0
                if statistics:
                    self.reset_statistics(["stimuli_stat", "output_stat"])
    """

    def reset(self, statistics: bool = False) -> None:
        """Reset dynamic state to the initial values.

        Args:
            statistics: Also clear accumulated statistics

        Note:
            Must be idempotent: calling reset twice leaves the same state as
            calling it once.
        """
        raise NotImplementedError(
            f"{self.__class__.__name__} must implement reset()"
        )

    def reset_statistics(self, stat_attrs: Iterable[str]) -> None:
        """Helper to reset the named statistics accumulators.

        Every named attribute must exist and expose reset().
        """
        for attr in stat_attrs:
            getattr(self, attr).reset()


__all__ = ["ResettableMixin"]
