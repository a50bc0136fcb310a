"""Mixin classes for reservoir components.

Available Mixins:
- ResettableMixin: Standard interface for resetting component state
"""

from liquidstate.mixins.resettable_mixin import ResettableMixin

__all__ = [
    'ResettableMixin',
]
