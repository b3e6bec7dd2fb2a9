"""Models package for treetable."""

from treetable.models.base import Base
from treetable.models.tree import TreeNode

__all__ = [
    "Base",
    "TreeNode",
]
