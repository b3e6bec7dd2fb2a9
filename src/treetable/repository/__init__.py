from .tree_repository import TreeRepository

__all__ = ["TreeRepository"]
