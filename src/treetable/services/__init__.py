"""Services package."""

from .service import BaseService
from .tree_service import TreeReader, TreeService
from .tree_query_service import TreeQueryService
from .tree_handler import TreeHandler, TreeHooks

__all__ = [
    "BaseService",
    "TreeReader",
    "TreeService",
    "TreeQueryService",
    "TreeHandler",
    "TreeHooks",
]
