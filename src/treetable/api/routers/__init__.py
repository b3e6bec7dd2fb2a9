"""API routers."""

from . import tree_router as tree

__all__ = ["tree"]
