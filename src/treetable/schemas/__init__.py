"""Tree schema exports.

Rather than importing from individual schema files, you can
import everything from treetable.schemas.
"""

from treetable.schemas.base import LoadMode, LoadOperation, NodeId, ParentId
from treetable.schemas.request import TreeNodeCreate, TreeNodeUpdate, TreeQuery
from treetable.schemas.response import (
    SQLAlchemyModel,
    TreeNodeResponse,
    TreePageResult,
    TreeResult,
)

__all__ = [
    # Base
    "LoadMode",
    "LoadOperation",
    "NodeId",
    "ParentId",
    # Requests
    "TreeNodeCreate",
    "TreeNodeUpdate",
    "TreeQuery",
    # Responses
    "SQLAlchemyModel",
    "TreeNodeResponse",
    "TreePageResult",
    "TreeResult",
]
