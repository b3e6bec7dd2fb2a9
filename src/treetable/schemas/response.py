"""Response schemas for tree operations.

Nodes carry the flags a tree widget needs to render them:

1. leaf - the node has no children, so no expand toggle is shown
2. expanded - the node should be rendered open
3. loaded - the node's children are already inlined in `children`
"""

import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict


class SQLAlchemyModel(BaseModel):
    """Base class for models that read from SQLAlchemy attributes."""

    model_config = ConfigDict(from_attributes=True)


class TreeNodeResponse(SQLAlchemyModel):
    """A tree node as returned to clients.

    Example Response:
    {
        "id": "3",
        "parent_id": "1",
        "path": "1,3,",
        "level": 2,
        "name": "Engineering",
        "enabled": true,
        "leaf": false,
        "expanded": false,
        "loaded": false,
        "children": []
    }
    """

    id: str
    parent_id: Optional[str] = None
    path: str = ""
    level: int = 1
    name: str
    code: Optional[str] = None
    sort_id: Optional[int] = None
    enabled: bool = True
    remark: Optional[str] = None
    created_at: Optional[datetime.datetime] = None
    updated_at: Optional[datetime.datetime] = None

    leaf: bool = True
    expanded: bool = False
    loaded: bool = False
    children: List["TreeNodeResponse"] = []

    @property
    def is_root(self) -> bool:
        return not self.parent_id


class TreePageResult(BaseModel):
    """One page of tree nodes.

    expand_ids lists the nodes a client should open on first render, root first.
    auto_expand tells the client to render a freshly loaded children page open.
    """

    items: List[TreeNodeResponse] = []
    total: int = 0
    page: int = 1
    page_size: int = 0
    expand_ids: List[str] = []
    auto_expand: bool = False

    def walk(self):
        """Yield every node in the page, depth first."""
        stack = list(reversed(self.items))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


class TreeResult(BaseModel):
    """Response envelope: success with an optional payload, or failure with a message."""

    success: bool = True
    message: Optional[str] = None
    data: Optional[Any] = None

    @classmethod
    def ok(cls, data: Any = None) -> "TreeResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, message: str) -> "TreeResult":
        return cls(success=False, message=message)
