"""Request schemas for tree operations."""

from typing import Annotated, Optional

from annotated_types import MaxLen, MinLen
from pydantic import BaseModel, Field

from treetable.schemas.base import NodeId, ParentId

NodeName = Annotated[str, MinLen(1), MaxLen(200)]


class TreeNodeCreate(BaseModel):
    """Create a node.

    The id is generated when it is not supplied. Leaving parent_id empty creates
    a root node.
    """

    id: Optional[NodeId] = None
    parent_id: ParentId = None
    name: NodeName
    code: Optional[str] = None
    sort_id: Optional[int] = None
    enabled: bool = True
    remark: Optional[str] = None


class TreeNodeUpdate(BaseModel):
    """Update a node.

    Only the fields that are sent are changed. Sending a different parent_id
    moves the node together with its subtree; sending an empty one makes it a root.
    name and enabled may be left out but not sent as null.
    """

    id: Optional[str] = ""
    parent_id: ParentId = None
    name: NodeName = None  # pyright: ignore [reportAssignmentType]
    code: Optional[str] = None
    sort_id: Optional[int] = None
    enabled: bool = None  # pyright: ignore [reportAssignmentType]
    remark: Optional[str] = None

    def changes(self) -> dict:
        """Fields explicitly sent by the client, without the id."""
        return self.model_dump(exclude_unset=True, exclude={"id"})


class TreeQuery(BaseModel):
    """Filter and paging parameters for a tree query.

    An empty parent_id asks for root level nodes; any other value asks for the
    direct children of that node.
    """

    parent_id: ParentId = None
    keyword: Optional[str] = None
    enabled: Optional[bool] = None
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size
