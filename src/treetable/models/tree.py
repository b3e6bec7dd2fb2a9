"""Tree node model."""

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from treetable.models.base import Base

PATH_SEPARATOR = ","


def generate_id() -> str:
    return uuid.uuid4().hex


def build_path(node_id: str, parent_path: Optional[str] = None) -> str:
    """Build the materialized path of a node.

    Paths list every id from the root down to the node itself, each followed by
    a separator, so a subtree can be selected with a single prefix match.

    Examples:
        >>> build_path("a")
        'a,'
        >>> build_path("c", "a,b,")
        'a,b,c,'
    """
    return f"{parent_path or ''}{node_id}{PATH_SEPARATOR}"


def split_path(path: Optional[str]) -> List[str]:
    """Split a materialized path into its ids, root first."""
    if not path:
        return []
    return [part for part in path.split(PATH_SEPARATOR) if part]


class TreeNode(Base):
    """
    A node in a tree of records.

    Each node:
    - Has a unique string ID
    - Points at its parent, or at nothing when it is a root
    - Keeps a materialized path and level in step with its position
    - Can be enabled or disabled without being removed
    """

    __tablename__ = "tree_node"
    __table_args__ = (
        Index("ix_tree_node_parent_id", "parent_id"),
        Index("ix_tree_node_path", "path"),
        Index("ix_tree_node_sort", "sort_id", "name"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=generate_id)
    parent_id: Mapped[Optional[str]] = mapped_column(
        String(64), ForeignKey("tree_node.id", ondelete="CASCADE"), nullable=True
    )
    path: Mapped[str] = mapped_column(Text, default="")
    level: Mapped[int] = mapped_column(Integer, default=1)

    name: Mapped[str] = mapped_column(String(200))
    code: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    sort_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    enabled: Mapped[bool] = mapped_column(Boolean, default=True)
    remark: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    @property
    def is_root(self) -> bool:
        return not self.parent_id

    @property
    def ancestor_ids(self) -> List[str]:
        """Ids of every ancestor, root first, excluding this node."""
        return [node_id for node_id in split_path(self.path) if node_id != self.id]

    def __repr__(self) -> str:
        return f"TreeNode(id={self.id!r}, parent_id={self.parent_id!r}, name={self.name!r}, level={self.level})"
