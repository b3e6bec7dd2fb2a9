"""Core pydantic types shared by the tree request and response schemas.

Trees are made of nodes that point at their parent. A node without a parent is
a root. Clients load trees in one of two ways:

1. Sync - the whole matching tree is fetched, optionally fully expanded
2. Async - one level is fetched at a time and children are loaded on demand
"""

from enum import Enum
from typing import Annotated, Optional

from annotated_types import MaxLen
from pydantic import BeforeValidator, StringConstraints


def empty_to_none(value: Optional[str]) -> Optional[str]:
    """Treat blank ids the same as missing ones."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


def is_empty(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


class LoadMode(str, Enum):
    """How a tree is loaded by the client.

    Modes are case-insensitive for easier use.
    """

    SYNC = "Sync"
    ASYNC = "Async"

    @classmethod
    def _missing_(cls, value: object) -> Optional["LoadMode"]:
        """Handle case-insensitive lookup."""
        if not isinstance(value, str):
            return None
        for member in cls:
            if member.value.lower() == value.strip().lower():
                return member
        return None


class LoadOperation(str, Enum):
    """What a tree query is asked to do."""

    QUERY = "Query"
    LOAD_CHILDREN = "LoadChildren"


NodeId = Annotated[str, MaxLen(64), StringConstraints(pattern=r"^[^,\s]+$")]
"""Unique identifier of a tree node.

Commas separate ids in paths and id lists, so ids may not contain them or whitespace.
"""

ParentId = Annotated[Optional[NodeId], BeforeValidator(empty_to_none)]
"""Identifier of the parent node, None for root nodes."""
