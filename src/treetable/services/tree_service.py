"""Service for reading and writing tree nodes."""

from typing import List, Optional, Protocol, Sequence

from loguru import logger

from treetable.models.tree import TreeNode, build_path, generate_id
from treetable.repository.tree_repository import TreeRepository
from treetable.schemas.request import TreeNodeCreate, TreeNodeUpdate, TreeQuery
from treetable.schemas.response import TreeNodeResponse, TreePageResult
from treetable.services.exceptions import TreeNodeNotFoundError, TreeOperationError
from treetable.services.load_options import split_ids
from treetable.services.service import BaseService


class TreeReader(Protocol):
    """Read/write access to stored tree nodes, as used by tree queries and handlers."""

    async def get_by_id(self, node_id: str) -> Optional[TreeNodeResponse]: ...

    async def create(self, request: TreeNodeCreate) -> str: ...

    async def update(self, request: TreeNodeUpdate) -> None: ...

    async def delete(self, ids: str) -> None: ...

    async def enable(self, ids: str) -> None: ...

    async def disable(self, ids: str) -> None: ...

    async def query_page(self, query: TreeQuery, max_page_size: int) -> TreePageResult: ...

    async def get_ancestor_chain(self, node_id: str) -> List[str]: ...


class TreeService(BaseService[TreeRepository]):
    """Tree reader backed by the database.

    Keeps path and level of every node consistent with its parent, so the
    ancestors of a node can be read from its path without walking the tree.
    """

    def __init__(self, tree_repository: TreeRepository):
        super().__init__(tree_repository)

    async def to_responses(self, nodes: Sequence[TreeNode]) -> List[TreeNodeResponse]:
        """Convert rows to responses with the leaf flag filled in."""
        with_children = await self.repository.find_ids_with_children([node.id for node in nodes])
        results = []
        for node in nodes:
            response = TreeNodeResponse.model_validate(node)
            response.leaf = node.id not in with_children
            results.append(response)
        return results

    async def get_by_id(self, node_id: str) -> Optional[TreeNodeResponse]:
        logger.debug(f"Getting tree node by id: {node_id}")
        node = await self.repository.find_by_id(node_id)
        if node is None:
            return None
        responses = await self.to_responses([node])
        return responses[0]

    async def get_node(self, node_id: str) -> TreeNode:
        """Get a node row, raising when it does not exist."""
        node = await self.repository.find_by_id(node_id)
        if node is None:
            raise TreeNodeNotFoundError(f"Tree node not found: {node_id}")
        return node

    async def create(self, request: TreeNodeCreate) -> str:
        """Create a node and return its id."""
        node_id = request.id or generate_id()
        logger.debug(f"Creating tree node {node_id} under parent {request.parent_id!r}")

        parent = await self.get_node(request.parent_id) if request.parent_id else None
        data = request.model_dump()
        data["id"] = node_id
        data["path"] = build_path(node_id, parent.path if parent else None)
        data["level"] = parent.level + 1 if parent else 1

        created = await self.repository.create(data)
        logger.info(f"Created tree node {created.id} at level {created.level}")
        return created.id

    async def update(self, request: TreeNodeUpdate) -> None:
        """Update a node, moving its subtree when the parent changes."""
        node = await self.get_node(request.id)
        changes = request.changes()
        logger.debug(f"Updating tree node {node.id} with {changes}")

        if "parent_id" in changes and changes["parent_id"] != node.parent_id:
            changes.update(await self.move(node, changes["parent_id"]))

        await self.repository.update(node.id, changes)

    async def move(self, node: TreeNode, parent_id: Optional[str]) -> dict:
        """Re-parent a node's descendants and return the node's new path and level."""
        parent = await self.get_node(parent_id) if parent_id else None
        if parent and node.id in [parent.id, *parent.ancestor_ids]:
            raise TreeOperationError(f"Cannot move node {node.id} under itself or its descendant")

        new_path = build_path(node.id, parent.path if parent else None)
        new_level = parent.level + 1 if parent else 1
        moved = await self.repository.move_subtree(node.path, new_path, new_level - node.level)
        logger.info(f"Moved tree node {node.id} to parent {parent_id!r} ({moved} descendants)")
        return {"path": new_path, "level": new_level}

    async def delete(self, ids: str) -> None:
        deleted = await self.repository.delete_subtrees(list(split_ids(ids)))
        logger.info(f"Deleted {deleted} tree nodes for ids: {ids}")

    async def enable(self, ids: str) -> None:
        await self.repository.set_enabled(list(split_ids(ids)), True)

    async def disable(self, ids: str) -> None:
        await self.repository.set_enabled(list(split_ids(ids)), False)

    async def query_page(self, query: TreeQuery, max_page_size: int) -> TreePageResult:
        """Fetch a page of root nodes or of the children of query.parent_id."""
        page_size = min(query.page_size, max_page_size)
        rows, total = await self.repository.find_page(
            parent_id=query.parent_id,
            keyword=query.keyword,
            enabled=query.enabled,
            offset=(query.page - 1) * page_size,
            limit=page_size,
        )
        return TreePageResult(
            items=await self.to_responses(rows),
            total=total,
            page=query.page,
            page_size=page_size,
        )

    async def find_children(self, parent_id: str, max_page_size: int) -> List[TreeNodeResponse]:
        rows = await self.repository.find_children(parent_id, limit=max_page_size)
        return await self.to_responses(rows)

    async def get_ancestor_chain(self, node_id: str) -> List[str]:
        """Ids from the top level ancestor down to the node's parent."""
        node = await self.get_node(node_id)
        return node.ancestor_ids
