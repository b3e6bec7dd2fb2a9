"""Repository for managing tree nodes."""

from typing import List, Optional, Sequence, Set, Tuple

from loguru import logger
from sqlalchemy import delete, func, literal, or_, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from treetable import db
from treetable.models.tree import TreeNode
from treetable.repository.repository import Repository


class TreeRepository(Repository[TreeNode]):
    """Repository for TreeNode model."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        """Initialize with session maker."""
        super().__init__(session_maker, TreeNode)

    def filtered(
        self,
        parent_id: Optional[str] = None,
        keyword: Optional[str] = None,
        enabled: Optional[bool] = None,
    ):
        """Build the where clauses shared by page and count queries.

        An empty parent_id selects root nodes, anything else selects the direct
        children of that parent.
        """
        clauses = []
        if parent_id:
            clauses.append(TreeNode.parent_id == parent_id)
        else:
            clauses.append(TreeNode.parent_id.is_(None))

        if keyword:
            clauses.append(
                or_(
                    TreeNode.name.icontains(keyword, autoescape=True),
                    TreeNode.code.icontains(keyword, autoescape=True),
                )
            )

        if enabled is not None:
            clauses.append(TreeNode.enabled == enabled)
        return clauses

    async def find_page(
        self,
        parent_id: Optional[str] = None,
        keyword: Optional[str] = None,
        enabled: Optional[bool] = None,
        offset: int = 0,
        limit: int = 20,
    ) -> Tuple[Sequence[TreeNode], int]:
        """Find one page of nodes and the total number of matches."""
        clauses = self.filtered(parent_id, keyword, enabled)

        query = (
            self.select()
            .where(*clauses)
            .order_by(TreeNode.sort_id, TreeNode.name, TreeNode.id)
            .offset(offset)
            .limit(limit)
        )
        result = await self.execute_query(query)
        rows = result.scalars().all()

        total = await self.count(self.select(func.count()).select_from(TreeNode).where(*clauses))
        logger.debug(
            f"Found {len(rows)} of {total} nodes (parent_id={parent_id!r}, offset={offset}, limit={limit})"
        )
        return rows, total

    async def find_children(self, parent_id: str, limit: int) -> Sequence[TreeNode]:
        """Find the direct children of a node."""
        rows, _ = await self.find_page(parent_id=parent_id, limit=limit)
        return rows

    async def find_ids_with_children(self, ids: List[str]) -> Set[str]:
        """Return the subset of ids that have at least one child."""
        if not ids:
            return set()

        query = self.select(TreeNode.parent_id).where(TreeNode.parent_id.in_(ids)).distinct()
        result = await self.execute_query(query, use_query_options=False)
        return set(result.scalars().all())

    async def move_subtree(self, old_path: str, new_path: str, level_delta: int) -> int:
        """Rewrite path and level of every node under old_path.

        The node owning old_path is expected to be updated by the caller.
        """
        logger.debug(f"Moving subtree '{old_path}' -> '{new_path}' (level delta {level_delta})")
        async with db.scoped_session(self.session_maker) as session:
            query = (
                update(TreeNode)
                .where(TreeNode.path.startswith(old_path, autoescape=True), TreeNode.path != old_path)
                .values(
                    path=literal(new_path).concat(func.substr(TreeNode.path, len(old_path) + 1)),
                    level=TreeNode.level + level_delta,
                )
                .execution_options(synchronize_session=False)
            )
            result = await session.execute(query)
            return result.rowcount

    async def delete_subtrees(self, ids: List[str]) -> int:
        """Delete the given nodes together with all of their descendants."""
        nodes = await self.find_by_ids(ids)
        if not nodes:
            return 0

        in_subtrees = or_(
            *[TreeNode.path.startswith(node.path, autoescape=True) for node in nodes]
        )
        deleted = await self.count(self.select(func.count()).select_from(TreeNode).where(in_subtrees))

        async with db.scoped_session(self.session_maker) as session:
            query = delete(TreeNode).where(in_subtrees).execution_options(synchronize_session=False)
            await session.execute(query)
        logger.debug(f"Deleted {deleted} nodes for ids: {ids}")
        return deleted

    async def set_enabled(self, ids: List[str], enabled: bool) -> int:
        """Enable or disable the given nodes."""
        if not ids:
            return 0

        async with db.scoped_session(self.session_maker) as session:
            query = (
                update(TreeNode)
                .where(TreeNode.id.in_(ids))
                .values(enabled=enabled)
                .execution_options(synchronize_session=False)
            )
            result = await session.execute(query)
            logger.debug(f"Set enabled={enabled} on {result.rowcount} nodes")
            return result.rowcount
