"""Service for loading trees page by page.

A tree query is handled in one of three ways, picked once per request:

1. Load children - the direct children of a parent node, one level only
2. Sync query - the matching root nodes, optionally with every descendant inlined
3. Async query - one page of root nodes; on first load the ancestors of the
   preselected nodes are resolved so the client can open the path to them
"""

from typing import Callable, Iterable, List, Optional

from loguru import logger

from treetable.schemas.base import LoadMode, LoadOperation
from treetable.schemas.request import TreeQuery
from treetable.schemas.response import TreeNodeResponse, TreePageResult
from treetable.services.load_options import ResolvedOptions, get_operation
from treetable.services.tree_service import TreeReader

QueryBefore = Callable[[TreeQuery], None]
QueryAfter = Callable[[TreePageResult, TreeQuery], None]


def assemble(
    page: TreePageResult,
    expand_ids: Iterable[str] = (),
    auto_expand: bool = False,
) -> TreePageResult:
    """Package fetched nodes and their rendering hints into the final page."""
    return page.model_copy(update={"expand_ids": list(expand_ids), "auto_expand": auto_expand})


class TreeQueryService:
    """Runs a single tree query.

    Created per request with the resolved options; holds no state between requests.
    """

    def __init__(
        self,
        reader: TreeReader,
        options: ResolvedOptions,
        operation: Optional[LoadOperation] = None,
        query_before: Optional[QueryBefore] = None,
        query_after: Optional[QueryAfter] = None,
    ):
        self.reader = reader
        self.options = options
        self.operation = operation
        self.query_before = query_before
        self.query_after = query_after

    @property
    def max_page_size(self) -> int:
        return self.options.max_page_size

    async def query(self, query: TreeQuery) -> TreePageResult:
        operation = self.operation or get_operation(query)
        logger.debug(
            f"Tree query operation={operation.value} mode={self.options.load_mode.value} "
            f"parent_id={query.parent_id!r}"
        )

        if self.query_before:
            self.query_before(query)

        if operation == LoadOperation.LOAD_CHILDREN:
            result = await self.load_children(query)
        elif self.options.load_mode == LoadMode.ASYNC:
            result = await self.async_query(query)
        else:
            result = await self.sync_query(query)

        if self.query_after:
            self.query_after(result, query)
        return result

    async def sync_query(self, query: TreeQuery) -> TreePageResult:
        """Fetch every matching root node, expanding all of them when asked to."""
        full_query = query.model_copy(update={"page": 1, "page_size": self.max_page_size})
        page = await self.reader.query_page(full_query, self.max_page_size)

        if self.options.is_expand_all:
            logger.debug(f"Expanding {len(page.items)} root nodes")
            for node in page.items:
                await self.expand_all(node)
        return assemble(page)

    async def async_query(self, query: TreeQuery) -> TreePageResult:
        """Fetch a page of root nodes and, on first load, the path to each load key."""
        page = await self.reader.query_page(query, self.max_page_size)
        if not (self.options.is_first_load and self.options.load_keys):
            return assemble(page)

        expand_ids = await self.resolve_expand_ids(self.options.load_keys)
        await self.expand_path(page.items, set(expand_ids))
        return assemble(page, expand_ids=expand_ids)

    async def load_children(self, query: TreeQuery) -> TreePageResult:
        """Fetch one level of children of query.parent_id."""
        children_query = query.model_copy(update={"page": 1, "page_size": self.max_page_size})
        page = await self.reader.query_page(children_query, self.max_page_size)

        auto_expand = False
        if self.options.load_mode == LoadMode.ASYNC and query.parent_id:
            parent = await self.reader.get_by_id(query.parent_id)
            auto_expand = bool(parent and parent.is_root and self.options.is_expand_for_root_async)
        return assemble(page, auto_expand=auto_expand)

    async def resolve_expand_ids(self, keys: Iterable[str]) -> List[str]:
        """Union of the ancestor chains of every key, root first, without repeats."""
        expand_ids: dict[str, None] = {}
        for key in keys:
            chain = await self.reader.get_ancestor_chain(key)
            logger.debug(f"Ancestor chain for {key}: {chain}")
            expand_ids.update(dict.fromkeys(chain))
        return list(expand_ids)

    async def fetch_level(self, parent_id: str) -> List[TreeNodeResponse]:
        level_query = TreeQuery(parent_id=parent_id, page=1, page_size=self.max_page_size)
        page = await self.reader.query_page(level_query, self.max_page_size)
        return page.items

    async def expand_all(self, node: TreeNodeResponse) -> None:
        if node.leaf:
            return
        node.children = await self.fetch_level(node.id)
        node.expanded = node.loaded = True
        for child in node.children:
            await self.expand_all(child)

    async def expand_path(self, nodes: List[TreeNodeResponse], expand_ids: set[str]) -> None:
        for node in nodes:
            if node.leaf or node.id not in expand_ids:
                continue
            node.children = await self.fetch_level(node.id)
            node.expanded = node.loaded = True
            await self.expand_path(node.children, expand_ids)
