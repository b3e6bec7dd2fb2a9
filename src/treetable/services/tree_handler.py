"""Validate-then-delegate handlers for tree endpoints."""

from dataclasses import dataclass
from typing import Callable, Mapping, Optional

from loguru import logger

from treetable.schemas.base import is_empty
from treetable.schemas.request import TreeNodeCreate, TreeNodeUpdate, TreeQuery
from treetable.schemas.response import TreeResult
from treetable.services.exceptions import TreeValidationError
from treetable.services.load_options import get_max_page_size, get_operation, resolve_options
from treetable.services.tree_query_service import QueryAfter, QueryBefore, TreeQueryService
from treetable.services.tree_service import TreeReader

REQUEST_EMPTY = "request empty"
ID_EMPTY = "id empty"

IdsHook = Callable[[str], None]


@dataclass
class TreeHooks:
    """Callbacks run around tree operations. Any of them may be left out."""

    create_before: Optional[Callable[[TreeNodeCreate], None]] = None
    update_before: Optional[Callable[[TreeNodeUpdate], None]] = None
    delete_before: Optional[IdsHook] = None
    enable_before: Optional[IdsHook] = None
    disable_before: Optional[IdsHook] = None
    query_before: Optional[QueryBefore] = None
    query_after: Optional[QueryAfter] = None


class TreeHandler:
    """CRUD and tree query operations returning result envelopes.

    Requests that fail validation come back as failure envelopes without the
    reader being called. Errors raised by the reader propagate to the caller.
    """

    def __init__(
        self,
        reader: TreeReader,
        hooks: Optional[TreeHooks] = None,
        max_page_size: Optional[int] = None,
    ):
        self.reader = reader
        self.hooks = hooks or TreeHooks()
        self.max_page_size = get_max_page_size(max_page_size)

    async def get(self, node_id: str) -> TreeResult:
        # a miss is success(None)
        return TreeResult.ok(await self.reader.get_by_id(node_id))

    async def create(self, request: Optional[TreeNodeCreate]) -> TreeResult:
        try:
            self.validate_create(request)
        except TreeValidationError as e:
            logger.warning(f"Rejected create: {e.message}")
            return TreeResult.fail(e.message)

        if self.hooks.create_before:
            self.hooks.create_before(request)
        node_id = await self.reader.create(request)
        return TreeResult.ok(await self.reader.get_by_id(node_id))

    async def update(self, node_id: Optional[str], request: Optional[TreeNodeUpdate]) -> TreeResult:
        try:
            self.validate_update(node_id, request)
        except TreeValidationError as e:
            logger.warning(f"Rejected update of {node_id!r}: {e.message}")
            return TreeResult.fail(e.message)

        if is_empty(request.id):
            request.id = node_id
        if self.hooks.update_before:
            self.hooks.update_before(request)
        await self.reader.update(request)
        return TreeResult.ok(await self.reader.get_by_id(request.id))

    async def delete(self, ids: str) -> TreeResult:
        if self.hooks.delete_before:
            self.hooks.delete_before(ids)
        await self.reader.delete(ids)
        return TreeResult.ok()

    async def enable(self, ids: str) -> TreeResult:
        if self.hooks.enable_before:
            self.hooks.enable_before(ids)
        await self.reader.enable(ids)
        return TreeResult.ok()

    async def disable(self, ids: str) -> TreeResult:
        if self.hooks.disable_before:
            self.hooks.disable_before(ids)
        await self.reader.disable(ids)
        return TreeResult.ok()

    async def query(self, query: TreeQuery, params: Mapping[str, str]) -> TreeResult:
        service = TreeQueryService(
            self.reader,
            resolve_options(params, query, self.max_page_size),
            get_operation(query),
            self.hooks.query_before,
            self.hooks.query_after,
        )
        return TreeResult.ok(await service.query(query))

    @staticmethod
    def validate_create(request: Optional[TreeNodeCreate]) -> None:
        if request is None:
            raise TreeValidationError(REQUEST_EMPTY)

    @staticmethod
    def validate_update(node_id: Optional[str], request: Optional[TreeNodeUpdate]) -> None:
        if request is None:
            raise TreeValidationError(REQUEST_EMPTY)
        if is_empty(node_id) and is_empty(request.id):
            raise TreeValidationError(ID_EMPTY)
