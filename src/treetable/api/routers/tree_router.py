"""Router for tree node operations."""

from typing import Annotated, Optional

from fastapi import APIRouter, Body, Query, Request, Response
from loguru import logger

from treetable.deps import TreeHandlerDep
from treetable.schemas import TreeNodeCreate, TreeNodeUpdate, TreeQuery, TreeResult

router = APIRouter(prefix="/tree", tags=["tree"])

IdsQuery = Annotated[str, Query(description="Comma separated node ids")]


def with_status(result: TreeResult, response: Response) -> TreeResult:
    """Map failure envelopes onto a 400 response."""
    if not result.success:
        response.status_code = 400
    return result


## Read endpoints


@router.get("/nodes", response_model=TreeResult)
async def query_nodes(
    request: Request,
    handler: TreeHandlerDep,
    query: Annotated[TreeQuery, Query()],
) -> TreeResult:
    """Query a tree.

    Besides the filters, the loading flags loadMode, is_search, is_expand_all,
    is_expand_for_root_async and load_keys are read from the query string.
    """
    logger.info(
        "API request", endpoint="query_nodes", parent_id=query.parent_id, page=query.page
    )
    result = await handler.query(query, request.query_params)
    logger.info("API response", endpoint="query_nodes", total=result.data.total)
    return result


@router.get("/nodes/{node_id}", response_model=TreeResult)
async def get_node(node_id: str, handler: TreeHandlerDep) -> TreeResult:
    """Get a node by id. A missing node is returned as a null payload."""
    return await handler.get(node_id)


## Write endpoints


@router.post("/nodes", response_model=TreeResult)
async def create_node(
    response: Response,
    handler: TreeHandlerDep,
    data: Annotated[Optional[TreeNodeCreate], Body()] = None,
) -> TreeResult:
    logger.info("API request", endpoint="create_node", parent_id=data.parent_id if data else None)
    return with_status(await handler.create(data), response)


@router.put("/nodes", response_model=TreeResult)
@router.put("/nodes/{node_id}", response_model=TreeResult)
async def update_node(
    response: Response,
    handler: TreeHandlerDep,
    node_id: Optional[str] = None,
    data: Annotated[Optional[TreeNodeUpdate], Body()] = None,
) -> TreeResult:
    """Update a node. The id may be given in the path, the body, or both; the body wins."""
    logger.info("API request", endpoint="update_node", node_id=node_id)
    return with_status(await handler.update(node_id, data), response)


@router.delete("/nodes", response_model=TreeResult)
async def delete_nodes(ids: IdsQuery, handler: TreeHandlerDep) -> TreeResult:
    """Delete nodes together with their descendants."""
    logger.info("API request", endpoint="delete_nodes", ids=ids)
    return await handler.delete(ids)


@router.post("/nodes/enable", response_model=TreeResult)
async def enable_nodes(ids: IdsQuery, handler: TreeHandlerDep) -> TreeResult:
    logger.info("API request", endpoint="enable_nodes", ids=ids)
    return await handler.enable(ids)


@router.post("/nodes/disable", response_model=TreeResult)
async def disable_nodes(ids: IdsQuery, handler: TreeHandlerDep) -> TreeResult:
    logger.info("API request", endpoint="disable_nodes", ids=ids)
    return await handler.disable(ids)
