"""Resolve tree loading flags from request parameters.

Every flag has a default and unrecognized values silently fall back to it, so
clients can omit any parameter they don't care about.

Parameters read:
- loadMode: Sync or Async, any case (default Sync)
- is_search: "false" marks the first load of a tree
- is_expand_all: "true" expands every node of a sync query
- is_expand_for_root_async: "false" keeps children of root nodes collapsed
- load_keys: comma separated ids whose ancestors are opened on first load
"""

from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from loguru import logger

from treetable.schemas.base import LoadMode, LoadOperation, is_empty
from treetable.schemas.request import TreeQuery

DEFAULT_MAX_PAGE_SIZE = 999

Params = Mapping[str, str]


@dataclass(frozen=True)
class ResolvedOptions:
    """Loading flags for a single tree request."""

    load_mode: LoadMode = LoadMode.SYNC
    is_first_load: bool = False
    is_expand_all: bool = False
    is_expand_for_root_async: bool = True
    load_keys: Tuple[str, ...] = ()
    max_page_size: int = DEFAULT_MAX_PAGE_SIZE


def _param(params: Params, name: str) -> str:
    value = params.get(name)
    return "" if value is None else str(value)


def get_max_page_size(default: Optional[int] = None) -> int:
    """Largest page a tree query may return. Set by the host, never by the request."""
    return default or DEFAULT_MAX_PAGE_SIZE


def get_load_mode(params: Params) -> LoadMode:
    try:
        return LoadMode(_param(params, "loadMode"))
    except ValueError:
        return LoadMode.SYNC


def is_first_load(params: Params) -> bool:
    # a client that is not searching is rendering the tree for the first time
    return _param(params, "is_search") == "false"


def is_expand_all(params: Params) -> bool:
    return _param(params, "is_expand_all") == "true"


def is_expand_for_root_async(params: Params) -> bool:
    return _param(params, "is_expand_for_root_async") != "false"


def get_load_keys(params: Params, query: Optional[TreeQuery] = None) -> str:
    return _param(params, "load_keys")


def split_ids(ids: Optional[str]) -> Tuple[str, ...]:
    """Split a comma separated id list, dropping blanks and repeats.

    Examples:
        >>> split_ids("5, 9,,5")
        ('5', '9')
    """
    if not ids:
        return ()
    parts = (part.strip() for part in ids.split(","))
    return tuple(dict.fromkeys(part for part in parts if part))


def get_operation(query: TreeQuery) -> LoadOperation:
    if is_empty(query.parent_id):
        return LoadOperation.QUERY
    return LoadOperation.LOAD_CHILDREN


def resolve_options(
    params: Params,
    query: Optional[TreeQuery] = None,
    max_page_size: Optional[int] = None,
) -> ResolvedOptions:
    """Read every loading flag from the request parameters."""
    options = ResolvedOptions(
        load_mode=get_load_mode(params),
        is_first_load=is_first_load(params),
        is_expand_all=is_expand_all(params),
        is_expand_for_root_async=is_expand_for_root_async(params),
        load_keys=split_ids(get_load_keys(params, query)),
        max_page_size=get_max_page_size(max_page_size),
    )
    logger.debug(f"Resolved tree options: {options}")
    return options
