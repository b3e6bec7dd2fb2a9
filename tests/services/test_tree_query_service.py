"""Tests for TreeQueryService."""

import pytest

from treetable.schemas import LoadMode, LoadOperation, TreePageResult, TreeQuery
from treetable.services import TreeQueryService, TreeService
from treetable.services.exceptions import TreeNodeNotFoundError
from treetable.services.load_options import ResolvedOptions

pytestmark = pytest.mark.asyncio


def ids(nodes):
    return [node.id for node in nodes]


def sync_options(**kwargs) -> ResolvedOptions:
    return ResolvedOptions(load_mode=LoadMode.SYNC, **kwargs)


def async_options(**kwargs) -> ResolvedOptions:
    return ResolvedOptions(load_mode=LoadMode.ASYNC, **kwargs)


class RecordingReader:
    """Wraps a reader and records the order of calls."""

    def __init__(self, reader: TreeService, events: list):
        self.reader = reader
        self.events = events

    async def get_by_id(self, node_id):
        self.events.append(("get_by_id", node_id))
        return await self.reader.get_by_id(node_id)

    async def query_page(self, query, max_page_size):
        self.events.append(("query_page", query.parent_id))
        return await self.reader.query_page(query, max_page_size)

    async def get_ancestor_chain(self, node_id):
        self.events.append(("get_ancestor_chain", node_id))
        return await self.reader.get_ancestor_chain(node_id)


async def test_sync_query_returns_top_level_nodes(tree_service, sample_tree):
    service = TreeQueryService(tree_service, sync_options())

    result = await service.query(TreeQuery())

    assert ids(result.items) == ["1", "7", "9"]
    assert [node.leaf for node in result.items] == [False, False, True]
    assert all(node.children == [] for node in result.items)
    assert all(not node.expanded for node in result.items)
    assert result.total == 3
    assert result.expand_ids == []
    assert result.auto_expand is False


async def test_sync_query_fetches_full_result_set(tree_service, sample_tree):
    service = TreeQueryService(tree_service, sync_options())

    result = await service.query(TreeQuery(page=2, page_size=1))

    assert ids(result.items) == ["1", "7", "9"]
    assert result.page == 1
    assert result.page_size == 999


async def test_sync_query_bounded_by_max_page_size(tree_service, sample_tree):
    service = TreeQueryService(tree_service, sync_options(max_page_size=2))

    result = await service.query(TreeQuery())

    assert ids(result.items) == ["1", "7"]
    assert result.total == 3


async def test_sync_query_expand_all(tree_service, sample_tree):
    service = TreeQueryService(tree_service, sync_options(is_expand_all=True))

    result = await service.query(TreeQuery())

    assert ids(result.items) == ["1", "7", "9"]
    assert ids(result.walk()) == ["1", "2", "3", "4", "5", "6", "7", "8", "9"]

    company = result.items[0]
    assert ids(company.children) == ["2", "6"]
    engineering = company.children[0]
    assert ids(engineering.children) == ["3", "5"]
    assert ids(engineering.children[0].children) == ["4"]

    for node in result.walk():
        if node.leaf:
            assert node.children == []
            assert not node.expanded
        else:
            assert node.expanded
            assert node.loaded


async def test_sync_query_keyword_filter(tree_service, sample_tree):
    service = TreeQueryService(tree_service, sync_options())

    result = await service.query(TreeQuery(keyword="hold"))

    assert ids(result.items) == ["7"]
    assert result.total == 1


async def test_async_query_returns_one_root_page(tree_service, sample_tree):
    service = TreeQueryService(tree_service, async_options())

    result = await service.query(TreeQuery(page_size=2))

    assert ids(result.items) == ["1", "7"]
    assert result.total == 3
    assert result.page_size == 2
    assert all(node.children == [] for node in result.items)

    second = await service.query(TreeQuery(page=2, page_size=2))
    assert ids(second.items) == ["9"]


async def test_async_query_bounded_by_max_page_size(tree_service, sample_tree):
    service = TreeQueryService(tree_service, async_options(max_page_size=1))

    result = await service.query(TreeQuery(page_size=20))

    assert ids(result.items) == ["1"]
    assert result.page_size == 1


async def test_async_query_ignores_expand_all(tree_service, sample_tree):
    service = TreeQueryService(tree_service, async_options(is_expand_all=True))

    result = await service.query(TreeQuery())

    assert all(node.children == [] for node in result.items)


async def test_async_first_load_expands_path_to_load_keys(tree_service, sample_tree):
    options = async_options(is_first_load=True, load_keys=("4", "8"))
    service = TreeQueryService(tree_service, options)

    result = await service.query(TreeQuery())

    # union of the ancestor chains of 4 (1, 2, 3) and 8 (7), root first
    assert result.expand_ids == ["1", "2", "3", "7"]
    assert ids(result.items) == ["1", "7", "9"]

    company, holding, archive = result.items
    assert company.expanded and company.loaded
    assert ids(company.children) == ["2", "6"]

    engineering, sales = company.children
    assert engineering.expanded
    assert ids(engineering.children) == ["3", "5"]
    assert not sales.expanded
    assert sales.children == []

    backend, frontend = engineering.children
    assert backend.expanded
    assert ids(backend.children) == ["4"]
    assert not frontend.expanded

    assert holding.expanded
    assert ids(holding.children) == ["8"]
    assert not archive.expanded


async def test_async_first_load_shared_ancestors_listed_once(tree_service, sample_tree):
    options = async_options(is_first_load=True, load_keys=("4", "5", "3"))
    service = TreeQueryService(tree_service, options)

    result = await service.query(TreeQuery())

    assert result.expand_ids == ["1", "2", "3"]


async def test_async_first_load_root_key_has_no_ancestors(tree_service, sample_tree):
    options = async_options(is_first_load=True, load_keys=("9",))
    service = TreeQueryService(tree_service, options)

    result = await service.query(TreeQuery())

    assert result.expand_ids == []
    assert all(not node.expanded for node in result.items)


async def test_async_query_not_first_load_skips_load_keys(tree_service, sample_tree):
    options = async_options(is_first_load=False, load_keys=("4",))
    service = TreeQueryService(tree_service, options)

    result = await service.query(TreeQuery())

    assert result.expand_ids == []
    assert all(node.children == [] for node in result.items)


async def test_async_first_load_missing_key_fails_whole_request(tree_service, sample_tree):
    options = async_options(is_first_load=True, load_keys=("4", "missing"))
    service = TreeQueryService(tree_service, options)

    with pytest.raises(TreeNodeNotFoundError):
        await service.query(TreeQuery())


@pytest.mark.parametrize("load_mode", [LoadMode.SYNC, LoadMode.ASYNC])
async def test_load_children_returns_one_level(tree_service, sample_tree, load_mode):
    options = ResolvedOptions(load_mode=load_mode, is_expand_all=True)
    service = TreeQueryService(tree_service, options)

    result = await service.query(TreeQuery(parent_id="2"))

    assert ids(result.items) == ["3", "5"]
    assert [node.leaf for node in result.items] == [False, True]
    # expand all has no effect when loading children
    assert all(node.children == [] for node in result.items)
    assert result.expand_ids == []


async def test_load_children_bounded_by_max_page_size(tree_service, sample_tree):
    service = TreeQueryService(tree_service, async_options(max_page_size=1))

    result = await service.query(TreeQuery(parent_id="2", page_size=50))

    assert ids(result.items) == ["3"]
    assert result.total == 2
    assert result.page_size == 1


async def test_load_children_of_root_auto_expands(tree_service, sample_tree):
    service = TreeQueryService(tree_service, async_options())

    result = await service.query(TreeQuery(parent_id="1"))

    assert ids(result.items) == ["2", "6"]
    assert result.auto_expand is True


async def test_load_children_of_root_expand_disabled(tree_service, sample_tree):
    service = TreeQueryService(tree_service, async_options(is_expand_for_root_async=False))

    result = await service.query(TreeQuery(parent_id="1"))

    assert result.auto_expand is False


async def test_load_children_of_non_root_never_auto_expands(tree_service, sample_tree):
    service = TreeQueryService(tree_service, async_options())

    result = await service.query(TreeQuery(parent_id="2"))

    assert result.auto_expand is False


async def test_load_children_sync_never_auto_expands(tree_service, sample_tree):
    service = TreeQueryService(tree_service, sync_options())

    result = await service.query(TreeQuery(parent_id="1"))

    assert result.auto_expand is False


async def test_load_children_of_missing_parent_is_empty(tree_service, sample_tree):
    service = TreeQueryService(tree_service, async_options())

    result = await service.query(TreeQuery(parent_id="missing"))

    assert result.items == []
    assert result.total == 0
    assert result.auto_expand is False


async def test_query_is_idempotent(tree_service, sample_tree):
    options = async_options(is_first_load=True, load_keys=("4",))

    first = await TreeQueryService(tree_service, options).query(TreeQuery())
    second = await TreeQueryService(tree_service, options).query(TreeQuery())

    assert first.model_dump() == second.model_dump()


async def test_query_before_runs_before_reader_and_after_runs_last(tree_service, sample_tree):
    events = []
    reader = RecordingReader(tree_service, events)

    def before(query: TreeQuery):
        events.append(("before", query.parent_id))
        query.keyword = "comp"

    def after(result: TreePageResult, query: TreeQuery):
        events.append(("after", len(result.items)))

    service = TreeQueryService(
        reader,
        async_options(is_first_load=True, load_keys=("3",)),
        query_before=before,
        query_after=after,
    )

    result = await service.query(TreeQuery())

    assert ids(result.items) == ["1"]
    assert events[0] == ("before", None)
    assert events[-1] == ("after", 1)
    assert ("get_ancestor_chain", "3") in events


async def test_query_after_can_change_result(tree_service, sample_tree):
    def after(result: TreePageResult, query: TreeQuery):
        result.items = [node for node in result.items if node.enabled]

    service = TreeQueryService(tree_service, sync_options(), query_after=after)

    result = await service.query(TreeQuery())

    assert ids(result.items) == ["1", "7"]


async def test_query_before_cannot_change_resolved_operation(tree_service, sample_tree):
    events = []
    reader = RecordingReader(tree_service, events)

    def before(query: TreeQuery):
        query.parent_id = "2"

    service = TreeQueryService(
        reader, async_options(), operation=LoadOperation.QUERY, query_before=before
    )

    result = await service.query(TreeQuery())

    # still handled as a root query: no parent lookup for auto expansion
    assert ("get_by_id", "2") not in events
    assert result.auto_expand is False
    assert ids(result.items) == ["3", "5"]


async def test_empty_tree(tree_service):
    service = TreeQueryService(tree_service, sync_options(is_expand_all=True))

    result = await service.query(TreeQuery())

    assert result.items == []
    assert result.total == 0
