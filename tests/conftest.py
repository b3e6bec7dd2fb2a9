"""Common test fixtures."""

from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from treetable import db
from treetable.config import TreeTableConfig
from treetable.db import DatabaseType
from treetable.repository.tree_repository import TreeRepository
from treetable.schemas import TreeNodeCreate
from treetable.services import TreeHandler, TreeService


@pytest.fixture
def config_home(tmp_path, monkeypatch) -> Path:
    # Keep every test away from the real home directory
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("TREETABLE_HOME", str(tmp_path / "treetable"))
    return tmp_path


@pytest.fixture
def app_config(config_home) -> TreeTableConfig:
    """Create test app configuration."""
    return TreeTableConfig(home=config_home / "treetable", max_page_size=999)


@pytest_asyncio.fixture(scope="function")
async def engine_factory(
    app_config,
) -> AsyncGenerator[tuple[AsyncEngine, async_sessionmaker[AsyncSession]], None]:
    """Create a fresh in-memory database for each test."""
    async with db.engine_session_factory(
        db_path=app_config.database_path, db_type=DatabaseType.MEMORY
    ) as (engine, session_maker):
        yield engine, session_maker


@pytest_asyncio.fixture
async def session_maker(engine_factory) -> async_sessionmaker[AsyncSession]:
    """Get session maker for tests."""
    _, session_maker = engine_factory
    return session_maker


## Repositories


@pytest_asyncio.fixture(scope="function")
async def tree_repository(session_maker: async_sessionmaker[AsyncSession]) -> TreeRepository:
    """Create a TreeRepository instance."""
    return TreeRepository(session_maker)


## Services


@pytest_asyncio.fixture
async def tree_service(tree_repository: TreeRepository) -> TreeService:
    """Create TreeService."""
    return TreeService(tree_repository)


@pytest_asyncio.fixture
async def tree_handler(tree_service: TreeService, app_config: TreeTableConfig) -> TreeHandler:
    """Create TreeHandler without hooks."""
    return TreeHandler(tree_service, max_page_size=app_config.max_page_size)


async def create_nodes(tree_service: TreeService, nodes: list[dict]) -> dict[str, str]:
    ids = {}
    for node in nodes:
        node_id = await tree_service.create(TreeNodeCreate(**node))
        ids[node["name"]] = node_id
    return ids


@pytest_asyncio.fixture
async def sample_tree(tree_service: TreeService) -> dict[str, str]:
    """Create a small org chart and return a mapping of name -> id.

    Company (1)
    ├── Engineering (2)
    │   ├── Backend (3)
    │   │   └── Platform (4)
    │   └── Frontend (5)
    └── Sales (6)
    Holding (7)
    └── Finance (8)
    Archive (9)
    """
    return await create_nodes(
        tree_service,
        [
            {"id": "1", "name": "Company", "code": "co", "sort_id": 1},
            {"id": "2", "parent_id": "1", "name": "Engineering", "code": "eng", "sort_id": 1},
            {"id": "3", "parent_id": "2", "name": "Backend", "sort_id": 1},
            {"id": "4", "parent_id": "3", "name": "Platform", "sort_id": 1},
            {"id": "5", "parent_id": "2", "name": "Frontend", "sort_id": 2},
            {"id": "6", "parent_id": "1", "name": "Sales", "sort_id": 2},
            {"id": "7", "name": "Holding", "sort_id": 2},
            {"id": "8", "parent_id": "7", "name": "Finance", "sort_id": 1},
            {"id": "9", "name": "Archive", "sort_id": 3, "enabled": False},
        ],
    )
