"""Dependency injection functions for treetable services."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    AsyncEngine,
    async_sessionmaker,
)

from treetable import db
from treetable.config import TreeTableConfig, config
from treetable.repository.tree_repository import TreeRepository
from treetable.services.tree_handler import TreeHandler, TreeHooks
from treetable.services.tree_service import TreeService


## config


def get_config() -> TreeTableConfig:
    return config


ConfigDep = Annotated[TreeTableConfig, Depends(get_config)]


## sqlalchemy


async def get_engine_factory(
    app_config: ConfigDep,
) -> tuple[AsyncEngine, async_sessionmaker[AsyncSession]]:
    """Get engine and session maker."""
    return await db.get_or_create_db(app_config.database_path)


EngineFactoryDep = Annotated[
    tuple[AsyncEngine, async_sessionmaker[AsyncSession]], Depends(get_engine_factory)
]


async def get_session_maker(engine_factory: EngineFactoryDep) -> async_sessionmaker[AsyncSession]:
    """Get session maker."""
    _, session_maker = engine_factory
    return session_maker


SessionMakerDep = Annotated[async_sessionmaker, Depends(get_session_maker)]


## repositories


async def get_tree_repository(
    session_maker: SessionMakerDep,
) -> TreeRepository:
    """Create a TreeRepository instance."""
    return TreeRepository(session_maker)


TreeRepositoryDep = Annotated[TreeRepository, Depends(get_tree_repository)]


## services


async def get_tree_service(tree_repository: TreeRepositoryDep) -> TreeService:
    """Create TreeService with repository."""
    return TreeService(tree_repository)


TreeServiceDep = Annotated[TreeService, Depends(get_tree_service)]


def get_tree_hooks() -> TreeHooks:
    """Hooks run around tree operations. Override to customize."""
    return TreeHooks()


TreeHooksDep = Annotated[TreeHooks, Depends(get_tree_hooks)]


async def get_tree_handler(
    tree_service: TreeServiceDep,
    hooks: TreeHooksDep,
    app_config: ConfigDep,
) -> TreeHandler:
    """Create TreeHandler with dependencies."""
    return TreeHandler(tree_service, hooks=hooks, max_page_size=app_config.max_page_size)


TreeHandlerDep = Annotated[TreeHandler, Depends(get_tree_handler)]
