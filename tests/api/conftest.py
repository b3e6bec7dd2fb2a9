"""Fixtures for API tests."""

from typing import AsyncGenerator

import pytest_asyncio
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport

from treetable.deps import get_config, get_engine_factory


@pytest_asyncio.fixture
async def app(app_config, engine_factory) -> AsyncGenerator[FastAPI, None]:
    """Create FastAPI test application."""
    from treetable.api.app import app

    app.dependency_overrides[get_config] = lambda: app_config
    app.dependency_overrides[get_engine_factory] = lambda: engine_factory
    yield app
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create client using ASGI transport."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
