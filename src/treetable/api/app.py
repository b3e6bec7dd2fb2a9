"""FastAPI application for the treetable API."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger

import treetable
from treetable import db
from treetable.api.routers import tree
from treetable.config import config as app_config
from treetable.schemas.response import TreeResult
from treetable.services.exceptions import TreeNodeNotFoundError, TreeOperationError
from treetable.utils import setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI):  # pragma: no cover
    """Lifecycle manager for the FastAPI app."""
    setup_logging(
        log_level=app_config.log_level,
        home_dir=app_config.home,
        log_file="treetable-api.log" if app_config.log_to_file else None,
    )
    logger.info(f"Starting treetable API {treetable.__version__}")
    await db.get_or_create_db(app_config.database_path)
    yield
    logger.info("Shutting down treetable API")
    await db.shutdown_db()


# Initialize FastAPI app
app = FastAPI(
    title="treetable API",
    description="Hierarchical CRUD and tree loading API",
    version=treetable.__version__,
    lifespan=lifespan,
)

# Include routers
app.include_router(tree.router)


def failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=TreeResult.fail(message).model_dump())


@app.exception_handler(TreeNodeNotFoundError)
async def not_found_handler(request: Request, exc: TreeNodeNotFoundError):
    logger.warning(f"Tree node not found for request '{request.url}': {exc}")
    return failure(404, str(exc))


@app.exception_handler(TreeOperationError)
async def operation_error_handler(request: Request, exc: TreeOperationError):
    logger.warning(f"Rejected tree operation for request '{request.url}': {exc}")
    return failure(400, str(exc))


@app.exception_handler(Exception)
async def exception_handler(request: Request, exc: Exception):  # pragma: no cover
    logger.exception(
        f"An unhandled exception occurred for request '{request.url}', exception: {exc}"
    )
    return failure(500, str(exc))
