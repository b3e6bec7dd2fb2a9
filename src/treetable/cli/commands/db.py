"""Database management commands."""

import asyncio

import typer
from loguru import logger

from treetable import db
from treetable.cli.app import app
from treetable.config import config


async def init_database() -> None:
    config.database_path.parent.mkdir(parents=True, exist_ok=True)
    async with db.engine_session_factory(db_path=config.database_path):
        pass


@app.command("init-db")
def init_db() -> None:
    """Create the database tables if they do not exist."""
    try:
        asyncio.run(init_database())
    except Exception as e:  # pragma: no cover
        logger.exception("Failed to initialize database")
        typer.echo(f"Error initializing database: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"Database ready at {config.database_path}")
