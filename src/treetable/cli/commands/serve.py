"""Command to run the treetable API server."""

import typer
import uvicorn

from treetable.cli.app import app
from treetable.config import config


@app.command()
def serve(
    host: str = typer.Option(config.host, help="Interface to bind"),
    port: int = typer.Option(config.port, help="Port to listen on"),
    reload: bool = typer.Option(False, help="Reload on code changes"),
) -> None:  # pragma: no cover
    """Run the tree API server."""
    uvicorn.run("treetable.api.app:app", host=host, port=port, reload=reload)
