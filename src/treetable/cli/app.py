from typing import Optional

import typer

from treetable.config import config


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:  # pragma: no cover
        import treetable

        typer.echo(f"treetable version: {treetable.__version__}")
        typer.echo(f"Home: {config.home}")
        raise typer.Exit()


app = typer.Typer(name="treetable")


@app.callback()
def app_callback(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """treetable - hierarchical records over a uniform tree API."""
