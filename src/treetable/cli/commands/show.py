"""Show command for treetable CLI."""

import asyncio
from typing import Iterable, Optional

import typer
from loguru import logger
from rich.console import Console
from rich.tree import Tree

from treetable import db
from treetable.cli.app import app
from treetable.config import config
from treetable.repository import TreeRepository
from treetable.schemas import LoadMode, TreeNodeResponse, TreePageResult, TreeQuery
from treetable.services import TreeQueryService, TreeService
from treetable.services.load_options import ResolvedOptions

# Create rich console
console = Console()


async def load_tree(parent_id: Optional[str], db_type=db.DatabaseType.FILESYSTEM) -> TreePageResult:
    """Load the whole tree, or the subtree below parent_id, fully expanded."""
    async with db.engine_session_factory(db_path=config.database_path, db_type=db_type) as (
        engine,
        session_maker,
    ):
        options = ResolvedOptions(
            load_mode=LoadMode.SYNC, is_expand_all=True, max_page_size=config.max_page_size
        )
        query_service = TreeQueryService(TreeService(TreeRepository(session_maker)), options)
        if not parent_id:
            return await query_service.query(TreeQuery())

        page = await query_service.load_children(TreeQuery(parent_id=parent_id))
        for node in page.items:
            await query_service.expand_all(node)
        return page


def add_nodes_to_tree(tree: Tree, nodes: Iterable[TreeNodeResponse], show_ids: bool = False):
    """Add nodes to a rich tree, recursing into inlined children."""
    for node in nodes:
        style = "green" if node.enabled else "dim"
        label = f"[{style}]{node.name}[/{style}]"
        if show_ids:
            label += f" ({node.id})"
        branch = tree.add(label)
        add_nodes_to_tree(branch, node.children, show_ids)


def display_tree(page: TreePageResult, show_ids: bool = False) -> None:
    tree = Tree(f"[bold]Tree[/bold] ({page.total} top level nodes)")
    add_nodes_to_tree(tree, page.items, show_ids)
    console.print(tree)


@app.command()
def show(
    parent_id: Optional[str] = typer.Option(None, "--parent", "-p", help="Show only below this node"),
    show_ids: bool = typer.Option(False, "--ids", help="Show node ids"),
) -> None:
    """Print the stored tree."""
    try:
        page = asyncio.run(load_tree(parent_id))
        display_tree(page, show_ids)
    except Exception as e:  # pragma: no cover
        logger.exception("Error loading tree")
        typer.echo(f"Error loading tree: {e}", err=True)
        raise typer.Exit(1)
