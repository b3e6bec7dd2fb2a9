"""Main CLI entry point for treetable."""  # pragma: no cover

from treetable.cli.app import app  # pragma: no cover
from treetable.config import config  # pragma: no cover
from treetable.utils import setup_logging  # pragma: no cover

# Register commands
from treetable.cli.commands import db, serve, show  # pragma: no cover

__all__ = ["db", "serve", "show"]  # pragma: no cover


# Set up logging when module is imported
setup_logging(
    log_level=config.log_level,
    home_dir=config.home,
    log_file="treetable-cli.log" if config.log_to_file else None,
)  # pragma: no cover

if __name__ == "__main__":  # pragma: no cover
    app()
