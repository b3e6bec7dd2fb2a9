"""CLI commands for treetable."""

from . import db, serve, show

__all__ = ["db", "serve", "show"]
