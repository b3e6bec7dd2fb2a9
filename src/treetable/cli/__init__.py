"""CLI tools for treetable."""
