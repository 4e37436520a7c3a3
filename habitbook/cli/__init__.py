"""CLI commands for habitbook."""

from habitbook.cli.main import cli, main

__all__ = ["cli", "main"]
