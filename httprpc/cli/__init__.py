"""Command-line interface."""

from httprpc.cli.main import main

__all__ = ["main"]
