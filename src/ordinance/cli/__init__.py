"""Command-line interface."""

from ordinance.cli.main import build_parser, main

__all__ = ["build_parser", "main"]
