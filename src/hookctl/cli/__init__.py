"""
CLI module for hookctl.

Provides the command-line interface using Click.
"""

from hookctl.cli.main import cli, main

__all__ = ["main", "cli"]
