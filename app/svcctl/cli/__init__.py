"""CLI package for svcctl.

This package contains the Typer application and all subcommands.
"""

from svcctl.cli.main import app

__all__ = ["app"]
