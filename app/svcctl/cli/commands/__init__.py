"""CLI commands for svcctl.

This package contains all subcommand implementations.
"""

from svcctl.cli.commands import check, init, logs, paging, restart, start, status, stop

__all__ = ["check", "init", "logs", "paging", "restart", "start", "status", "stop"]
