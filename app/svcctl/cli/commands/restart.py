"""Restart command implementation.

Restarts the Core services, or the services of a profile. Services that
are not running are started instead.
"""

from typing import Annotated

import typer

from svcctl.cli.lifecycle import run_lifecycle
from svcctl.cli.types import PagingChoice
from svcctl.models.paging import PagingAction
from svcctl.models.plan import LifecycleAction

app = typer.Typer(
    help="Restart Core services or a profile.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def restart_services(
    ctx: typer.Context,
    profile: Annotated[
        str | None,
        typer.Option(
            "--profile",
            "-p",
            help="Profile to restart. Without it, only Core services are affected.",
        ),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            "-n",
            help="Show what would be done without making changes.",
        ),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option(
            "--yes",
            "-y",
            help="Skip confirmation prompts and proceed.",
        ),
    ] = False,
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Kill service processes that do not stop cleanly.",
        ),
    ] = False,
    paging: Annotated[
        PagingChoice | None,
        typer.Option(
            "--paging",
            help="Move the paging cursor before restarting: next, previous or restart.",
            case_sensitive=False,
        ),
    ] = None,
    skip_exceptions: Annotated[
        bool,
        typer.Option(
            "--skip-exceptions",
            help="Skip exception services without asking.",
        ),
    ] = False,
) -> None:
    """Restart Core services or a profile.

    Examples:
        svcctl restart                       # Restart Core services
        svcctl restart --profile Web         # Restart the Web profile
        svcctl restart --paging restart      # Rewind the pager first
        svcctl restart --dry-run             # Preview without changes
    """
    # Skip if a subcommand is being invoked
    if ctx.invoked_subcommand is not None:
        return

    run_lifecycle(
        ctx,
        LifecycleAction.RESTART,
        profile=profile,
        paging=paging.to_action() if paging else PagingAction.NO_CHANGE,
        dry_run=dry_run,
        yes=yes,
        force=force,
        skip_exceptions=skip_exceptions,
    )
