"""Start command implementation.

Starts the Core services, or switches the host to a profile: prefixed
services outside Core and the profile are stopped first, then the
profile's services are started.
"""

from typing import Annotated

import typer

from svcctl.cli.lifecycle import run_lifecycle
from svcctl.cli.types import PagingChoice
from svcctl.models.paging import PagingAction
from svcctl.models.plan import LifecycleAction

app = typer.Typer(
    help="Start Core services or a profile.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def start_services(
    ctx: typer.Context,
    profile: Annotated[
        str | None,
        typer.Option(
            "--profile",
            "-p",
            help="Profile to start. Without it, only Core services are started.",
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
            help="Kill processes of services that do not stop cleanly.",
        ),
    ] = False,
    paging: Annotated[
        PagingChoice | None,
        typer.Option(
            "--paging",
            help="Move the paging cursor before starting: next, previous or restart.",
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
    """Start Core services or a profile.

    Examples:
        svcctl start                         # Start Core services
        svcctl start --profile Web           # Switch to the Web profile
        svcctl start -p Web --paging next    # Advance the pager, then start
        svcctl start --dry-run               # Preview without changes
    """
    # Skip if a subcommand is being invoked
    if ctx.invoked_subcommand is not None:
        return

    run_lifecycle(
        ctx,
        LifecycleAction.START,
        profile=profile,
        paging=paging.to_action() if paging else PagingAction.NO_CHANGE,
        dry_run=dry_run,
        yes=yes,
        force=force,
        skip_exceptions=skip_exceptions,
    )
