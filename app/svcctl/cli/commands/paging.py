"""Paging command implementation.

Moves the paging cursor stored in the pager's settings file without
running a lifecycle command, optionally restarting the paging service
afterwards.
"""

from typing import Annotated

import typer

from svcctl.cli.display import create_results_table, print_paging_result
from svcctl.cli.lifecycle import load_configuration, open_registry
from svcctl.core.audit import Severity, log_line
from svcctl.core.eligibility import classify
from svcctl.core.paging import apply_paging
from svcctl.models.paging import PagingAction
from svcctl.models.plan import LifecycleAction
from svcctl.models.policy import Configuration
from svcctl.operators.service import ServiceOperator
from svcctl.utils.formatting import console, print_info, print_warning

app = typer.Typer(
    help="Move the paging cursor.",
    no_args_is_help=True,
)

DryRunOption = Annotated[
    bool,
    typer.Option(
        "--dry-run",
        "-n",
        help="Show the rewrite without changing the settings file.",
    ),
]
RestartServiceOption = Annotated[
    bool,
    typer.Option(
        "--restart-service",
        "-r",
        help="Restart the paging service after the cursor moved.",
    ),
]
YesOption = Annotated[
    bool,
    typer.Option(
        "--yes",
        "-y",
        help="Skip confirmation prompts and proceed.",
    ),
]


@app.command("next")
def next_page(
    ctx: typer.Context,
    dry_run: DryRunOption = False,
    restart_service: RestartServiceOption = False,
    yes: YesOption = False,
) -> None:
    """Advance the cursor by one page."""
    _move_cursor(ctx, PagingAction.NEXT_PAGE, dry_run, restart_service, yes)


@app.command("previous")
def previous_page(
    ctx: typer.Context,
    dry_run: DryRunOption = False,
    restart_service: RestartServiceOption = False,
    yes: YesOption = False,
) -> None:
    """Move the cursor back by one page (never below the first page)."""
    _move_cursor(ctx, PagingAction.PREVIOUS_PAGE, dry_run, restart_service, yes)


@app.command("restart")
def restart_from_first_page(
    ctx: typer.Context,
    dry_run: DryRunOption = False,
    restart_service: RestartServiceOption = False,
    yes: YesOption = False,
) -> None:
    """Reset the cursor to the first page."""
    _move_cursor(ctx, PagingAction.RESTART_FROM_PAGE_1, dry_run, restart_service, yes)


def _move_cursor(
    ctx: typer.Context,
    action: PagingAction,
    dry_run: bool,
    restart_service: bool,
    yes: bool,
) -> None:
    """Apply one paging action and optionally restart the paging service.

    A failed rewrite is reported as a warning; the paging service is then
    left alone.
    """
    configuration, _, _ = load_configuration(ctx)
    paging = configuration.paging

    if not dry_run and not yes:
        prompt = f"Move paging cursor ({action.value}) in {paging.settings_path}?"
        if not typer.confirm(prompt, default=False):
            print_info("Aborted.")
            raise typer.Exit(code=0)

    result = apply_paging(paging, action, dry_run=dry_run)
    print_paging_result(result, dry_run=dry_run)

    if result.failed or not restart_service:
        return

    _restart_paging_service(configuration, dry_run, yes)


def _restart_paging_service(configuration: Configuration, dry_run: bool, yes: bool) -> None:
    """Restart the paging service, honoring its eligibility decision."""
    registry = open_registry()
    service = configuration.paging.service_name
    snapshot = registry.fetch_snapshot(service)
    decision = classify(
        service,
        configuration.prefix,
        configuration.is_exception(service),
        snapshot.startup_mode,
    )

    if not decision.eligible:
        print_warning(f"Not restarting {service}: {decision.reason}")
        log_line(f"Skip restart {service}: {decision.reason}", Severity.WARN)
        return

    if decision.requires_confirmation and not dry_run and not yes:
        if not typer.confirm(f"'{service}' is an exception service. Restart it?", default=False):
            log_line(f"Skip restart {service}: declined ({decision.reason})")
            print_info(f"Skipped {service}.")
            return

    operator = ServiceOperator(registry, dry_run=dry_run)
    op_result = operator.apply(service, LifecycleAction.RESTART)
    console.print(create_results_table([op_result]))
