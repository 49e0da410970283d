"""Shared Rich display functions for plans and results.

Provides reusable table builders and summary printers for displaying
execution plans, operation results and paging rewrites across CLI
commands (start, stop, restart, status, paging).
"""

from rich.markup import escape
from rich.table import Table

from svcctl.models.paging import PagingRewriteResult
from svcctl.models.plan import ExecutionPlan, OperationResult, Outcome, PlanItem
from svcctl.utils.formatting import (
    console,
    create_table,
    format_state,
    print_success,
    print_warning,
)

_OUTCOME_STYLES: dict[Outcome, tuple[str, str]] = {
    Outcome.SUCCESS: ("success", "OK"),
    Outcome.NO_CHANGE: ("muted", "--"),
    Outcome.WHAT_IF: ("what_if", "WHATIF"),
    Outcome.SKIPPED: ("skipped", "SKIP"),
    Outcome.ERROR: ("error", "FAIL"),
}


def _decision_text(item: PlanItem) -> str:
    """Format the eligibility decision of a plan item."""
    if not item.eligible:
        return f"[skipped]skip[/skipped] [muted]{item.decision.reason}[/muted]"
    if item.requires_confirmation:
        return f"[confirm]confirm[/confirm] [muted]{item.decision.reason}[/muted]"
    return f"[eligible]run[/eligible] [muted]{item.decision.reason}[/muted]"


def create_plan_table(plan: ExecutionPlan, dry_run: bool = False) -> Table:
    """Create a Rich table displaying an execution plan.

    Builds a formatted table with Phase, Action, Service, State, Startup
    and Decision columns, one row per plan item in execution order.

    Args:
        plan: The plan to display.
        dry_run: Whether this is a dry-run (changes table title).

    Returns:
        Rich Table configured for plan display.
    """
    title = "Execution Plan"
    if plan.profile:
        title = f"{title}: {plan.action.value} profile '{plan.profile}'"
    else:
        title = f"{title}: {plan.action.value} core"
    if dry_run:
        title = f"{title} (Dry Run)"

    table = create_table(title)
    table.add_column("Phase", no_wrap=True)
    table.add_column("Action", width=8)
    table.add_column("Service", no_wrap=True)
    table.add_column("State")
    table.add_column("Startup", style="muted")
    table.add_column("Decision")

    for item in plan.items:
        service = item.service
        if item.is_exception:
            service = f"{service} [confirm]*[/confirm]"
        table.add_row(
            f"[muted]{item.phase_label}[/muted]",
            item.action.value,
            f"[service.name]{service}[/service.name]",
            format_state(item.snapshot.state),
            item.snapshot.startup_mode.value,
            _decision_text(item),
        )

    return table


def create_results_table(results: list[OperationResult]) -> Table:
    """Create a Rich table displaying operation results.

    Args:
        results: List of operation results to display.

    Returns:
        Rich Table configured for results display.
    """
    table = create_table("Results")
    table.add_column("Status", width=8, justify="center")
    table.add_column("Action", width=8)
    table.add_column("Service", no_wrap=True)
    table.add_column("Message")

    for result in results:
        style, label = _OUTCOME_STYLES[result.outcome]
        message = result.error if result.failed else result.message
        table.add_row(
            f"[{style}]{label}[/{style}]",
            result.action.value,
            result.service,
            f"[muted]{message or ''}[/muted]",
        )

    return table


def print_plan_summary(plan: ExecutionPlan) -> None:
    """Print a summary of a plan.

    Args:
        plan: The plan to summarize.
    """
    eligible = len(plan.eligible_items)
    confirm = len(plan.confirmation_items)
    skipped = len(plan) - eligible

    parts = [f"[eligible]{eligible} to run[/eligible]"]
    if confirm:
        parts.append(f"[confirm]{confirm} need confirmation[/confirm]")
    if skipped:
        parts.append(f"[skipped]{skipped} skipped[/skipped]")
    console.print(f"\nSummary: {', '.join(parts)}")


def print_results_summary(results: list[OperationResult]) -> None:
    """Print a summary of operation results.

    Shows a success message when nothing failed, or a count of
    changed/unchanged/failed operations otherwise.

    Args:
        results: List of operation results.
    """
    fail_count = sum(1 for r in results if r.failed)
    changed_count = sum(1 for r in results if r.changed)
    skipped_count = sum(1 for r in results if r.outcome == Outcome.SKIPPED)

    if fail_count == 0:
        print_success(
            f"All {len(results)} operation(s) completed: "
            f"{changed_count} changed, {skipped_count} skipped."
        )
    else:
        console.print(
            f"\n[success]{changed_count} changed[/success], "
            f"[skipped]{skipped_count} skipped[/skipped], "
            f"[error]{fail_count} failed[/error]"
        )


def print_paging_result(result: PagingRewriteResult, dry_run: bool = False) -> None:
    """Print the outcome of one paging rewrite.

    Args:
        result: Paging rewrite result.
        dry_run: Whether the rewrite was simulated.
    """
    if result.failed:
        print_warning(f"Paging {result.action.value} failed: {result.error}")
        return

    if result.old_offset is None:
        console.print(f"[muted]Paging {result.action.value}: nothing to do[/muted]")
        return

    prefix = "[what_if]WhatIf[/what_if] " if dry_run else ""
    console.print(
        f"{prefix}Paging {result.action.value}: "
        f"OFFSET [info]{result.old_offset}[/info] -> [info]{result.new_offset}[/info]"
    )
    if result.new_text is not None:
        console.print(f"  [muted]{escape(result.new_text)}[/muted]", highlight=False)
    if result.backup_path:
        console.print(f"  [muted]Backup: {result.backup_path}[/muted]")
