"""Shared plumbing for lifecycle commands.

Loads the policy, opens the service registry, wires the interactive
confirmation callbacks and renders a RunReport. Fatal errors end the
command with exit code 1 after a final ERROR audit line.
"""

from pathlib import Path
from typing import NoReturn

import typer

from svcctl.cli.display import (
    create_plan_table,
    create_results_table,
    print_paging_result,
    print_plan_summary,
    print_results_summary,
)
from svcctl.core.audit import Severity, log_line
from svcctl.core.paths import get_policy_path
from svcctl.core.planner import UnknownProfileError
from svcctl.core.policy import PolicyError, PolicyNotFoundError, load_policy
from svcctl.core.runner import RunReport, run_operation
from svcctl.core.state import RunStateStore
from svcctl.models.paging import PagingAction
from svcctl.models.plan import ExecutionPlan, LifecycleAction
from svcctl.models.policy import Configuration
from svcctl.registry.base import ServiceRegistry
from svcctl.registry.systemd import SystemdRegistry
from svcctl.utils.formatting import console, print_error, print_info, print_warning


def get_registry() -> ServiceRegistry:
    """Create the registry for the host's service manager."""
    return SystemdRegistry()


def fail(message: str) -> NoReturn:
    """Report a fatal error and exit with code 1.

    Args:
        message: Error description.

    Raises:
        typer.Exit: Always, with code 1.
    """
    print_error(message)
    log_line(f"ERROR: {message}", Severity.ERROR)
    raise typer.Exit(code=1)


def policy_path_from(ctx: typer.Context) -> Path:
    """Get the policy path selected by the global ``--config`` option."""
    obj = ctx.obj or {}
    return obj.get("config") or get_policy_path()


def load_configuration(
    ctx: typer.Context,
    show_issues: bool = True,
) -> tuple[Configuration, Path, list[str]]:
    """Load and resolve the policy selected on the command line.

    Args:
        ctx: Typer context carrying the global options.
        show_issues: Print advisory issues as warnings.

    Returns:
        Tuple of (configuration, policy path, advisory issues).

    Raises:
        typer.Exit: If the policy is missing or invalid.
    """
    path = policy_path_from(ctx)
    try:
        configuration, issues = load_policy(path)
    except PolicyNotFoundError:
        print_info("Run 'svcctl init' to create a starter policy.")
        fail(f"Policy not found: {path}")
    except PolicyError as e:
        fail(f"Failed to load policy: {e}")

    if show_issues:
        for issue in issues:
            print_warning(issue)
            log_line(issue, Severity.WARN)

    return configuration, path, issues


def open_registry() -> ServiceRegistry:
    """Get an available registry or exit.

    Raises:
        typer.Exit: If the service manager is not available.
    """
    registry = get_registry()
    if not registry.is_available():
        fail("Service manager (systemctl) is not available on this system.")
    return registry


def run_lifecycle(
    ctx: typer.Context,
    action: LifecycleAction,
    *,
    profile: str | None,
    paging: PagingAction,
    dry_run: bool,
    yes: bool,
    force: bool,
    skip_exceptions: bool,
) -> RunReport:
    """Run one lifecycle command and render its outcome.

    Per-service failures and paging failures are reported but do not
    change the exit code.

    Args:
        ctx: Typer context carrying the global options.
        action: Lifecycle action for the targets.
        profile: Profile name, or None for Core-only.
        paging: Explicit paging action.
        dry_run: Simulate without changing anything.
        yes: Accept every confirmation prompt.
        force: Force stops and restarts.
        skip_exceptions: Decline every exception service without asking.

    Returns:
        The RunReport of the run.

    Raises:
        typer.Exit: On fatal errors (code 1) or when the plan is declined (code 0).
    """
    configuration, policy_path, _ = load_configuration(ctx)
    registry = open_registry()

    def confirm_plan(plan: ExecutionPlan) -> bool:
        console.print(create_plan_table(plan))
        print_plan_summary(plan)
        if yes:
            return True
        return typer.confirm(f"\nProceed with {len(plan)} item(s)?", default=False)

    def confirm_exception(service: str) -> bool:
        if skip_exceptions:
            return False
        if yes:
            return True
        return typer.confirm(
            f"'{service}' is an exception service. {action.value.capitalize()} it?",
            default=False,
        )

    try:
        report = run_operation(
            configuration,
            registry,
            action,
            state_store=RunStateStore.for_policy(policy_path),
            profile=profile,
            paging_action=paging,
            dry_run=dry_run,
            force=force,
            confirm_plan=confirm_plan,
            confirm_exception=confirm_exception,
        )
    except UnknownProfileError as e:
        fail(str(e))
    except OSError as e:
        fail(f"Failed to save run state: {e}")

    if report.aborted:
        print_info("Aborted.")
        raise typer.Exit(code=0)

    if dry_run:
        console.print(create_plan_table(report.plan, dry_run=True))
        print_plan_summary(report.plan)

    if report.profile_switched:
        print_info(f"Profile switched to '{profile}'.")

    for paging_result in report.paging_results:
        print_paging_result(paging_result, dry_run=dry_run)

    if report.results:
        console.print(create_results_table(report.results))
    print_results_summary(report.results)

    if dry_run:
        print_info("\nDry-run mode: No changes were made.")

    return report
