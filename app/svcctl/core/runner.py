"""Run orchestration.

Ties one lifecycle request together: run state, paging rewrites, plan
construction, confirmation and execution. The CLI commands are thin
wrappers around :func:`run_operation`.
"""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime

from svcctl.core.audit import log_line
from svcctl.core.executor import ExceptionConfirmation, PlanConfirmation, execute_plan
from svcctl.core.paging import apply_paging
from svcctl.core.planner import build_plan
from svcctl.core.state import RunStateStore
from svcctl.models.paging import PagingAction, PagingRewriteResult
from svcctl.models.plan import ExecutionPlan, LifecycleAction, OperationResult
from svcctl.models.policy import Configuration
from svcctl.operators.service import ServiceOperator
from svcctl.registry.base import ServiceRegistry

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RunReport:
    """Outcome of one orchestrated run.

    Attributes:
        plan: The plan that was built.
        results: One result per plan item; empty if the run was aborted.
        paging_results: Paging rewrites in the order they were applied.
        profile_switched: Whether the run switched to a different profile.
        aborted: Whether the user declined the plan.
        dry_run: Whether the run only simulated its actions.
    """

    plan: ExecutionPlan
    results: list[OperationResult] = field(default_factory=list)
    paging_results: list[PagingRewriteResult] = field(default_factory=list)
    profile_switched: bool = False
    aborted: bool = False
    dry_run: bool = False

    @property
    def failed_count(self) -> int:
        """Number of failed service operations."""
        return sum(1 for r in self.results if r.failed)

    @property
    def paging_failed(self) -> bool:
        """Check if any paging rewrite failed."""
        return any(r.failed for r in self.paging_results)


def paging_actions_for(
    configuration: Configuration,
    profile_switched: bool,
    paging_action: PagingAction,
) -> list[PagingAction]:
    """Collect the paging actions a run has to apply.

    A profile switch resets the cursor first (when the policy asks for it);
    an explicit action is applied after that.

    Args:
        configuration: Resolved policy.
        profile_switched: Whether the run switches profile.
        paging_action: Explicitly requested paging action.

    Returns:
        Paging actions in application order.
    """
    actions: list[PagingAction] = []
    if profile_switched and configuration.paging.reset_on_profile_change:
        actions.append(PagingAction.RESTART_FROM_PAGE_1)
    if paging_action != PagingAction.NO_CHANGE:
        actions.append(paging_action)
    return actions


def run_operation(
    configuration: Configuration,
    registry: ServiceRegistry,
    action: LifecycleAction,
    *,
    state_store: RunStateStore,
    profile: str | None = None,
    paging_action: PagingAction = PagingAction.NO_CHANGE,
    dry_run: bool = False,
    force: bool = False,
    confirm_plan: PlanConfirmation | None = None,
    confirm_exception: ExceptionConfirmation | None = None,
) -> RunReport:
    """Run one lifecycle operation end to end.

    Nothing is mutated before ``confirm_plan`` accepts the plan. Paging
    rewrites happen after confirmation and before the first plan item.

    Args:
        configuration: Resolved policy.
        registry: Registry to read and control services through.
        action: Lifecycle action for the targets.
        state_store: Store holding the last profile.
        profile: Profile name, or None for a Core-only operation.
        paging_action: Explicit paging action.
        dry_run: Simulate everything; no confirmation, no writes.
        force: Force stops and restarts.
        confirm_plan: Up-front gate over the whole plan.
        confirm_exception: Per-item gate for exception services.

    Returns:
        RunReport describing what happened.

    Raises:
        UnknownProfileError: If ``profile`` is not defined in the policy.
    """
    state = state_store.load()
    profile_switched = state.is_profile_switch(profile)
    if profile_switched:
        log_line(f"Profile switch: {state.last_profile or 'none'} -> {profile}")

    paging = paging_actions_for(configuration, profile_switched, paging_action)

    plan = build_plan(
        configuration,
        registry,
        action,
        profile=profile,
        include_paging_restart=bool(paging),
    )
    report = RunReport(plan=plan, profile_switched=profile_switched, dry_run=dry_run)

    if not dry_run and confirm_plan is not None and not confirm_plan(plan):
        log_line(f"Plan for {action.value} not confirmed; nothing executed")
        report.aborted = True
        return report

    for paging_step in paging:
        report.paging_results.append(apply_paging(configuration.paging, paging_step, dry_run))

    operator = ServiceOperator(registry, dry_run=dry_run, force=force)
    report.results = execute_plan(plan, operator, confirm_exception=confirm_exception)

    if not dry_run:
        state_store.save(profile, datetime.now(UTC))

    logger.debug(
        "Run finished: %d result(s), %d failed, %d paging rewrite(s)",
        len(report.results),
        report.failed_count,
        len(report.paging_results),
    )
    return report
