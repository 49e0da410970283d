"""Execution of a confirmed plan.

Runs plan items strictly in plan order through a ServiceOperator. An
optional up-front gate can abort the whole plan before any mutation; a
per-item gate asks about each exception service. Failures are isolated
per item.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from svcctl.core.audit import Severity, log_line
from svcctl.core.eligibility import WARN_DECISIONS
from svcctl.models.plan import ExecutionPlan, OperationResult, Outcome, PlanItem

if TYPE_CHECKING:
    from svcctl.operators.service import ServiceOperator

logger = logging.getLogger(__name__)

PlanConfirmation = Callable[[ExecutionPlan], bool]
ExceptionConfirmation = Callable[[str], bool]


def execute_plan(
    plan: ExecutionPlan,
    operator: ServiceOperator,
    *,
    confirm_plan: PlanConfirmation | None = None,
    confirm_exception: ExceptionConfirmation | None = None,
) -> list[OperationResult]:
    """Execute every item of a plan in order.

    Args:
        plan: Fully classified plan.
        operator: Operator applying the actions (carries dry-run and force).
        confirm_plan: Up-front gate. If it returns False nothing is
            executed and an empty list is returned. Not asked in dry-run.
        confirm_exception: Per-item gate for items requiring confirmation.
            If None, such items are declined. Not asked in dry-run.

    Returns:
        One OperationResult per plan item, in plan order.
    """
    if confirm_plan is not None and not operator.dry_run and not confirm_plan(plan):
        log_line(f"Plan for {plan.action.value} not confirmed; nothing executed", Severity.WARN)
        return []

    for service in plan.overlaps:
        log_line(f"Skip {service} from profile '{plan.profile}': Also in Core")

    results: list[OperationResult] = []
    for item in plan.items:
        results.append(_execute_item(item, operator, confirm_exception))

    logger.debug(
        "Executed plan: %d item(s), %d failed",
        len(results),
        sum(1 for r in results if r.failed),
    )
    return results


def _execute_item(
    item: PlanItem,
    operator: ServiceOperator,
    confirm_exception: ExceptionConfirmation | None,
) -> OperationResult:
    """Execute one plan item, honoring its eligibility decision."""
    if not item.eligible:
        severity = Severity.WARN if item.decision in WARN_DECISIONS else Severity.INFO
        log_line(f"Skip {item.action.value} {item.service}: {item.decision.reason}", severity)
        return _skipped(item, item.decision.reason)

    if item.requires_confirmation and not operator.dry_run:
        confirmed = confirm_exception(item.service) if confirm_exception else False
        if not confirmed:
            log_line(f"Skip {item.action.value} {item.service}: declined ({item.decision.reason})")
            return _skipped(item, "Declined by user")

    return operator.apply(item.service, item.action)


def _skipped(item: PlanItem, message: str) -> OperationResult:
    return OperationResult(
        service=item.service,
        action=item.action,
        success=True,
        outcome=Outcome.SKIPPED,
        message=message,
    )
