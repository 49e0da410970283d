"""Service lifecycle operator.

Applies a single lifecycle action to a single service, idempotently and
with dry-run support. A restart of a service that isn't running is
issued as a plain start.
"""

import logging

from svcctl.core.audit import Severity, log_line
from svcctl.models.plan import LifecycleAction, OperationResult, Outcome
from svcctl.registry.base import ServiceRegistry

logger = logging.getLogger(__name__)


class ServiceOperator:
    """Executes lifecycle actions against a service registry.

    Collaborator failures never propagate: they are logged and returned
    as ERROR results so a caller iterating over a plan can continue.

    Attributes:
        dry_run: If True, only report what would be done.
        force: Passed through to stop and restart.

    Example:
        >>> operator = ServiceOperator(SystemdRegistry(), dry_run=True)
        >>> result = operator.apply("Su_Auth", LifecycleAction.START)
        >>> result.outcome
        <Outcome.WHAT_IF: 'what_if'>
    """

    def __init__(
        self,
        registry: ServiceRegistry,
        *,
        dry_run: bool = False,
        force: bool = False,
    ) -> None:
        """Initialize the operator.

        Args:
            registry: Registry used to query and control services.
            dry_run: If True, never touch the registry.
            force: Force stop/restart (no default force).
        """
        self._registry = registry
        self._dry_run = dry_run
        self._force = force

    @property
    def dry_run(self) -> bool:
        """Check if operator is in dry-run mode."""
        return self._dry_run

    @property
    def force(self) -> bool:
        """Check if stop/restart are forced."""
        return self._force

    def apply(self, service: str, action: LifecycleAction) -> OperationResult:
        """Apply one lifecycle action to one service.

        Args:
            service: Service name.
            action: Action to apply.

        Returns:
            OperationResult describing the outcome. Exactly one audit line
            is written per call.
        """
        if self._dry_run:
            result = OperationResult(
                service=service,
                action=action,
                success=True,
                outcome=Outcome.WHAT_IF,
                message=f"Would {action.value}",
            )
            log_line(f"WhatIf: {action.value} {service}")
            return result

        try:
            result = self._apply(service, action)
        except Exception as e:
            logger.debug("Lifecycle action failed", exc_info=True)
            result = OperationResult(
                service=service,
                action=action,
                success=False,
                outcome=Outcome.ERROR,
                error=str(e) or type(e).__name__,
            )

        self._audit(result)
        return result

    def _apply(self, service: str, action: LifecycleAction) -> OperationResult:
        """Query the service and issue the command the action calls for."""
        snapshot = self._registry.fetch_snapshot(service)

        if not snapshot.exists:
            return OperationResult(
                service=service,
                action=action,
                success=False,
                outcome=Outcome.ERROR,
                error="Service not found",
            )

        if action == LifecycleAction.START:
            if snapshot.is_running:
                return self._no_change(service, action, "Already running")
            self._registry.start(service)
            return self._success(service, action, LifecycleAction.START, "Started")

        if action == LifecycleAction.STOP:
            if snapshot.is_stopped:
                return self._no_change(service, action, "Already stopped")
            self._registry.stop(service, force=self._force)
            return self._success(service, action, LifecycleAction.STOP, "Stopped")

        # RESTART
        if not snapshot.is_running:
            self._registry.start(service)
            return self._success(
                service,
                action,
                LifecycleAction.START,
                "Not running; started instead of restart",
            )
        self._registry.restart(service, force=self._force)
        return self._success(service, action, LifecycleAction.RESTART, "Restarted")

    @staticmethod
    def _no_change(service: str, action: LifecycleAction, message: str) -> OperationResult:
        return OperationResult(
            service=service,
            action=action,
            success=True,
            outcome=Outcome.NO_CHANGE,
            message=message,
        )

    @staticmethod
    def _success(
        service: str,
        action: LifecycleAction,
        performed: LifecycleAction,
        message: str,
    ) -> OperationResult:
        return OperationResult(
            service=service,
            action=action,
            success=True,
            outcome=Outcome.SUCCESS,
            message=message,
            performed=performed,
        )

    @staticmethod
    def _audit(result: OperationResult) -> None:
        """Write the single audit line for an applied action."""
        prefix = f"{result.action.value} {result.service}"
        if result.outcome == Outcome.ERROR:
            log_line(f"{prefix}: ERROR {result.error}", Severity.ERROR)
        elif result.outcome == Outcome.NO_CHANGE:
            log_line(f"{prefix}: no change ({result.message})")
        else:
            log_line(f"{prefix}: success ({result.message})")
