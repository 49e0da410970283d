"""Execution plan construction.

Pure business logic turning a configuration, an operation request and
live registry state into a fully classified, ordered ExecutionPlan.
Building a plan never mutates anything and can be repeated safely.
"""

import logging

from svcctl.core.eligibility import classify
from svcctl.models.plan import (
    ExecutionPlan,
    LifecycleAction,
    OperationKind,
    PlanItem,
    PlanPhase,
)
from svcctl.models.policy import Configuration
from svcctl.models.service import ServiceSnapshot, missing_snapshot
from svcctl.registry.base import ServiceRegistry

logger = logging.getLogger(__name__)


class UnknownProfileError(KeyError):
    """Raised when the requested profile is not in the policy."""

    def __init__(self, profile: str, known: list[str]) -> None:
        self.profile = profile
        self.known = known
        super().__init__(profile)

    def __str__(self) -> str:
        known = ", ".join(self.known) or "none"
        return f"Unknown profile '{self.profile}' (known profiles: {known})"


def build_plan(
    configuration: Configuration,
    registry: ServiceRegistry,
    action: LifecycleAction,
    *,
    profile: str | None = None,
    include_paging_restart: bool = False,
) -> ExecutionPlan:
    """Build the execution plan for one operation.

    Core-only (``profile is None``): targets are the Core services plus the
    exceptions, each exception gated by its own confirmation.

    Profile: prefixed installed services outside Core and the profile are
    stopped first; targets are the profile's services minus Core.

    Args:
        configuration: Resolved policy.
        registry: Registry providing enumeration and snapshots.
        action: Action applied to the targets.
        profile: Profile name, or None for a Core-only operation.
        include_paging_restart: Append a restart of the paging service.

    Returns:
        ExecutionPlan ordered STOP_OTHERS, targets, PAGING_RESTART, each
        phase alphabetical by service name.

    Raises:
        UnknownProfileError: If ``profile`` is not defined in the policy.
    """
    stop_others: list[str] = []
    overlaps: list[str] = []

    if profile is None:
        kind = OperationKind.CORE_ONLY
        target_phase = PlanPhase.CORE_TARGET
        targets = sorted(configuration.core | configuration.exceptions)
    else:
        if profile not in configuration.profiles:
            raise UnknownProfileError(profile, configuration.profile_names)

        kind = OperationKind.PROFILE
        target_phase = PlanPhase.PROFILE_TARGET
        profile_services = configuration.profiles[profile]

        overlaps = sorted(profile_services & configuration.core)
        for service in overlaps:
            logger.info("Skip %s from profile '%s': Also in Core", service, profile)

        targets = sorted(profile_services - configuration.core)

        installed = set(registry.enumerate_installed(configuration.prefix))
        stop_others = sorted(
            name
            for name in installed - configuration.core - profile_services
            if name.startswith(configuration.prefix)
        )

    paging_service = configuration.paging.service_name if include_paging_restart else None

    snapshots = _fetch_snapshots(registry, [*stop_others, *targets, *_optional(paging_service)])

    items: list[PlanItem] = []
    for service in stop_others:
        items.append(
            _make_item(
                configuration,
                snapshots,
                PlanPhase.STOP_OTHERS,
                service,
                LifecycleAction.STOP,
            )
        )
    for service in targets:
        items.append(
            _make_item(configuration, snapshots, target_phase, service, action, profile=profile)
        )
    if paging_service is not None:
        items.append(
            _make_item(
                configuration,
                snapshots,
                PlanPhase.PAGING_RESTART,
                paging_service,
                LifecycleAction.RESTART,
            )
        )

    logger.debug(
        "Built %s plan for %s with %d item(s)",
        kind.value,
        action.value,
        len(items),
    )
    return ExecutionPlan(
        kind=kind,
        action=action,
        items=tuple(items),
        profile=profile,
        overlaps=tuple(overlaps),
    )


def _optional(name: str | None) -> list[str]:
    return [name] if name is not None else []


def _fetch_snapshots(registry: ServiceRegistry, names: list[str]) -> dict[str, ServiceSnapshot]:
    """Fetch snapshots once for the deduplicated set of names.

    Names the registry does not report resolve to NOT_FOUND/UNKNOWN.
    """
    unique = list(dict.fromkeys(names))
    if not unique:
        return {}

    by_name = {snap.name: snap for snap in registry.fetch_snapshots(unique)}
    return {name: by_name.get(name, missing_snapshot(name)) for name in unique}


def _make_item(
    configuration: Configuration,
    snapshots: dict[str, ServiceSnapshot],
    phase: PlanPhase,
    service: str,
    action: LifecycleAction,
    profile: str | None = None,
) -> PlanItem:
    """Create a classified plan item."""
    snapshot = snapshots[service]
    is_exception = configuration.is_exception(service)
    decision = classify(service, configuration.prefix, is_exception, snapshot.startup_mode)
    return PlanItem(
        phase=phase,
        service=service,
        action=action,
        snapshot=snapshot,
        is_exception=is_exception,
        decision=decision,
        profile=profile,
    )
