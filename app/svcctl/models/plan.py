"""Plan models for service lifecycle operations.

This module defines data structures for representing lifecycle actions
(start, stop, restart), the eligibility decision attached to each planned
service, the ordered execution plan and the results of executing it.
"""

from dataclasses import dataclass
from enum import Enum

from svcctl.models.service import ServiceSnapshot


class LifecycleAction(str, Enum):
    """Type of lifecycle action.

    Attributes:
        START: Start a service that is not running.
        STOP: Stop a service that is running.
        RESTART: Restart a running service (started if not running).
    """

    START = "start"
    STOP = "stop"
    RESTART = "restart"


class OperationKind(str, Enum):
    """Scope of a requested operation."""

    CORE_ONLY = "core"
    PROFILE = "profile"


class PlanPhase(str, Enum):
    """Ordered grouping of plan items.

    Attributes:
        STOP_OTHERS: Prefixed services outside Core and the selected profile.
        CORE_TARGET: Core services (and exceptions) of a Core-only run.
        PROFILE_TARGET: Services of the selected profile.
        PAGING_RESTART: Restart of the paging service after a cursor change.
    """

    STOP_OTHERS = "stop_others"
    CORE_TARGET = "core_target"
    PROFILE_TARGET = "profile_target"
    PAGING_RESTART = "paging_restart"


class Outcome(str, Enum):
    """Outcome class of a single operation."""

    WHAT_IF = "what_if"
    NO_CHANGE = "no_change"
    SUCCESS = "success"
    ERROR = "error"
    SKIPPED = "skipped"


@dataclass(frozen=True, slots=True)
class EligibilityDecision:
    """Whether a service may be acted upon, and under which condition.

    Attributes:
        eligible: True if the service may be acted upon.
        requires_confirmation: True if an interactive confirmation is needed.
        reason: Human-readable explanation, logged verbatim.
    """

    eligible: bool
    requires_confirmation: bool
    reason: str


@dataclass(frozen=True, slots=True)
class PlanItem:
    """A single planned lifecycle action on one service.

    Attributes:
        phase: Plan phase this item belongs to.
        service: Name of the service to operate on.
        action: Lifecycle action intended for the service.
        snapshot: Registry snapshot taken while building the plan.
        is_exception: Whether the service is listed in the exceptions.
        decision: Eligibility decision for this service.
        profile: Selected profile name (PROFILE_TARGET items only).
    """

    phase: PlanPhase
    service: str
    action: LifecycleAction
    snapshot: ServiceSnapshot
    is_exception: bool
    decision: EligibilityDecision
    profile: str | None = None

    def __post_init__(self) -> None:
        """Validate item data after initialization."""
        if not self.service:
            msg = "Service name cannot be empty"
            raise ValueError(msg)

    @property
    def eligible(self) -> bool:
        """Check if the item may be executed."""
        return self.decision.eligible

    @property
    def requires_confirmation(self) -> bool:
        """Check if the item needs a per-item confirmation."""
        return self.decision.eligible and self.decision.requires_confirmation

    @property
    def phase_label(self) -> str:
        """Phase name, qualified with the profile for profile targets."""
        if self.phase == PlanPhase.PROFILE_TARGET and self.profile:
            return f"{self.phase.value}({self.profile})"
        return self.phase.value


@dataclass(frozen=True, slots=True)
class ExecutionPlan:
    """Ordered, fully classified sequence of plan items.

    The plan is immutable: once built, nothing inserts, removes or
    reorders its items.

    Attributes:
        kind: Core-only or profile operation.
        action: Lifecycle action requested for the targets.
        items: Plan items in execution order.
        profile: Selected profile name for profile operations.
        overlaps: Profile services dropped because they are also in Core.
    """

    kind: OperationKind
    action: LifecycleAction
    items: tuple[PlanItem, ...] = ()
    profile: str | None = None
    overlaps: tuple[str, ...] = ()

    def __len__(self) -> int:
        return len(self.items)

    def phase_items(self, phase: PlanPhase) -> list[PlanItem]:
        """Get the items of one phase, in plan order."""
        return [item for item in self.items if item.phase == phase]

    @property
    def eligible_items(self) -> list[PlanItem]:
        """Items that will be executed (subject to confirmation)."""
        return [item for item in self.items if item.eligible]

    @property
    def confirmation_items(self) -> list[PlanItem]:
        """Items that need a per-item confirmation."""
        return [item for item in self.items if item.requires_confirmation]

    @property
    def is_empty(self) -> bool:
        """Check if no item in the plan is eligible."""
        return not self.eligible_items


@dataclass(frozen=True, slots=True)
class OperationResult:
    """Result of applying one lifecycle action to one service.

    Attributes:
        service: Service that was operated on.
        action: Action that was requested.
        success: Whether the operation completed without error.
        outcome: Outcome class of the operation.
        message: Optional success message or additional information.
        error: Optional error message if the operation failed.
        performed: Action actually issued (differs from ``action`` when a
            restart of a stopped service was turned into a start).
    """

    service: str
    action: LifecycleAction
    success: bool
    outcome: Outcome
    message: str | None = None
    error: str | None = None
    performed: LifecycleAction | None = None

    @property
    def failed(self) -> bool:
        """Check if the operation failed."""
        return not self.success

    @property
    def changed(self) -> bool:
        """Check if the operation changed the service state."""
        return self.outcome == Outcome.SUCCESS
