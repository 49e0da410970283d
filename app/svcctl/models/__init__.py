"""Data models for svcctl.

This module exports the core data structures used throughout the application.
"""

from svcctl.models.paging import PagingAction, PagingRewriteResult
from svcctl.models.plan import (
    EligibilityDecision,
    ExecutionPlan,
    LifecycleAction,
    OperationKind,
    OperationResult,
    Outcome,
    PlanItem,
    PlanPhase,
)
from svcctl.models.policy import Configuration, PagingSpec, PolicyDocument
from svcctl.models.service import ServiceSnapshot, ServiceState, StartupMode
from svcctl.models.state import RunState

__all__ = [
    "Configuration",
    "EligibilityDecision",
    "ExecutionPlan",
    "LifecycleAction",
    "OperationKind",
    "OperationResult",
    "Outcome",
    "PagingAction",
    "PagingRewriteResult",
    "PagingSpec",
    "PlanItem",
    "PlanPhase",
    "PolicyDocument",
    "RunState",
    "ServiceSnapshot",
    "ServiceState",
    "StartupMode",
]
