"""Shared types for CLI commands.

Enums used by several command modules for Typer option choices.
"""

from enum import Enum

from svcctl.models.paging import PagingAction
from svcctl.models.plan import LifecycleAction


class PagingChoice(str, Enum):
    """Paging actions selectable on the command line."""

    NEXT = "next"
    PREVIOUS = "previous"
    RESTART = "restart"

    def to_action(self) -> PagingAction:
        """Convert to the corresponding PagingAction."""
        return PagingAction(self.value)


class ActionChoice(str, Enum):
    """Lifecycle actions selectable on the command line."""

    START = "start"
    STOP = "stop"
    RESTART = "restart"

    def to_action(self) -> LifecycleAction:
        """Convert to the corresponding LifecycleAction."""
        return LifecycleAction(self.value)
