"""Paging cursor models.

Defines the paging actions that move the cursor embedded in a settings
value and the structured result of a rewrite attempt.
"""

from dataclasses import dataclass
from enum import Enum


class PagingAction(str, Enum):
    """Movement of the paging cursor.

    Attributes:
        NEXT_PAGE: Advance the offset by one page.
        PREVIOUS_PAGE: Move the offset back by one page (never below 0).
        RESTART_FROM_PAGE_1: Reset the offset to 0.
        NO_CHANGE: Leave the cursor untouched.
    """

    NEXT_PAGE = "next"
    PREVIOUS_PAGE = "previous"
    RESTART_FROM_PAGE_1 = "restart"
    NO_CHANGE = "none"


@dataclass(frozen=True, slots=True)
class PagingRewriteResult:
    """Result of a paging cursor rewrite.

    Failures are reported here rather than raised.

    Attributes:
        action: The paging action that was requested.
        success: Whether the rewrite (or its dry-run) succeeded.
        changed: Whether the settings file was actually written.
        old_offset: Offset found before the rewrite.
        new_offset: Offset computed by the rewrite.
        old_text: Setting value before the rewrite.
        new_text: Setting value after the rewrite.
        backup_path: Backup copy location, present iff the file was written.
        error: Failure reason if the rewrite failed.
    """

    action: PagingAction
    success: bool
    changed: bool = False
    old_offset: int | None = None
    new_offset: int | None = None
    old_text: str | None = None
    new_text: str | None = None
    backup_path: str | None = None
    error: str | None = None

    @property
    def failed(self) -> bool:
        """Check if the rewrite failed."""
        return not self.success
