"""Run state model.

The run state remembers the profile used by the last successful run so a
profile switch can be detected on the next invocation.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True, slots=True)
class RunState:
    """State persisted between runs.

    Attributes:
        last_profile: Profile of the last successful run, None for Core-only.
        last_run: When the last successful run ended.
    """

    last_profile: str | None = None
    last_run: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON storage.

        Returns:
            Dictionary with ``lastProfile`` and ``lastRun`` keys.
        """
        return {
            "lastProfile": self.last_profile,
            "lastRun": self.last_run.isoformat() if self.last_run else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RunState":
        """Deserialize from dictionary.

        Args:
            data: Dictionary containing state data.

        Returns:
            RunState instance.

        Raises:
            ValueError: If a field has the wrong type or format.
        """
        last_profile = data.get("lastProfile")
        if last_profile is not None and not isinstance(last_profile, str):
            msg = "lastProfile must be a string or null"
            raise ValueError(msg)

        last_run_raw = data.get("lastRun")
        last_run = datetime.fromisoformat(last_run_raw) if last_run_raw else None

        return cls(last_profile=last_profile, last_run=last_run)

    def is_profile_switch(self, profile: str | None) -> bool:
        """Check if running ``profile`` switches away from the stored one.

        A Core-only request (``None``) never counts as a switch. A stored
        ``None`` always differs from a requested profile.
        """
        return profile is not None and self.last_profile != profile
