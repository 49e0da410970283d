"""Run state persistence.

This module provides the RunStateStore class for remembering the profile
of the last successful run, so the next run can detect a profile switch.
"""

import json
import logging
import os
from datetime import UTC, datetime
from pathlib import Path
from tempfile import NamedTemporaryFile

from svcctl.core.paths import state_path_for
from svcctl.models.state import RunState

logger = logging.getLogger(__name__)


class RunStateStore:
    """Manages run state in a small JSON file.

    Storage location: ``<policy path>.state.json`` by convention.

    The state is loaded once at the start of a run and saved once at the
    end of a successful run.

    Attributes:
        path: Location of the state file.
    """

    def __init__(self, path: Path) -> None:
        """Initialize RunStateStore.

        Args:
            path: State file location.
        """
        self._path = path

    @classmethod
    def for_policy(cls, policy_path: Path) -> "RunStateStore":
        """Create the store colocated with a policy file.

        Args:
            policy_path: Path of the policy file.

        Returns:
            Store backed by ``<policy_path>.state.json``.
        """
        return cls(state_path_for(policy_path))

    @property
    def path(self) -> Path:
        """Path to the state file."""
        return self._path

    def load(self) -> RunState:
        """Read the stored state.

        Never raises: a missing, unreadable or corrupt file yields an
        empty RunState.

        Returns:
            Stored RunState, or RunState() with null fields.
        """
        if not self._path.exists():
            return RunState()

        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
            if not isinstance(data, dict):
                msg = "state file must hold a JSON object"
                raise ValueError(msg)
            return RunState.from_dict(data)
        except (OSError, json.JSONDecodeError, ValueError, TypeError) as e:
            logger.warning("Ignoring unreadable run state %s: %s", self._path, e)
            return RunState()

    def save(self, profile: str | None, timestamp: datetime | None = None) -> RunState:
        """Overwrite the stored state.

        Creates the parent directory if needed and replaces the file
        atomically.

        Args:
            profile: Profile of the run, None for Core-only runs.
            timestamp: End of the run. Defaults to now (UTC).

        Returns:
            The RunState that was written.

        Raises:
            OSError: If the file cannot be written.
        """
        state = RunState(last_profile=profile, last_run=timestamp or datetime.now(UTC))

        self._path.parent.mkdir(parents=True, exist_ok=True)

        tmp_path: Path | None = None
        try:
            with NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=self._path.parent,
                delete=False,
                suffix=".tmp",
            ) as f:
                tmp_path = Path(f.name)
                json.dump(state.to_dict(), f, indent=2)
            os.replace(str(tmp_path), str(self._path))
        except OSError:
            if tmp_path is not None and tmp_path.exists():
                tmp_path.unlink()
            raise

        logger.debug("Saved run state to %s", self._path)
        return state
