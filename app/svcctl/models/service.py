"""Service models for registry snapshots.

This module defines the data structures describing the live state of a
host-level service as reported by a service registry.
"""

from dataclasses import dataclass
from enum import Enum


class ServiceState(Enum):
    """Current run state of a service."""

    RUNNING = "running"
    STOPPED = "stopped"
    UNKNOWN = "unknown"
    NOT_FOUND = "not_found"


class StartupMode(Enum):
    """Configured startup mode of a service.

    Attributes:
        MANUAL: Started on demand only.
        AUTOMATIC: Started by the host at boot.
        DISABLED: Cannot be started until re-enabled.
        UNKNOWN: Startup mode could not be determined.
    """

    MANUAL = "manual"
    AUTOMATIC = "automatic"
    DISABLED = "disabled"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class ServiceSnapshot:
    """Point-in-time view of a single service.

    Snapshots are fetched fresh for every plan build and are never cached
    between phases.

    Attributes:
        name: Service name (e.g., 'Su_Auth').
        state: Current run state.
        startup_mode: Configured startup mode.
    """

    name: str
    state: ServiceState = ServiceState.UNKNOWN
    startup_mode: StartupMode = StartupMode.UNKNOWN

    def __post_init__(self) -> None:
        """Validate snapshot data after initialization."""
        if not self.name:
            msg = "Service name cannot be empty"
            raise ValueError(msg)

    @property
    def is_running(self) -> bool:
        """Check if the service is currently running."""
        return self.state == ServiceState.RUNNING

    @property
    def is_stopped(self) -> bool:
        """Check if the service is currently stopped."""
        return self.state == ServiceState.STOPPED

    @property
    def exists(self) -> bool:
        """Check if the registry knows this service."""
        return self.state != ServiceState.NOT_FOUND


def missing_snapshot(name: str) -> ServiceSnapshot:
    """Create the snapshot used for names the registry did not report.

    Args:
        name: Service name that was requested but not returned.

    Returns:
        Snapshot with NOT_FOUND state and UNKNOWN startup mode.
    """
    return ServiceSnapshot(
        name=name,
        state=ServiceState.NOT_FOUND,
        startup_mode=StartupMode.UNKNOWN,
    )
