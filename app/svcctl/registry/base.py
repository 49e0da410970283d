"""Abstract base class for service registries.

This module defines the ServiceRegistry interface that wraps the host's
service manager: querying state, enumerating installed services and
issuing lifecycle commands.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable

from svcctl.models.service import ServiceSnapshot


class ServiceControlError(RuntimeError):
    """Raised when a lifecycle command fails."""


class ServiceRegistry(ABC):
    """Abstract base class for all service registries.

    Query methods are best-effort; mutating methods raise
    ServiceControlError on failure.

    Example:
        >>> registry = SystemdRegistry()
        >>> if registry.is_available():
        ...     for snap in registry.fetch_snapshots(["Su_Auth"]):
        ...         print(f"{snap.name}: {snap.state.value}")
    """

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this service manager is available on the system.

        Returns:
            True if the service manager can be used, False otherwise.
        """

    @abstractmethod
    def enumerate_installed(self, prefix: str) -> list[str]:
        """List installed services whose name starts with ``prefix``.

        Never raises; returns an empty list on failure.

        Args:
            prefix: Name prefix to filter on.

        Returns:
            Service names.
        """

    @abstractmethod
    def fetch_snapshots(self, names: Iterable[str]) -> list[ServiceSnapshot]:
        """Fetch the current state of the given services.

        Args:
            names: Service names to query.

        Returns:
            One snapshot per requested name, in request order. Unknown
            names are reported with NOT_FOUND state and UNKNOWN startup mode.
        """

    @abstractmethod
    def start(self, name: str) -> None:
        """Start a service.

        Raises:
            ServiceControlError: If the service could not be started.
        """

    @abstractmethod
    def stop(self, name: str, force: bool = False) -> None:
        """Stop a service.

        Args:
            name: Service name.
            force: Kill the service's processes if needed.

        Raises:
            ServiceControlError: If the service could not be stopped.
        """

    @abstractmethod
    def restart(self, name: str, force: bool = False) -> None:
        """Restart a service.

        Args:
            name: Service name.
            force: Kill the service's processes before restarting.

        Raises:
            ServiceControlError: If the service could not be restarted.
        """

    def fetch_snapshot(self, name: str) -> ServiceSnapshot:
        """Fetch the current state of a single service.

        Args:
            name: Service name to query.

        Returns:
            Snapshot for ``name``.
        """
        return self.fetch_snapshots([name])[0]
