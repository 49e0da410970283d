"""In-memory service registry for tests."""

from collections.abc import Iterable

from svcctl.models.service import ServiceSnapshot, ServiceState, StartupMode, missing_snapshot
from svcctl.registry.base import ServiceControlError, ServiceRegistry

SAMPLE_QUERY = "SELECT * FROM Jobs ORDER BY Id OFFSET 0 ROWS FETCH NEXT 1000000 ROWS ONLY"


class FakeRegistry(ServiceRegistry):
    """ServiceRegistry keeping services in a dict.

    Lifecycle calls are recorded in ``calls`` as ``(command, name, force)``
    and update the stored state. Names listed in ``failures`` raise
    ServiceControlError instead.
    """

    def __init__(self, available: bool = True) -> None:
        self.available = available
        self.services: dict[str, ServiceSnapshot] = {}
        self.failures: dict[str, str] = {}
        self.calls: list[tuple[str, str, bool]] = []
        self.fetches: list[list[str]] = []

    def add(
        self,
        name: str,
        state: ServiceState = ServiceState.STOPPED,
        startup_mode: StartupMode = StartupMode.MANUAL,
    ) -> None:
        self.services[name] = ServiceSnapshot(name=name, state=state, startup_mode=startup_mode)

    def state_of(self, name: str) -> ServiceState:
        return self.services[name].state

    def is_available(self) -> bool:
        return self.available

    def enumerate_installed(self, prefix: str) -> list[str]:
        return sorted(name for name in self.services if name.startswith(prefix))

    def fetch_snapshots(self, names: Iterable[str]) -> list[ServiceSnapshot]:
        requested = list(names)
        self.fetches.append(requested)
        return [self.services.get(name, missing_snapshot(name)) for name in requested]

    def start(self, name: str) -> None:
        self._record("start", name, False, ServiceState.RUNNING)

    def stop(self, name: str, force: bool = False) -> None:
        self._record("stop", name, force, ServiceState.STOPPED)

    def restart(self, name: str, force: bool = False) -> None:
        self._record("restart", name, force, ServiceState.RUNNING)

    def _record(self, command: str, name: str, force: bool, new_state: ServiceState) -> None:
        self.calls.append((command, name, force))
        if name in self.failures:
            raise ServiceControlError(self.failures[name])
        current = self.services[name]
        self.services[name] = ServiceSnapshot(
            name=name, state=new_state, startup_mode=current.startup_mode
        )
