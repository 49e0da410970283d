"""systemd service registry implementation.

Queries and controls services using systemctl.
"""

import logging
import subprocess
from collections.abc import Iterable

from svcctl.models.service import ServiceSnapshot, ServiceState, StartupMode, missing_snapshot
from svcctl.registry.base import ServiceControlError, ServiceRegistry
from svcctl.utils.shell import command_exists, run_command

logger = logging.getLogger(__name__)

UNIT_SUFFIX = ".service"

# ActiveState values that count as running
_RUNNING_STATES = {"active", "reloading", "activating"}
_STOPPED_STATES = {"inactive", "failed", "deactivating"}

# UnitFileState to startup mode
_STARTUP_MODES: dict[str, StartupMode] = {
    "enabled": StartupMode.AUTOMATIC,
    "enabled-runtime": StartupMode.AUTOMATIC,
    "alias": StartupMode.AUTOMATIC,
    "disabled": StartupMode.MANUAL,
    "static": StartupMode.MANUAL,
    "indirect": StartupMode.MANUAL,
    "linked": StartupMode.MANUAL,
    "linked-runtime": StartupMode.MANUAL,
    "generated": StartupMode.MANUAL,
    "masked": StartupMode.DISABLED,
    "masked-runtime": StartupMode.DISABLED,
}


def unit_name(name: str) -> str:
    """Get the systemd unit name for a service name."""
    return name if name.endswith(UNIT_SUFFIX) else name + UNIT_SUFFIX


def service_name(unit: str) -> str:
    """Get the service name for a systemd unit name."""
    return unit.removesuffix(UNIT_SUFFIX)


class SystemdRegistry(ServiceRegistry):
    """Registry for systemd-managed services.

    Service names are unit names without the ``.service`` suffix.
    Lifecycle commands are run through sudo unless disabled.

    Attributes:
        use_sudo: If True, prefix mutating commands with sudo.
    """

    # Timeout for queries and for lifecycle commands
    _QUERY_TIMEOUT: float = 30.0
    _CONTROL_TIMEOUT: float = 120.0

    def __init__(self, use_sudo: bool = True) -> None:
        """Initialize the registry.

        Args:
            use_sudo: If True, prefix mutating commands with sudo.
        """
        self._use_sudo = use_sudo

    def is_available(self) -> bool:
        """Check if systemctl is available."""
        return command_exists("systemctl")

    def enumerate_installed(self, prefix: str) -> list[str]:
        """List installed service units starting with ``prefix``.

        Template units (``name@.service``) are ignored.
        """
        args = [
            "systemctl",
            "list-unit-files",
            "--type=service",
            "--no-legend",
            "--no-pager",
            "--plain",
        ]
        try:
            result = run_command(args, timeout=self._QUERY_TIMEOUT)
        except (OSError, subprocess.SubprocessError) as e:
            logger.warning("Failed to enumerate services: %s", e)
            return []

        if not result.success:
            logger.warning("systemctl list-unit-files failed: %s", result.error_text)
            return []

        names: list[str] = []
        for line in result.stdout.splitlines():
            parts = line.split()
            if not parts:
                continue
            name = service_name(parts[0])
            if name.endswith("@") or not name.startswith(prefix):
                continue
            names.append(name)
        return sorted(set(names))

    def fetch_snapshots(self, names: Iterable[str]) -> list[ServiceSnapshot]:
        """Fetch state for the given services with a single systemctl show."""
        requested = list(names)
        if not requested:
            return []

        args = [
            "systemctl",
            "show",
            "--no-pager",
            "--property=Id,LoadState,ActiveState,UnitFileState",
            *[unit_name(n) for n in requested],
        ]
        try:
            result = run_command(args, timeout=self._QUERY_TIMEOUT)
        except (OSError, subprocess.SubprocessError) as e:
            logger.warning("Failed to query services: %s", e)
            return [ServiceSnapshot(name=n) for n in requested]

        if not result.success:
            logger.warning("systemctl show failed: %s", result.error_text)
            return [ServiceSnapshot(name=n) for n in requested]

        blocks = _parse_show_output(result.stdout)
        snapshots: list[ServiceSnapshot] = []
        for index, name in enumerate(requested):
            props = blocks[index] if index < len(blocks) else {}
            snapshots.append(_snapshot_from_properties(name, props))
        return snapshots

    def start(self, name: str) -> None:
        """Start a service using systemctl start."""
        self._control("start", name)

    def stop(self, name: str, force: bool = False) -> None:
        """Stop a service using systemctl stop, killing it first if forced."""
        if force:
            self._control("kill", name, "--signal=SIGKILL")
        self._control("stop", name)

    def restart(self, name: str, force: bool = False) -> None:
        """Restart a service using systemctl restart, killing it first if forced."""
        if force:
            self._control("kill", name, "--signal=SIGKILL")
        self._control("restart", name)

    def _control(self, command: str, name: str, *extra: str) -> None:
        """Run a mutating systemctl command.

        Args:
            command: systemctl verb (start, stop, restart, kill).
            name: Service name.
            extra: Additional arguments placed before the unit.

        Raises:
            ServiceControlError: If the command fails or cannot be run.
        """
        args = ["sudo"] if self._use_sudo else []
        args.extend(["systemctl", command, *extra, unit_name(name)])

        logger.info("Executing systemctl %s for %s", command, name)

        try:
            result = run_command(args, timeout=self._CONTROL_TIMEOUT)
        except (OSError, subprocess.SubprocessError) as e:
            msg = f"systemctl {command} {name} could not be run: {e}"
            raise ServiceControlError(msg) from e

        if not result.success:
            error_msg = result.error_text or f"systemctl {command} failed"
            raise ServiceControlError(error_msg)


def _parse_show_output(output: str) -> list[dict[str, str]]:
    """Split ``systemctl show`` output into one property dict per unit.

    Units are separated by blank lines, in the order they were requested.
    """
    blocks: list[dict[str, str]] = []
    current: dict[str, str] = {}
    for line in output.splitlines():
        if not line.strip():
            if current:
                blocks.append(current)
                current = {}
            continue
        key, sep, value = line.partition("=")
        if sep:
            current[key.strip()] = value.strip()
    if current:
        blocks.append(current)
    return blocks


def _snapshot_from_properties(name: str, props: dict[str, str]) -> ServiceSnapshot:
    """Build a snapshot from ``systemctl show`` properties."""
    if not props or props.get("LoadState") == "not-found":
        return missing_snapshot(name)

    active = props.get("ActiveState", "")
    if active in _RUNNING_STATES:
        state = ServiceState.RUNNING
    elif active in _STOPPED_STATES:
        state = ServiceState.STOPPED
    else:
        state = ServiceState.UNKNOWN

    if props.get("LoadState") == "masked":
        mode = StartupMode.DISABLED
    else:
        mode = _STARTUP_MODES.get(props.get("UnitFileState", ""), StartupMode.UNKNOWN)

    return ServiceSnapshot(name=name, state=state, startup_mode=mode)
