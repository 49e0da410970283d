"""Unit tests for SystemdRegistry.

systemctl is never executed; run_command is patched throughout.
"""

import subprocess
from unittest.mock import MagicMock, patch

import pytest
from svcctl.models.service import ServiceState, StartupMode
from svcctl.registry.base import ServiceControlError
from svcctl.registry.systemd import SystemdRegistry, service_name, unit_name
from svcctl.utils.shell import CommandResult

LIST_UNIT_FILES = """\
Su_Auth.service enabled enabled
Su_Gateway.service disabled enabled
Su_Worker@.service static -
cron.service enabled enabled
Su_Pager.service masked enabled
"""

SHOW_OUTPUT = """\
Id=Su_Auth.service
LoadState=loaded
ActiveState=active
UnitFileState=disabled

Id=Su_Gateway.service
LoadState=loaded
ActiveState=inactive
UnitFileState=enabled

Id=Su_Gone.service
LoadState=not-found
ActiveState=inactive
UnitFileState=

Id=Su_Pager.service
LoadState=masked
ActiveState=failed
UnitFileState=masked
"""


def _ok(stdout: str = "") -> CommandResult:
    return CommandResult(stdout=stdout, stderr="", returncode=0)


class TestUnitNames:
    """Tests for unit/service name helpers."""

    def test_unit_name(self) -> None:
        """The .service suffix is added once."""
        assert unit_name("Su_Auth") == "Su_Auth.service"
        assert unit_name("Su_Auth.service") == "Su_Auth.service"

    def test_service_name(self) -> None:
        """The .service suffix is stripped."""
        assert service_name("Su_Auth.service") == "Su_Auth"


class TestIsAvailable:
    """Tests for SystemdRegistry.is_available."""

    @patch("svcctl.registry.systemd.command_exists", return_value=True)
    def test_available(self, mock_exists: MagicMock) -> None:
        """Available when systemctl is on PATH."""
        assert SystemdRegistry().is_available()
        mock_exists.assert_called_once_with("systemctl")


class TestEnumerateInstalled:
    """Tests for SystemdRegistry.enumerate_installed."""

    @patch("svcctl.registry.systemd.run_command")
    def test_filters_prefix_and_templates(self, mock_run: MagicMock) -> None:
        """Only prefixed, non-template services are returned."""
        mock_run.return_value = _ok(LIST_UNIT_FILES)

        names = SystemdRegistry().enumerate_installed("Su_")

        assert names == ["Su_Auth", "Su_Gateway", "Su_Pager"]

    @patch("svcctl.registry.systemd.run_command")
    def test_failure_returns_empty(self, mock_run: MagicMock) -> None:
        """Enumeration never raises."""
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="systemctl", timeout=30)

        assert SystemdRegistry().enumerate_installed("Su_") == []

    @patch("svcctl.registry.systemd.run_command")
    def test_nonzero_exit_returns_empty(self, mock_run: MagicMock) -> None:
        """A failing systemctl yields an empty list."""
        mock_run.return_value = CommandResult(stdout="", stderr="boom", returncode=1)

        assert SystemdRegistry().enumerate_installed("Su_") == []


class TestFetchSnapshots:
    """Tests for SystemdRegistry.fetch_snapshots."""

    @patch("svcctl.registry.systemd.run_command")
    def test_parses_blocks_in_order(self, mock_run: MagicMock) -> None:
        """One snapshot per requested name, mapped from systemd properties."""
        mock_run.return_value = _ok(SHOW_OUTPUT)

        names = ["Su_Auth", "Su_Gateway", "Su_Gone", "Su_Pager"]
        snaps = SystemdRegistry().fetch_snapshots(names)

        assert [s.name for s in snaps] == names
        assert snaps[0].state == ServiceState.RUNNING
        assert snaps[0].startup_mode == StartupMode.MANUAL
        assert snaps[1].state == ServiceState.STOPPED
        assert snaps[1].startup_mode == StartupMode.AUTOMATIC
        assert snaps[2].state == ServiceState.NOT_FOUND
        assert snaps[2].startup_mode == StartupMode.UNKNOWN
        assert snaps[3].state == ServiceState.STOPPED
        assert snaps[3].startup_mode == StartupMode.DISABLED

    @patch("svcctl.registry.systemd.run_command")
    def test_single_batched_call(self, mock_run: MagicMock) -> None:
        """All names are queried with one systemctl show."""
        mock_run.return_value = _ok(SHOW_OUTPUT)

        SystemdRegistry().fetch_snapshots(["Su_Auth", "Su_Gateway"])

        mock_run.assert_called_once()
        args = mock_run.call_args.args[0]
        assert args[:2] == ["systemctl", "show"]
        assert args[-2:] == ["Su_Auth.service", "Su_Gateway.service"]

    @patch("svcctl.registry.systemd.run_command")
    def test_empty_request(self, mock_run: MagicMock) -> None:
        """No names, no call."""
        assert SystemdRegistry().fetch_snapshots([]) == []
        mock_run.assert_not_called()

    @patch("svcctl.registry.systemd.run_command")
    def test_query_failure_yields_unknown(self, mock_run: MagicMock) -> None:
        """A failed query reports UNKNOWN state instead of raising."""
        mock_run.side_effect = OSError("no systemctl")

        snaps = SystemdRegistry().fetch_snapshots(["Su_Auth"])

        assert snaps[0].state == ServiceState.UNKNOWN
        assert snaps[0].startup_mode == StartupMode.UNKNOWN


class TestControl:
    """Tests for start/stop/restart."""

    @patch("svcctl.registry.systemd.run_command")
    def test_start_uses_sudo(self, mock_run: MagicMock) -> None:
        """Mutating commands run through sudo by default."""
        mock_run.return_value = _ok()

        SystemdRegistry().start("Su_Auth")

        assert mock_run.call_args.args[0] == ["sudo", "systemctl", "start", "Su_Auth.service"]

    @patch("svcctl.registry.systemd.run_command")
    def test_without_sudo(self, mock_run: MagicMock) -> None:
        """sudo can be disabled."""
        mock_run.return_value = _ok()

        SystemdRegistry(use_sudo=False).stop("Su_Auth")

        assert mock_run.call_args.args[0] == ["systemctl", "stop", "Su_Auth.service"]

    @patch("svcctl.registry.systemd.run_command")
    def test_forced_stop_kills_first(self, mock_run: MagicMock) -> None:
        """A forced stop sends SIGKILL before stopping."""
        mock_run.return_value = _ok()

        SystemdRegistry(use_sudo=False).stop("Su_Auth", force=True)

        commands = [c.args[0] for c in mock_run.call_args_list]
        assert commands == [
            ["systemctl", "kill", "--signal=SIGKILL", "Su_Auth.service"],
            ["systemctl", "stop", "Su_Auth.service"],
        ]

    @patch("svcctl.registry.systemd.run_command")
    def test_failure_raises_control_error(self, mock_run: MagicMock) -> None:
        """A failing command raises ServiceControlError with stderr."""
        mock_run.return_value = CommandResult(
            stdout="", stderr="Job for Su_Auth.service failed.\n", returncode=1
        )

        with pytest.raises(ServiceControlError, match="Job for Su_Auth.service failed."):
            SystemdRegistry().restart("Su_Auth")

    @patch("svcctl.registry.systemd.run_command")
    def test_timeout_raises_control_error(self, mock_run: MagicMock) -> None:
        """Timeouts are wrapped in ServiceControlError."""
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="systemctl", timeout=120)

        with pytest.raises(ServiceControlError, match="could not be run"):
            SystemdRegistry().start("Su_Auth")
