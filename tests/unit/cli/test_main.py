"""Unit tests for the main application and global options."""

import logging
from pathlib import Path

from rich.logging import RichHandler
from svcctl import __version__
from svcctl.cli.main import app
from typer.testing import CliRunner

runner = CliRunner()


class TestMainApp:
    """Tests for the svcctl entry point."""

    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert f"svcctl version {__version__}" in result.output

    def test_help_lists_commands(self) -> None:
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        for command in ("start", "stop", "restart", "status", "check", "paging", "logs", "init"):
            assert command in result.output

    def test_paging_help(self) -> None:
        result = runner.invoke(app, ["paging", "--help"])

        assert result.exit_code == 0
        assert "previous" in result.output

    def test_verbose_enables_console_diagnostics(self, policy_file: Path) -> None:
        result = runner.invoke(app, ["-v", "--config", str(policy_file), "check"])

        assert result.exit_code == 0
        package_logger = logging.getLogger("svcctl")
        assert package_logger.level == logging.DEBUG
        assert any(isinstance(h, RichHandler) for h in package_logger.handlers)

    def test_default_audit_log_location(self, tmp_path: Path) -> None:
        """Fatal errors are recorded in the XDG state directory by default."""
        runner.invoke(app, ["--config", str(tmp_path / "missing.toml"), "check"])

        audit_log = tmp_path / "xdg-state" / "svcctl" / "svcctl.log"
        assert "ERROR: Policy not found" in audit_log.read_text()
