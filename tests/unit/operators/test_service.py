"""Unit tests for ServiceOperator."""

import logging

import pytest
from fakes import FakeRegistry
from svcctl.models.plan import LifecycleAction, Outcome
from svcctl.models.service import ServiceState, StartupMode
from svcctl.operators.service import ServiceOperator


@pytest.fixture
def fake() -> FakeRegistry:
    """Registry with one running and one stopped service."""
    registry = FakeRegistry()
    registry.add("Su_Up", ServiceState.RUNNING, StartupMode.MANUAL)
    registry.add("Su_Down", ServiceState.STOPPED, StartupMode.MANUAL)
    return registry


class TestStart:
    """Tests for START."""

    def test_starts_stopped_service(self, fake: FakeRegistry) -> None:
        """A stopped service is started."""
        result = ServiceOperator(fake).apply("Su_Down", LifecycleAction.START)

        assert result.outcome == Outcome.SUCCESS
        assert result.message == "Started"
        assert fake.calls == [("start", "Su_Down", False)]
        assert fake.state_of("Su_Down") == ServiceState.RUNNING

    def test_start_is_idempotent(self, fake: FakeRegistry) -> None:
        """Starting a running service issues no command."""
        result = ServiceOperator(fake).apply("Su_Up", LifecycleAction.START)

        assert result.success
        assert result.outcome == Outcome.NO_CHANGE
        assert result.message == "Already running"
        assert fake.calls == []


class TestStop:
    """Tests for STOP."""

    def test_stops_running_service(self, fake: FakeRegistry) -> None:
        """A running service is stopped."""
        result = ServiceOperator(fake).apply("Su_Up", LifecycleAction.STOP)

        assert result.outcome == Outcome.SUCCESS
        assert fake.state_of("Su_Up") == ServiceState.STOPPED

    def test_stop_is_idempotent(self, fake: FakeRegistry) -> None:
        """Stopping a stopped service issues no command."""
        result = ServiceOperator(fake).apply("Su_Down", LifecycleAction.STOP)

        assert result.outcome == Outcome.NO_CHANGE
        assert result.message == "Already stopped"
        assert fake.calls == []

    def test_force_is_passed(self, fake: FakeRegistry) -> None:
        """The force flag reaches the registry."""
        ServiceOperator(fake, force=True).apply("Su_Up", LifecycleAction.STOP)

        assert fake.calls == [("stop", "Su_Up", True)]


class TestRestart:
    """Tests for RESTART."""

    def test_restarts_running_service(self, fake: FakeRegistry) -> None:
        """A running service is restarted."""
        result = ServiceOperator(fake).apply("Su_Up", LifecycleAction.RESTART)

        assert result.outcome == Outcome.SUCCESS
        assert result.performed == LifecycleAction.RESTART
        assert fake.calls == [("restart", "Su_Up", False)]

    def test_restart_of_stopped_service_starts_it(self, fake: FakeRegistry) -> None:
        """Restarting a stopped service starts it instead."""
        result = ServiceOperator(fake).apply("Su_Down", LifecycleAction.RESTART)

        assert result.outcome == Outcome.SUCCESS
        assert result.action == LifecycleAction.RESTART
        assert result.performed == LifecycleAction.START
        assert fake.calls == [("start", "Su_Down", False)]
        assert fake.state_of("Su_Down") == ServiceState.RUNNING


class TestFailures:
    """Tests for error handling."""

    def test_missing_service_is_error(self, fake: FakeRegistry) -> None:
        """A service unknown to the registry yields an ERROR without a command."""
        result = ServiceOperator(fake).apply("Su_Gone", LifecycleAction.START)

        assert result.failed
        assert result.outcome == Outcome.ERROR
        assert result.error == "Service not found"
        assert fake.calls == []

    def test_control_error_is_captured(self, fake: FakeRegistry) -> None:
        """Registry failures become ERROR results instead of exceptions."""
        fake.failures["Su_Down"] = "Job for Su_Down.service failed"

        result = ServiceOperator(fake).apply("Su_Down", LifecycleAction.START)

        assert result.failed
        assert result.error == "Job for Su_Down.service failed"


class TestDryRun:
    """Tests for dry-run mode."""

    def test_dry_run_touches_nothing(self, fake: FakeRegistry) -> None:
        """Dry-run reports WHAT_IF without querying or commanding."""
        operator = ServiceOperator(fake, dry_run=True)

        result = operator.apply("Su_Down", LifecycleAction.START)

        assert operator.dry_run
        assert result.outcome == Outcome.WHAT_IF
        assert result.message == "Would start"
        assert fake.calls == []
        assert fake.fetches == []


class TestAuditLines:
    """Tests for the audit trail written by the operator."""

    def test_one_line_per_action(
        self, fake: FakeRegistry, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Every apply writes exactly one audit line."""
        fake.failures["Su_Up"] = "boom"
        operator = ServiceOperator(fake)

        with caplog.at_level(logging.INFO, logger="svcctl.audit"):
            operator.apply("Su_Down", LifecycleAction.START)
            operator.apply("Su_Down", LifecycleAction.START)
            operator.apply("Su_Up", LifecycleAction.STOP)

        assert caplog.messages == [
            "start Su_Down: success (Started)",
            "start Su_Down: no change (Already running)",
            "stop Su_Up: ERROR boom",
        ]
        assert caplog.records[2].levelno == logging.ERROR

    def test_dry_run_line(self, fake: FakeRegistry, caplog: pytest.LogCaptureFixture) -> None:
        """Dry-run writes a WhatIf line."""
        with caplog.at_level(logging.INFO, logger="svcctl.audit"):
            ServiceOperator(fake, dry_run=True).apply("Su_Up", LifecycleAction.RESTART)

        assert caplog.messages == ["WhatIf: restart Su_Up"]
