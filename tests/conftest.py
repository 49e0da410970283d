"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import json
import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest
import tomli_w
from fakes import SAMPLE_QUERY, FakeRegistry
from svcctl.core.audit import AUDIT_LOGGER_NAME
from svcctl.core.policy import resolve_configuration
from svcctl.models.policy import Configuration
from svcctl.models.service import ServiceState, StartupMode


@pytest.fixture(autouse=True)
def isolated_xdg(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Point XDG directories into the test's tmp_path and reset the audit logger."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path / "xdg-state"))
    monkeypatch.delenv("SVCCTL_CONFIG", raising=False)
    monkeypatch.delenv("SVCCTL_THEME", raising=False)

    yield

    for name in (AUDIT_LOGGER_NAME, "svcctl"):
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        logger.setLevel(logging.NOTSET)


@pytest.fixture
def settings_file(tmp_path: Path) -> Path:
    """Pager settings file holding the paging query."""
    path = tmp_path / "pager" / "appsettings.json"
    path.parent.mkdir(parents=True)
    path.write_text(json.dumps({"Pager": {"Query": SAMPLE_QUERY}, "Other": 1}, indent=2))
    return path


@pytest.fixture
def policy_document(settings_file: Path) -> dict[str, Any]:
    """Policy document with Core, two profiles and an exception."""
    return {
        "prefix": "Su_",
        "core": ["Su_Auth", "Su_Gateway"],
        "exceptions": ["Su_Vault"],
        "profiles": {
            "Web": ["Su_WebFront", "Su_WebWorker"],
            "DBOracle": ["Su_OraBridge"],
        },
        "paging": {
            "service_name": "Su_Pager",
            "settings_path": str(settings_file),
            "settings_key": "Pager.Query",
            "page_size": 1000000,
        },
    }


@pytest.fixture
def configuration(policy_document: dict[str, Any]) -> Configuration:
    """Resolved configuration for the sample policy."""
    config, _ = resolve_configuration(policy_document)
    return config


@pytest.fixture
def policy_file(tmp_path: Path, policy_document: dict[str, Any]) -> Path:
    """Sample policy written as TOML."""
    path = tmp_path / "policy.toml"
    path.write_bytes(tomli_w.dumps(policy_document).encode())
    return path


@pytest.fixture
def registry() -> FakeRegistry:
    """Registry with every sample service installed, stopped and Manual."""
    fake = FakeRegistry()
    for name in (
        "Su_Auth",
        "Su_Gateway",
        "Su_WebFront",
        "Su_WebWorker",
        "Su_OraBridge",
        "Su_Pager",
    ):
        fake.add(name, ServiceState.STOPPED, StartupMode.MANUAL)
    fake.add("Su_Vault", ServiceState.STOPPED, StartupMode.AUTOMATIC)
    return fake
