"""Policy file I/O and configuration resolution.

This module loads the policy document (TOML, or JSON by suffix), validates
it with Pydantic and normalizes it into an immutable Configuration.
Misconfigurations that are enforced later by the eligibility classifier
are reported as advisory issues instead of errors.
"""

import json
import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from tempfile import NamedTemporaryFile
from types import MappingProxyType
from typing import Any

import tomli_w
from pydantic import ValidationError

from svcctl.core.paths import ensure_parent_dir, get_policy_path
from svcctl.models.policy import Configuration, PagingSpec, PolicyDocument

REQUIRED_KEYS: tuple[str, ...] = ("prefix", "core", "profiles", "exceptions", "paging")


class PolicyError(Exception):
    """Base exception for policy-related errors."""


class PolicyNotFoundError(PolicyError):
    """Raised when the policy file is not found."""


class PolicyParseError(PolicyError):
    """Raised when the policy file cannot be parsed."""


class PolicyValidationError(PolicyError):
    """Raised when the policy content is invalid."""


def resolve_configuration(document: Mapping[str, Any]) -> tuple[Configuration, list[str]]:
    """Normalize a raw policy document.

    Args:
        document: Parsed policy document.

    Returns:
        Tuple of (configuration, issues). Issues are advisory, in order:
        Core prefix issues, profile prefix issues, Core/profile overlaps.

    Raises:
        PolicyValidationError: If a required key is missing, the prefix is
            empty or the content doesn't match the schema.
    """
    missing = [key for key in REQUIRED_KEYS if key not in document]
    if missing:
        msg = f"Missing required policy key(s): {', '.join(missing)}"
        raise PolicyValidationError(msg)

    try:
        policy = PolicyDocument.model_validate(dict(document))
    except ValidationError as e:
        raise PolicyValidationError(f"Invalid policy content: {e}") from e

    prefix = policy.prefix
    core = frozenset(policy.core)
    profiles = {name: frozenset(services) for name, services in policy.profiles.items()}

    issues: list[str] = []

    for service in sorted(core):
        if not service.startswith(prefix):
            issues.append(
                f"Core service '{service}' does not start with prefix '{prefix}' "
                "(will warn & skip at runtime)"
            )

    for profile in sorted(profiles):
        for service in sorted(profiles[profile]):
            if not service.startswith(prefix):
                issues.append(
                    f"Profile '{profile}': service '{service}' does not start with "
                    f"prefix '{prefix}' (will warn & skip at runtime)"
                )

    for profile in sorted(profiles):
        for service in sorted(profiles[profile] & core):
            issues.append(
                f"Profile '{profile}': service '{service}' is also in Core "
                "(will be skipped from Profile at runtime)"
            )

    paging = PagingSpec(
        service_name=policy.paging.service_name,
        settings_path=policy.paging.settings_path,
        settings_key=policy.paging.settings_key,
        page_size=policy.paging.page_size,
        enforce_fetch_next=policy.paging.enforce_fetch_next,
        reset_on_profile_change=policy.paging.reset_on_profile_change,
    )

    configuration = Configuration(
        prefix=prefix,
        core=core,
        profiles=MappingProxyType(profiles),
        exceptions=frozenset(policy.exceptions),
        paging=paging,
        log_files=MappingProxyType({name: Path(p) for name, p in policy.logs.items()}),
    )
    return configuration, issues


def read_policy_document(path: Path) -> dict[str, Any]:
    """Read a policy file into a dictionary.

    Args:
        path: Policy file. ``.json`` files are parsed as JSON, anything
            else as TOML.

    Returns:
        Parsed document.

    Raises:
        PolicyNotFoundError: If the file doesn't exist.
        PolicyParseError: If the syntax is invalid.
        PolicyError: If the file cannot be read.
    """
    if not path.exists():
        raise PolicyNotFoundError(f"Policy not found: {path}")

    try:
        if path.suffix.lower() == ".json":
            data = json.loads(path.read_text(encoding="utf-8"))
        else:
            with open(path, "rb") as f:
                data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise PolicyParseError(f"Invalid TOML syntax: {e}") from e
    except json.JSONDecodeError as e:
        raise PolicyParseError(f"Invalid JSON syntax: {e}") from e
    except OSError as e:
        raise PolicyError(f"Failed to read policy: {e}") from e

    if not isinstance(data, dict):
        raise PolicyParseError("Policy document must be a table/object")
    return data


def load_policy(path: Path | None = None) -> tuple[Configuration, list[str]]:
    """Load, validate and resolve a policy file.

    Args:
        path: Path to the policy file. If None, uses default policy path.

    Returns:
        Tuple of (configuration, issues).

    Raises:
        PolicyNotFoundError: If the policy file doesn't exist.
        PolicyParseError: If the syntax is invalid.
        PolicyValidationError: If the content is invalid.
    """
    policy_path = path or get_policy_path()
    return resolve_configuration(read_policy_document(policy_path))


def starter_policy() -> dict[str, Any]:
    """Build the starter policy written by ``svcctl init``.

    Returns:
        Dictionary ready for TOML serialization.
    """
    return {
        "prefix": "Su_",
        "core": ["Su_Auth", "Su_Gateway"],
        "exceptions": [],
        "profiles": {
            "Web": ["Su_WebFront", "Su_WebWorker"],
            "DBOracle": ["Su_OraBridge"],
        },
        "paging": {
            "service_name": "Su_Pager",
            "settings_path": "/etc/su/pager/appsettings.json",
            "settings_key": "Pager.Query",
            "page_size": 1000000,
            "enforce_fetch_next": True,
            "reset_on_profile_change": True,
        },
        "logs": {},
    }


def save_policy(data: Mapping[str, Any], path: Path | None = None) -> Path:
    """Save a policy document to a TOML file.

    The document is validated first. The file is written atomically by
    first writing to a temporary file in the same directory and then
    using os.replace() for atomic rename.

    Args:
        data: Policy document to save.
        path: Path to save the policy. If None, uses default policy path.

    Returns:
        Path where the policy was saved.

    Raises:
        PolicyValidationError: If the document is invalid.
        PolicyError: If the file cannot be written.
    """
    resolve_configuration(data)

    policy_path = path or get_policy_path()
    try:
        ensure_parent_dir(policy_path)
    except RuntimeError as e:
        raise PolicyError(str(e)) from e

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=policy_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(dict(data), f)
        os.replace(str(tmp_path), str(policy_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise PolicyError(f"Failed to write policy: {e}") from e

    return policy_path
