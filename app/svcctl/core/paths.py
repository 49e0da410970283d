"""XDG-compliant path management for svcctl.

This module provides standardized paths following the XDG Base Directory
Specification for configuration and state storage.

XDG defaults:
- Config: ~/.config/svcctl/
- State: ~/.local/state/svcctl/
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "svcctl"

# Suffix appended to the policy path to locate its run state
STATE_SUFFIX = ".state.json"


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/svcctl/ (or XDG_CONFIG_HOME/svcctl/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_state_dir() -> Path:
    """Get the state directory path.

    Returns:
        Path to ~/.local/state/svcctl/ (or XDG_STATE_HOME/svcctl/).
    """
    return _get_xdg_dir("XDG_STATE_HOME", ".local/state")


def get_policy_path() -> Path:
    """Get the default policy file path.

    Returns:
        Path to ~/.config/svcctl/policy.toml.
    """
    return get_config_dir() / "policy.toml"


def get_audit_log_path() -> Path:
    """Get the default audit log path.

    Returns:
        Path to ~/.local/state/svcctl/svcctl.log.
    """
    return get_state_dir() / "svcctl.log"


def state_path_for(policy_path: Path) -> Path:
    """Get the run state file colocated with a policy file.

    Args:
        policy_path: Path of the policy file.

    Returns:
        ``<policy_path>.state.json``.
    """
    return policy_path.with_name(policy_path.name + STATE_SUFFIX)


def _ensure_dir(path: Path, name: str) -> Path:
    """Create directory if it doesn't exist.

    Args:
        path: Directory path to create.
        name: Human-readable name for error messages.

    Returns:
        The created/existing directory path.

    Raises:
        RuntimeError: If directory cannot be created.
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except PermissionError as e:
        msg = f"Cannot create {name} directory {path}: Permission denied"
        raise RuntimeError(msg) from e
    except OSError as e:
        msg = f"Cannot create {name} directory {path}: {e}"
        raise RuntimeError(msg) from e
    return path


def ensure_parent_dir(path: Path) -> Path:
    """Create the parent directory of a file path if it doesn't exist.

    Args:
        path: File path whose parent should exist.

    Returns:
        The parent directory.

    Raises:
        RuntimeError: If the directory cannot be created.
    """
    return _ensure_dir(path.parent, "parent")
