"""Policy models for declarative service control.

This module defines the Pydantic models representing the policy.toml
structure, and the normalized, immutable Configuration derived from it.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _clean_names(names: list[str]) -> list[str]:
    """Strip service names and reject empty ones."""
    cleaned: list[str] = []
    for name in names:
        stripped = name.strip()
        if not stripped:
            msg = "Service names cannot be empty"
            raise ValueError(msg)
        cleaned.append(stripped)
    return cleaned


class PagingSection(BaseModel):
    """Paging section of the policy.

    Describes where the paging cursor lives and how it is advanced.

    Attributes:
        service_name: Service restarted after the cursor moves.
        settings_path: Settings file (JSON) holding the query.
        settings_key: Key of the query value (dotted path for nested objects).
        page_size: Number of rows per page.
        enforce_fetch_next: Keep a FETCH NEXT clause in sync with page_size.
        reset_on_profile_change: Reset the cursor when the profile changes.
    """

    model_config = ConfigDict(extra="forbid")

    service_name: Annotated[str, Field(min_length=1, description="Paging service")]
    settings_path: Annotated[Path, Field(description="Settings file path")]
    settings_key: Annotated[str, Field(min_length=1, description="Query setting key")]
    page_size: Annotated[int, Field(gt=0, description="Rows per page")]
    enforce_fetch_next: Annotated[bool, Field(description="Maintain FETCH NEXT")] = True
    reset_on_profile_change: Annotated[
        bool,
        Field(description="Reset cursor on profile switch"),
    ] = True


class PolicyDocument(BaseModel):
    """Complete policy document as read from disk.

    Attributes:
        prefix: Name prefix every touched service must carry.
        core: Services handled by Core-only operations.
        profiles: Mutually-exclusive service groups by name.
        exceptions: Services that always need interactive confirmation.
        paging: Paging cursor settings.
        logs: Optional log file per service, used by ``svcctl logs``.
    """

    model_config = ConfigDict(extra="forbid")

    prefix: Annotated[str, Field(description="Service name prefix")]
    core: Annotated[list[str], Field(description="Core services")]
    profiles: Annotated[dict[str, list[str]], Field(description="Profiles")]
    exceptions: Annotated[list[str], Field(description="Exception services")]
    paging: Annotated[PagingSection, Field(description="Paging settings")]
    logs: Annotated[
        dict[str, str],
        Field(default_factory=dict, description="Log file per service"),
    ]

    @field_validator("prefix")
    @classmethod
    def validate_prefix(cls, v: str) -> str:
        """Reject empty or blank prefixes."""
        if not v.strip():
            msg = "prefix cannot be empty"
            raise ValueError(msg)
        return v

    @field_validator("core", "exceptions")
    @classmethod
    def validate_names(cls, v: list[str]) -> list[str]:
        """Strip service names and reject empty ones."""
        return _clean_names(v)

    @field_validator("profiles")
    @classmethod
    def validate_profiles(cls, v: dict[str, list[str]]) -> dict[str, list[str]]:
        """Validate profile names and their service names."""
        cleaned: dict[str, list[str]] = {}
        for profile, names in v.items():
            if not profile.strip():
                msg = "Profile names cannot be empty"
                raise ValueError(msg)
            cleaned[profile] = _clean_names(names)
        return cleaned


@dataclass(frozen=True, slots=True)
class PagingSpec:
    """Normalized paging settings."""

    service_name: str
    settings_path: Path
    settings_key: str
    page_size: int
    enforce_fetch_next: bool = True
    reset_on_profile_change: bool = True


@dataclass(frozen=True, slots=True)
class Configuration:
    """Normalized policy, immutable after load.

    Core and profile sets are meant to be disjoint and prefix-conformant.
    Violations are reported as issues by the resolver and enforced when
    the plan is built and classified.

    Attributes:
        prefix: Name prefix every touched service must carry.
        core: Core service names.
        profiles: Profile name to service names.
        exceptions: Exception service names.
        paging: Paging cursor settings.
        log_files: Log file per service.
    """

    prefix: str
    core: frozenset[str]
    profiles: Mapping[str, frozenset[str]]
    exceptions: frozenset[str]
    paging: PagingSpec
    log_files: Mapping[str, Path] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def profile_names(self) -> list[str]:
        """Profile names in alphabetical order."""
        return sorted(self.profiles)

    def is_exception(self, service: str) -> bool:
        """Check if a service is listed in the exceptions."""
        return service in self.exceptions
