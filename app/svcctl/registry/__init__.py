"""Service registries for querying and controlling host services.

This module provides the abstract registry interface and the systemd
implementation.
"""

from svcctl.registry.base import ServiceControlError, ServiceRegistry
from svcctl.registry.systemd import SystemdRegistry

__all__ = ["ServiceControlError", "ServiceRegistry", "SystemdRegistry"]
