"""svcctl - Policy-gated lifecycle control for host service groups."""

__version__ = "0.4.0"
