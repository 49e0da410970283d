"""Operators for executing service lifecycle actions."""

from svcctl.operators.service import ServiceOperator

__all__ = ["ServiceOperator"]
