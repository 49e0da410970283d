"""Audit trail for decisions and actions.

Every decision point writes exactly one line per action taken or skipped
to the ``svcctl.audit`` logger. When a file handler is attached with
:func:`configure_audit_log`, lines take the form ``<timestamp>:: <message>``.
"""

import logging
from enum import Enum
from pathlib import Path

AUDIT_LOGGER_NAME = "svcctl.audit"

AUDIT_FORMAT = "%(asctime)s:: %(message)s"
AUDIT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

audit_logger = logging.getLogger(AUDIT_LOGGER_NAME)


class Severity(str, Enum):
    """Severity of an audit line."""

    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"


_LEVELS: dict[Severity, int] = {
    Severity.INFO: logging.INFO,
    Severity.WARN: logging.WARNING,
    Severity.ERROR: logging.ERROR,
}


class _AuditFileHandler(logging.FileHandler):
    """File handler marker so repeated configuration replaces, not stacks."""


def log_line(message: str, severity: Severity = Severity.INFO) -> None:
    """Append one line to the audit trail.

    Args:
        message: Line content, logged verbatim.
        severity: INFO, WARN or ERROR.
    """
    audit_logger.log(_LEVELS[severity], message)


def configure_audit_log(path: Path) -> logging.Handler:
    """Attach an append-only file handler to the audit logger.

    Any handler previously attached by this function is closed and
    replaced.

    Args:
        path: Audit log file. Parent directories are created.

    Returns:
        The attached handler.

    Raises:
        OSError: If the log file cannot be opened.
    """
    for handler in list(audit_logger.handlers):
        if isinstance(handler, _AuditFileHandler):
            audit_logger.removeHandler(handler)
            handler.close()

    path.parent.mkdir(parents=True, exist_ok=True)

    handler = _AuditFileHandler(path, mode="a", encoding="utf-8")
    handler.setFormatter(logging.Formatter(AUDIT_FORMAT, datefmt=AUDIT_DATE_FORMAT))
    audit_logger.addHandler(handler)
    audit_logger.setLevel(logging.INFO)
    return handler
