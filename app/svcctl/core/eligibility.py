"""Eligibility classification for planned services.

A single total function maps a service's exception membership, prefix
conformance and startup mode to an EligibilityDecision. Rows are
evaluated in priority order; exception status wins over the prefix gate,
and Disabled is the only mode that skips an exception.
"""

from svcctl.models.plan import EligibilityDecision
from svcctl.models.service import StartupMode

EXCEPTION_DISABLED = EligibilityDecision(False, True, "Disabled (Exception → warn & skip)")
EXCEPTION_AUTOMATIC = EligibilityDecision(True, True, "Automatic & in Exceptions (confirm)")
EXCEPTION_OTHER = EligibilityDecision(True, True, "In Exceptions (confirm)")
NOT_PREFIXED = EligibilityDecision(False, False, "Not prefixed (skip)")
MANUAL = EligibilityDecision(True, False, "Manual (eligible)")
DISABLED = EligibilityDecision(False, False, "Disabled (skip)")
AUTOMATIC = EligibilityDecision(False, False, "Automatic (skip unless Exception)")
UNKNOWN_MODE = EligibilityDecision(False, False, "Unknown StartMode (skip)")

_PREFIXED: dict[StartupMode, EligibilityDecision] = {
    StartupMode.MANUAL: MANUAL,
    StartupMode.DISABLED: DISABLED,
    StartupMode.AUTOMATIC: AUTOMATIC,
}

# Decisions logged at warning severity when skipped
WARN_DECISIONS: frozenset[EligibilityDecision] = frozenset({EXCEPTION_DISABLED, NOT_PREFIXED})


def classify(
    service: str,
    prefix: str,
    is_exception: bool,
    startup_mode: StartupMode,
) -> EligibilityDecision:
    """Decide whether a service may be acted upon.

    Args:
        service: Service name.
        prefix: Configured name prefix.
        is_exception: Whether the service is listed in the exceptions.
        startup_mode: Startup mode reported by the registry.

    Returns:
        The matching EligibilityDecision.
    """
    if is_exception:
        if startup_mode == StartupMode.DISABLED:
            return EXCEPTION_DISABLED
        if startup_mode == StartupMode.AUTOMATIC:
            return EXCEPTION_AUTOMATIC
        return EXCEPTION_OTHER

    if not service.startswith(prefix):
        return NOT_PREFIXED

    return _PREFIXED.get(startup_mode, UNKNOWN_MODE)
