"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

import sys

from rich.console import Console
from rich.table import Table

from svcctl.core.theme import get_theme
from svcctl.models.service import ServiceState


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())


def create_table(title: str) -> Table:
    """Create a pre-configured table with the svcctl header and border styles.

    Args:
        title: Table title.

    Returns:
        Empty Rich Table; callers add their own columns.
    """
    return Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )


def format_state(state: ServiceState) -> str:
    """Format a service state with color markup.

    Args:
        state: Observed service state.

    Returns:
        Rich markup string for state display.
    """
    styles = {
        ServiceState.RUNNING: "running",
        ServiceState.STOPPED: "stopped",
        ServiceState.NOT_FOUND: "missing",
    }
    style = styles.get(state, "muted")
    return f"[{style}]{state.value}[/]"


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")
