"""Main CLI application entry point.

Defines the Typer application and global options.
"""

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.logging import RichHandler

from svcctl import __version__
from svcctl.cli.commands import check, init, logs, paging, restart, start, status, stop
from svcctl.core.audit import configure_audit_log
from svcctl.core.paths import get_audit_log_path
from svcctl.utils.formatting import err_console, print_warning

# Create main Typer app
app = typer.Typer(
    name="svcctl",
    help="Policy-gated lifecycle control for host services.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"svcctl version {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool, log_file: Path) -> None:
    """Attach the audit file handler and, if verbose, console diagnostics."""
    try:
        configure_audit_log(log_file)
    except OSError as e:
        print_warning(f"Cannot write audit log {log_file}: {e}")

    if verbose:
        package_logger = logging.getLogger("svcctl")
        if not any(isinstance(h, RichHandler) for h in package_logger.handlers):
            package_logger.addHandler(
                RichHandler(console=err_console, show_path=False, markup=False)
            )
        package_logger.setLevel(logging.DEBUG)


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            envvar="SVCCTL_CONFIG",
            help="Policy file to use instead of ~/.config/svcctl/policy.toml.",
        ),
    ] = None,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Audit log file (default: ~/.local/state/svcctl/svcctl.log).",
        ),
    ] = None,
) -> None:
    """svcctl - Policy-gated lifecycle control for host services.

    Start, stop and restart the Core services or a named profile of a
    host, following the eligibility rules of a declarative policy file.
    """
    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config"] = config
    ctx.obj["log_file"] = log_file or get_audit_log_path()

    _configure_logging(verbose, ctx.obj["log_file"])


# Register commands
app.add_typer(start.app, name="start")
app.add_typer(stop.app, name="stop")
app.add_typer(restart.app, name="restart")
app.add_typer(status.app, name="status")
app.add_typer(check.app, name="check")
app.add_typer(paging.app, name="paging")
app.add_typer(logs.app, name="logs")
app.add_typer(init.app, name="init")


if __name__ == "__main__":
    app()
