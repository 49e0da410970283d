"""Logs command implementation.

Follows the log of a service: the file configured for it in the policy's
``[logs]`` table, or its systemd journal otherwise.
"""

from typing import Annotated

import typer

from svcctl.cli.lifecycle import fail, load_configuration
from svcctl.registry.systemd import unit_name
from svcctl.utils.formatting import print_info
from svcctl.utils.shell import command_exists, run_interactive

app = typer.Typer(
    help="Show or follow the log of a service.",
    invoke_without_command=True,
    # Options may follow the service name
    context_settings={"allow_interspersed_args": True},
)


def build_log_command(
    service: str,
    log_file: str | None,
    lines: int,
    follow: bool,
) -> list[str]:
    """Build the command line that shows a service log.

    Args:
        service: Service name.
        log_file: Configured log file, or None to read the journal.
        lines: Number of trailing lines to show.
        follow: Keep following new output.

    Returns:
        Command and arguments.
    """
    if log_file is not None:
        args = ["tail", "-n", str(lines)]
        if follow:
            args.append("-F")
        args.append(log_file)
        return args

    args = ["journalctl", "-u", unit_name(service), "-n", str(lines), "--no-pager"]
    if follow:
        args.append("-f")
    return args


@app.callback(invoke_without_command=True)
def show_logs(
    ctx: typer.Context,
    service: Annotated[str, typer.Argument(help="Service whose log to show.")],
    lines: Annotated[
        int,
        typer.Option(
            "--lines",
            "-l",
            min=1,
            help="Number of trailing lines to show.",
        ),
    ] = 50,
    no_follow: Annotated[
        bool,
        typer.Option(
            "--no-follow",
            help="Print the last lines and exit instead of following.",
        ),
    ] = False,
) -> None:
    """Show or follow the log of a service.

    Examples:
        svcctl logs Su_Auth                  # Follow the Su_Auth log
        svcctl logs Su_Auth -l 200 --no-follow
    """
    # Skip if a subcommand is being invoked
    if ctx.invoked_subcommand is not None:
        return

    configuration, _, _ = load_configuration(ctx, show_issues=False)
    log_path = configuration.log_files.get(service)

    if log_path is not None and not log_path.exists():
        fail(f"Log file not found: {log_path}")

    args = build_log_command(
        service,
        str(log_path) if log_path is not None else None,
        lines,
        follow=not no_follow,
    )
    if not command_exists(args[0]):
        fail(f"'{args[0]}' is not available on this system.")

    print_info(f"Showing log of {service}: {' '.join(args)}")
    try:
        returncode = run_interactive(args)
    except KeyboardInterrupt:
        return
    except OSError as e:
        fail(f"Failed to run {args[0]}: {e}")

    if returncode != 0:
        raise typer.Exit(code=returncode)
