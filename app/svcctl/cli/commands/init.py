"""Init command implementation.

Creates a starter policy.toml to be edited by hand.
"""

from pathlib import Path
from typing import Annotated, Any

import typer

from svcctl.cli.lifecycle import policy_path_from
from svcctl.core.policy import PolicyError, save_policy, starter_policy
from svcctl.utils.formatting import (
    console,
    print_error,
    print_info,
    print_success,
    print_warning,
)

app = typer.Typer(
    help="Create a starter policy file.",
    invoke_without_command=True,
)


def _show_policy_summary(policy: dict[str, Any], output_path: Path) -> None:
    """Display a summary of the starter policy."""
    console.print()
    console.print("[bold]Policy Summary[/bold]")
    console.print(f"  Output: [muted]{output_path}[/muted]")
    console.print(f"  Prefix: [info]{policy['prefix']}[/info]")
    console.print(f"  Profiles: [info]{', '.join(sorted(policy['profiles']))}[/info]")
    console.print()


@app.callback(invoke_without_command=True)
def init_policy(
    ctx: typer.Context,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output path for the policy file.",
        ),
    ] = None,
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Overwrite an existing policy without prompting.",
        ),
    ] = False,
) -> None:
    """Create a starter policy file.

    The starter policy lists example Core services, two profiles and the
    paging settings. Edit it to match the host before the first run.

    Examples:
        svcctl init                    # Create policy in default location
        svcctl init --output my.toml   # Create policy at custom path
        svcctl init --force            # Overwrite existing policy
    """
    # Skip if a subcommand is being invoked
    if ctx.invoked_subcommand is not None:
        return

    output_path = output or policy_path_from(ctx)

    if output_path.exists():
        if not force:
            print_error(f"Policy already exists: {output_path}")
            print_info("Use --force to overwrite or specify a different path with --output.")
            raise typer.Exit(code=1)
        print_warning(f"Overwriting existing policy: {output_path}")

    policy = starter_policy()
    _show_policy_summary(policy, output_path)

    try:
        saved_path = save_policy(policy, output_path)
    except PolicyError as e:
        print_error(f"Failed to save policy: {e}")
        raise typer.Exit(code=1) from e

    print_success(f"Policy created: {saved_path}")
