"""Check command implementation.

Loads and resolves the policy and lists the advisory issues found in it.
"""

import typer

from svcctl.cli.lifecycle import load_configuration
from svcctl.utils.formatting import console, print_success, print_warning

app = typer.Typer(
    help="Validate the policy file.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def check_policy(ctx: typer.Context) -> None:
    """Validate the policy file.

    Fatal problems (missing file, bad syntax, missing keys) exit with
    code 1. Advisory issues are listed but do not fail the check.
    """
    # Skip if a subcommand is being invoked
    if ctx.invoked_subcommand is not None:
        return

    configuration, policy_path, issues = load_configuration(ctx, show_issues=False)

    console.print(f"Policy: [muted]{policy_path}[/muted]")
    console.print(f"  Prefix: [info]{configuration.prefix}[/info]")
    console.print(f"  Core: {len(configuration.core)} service(s)")
    for name in configuration.profile_names:
        services = configuration.profiles[name]
        console.print(f"  Profile [info]{name}[/info]: {len(services)} service(s)")
    console.print(f"  Exceptions: {len(configuration.exceptions)} service(s)")
    console.print(f"  Paging service: [info]{configuration.paging.service_name}[/info]")
    console.print()

    if not issues:
        print_success("No issues found.")
        return

    for issue in issues:
        print_warning(issue)
    console.print(f"\n{len(issues)} issue(s) found.")
