"""Status command implementation.

Shows what a lifecycle command would do right now: the classified plan
with live service state, plus the last profile recorded in the run state.
Nothing is changed.
"""

from typing import Annotated

import typer

from svcctl.cli.display import create_plan_table, print_plan_summary
from svcctl.cli.lifecycle import fail, load_configuration, open_registry
from svcctl.cli.types import ActionChoice
from svcctl.core.planner import UnknownProfileError, build_plan
from svcctl.core.runner import paging_actions_for
from svcctl.core.state import RunStateStore
from svcctl.models.paging import PagingAction
from svcctl.utils.formatting import console

app = typer.Typer(
    help="Show the plan for a lifecycle command without running it.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def show_status(
    ctx: typer.Context,
    profile: Annotated[
        str | None,
        typer.Option(
            "--profile",
            "-p",
            help="Profile to preview. Without it, the Core plan is shown.",
        ),
    ] = None,
    action: Annotated[
        ActionChoice,
        typer.Option(
            "--action",
            "-a",
            help="Lifecycle action to preview: start, stop or restart.",
            case_sensitive=False,
        ),
    ] = ActionChoice.START,
) -> None:
    """Show the plan for a lifecycle command without running it.

    Examples:
        svcctl status                        # Preview 'svcctl start'
        svcctl status --profile Web          # Preview a switch to Web
        svcctl status -a stop                # Preview 'svcctl stop'
    """
    # Skip if a subcommand is being invoked
    if ctx.invoked_subcommand is not None:
        return

    configuration, policy_path, _ = load_configuration(ctx)
    registry = open_registry()

    state = RunStateStore.for_policy(policy_path).load()
    switched = state.is_profile_switch(profile)
    paging = paging_actions_for(configuration, switched, PagingAction.NO_CHANGE)

    try:
        plan = build_plan(
            configuration,
            registry,
            action.to_action(),
            profile=profile,
            include_paging_restart=bool(paging),
        )
    except UnknownProfileError as e:
        fail(str(e))

    last_run = state.last_run.strftime("%Y-%m-%d %H:%M:%S") if state.last_run else "never"
    console.print(f"Last profile: [info]{state.last_profile or 'none'}[/info]")
    console.print(f"Last run: [muted]{last_run}[/muted]")
    if paging:
        console.print("[warning]Profile switch: the paging cursor will be reset.[/warning]")

    console.print(create_plan_table(plan))
    print_plan_summary(plan)
