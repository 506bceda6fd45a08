"""Start command - start a stopped dev environment."""

import click

from ikagent.cli.alias import alias
from ikagent.cli.commands.shared import resolve_clone
from ikagent.cli.ensure import Ensure
from ikagent.cli.output import user_output
from ikagent.core.containers import get_container
from ikagent.core.context import IkagentContext


@alias("up")
@click.command("start")
@click.argument("clone", required=False)
@click.pass_obj
def start_cmd(ctx: IkagentContext, clone: str | None) -> None:
    """Start a stopped dev environment.

    CLONE is a clone name or branch; pick one interactively if omitted.
    """
    project = Ensure.in_project(ctx)
    Ensure.docker_running(ctx)

    target = resolve_clone(ctx, project, clone)
    container = Ensure.not_none(
        get_container(ctx.docker, ctx.settings, project.name, target.branch),
        f"No container found for {target.name}",
    )

    if container.is_running:
        user_output(f"{target.name} is already running")
        return

    user_output(f"Starting {target.name}...")
    ctx.docker.start_container(container.name)
    user_output(click.style("Started", fg="green"))
