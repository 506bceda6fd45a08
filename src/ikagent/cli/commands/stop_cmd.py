"""Stop command - stop a dev environment without removing it."""

import click

from ikagent.cli.alias import alias
from ikagent.cli.commands.shared import resolve_clone
from ikagent.cli.ensure import Ensure
from ikagent.cli.output import user_output
from ikagent.core.containers import get_container
from ikagent.core.context import IkagentContext


@alias("st")
@click.command("stop")
@click.argument("clone", required=False)
@click.pass_obj
def stop_cmd(ctx: IkagentContext, clone: str | None) -> None:
    """Stop a dev environment (it can be restarted with `start`)."""
    project = Ensure.in_project(ctx)
    Ensure.docker_running(ctx)

    target = resolve_clone(ctx, project, clone)
    container = Ensure.not_none(
        get_container(ctx.docker, ctx.settings, project.name, target.branch),
        f"No container found for {target.name}",
    )

    if not container.is_running:
        user_output(f"{target.name} is already stopped")
        return

    user_output(f"Stopping {target.name}...")
    ctx.docker.stop_container(container.name)
    user_output(click.style("Stopped", fg="green"))
