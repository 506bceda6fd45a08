"""Attach command - open a shell in an existing dev environment."""

import click

from ikagent.cli.alias import alias
from ikagent.cli.commands.create_cmd import attach_and_exit
from ikagent.cli.ensure import Ensure
from ikagent.cli.output import user_output
from ikagent.core.containers import find_container_by_name
from ikagent.core.context import IkagentContext
from ikagent.core.picker import Choice, filter_choices


@alias("at")
@click.command("attach")
@click.argument("container", required=False)
@click.pass_obj
def attach_cmd(ctx: IkagentContext, container: str | None) -> None:
    """Attach to an existing dev environment.

    CONTAINER may be a container name, an ID prefix, or any unique part of
    `project/branch`. Works from any directory. Stopped containers are
    started first.
    """
    Ensure.docker_running(ctx)

    containers = ctx.docker.list_containers(ctx.settings.container_prefix)

    if container is not None:
        info = Ensure.not_none(
            find_container_by_name(containers, container),
            f"No container found: '{container}'",
            "Run 'ikagent list' to see available environments "
            "(a name matching several containers must be made more specific)",
        )
    else:
        Ensure.invariant(len(containers) > 0, "No containers found")
        choices = [
            Choice(
                name=c.label,
                value=c,
                description="running" if c.is_running else "stopped",
            )
            for c in containers
        ]
        info = Ensure.not_none(
            ctx.picker.search("Search for a container", lambda q: filter_choices(choices, q)),
            "Cancelled",
        )

    if not info.is_running:
        user_output("Starting stopped container...")
        ctx.docker.start_container(info.name)

    attach_and_exit(ctx, info.name)
