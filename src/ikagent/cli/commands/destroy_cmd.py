"""Destroy command - remove a dev environment's container and clone."""

import click

from ikagent.cli.alias import alias
from ikagent.cli.commands.shared import resolve_clone
from ikagent.cli.ensure import Ensure
from ikagent.cli.output import user_output, user_warning
from ikagent.core.clones import remove_clone_at
from ikagent.core.containers import get_container
from ikagent.core.context import IkagentContext
from ikagent.core.env import template_variables
from ikagent.core.init_ops import run_scripts
from ikagent.core.project_config import load_project_config


@alias("rm")
@click.command("destroy")
@click.argument("clone", required=False)
@click.option("-f", "--force", is_flag=True, help="Do not prompt for confirmation.")
@click.option(
    "--clone/--no-clone",
    "remove_clone",
    default=True,
    help="Also delete the clone directory (default: yes).",
)
@click.pass_obj
def destroy_cmd(ctx: IkagentContext, clone: str | None, force: bool, remove_clone: bool) -> None:
    """Destroy a dev environment.

    Runs the configured teardown scripts inside the container, removes the
    container, then deletes the clone directory.
    """
    project = Ensure.in_project(ctx)
    Ensure.docker_running(ctx)

    target = resolve_clone(ctx, project, clone, empty_hint=None)

    if not force:
        if not ctx.picker.confirm(f"Destroy {target.name}?", default=False):
            user_output("Cancelled")
            return

    container = get_container(ctx.docker, ctx.settings, project.name, target.branch)
    config = load_project_config(project.config_path)

    if container is not None and config.teardown:
        user_output("Running teardown scripts...")
        try:
            run_scripts(
                ctx.docker,
                container.name,
                config.teardown,
                template_variables(project.name, target.branch),
            )
        except RuntimeError:
            user_warning("Teardown scripts failed, continuing with destroy...")

    if container is not None:
        user_output("Removing container...")
        ctx.docker.remove_container(container.name)

    if remove_clone:
        user_output("Removing clone...")
        remove_clone_at(target.path)

    user_output(click.style("Done", fg="green"))
