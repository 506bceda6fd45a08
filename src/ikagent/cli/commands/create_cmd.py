"""Create command - clone a branch and start a container for it."""

import click

from ikagent.cli.alias import alias
from ikagent.cli.ensure import Ensure, fail
from ikagent.cli.output import user_output
from ikagent.core.clones import BranchNotFoundError, create_clone
from ikagent.core.containers import get_container
from ikagent.core.context import IkagentContext
from ikagent.core.env import resolve_environment, template_variables
from ikagent.core.init_ops import ScriptError, copy_files_to_clone, run_scripts
from ikagent.core.naming import container_name, sanitize_branch_for_container
from ikagent.core.picker import select_branch
from ikagent.core.project_config import load_project_config
from ikagent.core.provisioner import (
    ContainerOptions,
    cache_init_commands,
    create_container,
    ensure_image,
    image_tag,
)


def attach_and_exit(ctx: IkagentContext, name: str) -> None:
    """Attach to `name` and exit with the shell's exit code."""
    user_output(f"Attaching to {name}...")
    exit_code = ctx.docker.attach(name, ctx.settings.shell)
    raise SystemExit(exit_code)


@alias("c")
@click.command("create")
@click.argument("branch", required=False)
@click.option(
    "--attach/--no-attach", default=True, help="Attach to the container after creation."
)
@click.option("--rebuild", is_flag=True, help="Rebuild the project image first.")
@click.pass_obj
def create_cmd(ctx: IkagentContext, branch: str | None, attach: bool, rebuild: bool) -> None:
    """Create a dev environment for BRANCH.

    Clones the project into .ikagent/clones/, starts a container with the
    clone mounted at /workspace, runs cache setup and init scripts, then
    attaches. Without BRANCH, pick one interactively.
    """
    project = Ensure.in_project(ctx)
    Ensure.docker_running(ctx)

    if branch is None:
        branch = Ensure.not_none(select_branch(ctx.picker, ctx.git, project.root), "Cancelled")

    Ensure.invariant(
        ctx.git.branch_exists(project.root, branch),
        f"Branch '{branch}' does not exist locally or remotely",
    )

    name = container_name(ctx.settings.container_prefix, project.name, branch)

    existing = get_container(ctx.docker, ctx.settings, project.name, branch)
    if existing is not None:
        user_output(f"Container for {project.name}/{branch} already exists")
        if attach:
            if not existing.is_running:
                user_output("Starting stopped container...")
                ctx.docker.start_container(name)
            attach_and_exit(ctx, name)
        return

    built = ensure_image(
        ctx.docker,
        ctx.settings,
        project,
        rebuild=rebuild,
        confirm=lambda message: ctx.picker.confirm(message, default=True),
    )
    if built:
        user_output(f"Built image {image_tag(ctx.settings, project.name)}")

    config = load_project_config(project.config_path)

    user_output(f"Creating clone for branch '{branch}'...")
    try:
        clone_path = create_clone(ctx.git, project, branch)
    except BranchNotFoundError as e:
        fail(str(e), f"The partial clone was left at {e.clone_path} for inspection.")
    user_output(f"Clone created at {clone_path}")

    if config.copy:
        user_output("Copying files...")
        copy_files_to_clone(config.copy, project.root, clone_path)

    env = resolve_environment(config, project.root, project.name, branch)

    user_output("Creating container...")
    container_id = create_container(
        ctx.docker,
        ctx.settings,
        ContainerOptions(
            project=project.name,
            branch=branch,
            clone_path=clone_path,
            network=config.network,
            caches=config.caches,
            env=env,
        ),
    )
    user_output(f"Container created: {container_id[:12]}")

    if config.network:
        user_output(f"Joined network: {config.network}")
    if config.caches:
        user_output(f"Cache volume mounted: {', '.join(c.value for c in config.caches)}")

    try:
        cache_commands = cache_init_commands(config.caches, ctx.settings)
        if cache_commands:
            user_output("Configuring caches...")
            run_scripts(ctx.docker, name, cache_commands)

        if config.init:
            user_output("Running init scripts...")
            run_scripts(ctx.docker, name, config.init, template_variables(project.name, branch))
    except ScriptError as e:
        fail(str(e), f"The container {name} is still running; fix the script and re-run it.")

    if attach:
        attach_and_exit(ctx, name)

    user_output(f"\nTo attach: ikagent attach {sanitize_branch_for_container(branch)}")
