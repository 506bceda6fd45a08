"""List command - show clones and their container status."""

import click
from rich.console import Console
from rich.table import Table

from ikagent.cli.alias import alias
from ikagent.cli.ensure import Ensure
from ikagent.cli.output import user_output
from ikagent.core.clones import list_clones
from ikagent.core.containers import list_project_containers
from ikagent.core.context import IkagentContext
from ikagent.core.docker.types import ContainerInfo
from ikagent.core.naming import project_container_prefix, sanitize_branch_for_container


def _format_status(container: ContainerInfo | None) -> str:
    if container is None:
        return "[red]no container[/red]"
    if container.is_running:
        return "[green]running[/green]"
    return "[yellow]stopped[/yellow]"


@alias("ls")
@click.command("list")
@click.pass_obj
def list_cmd(ctx: IkagentContext) -> None:
    """List dev environments for this project."""
    project = Ensure.in_project(ctx)
    Ensure.docker_running(ctx)

    clones = list_clones(ctx.git, project)
    containers = list_project_containers(ctx.docker, ctx.settings, project.name)

    if not clones and not containers:
        user_output("No dev environments found")
        user_output("\nRun 'ikagent create <branch>' to create one.")
        return

    prefix = project_container_prefix(ctx.settings.container_prefix, project.name)
    by_branch = {c.name[len(prefix) :]: c for c in containers}

    table = Table(title=f"Dev environments for {project.name}", title_justify="left")
    table.add_column("Clone", style="bold")
    table.add_column("Branch")
    table.add_column("Status")
    table.add_column("Container", style="dim")

    for clone in clones:
        container = by_branch.get(sanitize_branch_for_container(clone.branch))
        table.add_row(
            clone.name,
            clone.branch,
            _format_status(container),
            container.short_id if container is not None else "",
        )

    console = Console(highlight=False)
    console.print(table)
    console.print(f"{len(clones)} environment(s)")
