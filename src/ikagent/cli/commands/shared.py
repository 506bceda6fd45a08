"""Helpers shared by the clone-addressed commands (start, stop, destroy)."""

from ikagent.cli.ensure import Ensure, fail
from ikagent.core.clones import CloneInfo, find_clone, list_clones
from ikagent.core.context import IkagentContext
from ikagent.core.picker import Choice, filter_choices
from ikagent.core.project_discovery import ProjectContext


def resolve_clone(
    ctx: IkagentContext,
    project: ProjectContext,
    clone_arg: str | None,
    *,
    empty_hint: str | None = "Run 'ikagent create <branch>' first.",
) -> CloneInfo:
    """Find the clone named by `clone_arg` (name or branch), or ask the picker.

    Raises:
        SystemExit: If no clone matches, none exist, or the picker is cancelled
    """
    clones = list_clones(ctx.git, project)

    if clone_arg is not None:
        return Ensure.not_none(
            find_clone(clones, clone_arg),
            f"No clone found: '{clone_arg}'",
            "Run 'ikagent list' to see available environments",
        )

    Ensure.invariant(len(clones) > 0, "No clones found.", empty_hint)

    choices = [Choice(name=c.name, value=c, description=c.branch) for c in clones]
    selected = ctx.picker.search("Search for a clone", lambda q: filter_choices(choices, q))
    if selected is None:
        fail("Cancelled")
    return selected
