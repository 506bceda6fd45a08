"""Per-branch clones of the project repository.

Each clone is a full `git clone` of the project root living in
`.ikagent/clones/<branch with / replaced by ->`. The clone's `origin` is the
local project checkout; the project's own `origin` (the shared remote) is
registered as `upstream` so branches that were never fetched locally can
still be checked out.
"""

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

from ikagent.cli.output import user_output
from ikagent.core.git.abc import Git
from ikagent.core.naming import clone_dir_name
from ikagent.core.project_discovery import ProjectContext

logger = logging.getLogger(__name__)

UPSTREAM_REMOTE = "upstream"


class BranchNotFoundError(RuntimeError):
    """The requested branch exists in no ref source reachable from the clone."""

    def __init__(self, branch: str, clone_path: Path) -> None:
        super().__init__(f"Could not checkout branch '{branch}' in clone")
        self.branch = branch
        self.clone_path = clone_path


@dataclass(frozen=True)
class CloneInfo:
    """A clone directory and the branch currently checked out in it."""

    name: str
    path: Path
    branch: str


def get_clone_path(project: ProjectContext, branch: str) -> Path:
    return project.clones_dir / clone_dir_name(branch)


def clone_exists(project: ProjectContext, branch: str) -> bool:
    return get_clone_path(project, branch).exists()


def create_clone(git: Git, project: ProjectContext, branch: str) -> Path:
    """Materialize a clone of the project checked out to `branch`.

    An existing directory at the clone path is returned as-is, without
    checking which branch it has checked out.

    Ref sources are tried in order, first hit wins:
    1. local branch in the clone (the project's checked-out branch)
    2. origin/<branch> (any local branch of the project)
    3. upstream/<branch> (fetched on demand from the project's own origin)

    Raises:
        BranchNotFoundError: If no source has the branch. The partially
            initialized clone is left on disk for inspection.
        RuntimeError: If a git command fails
    """
    clone_path = get_clone_path(project, branch)

    if clone_path.exists():
        user_output(f"Clone already exists at {clone_path}")
        return clone_path

    project.clones_dir.mkdir(parents=True, exist_ok=True)

    git.clone_local(project.root, clone_path)

    upstream_url = git.get_remote_url(project.root, "origin")
    if upstream_url is not None:
        git.add_remote(clone_path, UPSTREAM_REMOTE, upstream_url)

    if git.ref_exists(clone_path, f"refs/heads/{branch}"):
        logger.debug("Branch %s exists locally in clone", branch)
        git.checkout(clone_path, branch)
        return clone_path

    if git.ref_exists(clone_path, f"refs/remotes/origin/{branch}"):
        logger.debug("Branch %s found on clone origin", branch)
        git.checkout_new_branch(clone_path, branch, f"origin/{branch}")
        return clone_path

    if upstream_url is not None and git.fetch_branch(clone_path, UPSTREAM_REMOTE, branch):
        logger.debug("Branch %s fetched from upstream %s", branch, upstream_url)
        git.checkout_new_branch(clone_path, branch, f"{UPSTREAM_REMOTE}/{branch}")
        return clone_path

    raise BranchNotFoundError(branch, clone_path)


def remove_clone(project: ProjectContext, branch: str) -> None:
    """Delete the clone directory for `branch` if present."""
    remove_clone_at(get_clone_path(project, branch))


def remove_clone_at(clone_path: Path) -> None:
    """Delete a clone directory if present.

    Used when the clone was found by listing, whose checked-out branch may no
    longer match the branch its directory was named after.
    """
    if clone_path.exists():
        logger.debug("Removing clone directory %s", clone_path)
        shutil.rmtree(clone_path)


def list_clones(git: Git, project: ProjectContext) -> list[CloneInfo]:
    """List clones with the branch each one currently has checked out.

    The branch is read live from git, so a clone the user switched by hand
    reports its current branch. Directories that are not git repositories
    are skipped.
    """
    clones_dir = project.clones_dir
    if not clones_dir.is_dir():
        return []

    clones: list[CloneInfo] = []
    for entry in sorted(clones_dir.iterdir()):
        if not entry.is_dir():
            continue
        branch = git.get_current_branch(entry)
        if branch is None:
            logger.debug("Skipping %s: not a git repository", entry)
            continue
        clones.append(CloneInfo(name=entry.name, path=entry, branch=branch))
    return clones


def find_clone(clones: list[CloneInfo], name_or_branch: str) -> CloneInfo | None:
    """Find a clone by directory name or by checked-out branch."""
    for clone in clones:
        if clone.name == name_or_branch or clone.branch == name_or_branch:
            return clone
    return None
