"""Production Git implementation using subprocess.

This module provides the real Git implementation that executes actual git
commands via subprocess.
"""

import subprocess
from pathlib import Path

from ikagent.core.git.abc import Git
from ikagent.core.subprocess import run_subprocess_with_context, run_succeeds


class RealGit(Git):
    """Production implementation using subprocess.

    All git operations execute actual git commands via subprocess.
    """

    def is_git_repo(self, path: Path) -> bool:
        """Check whether `path` is inside a git work tree."""
        return run_succeeds(["git", "rev-parse", "--git-dir"], cwd=path)

    def clone_local(self, source: Path, dest: Path) -> None:
        """Clone the repository at `source` into `dest`."""
        run_subprocess_with_context(
            ["git", "clone", str(source), str(dest)],
            operation_context=f"clone '{source}' into '{dest}'",
            cwd=dest.parent,
        )

    def get_remote_url(self, repo: Path, remote: str) -> str | None:
        """Get the URL of `remote`, or None if the remote is not configured."""
        result = subprocess.run(
            ["git", "remote", "get-url", remote],
            cwd=repo,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            return None
        url = result.stdout.strip()
        return url or None

    def add_remote(self, repo: Path, name: str, url: str) -> None:
        """Register a new remote."""
        run_subprocess_with_context(
            ["git", "remote", "add", name, url],
            operation_context=f"add remote '{name}'",
            cwd=repo,
        )

    def ref_exists(self, repo: Path, ref: str) -> bool:
        """Check whether a fully-qualified ref exists."""
        return run_succeeds(["git", "show-ref", "--verify", "--quiet", ref], cwd=repo)

    def checkout(self, repo: Path, branch: str) -> None:
        """Checkout an existing local branch."""
        run_subprocess_with_context(
            ["git", "checkout", branch],
            operation_context=f"checkout branch '{branch}'",
            cwd=repo,
        )

    def checkout_new_branch(self, repo: Path, branch: str, start_point: str) -> None:
        """Create `branch` at `start_point` and check it out, without tracking."""
        run_subprocess_with_context(
            ["git", "checkout", "-b", branch, start_point, "--no-track"],
            operation_context=f"create branch '{branch}' from '{start_point}'",
            cwd=repo,
        )

    def fetch_branch(self, repo: Path, remote: str, branch: str) -> bool:
        """Fetch a single branch into refs/remotes/<remote>/<branch>."""
        return run_succeeds(
            ["git", "fetch", remote, f"{branch}:refs/remotes/{remote}/{branch}"],
            cwd=repo,
        )

    def fetch_all(self, repo: Path) -> None:
        """Fetch and prune all remotes."""
        run_subprocess_with_context(
            ["git", "fetch", "--all", "--prune"],
            operation_context="fetch all remotes",
            cwd=repo,
        )

    def get_current_branch(self, cwd: Path) -> str | None:
        """Get the currently checked-out branch."""
        result = subprocess.run(
            ["git", "rev-parse", "--abbrev-ref", "HEAD"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            return None
        return result.stdout.strip()

    def list_branches(self, repo: Path) -> list[str]:
        """List local and origin branch names, without the `origin/` prefix."""
        result = run_subprocess_with_context(
            ["git", "branch", "-a", "--format=%(refname:short)"],
            operation_context="list branches",
            cwd=repo,
        )
        branches: set[str] = set()
        for line in result.stdout.splitlines():
            name = line.strip()
            if not name or "HEAD" in name or name == "origin":
                continue
            branches.add(name.removeprefix("origin/"))
        return sorted(branches)

    def branch_exists(self, repo: Path, branch: str) -> bool:
        """Check whether `branch` exists locally or as origin/<branch>."""
        if run_succeeds(["git", "rev-parse", "--verify", "--quiet", branch], cwd=repo):
            return True
        return run_succeeds(
            ["git", "rev-parse", "--verify", "--quiet", f"origin/{branch}"], cwd=repo
        )
