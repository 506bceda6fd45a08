"""Fake git operations for testing.

FakeGit is an in-memory implementation that accepts pre-configured state
in its constructor. Construct instances directly with keyword arguments.
"""

from pathlib import Path

from ikagent.core.git.abc import Git


class FakeGit(Git):
    """In-memory fake implementation of git operations.

    This class has NO public setup methods. All state is provided via the
    constructor. Repositories are keyed by path; remote-tracking branches are
    stored as "<remote>/<branch>".

    clone_local() models a real local clone: the destination directory is
    created, the source's current branch becomes the clone's only local
    branch, and every local branch of the source shows up as origin/<branch>.
    """

    def __init__(
        self,
        *,
        git_repos: set[Path] | None = None,
        local_branches: dict[Path, list[str]] | None = None,
        remote_branches: dict[Path, list[str]] | None = None,
        current_branches: dict[Path, str] | None = None,
        remote_urls: dict[tuple[Path, str], str] | None = None,
        upstream_branches: set[str] | None = None,
        fetch_error: str | None = None,
    ) -> None:
        """Create FakeGit with pre-configured state.

        Args:
            git_repos: Paths is_git_repo() reports as repositories (in addition
                to any path with configured branches)
            local_branches: Mapping of repo -> local branch names
            remote_branches: Mapping of repo -> "remote/branch" names
            current_branches: Mapping of repo -> checked-out branch
            remote_urls: Mapping of (repo, remote name) -> URL
            upstream_branches: Branches fetch_branch() can fetch from any remote
            fetch_error: If set, fetch_all() raises RuntimeError with this message
        """
        self._git_repos = set(git_repos or set())
        self._local_branches = {k: list(v) for k, v in (local_branches or {}).items()}
        self._remote_branches = {k: list(v) for k, v in (remote_branches or {}).items()}
        self._current_branches = dict(current_branches or {})
        self._remote_urls = dict(remote_urls or {})
        self._upstream_branches = set(upstream_branches or set())
        self._fetch_error = fetch_error

        self._cloned: list[tuple[Path, Path]] = []
        self._added_remotes: list[tuple[Path, str, str]] = []
        self._checked_out: list[tuple[Path, str]] = []
        self._created_branches: list[tuple[Path, str, str]] = []
        self._fetched_branches: list[tuple[Path, str, str]] = []
        self._fetch_all_calls: list[Path] = []

    @property
    def cloned(self) -> list[tuple[Path, Path]]:
        """(source, dest) pairs passed to clone_local()."""
        return self._cloned

    @property
    def added_remotes(self) -> list[tuple[Path, str, str]]:
        return self._added_remotes

    @property
    def checked_out(self) -> list[tuple[Path, str]]:
        """(repo, branch) pairs passed to checkout()."""
        return self._checked_out

    @property
    def created_branches(self) -> list[tuple[Path, str, str]]:
        """(repo, branch, start_point) triples passed to checkout_new_branch()."""
        return self._created_branches

    @property
    def fetched_branches(self) -> list[tuple[Path, str, str]]:
        """(repo, remote, branch) triples passed to fetch_branch(), successful or not."""
        return self._fetched_branches

    @property
    def fetch_all_calls(self) -> list[Path]:
        return self._fetch_all_calls

    def is_git_repo(self, path: Path) -> bool:
        return (
            path in self._git_repos
            or path in self._local_branches
            or path in self._current_branches
        )

    def clone_local(self, source: Path, dest: Path) -> None:
        if dest.exists():
            raise RuntimeError(f"destination path '{dest}' already exists")
        dest.mkdir(parents=True)
        self._cloned.append((source, dest))

        current = self._current_branches.get(source)
        self._local_branches[dest] = [current] if current is not None else []
        self._remote_branches[dest] = [
            f"origin/{b}" for b in self._local_branches.get(source, [])
        ]
        if current is not None:
            self._current_branches[dest] = current
        self._remote_urls[(dest, "origin")] = str(source)

    def get_remote_url(self, repo: Path, remote: str) -> str | None:
        return self._remote_urls.get((repo, remote))

    def add_remote(self, repo: Path, name: str, url: str) -> None:
        if (repo, name) in self._remote_urls:
            raise RuntimeError(f"remote {name} already exists")
        self._remote_urls[(repo, name)] = url
        self._added_remotes.append((repo, name, url))

    def ref_exists(self, repo: Path, ref: str) -> bool:
        if ref.startswith("refs/heads/"):
            return ref.removeprefix("refs/heads/") in self._local_branches.get(repo, [])
        if ref.startswith("refs/remotes/"):
            return ref.removeprefix("refs/remotes/") in self._remote_branches.get(repo, [])
        return False

    def checkout(self, repo: Path, branch: str) -> None:
        if branch not in self._local_branches.get(repo, []):
            raise RuntimeError(f"pathspec '{branch}' did not match any file(s) known to git")
        self._current_branches[repo] = branch
        self._checked_out.append((repo, branch))

    def checkout_new_branch(self, repo: Path, branch: str, start_point: str) -> None:
        if start_point not in self._remote_branches.get(repo, []):
            raise RuntimeError(f"'{start_point}' is not a commit")
        self._local_branches.setdefault(repo, []).append(branch)
        self._current_branches[repo] = branch
        self._created_branches.append((repo, branch, start_point))

    def fetch_branch(self, repo: Path, remote: str, branch: str) -> bool:
        self._fetched_branches.append((repo, remote, branch))
        if branch not in self._upstream_branches:
            return False
        self._remote_branches.setdefault(repo, []).append(f"{remote}/{branch}")
        return True

    def fetch_all(self, repo: Path) -> None:
        self._fetch_all_calls.append(repo)
        if self._fetch_error is not None:
            raise RuntimeError(self._fetch_error)
        remote = self._remote_branches.setdefault(repo, [])
        for branch in sorted(self._upstream_branches):
            if f"origin/{branch}" not in remote:
                remote.append(f"origin/{branch}")

    def get_current_branch(self, cwd: Path) -> str | None:
        return self._current_branches.get(cwd)

    def list_branches(self, repo: Path) -> list[str]:
        names = set(self._local_branches.get(repo, []))
        for ref in self._remote_branches.get(repo, []):
            if ref.startswith("origin/") and ref != "origin/HEAD":
                names.add(ref.removeprefix("origin/"))
        return sorted(names)

    def branch_exists(self, repo: Path, branch: str) -> bool:
        return branch in self._local_branches.get(repo, []) or (
            f"origin/{branch}" in self._remote_branches.get(repo, [])
        )
