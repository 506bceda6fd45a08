"""High-level git operations interface.

This module provides a clean abstraction over git subprocess calls, making the
clone manager testable without a real repository.

Architecture:
- Git: Abstract base class defining the interface
- RealGit: Production implementation using subprocess
- FakeGit (tests/fakes/git.py): In-memory implementation for tests
"""

from abc import ABC, abstractmethod
from pathlib import Path


class Git(ABC):
    """Abstract interface for git operations.

    All implementations (real and fake) must implement this interface.
    This interface contains ONLY runtime operations - no test setup methods.
    """

    @abstractmethod
    def is_git_repo(self, path: Path) -> bool:
        """Check whether `path` is inside a git work tree."""
        ...

    @abstractmethod
    def clone_local(self, source: Path, dest: Path) -> None:
        """Clone the repository at `source` into `dest`.

        Both paths are on the same machine, so git hardlinks objects instead
        of copying them.

        Raises:
            RuntimeError: If git clone fails
        """
        ...

    @abstractmethod
    def get_remote_url(self, repo: Path, remote: str) -> str | None:
        """Get the URL of `remote`, or None if the remote is not configured."""
        ...

    @abstractmethod
    def add_remote(self, repo: Path, name: str, url: str) -> None:
        """Register a new remote."""
        ...

    @abstractmethod
    def ref_exists(self, repo: Path, ref: str) -> bool:
        """Check whether a fully-qualified ref (e.g. refs/heads/main) exists."""
        ...

    @abstractmethod
    def checkout(self, repo: Path, branch: str) -> None:
        """Checkout an existing local branch."""
        ...

    @abstractmethod
    def checkout_new_branch(self, repo: Path, branch: str, start_point: str) -> None:
        """Create `branch` at `start_point` and check it out, without tracking.

        The new branch has no upstream configured, so a bare `git push` goes
        to the clone's own origin rather than the remote it was started from.
        """
        ...

    @abstractmethod
    def fetch_branch(self, repo: Path, remote: str, branch: str) -> bool:
        """Fetch a single branch into refs/remotes/<remote>/<branch>.

        Returns:
            True if the fetch succeeded, False if the remote has no such branch
            or could not be reached
        """
        ...

    @abstractmethod
    def fetch_all(self, repo: Path) -> None:
        """Fetch and prune all remotes."""
        ...

    @abstractmethod
    def get_current_branch(self, cwd: Path) -> str | None:
        """Get the currently checked-out branch, or None if not a repo."""
        ...

    @abstractmethod
    def list_branches(self, repo: Path) -> list[str]:
        """List local and origin branch names, without the `origin/` prefix.

        Returns:
            Sorted, de-duplicated branch names (HEAD pointers excluded)
        """
        ...

    @abstractmethod
    def branch_exists(self, repo: Path, branch: str) -> bool:
        """Check whether `branch` exists locally or as origin/<branch>."""
        ...
