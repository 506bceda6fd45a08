"""Interactive selection.

Commands that accept an optional argument fall back to a picker when it is
omitted. The Picker ABC is the only thing commands depend on, so tests swap
in a scripted fake and never touch a terminal.
"""

import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import click

from ikagent.cli.output import user_output
from ikagent.core.git.abc import Git

logger = logging.getLogger(__name__)

MAX_RESULTS = 20


@dataclass(frozen=True)
class Choice[T]:
    """A labeled candidate."""

    name: str
    value: T
    description: str | None = None


def filter_choices[T](choices: list[Choice[T]], query: str) -> list[Choice[T]]:
    """Case-insensitive substring match on the choice name."""
    term = query.strip().lower()
    return [c for c in choices if term in c.name.lower()][:MAX_RESULTS]


class Picker(ABC):
    """Collaborator interface for interactive selection."""

    @abstractmethod
    def search[T](self, message: str, source: Callable[[str], list[Choice[T]]]) -> T | None:
        """Let the user narrow candidates with a free-text query and pick one.

        Args:
            message: Prompt shown for the query
            source: Called with each query; returns the matching candidates

        Returns:
            The selected value, or None if the user cancelled
        """
        ...

    @abstractmethod
    def confirm(self, message: str, default: bool = False) -> bool:
        """Ask a yes/no question."""
        ...


class ClickPicker(Picker):
    """Terminal picker built on click prompts.

    Flow: type a query, get a numbered list of up to MAX_RESULTS matches,
    pick a number. 0 searches again, an empty list asks for a new query.
    """

    def search[T](self, message: str, source: Callable[[str], list[Choice[T]]]) -> T | None:
        while True:
            query = click.prompt(message, default="", show_default=False, err=True)
            matches = source(query)
            if not matches:
                user_output(click.style("No matches", fg="yellow"))
                if not click.confirm("Search again?", default=True, err=True):
                    return None
                continue

            for i, choice in enumerate(matches, start=1):
                line = f"  {i}. {choice.name}"
                if choice.description:
                    line += click.style(f"  ({choice.description})", dim=True)
                user_output(line)

            selection = click.prompt(
                "Select (0 to search again)",
                type=click.IntRange(0, len(matches)),
                default=1,
                err=True,
            )
            if selection == 0:
                continue
            return matches[selection - 1].value

    def confirm(self, message: str, default: bool = False) -> bool:
        return click.confirm(message, default=default, err=True)


class BranchPrefetch:
    """Fetch remotes in the background while the user types a query.

    Until the fetch finishes, branches() returns the branches known locally;
    afterwards it returns the refreshed list. A failed fetch is logged and the
    local list stays in use.
    """

    def __init__(self, git: Git, repo: Path) -> None:
        self._git = git
        self._repo = repo
        self._local = git.list_branches(repo)
        self._fetched: list[str] | None = None
        self._thread = threading.Thread(target=self._run, daemon=True)

    def start(self) -> "BranchPrefetch":
        self._thread.start()
        return self

    def _run(self) -> None:
        try:
            self._git.fetch_all(self._repo)
            self._fetched = self._git.list_branches(self._repo)
        except RuntimeError as e:
            logger.debug("Background fetch failed: %s", e)

    @property
    def done(self) -> bool:
        return self._fetched is not None

    def join(self, timeout: float | None = None) -> None:
        self._thread.join(timeout)

    def branches(self) -> list[str]:
        if self._fetched is not None:
            return self._fetched
        return self._local


def select_branch(picker: Picker, git: Git, repo: Path) -> str | None:
    """Pick a branch, searching the freshest branch list available."""
    prefetch = BranchPrefetch(git, repo).start()
    user_output(f"{len(prefetch.branches())} branches loaded, fetching remotes in background")

    def source(query: str) -> list[Choice[str]]:
        choices = [Choice(name=b, value=b) for b in prefetch.branches()]
        return filter_choices(choices, query)

    return picker.search("Search for a branch", source)
