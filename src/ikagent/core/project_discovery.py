"""Project discovery.

Finds the enclosing ikagent project by walking up from a directory until a
`.ikagent/` marker directory is found.
"""

from dataclasses import dataclass
from pathlib import Path

from ikagent.core.settings import CLONES_DIR, CONFIG_FILE, MARKER_DIR


@dataclass(frozen=True)
class ProjectContext:
    """An ikagent project: the directory holding the `.ikagent/` marker."""

    name: str
    root: Path
    marker_dir: Path  # <root>/.ikagent

    @property
    def clones_dir(self) -> Path:
        return self.marker_dir / CLONES_DIR

    @property
    def config_path(self) -> Path:
        return self.marker_dir / CONFIG_FILE

    @staticmethod
    def at(root: Path) -> "ProjectContext":
        """Project rooted at `root`, whether or not the marker exists yet."""
        return ProjectContext(name=root.name, root=root, marker_dir=root / MARKER_DIR)


@dataclass(frozen=True)
class NoProjectSentinel:
    """Sentinel value indicating execution outside an ikagent project.

    Commands that require a project check for this sentinel and fail fast.
    """

    message: str = "Not in an ikagent project. Run 'ikagent init' first."


def find_marker_dir(start: Path) -> Path | None:
    """Return the nearest `.ikagent/` directory at or above `start`."""
    cur = start.resolve()
    for parent in [cur, *cur.parents]:
        candidate = parent / MARKER_DIR
        if candidate.is_dir():
            return candidate
    return None


def discover_project_or_sentinel(cwd: Path) -> ProjectContext | NoProjectSentinel:
    """Walk up from `cwd` to find the enclosing ikagent project.

    Args:
        cwd: Directory to start the search from

    Returns:
        ProjectContext if a marker directory was found, NoProjectSentinel otherwise
    """
    if not cwd.exists():
        return NoProjectSentinel(message=f"Start path '{cwd}' does not exist")

    marker = find_marker_dir(cwd)
    if marker is None:
        return NoProjectSentinel()

    root = marker.parent
    return ProjectContext(name=root.name, root=root, marker_dir=marker)
