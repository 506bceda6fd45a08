"""Application context with dependency injection."""

from dataclasses import dataclass
from pathlib import Path

from ikagent.core.docker.abc import Docker
from ikagent.core.docker.real import RealDocker
from ikagent.core.git.abc import Git
from ikagent.core.git.real import RealGit
from ikagent.core.picker import ClickPicker, Picker
from ikagent.core.project_discovery import (
    NoProjectSentinel,
    ProjectContext,
    discover_project_or_sentinel,
)
from ikagent.core.settings import Settings, load_settings


@dataclass(frozen=True)
class IkagentContext:
    """Immutable context holding all dependencies for ikagent operations.

    Created at CLI entry point and threaded through the application.
    Frozen to prevent accidental modification at runtime.
    """

    git: Git
    docker: Docker
    picker: Picker
    settings: Settings
    cwd: Path  # Current working directory at CLI invocation
    project: ProjectContext | NoProjectSentinel

    @staticmethod
    def for_test(
        git: Git | None = None,
        docker: Docker | None = None,
        picker: Picker | None = None,
        settings: Settings | None = None,
        cwd: Path | None = None,
        project: ProjectContext | NoProjectSentinel | None = None,
    ) -> "IkagentContext":
        """Create test context with optional pre-configured integration classes.

        Unspecified integrations default to empty fakes; `project` defaults to
        NoProjectSentinel and `cwd` to a placeholder path.

        Example:
            >>> git = FakeGit(branches={repo: ["main"]})
            >>> ctx = IkagentContext.for_test(git=git, project=ProjectContext.at(repo))
        """
        from tests.fakes.docker import FakeDocker
        from tests.fakes.git import FakeGit
        from tests.fakes.picker import FakePicker

        return IkagentContext(
            git=git if git is not None else FakeGit(),
            docker=docker if docker is not None else FakeDocker(),
            picker=picker if picker is not None else FakePicker(),
            settings=settings if settings is not None else Settings(),
            cwd=cwd if cwd is not None else Path("/test/default/cwd"),
            project=project if project is not None else NoProjectSentinel(),
        )


def create_context() -> IkagentContext:
    """Create production context with real implementations.

    Called once at CLI entry point.
    """
    cwd = Path.cwd()
    return IkagentContext(
        git=RealGit(),
        docker=RealDocker(),
        picker=ClickPicker(),
        settings=load_settings(),
        cwd=cwd,
        project=discover_project_or_sentinel(cwd),
    )
