"""Tests for per-branch clone management."""

from pathlib import Path

import pytest

from ikagent.core.clones import (
    BranchNotFoundError,
    CloneInfo,
    clone_exists,
    create_clone,
    find_clone,
    get_clone_path,
    list_clones,
    remove_clone,
)
from ikagent.core.project_discovery import ProjectContext
from tests.fakes.git import FakeGit

UPSTREAM_URL = "git@github.com:acme/shop.git"


def _project(tmp_path: Path) -> ProjectContext:
    root = tmp_path / "shop"
    (root / ".ikagent").mkdir(parents=True)
    return ProjectContext.at(root)


def _git(project: ProjectContext, *, upstream: set[str] | None = None) -> FakeGit:
    return FakeGit(
        local_branches={project.root: ["main", "feature/x"]},
        current_branches={project.root: "main"},
        remote_urls={(project.root, "origin"): UPSTREAM_URL},
        upstream_branches=upstream,
    )


def test_clone_path_replaces_slashes(tmp_path: Path) -> None:
    project = _project(tmp_path)

    assert get_clone_path(project, "feature/x") == project.clones_dir / "feature-x"


def test_current_branch_checks_out_local(tmp_path: Path) -> None:
    project = _project(tmp_path)
    git = _git(project)

    path = create_clone(git, project, "main")

    assert path == project.clones_dir / "main"
    assert path.is_dir()
    assert git.cloned == [(project.root, path)]
    assert git.added_remotes == [(path, "upstream", UPSTREAM_URL)]
    assert git.checked_out == [(path, "main")]
    assert git.created_branches == []


def test_project_branch_is_created_from_origin(tmp_path: Path) -> None:
    project = _project(tmp_path)
    git = _git(project)

    path = create_clone(git, project, "feature/x")

    assert path == project.clones_dir / "feature-x"
    assert git.created_branches == [(path, "feature/x", "origin/feature/x")]
    assert git.fetched_branches == []
    assert git.get_current_branch(path) == "feature/x"


def test_upstream_only_branch_is_fetched(tmp_path: Path) -> None:
    project = _project(tmp_path)
    git = _git(project, upstream={"remote-only"})

    path = create_clone(git, project, "remote-only")

    assert git.fetched_branches == [(path, "upstream", "remote-only")]
    assert git.created_branches == [(path, "remote-only", "upstream/remote-only")]


def test_unknown_branch_raises_and_leaves_clone(tmp_path: Path) -> None:
    project = _project(tmp_path)
    git = _git(project)

    with pytest.raises(BranchNotFoundError) as exc_info:
        create_clone(git, project, "ghost")

    assert "Could not checkout branch 'ghost' in clone" in str(exc_info.value)
    assert exc_info.value.clone_path == project.clones_dir / "ghost"
    assert exc_info.value.clone_path.is_dir()


def test_no_upstream_remote_skips_fetch(tmp_path: Path) -> None:
    project = _project(tmp_path)
    git = FakeGit(
        local_branches={project.root: ["main"]},
        current_branches={project.root: "main"},
        upstream_branches={"ghost"},
    )

    with pytest.raises(BranchNotFoundError):
        create_clone(git, project, "ghost")

    assert git.added_remotes == []
    assert git.fetched_branches == []


def test_existing_clone_is_reused(tmp_path: Path) -> None:
    project = _project(tmp_path)
    git = _git(project)
    first = create_clone(git, project, "main")

    second = create_clone(git, project, "main")

    assert second == first
    assert len(git.cloned) == 1
    assert clone_exists(project, "main")


def test_remove_clone_is_noop_when_missing(tmp_path: Path) -> None:
    project = _project(tmp_path)
    git = _git(project)
    path = create_clone(git, project, "main")
    (path / "file.txt").write_text("x", encoding="utf-8")

    remove_clone(project, "main")
    remove_clone(project, "main")

    assert not path.exists()


def test_list_clones_reads_live_branch(tmp_path: Path) -> None:
    project = _project(tmp_path)
    git = _git(project)
    create_clone(git, project, "main")
    create_clone(git, project, "feature/x")
    (project.clones_dir / "not-a-repo").mkdir()
    (project.clones_dir / "stray.txt").write_text("", encoding="utf-8")

    clones = list_clones(git, project)

    assert clones == [
        CloneInfo(name="feature-x", path=project.clones_dir / "feature-x", branch="feature/x"),
        CloneInfo(name="main", path=project.clones_dir / "main", branch="main"),
    ]


def test_list_clones_without_clones_dir(tmp_path: Path) -> None:
    project = _project(tmp_path)

    assert list_clones(FakeGit(), project) == []


def test_find_clone_by_name_or_branch() -> None:
    clones = [CloneInfo(name="feature-x", path=Path("/c/feature-x"), branch="feature/x")]

    assert find_clone(clones, "feature-x") == clones[0]
    assert find_clone(clones, "feature/x") == clones[0]
    assert find_clone(clones, "feature") is None
