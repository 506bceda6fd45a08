"""Tests for finding the enclosing ikagent project."""

from pathlib import Path

from ikagent.core.project_discovery import (
    NoProjectSentinel,
    ProjectContext,
    discover_project_or_sentinel,
)


def test_discovers_project_from_nested_directory(tmp_path: Path) -> None:
    root = tmp_path / "shop"
    (root / ".ikagent").mkdir(parents=True)
    nested = root / "src" / "components"
    nested.mkdir(parents=True)

    result = discover_project_or_sentinel(nested)

    assert isinstance(result, ProjectContext)
    assert result.name == "shop"
    assert result.root == root.resolve()
    assert result.clones_dir == root.resolve() / ".ikagent" / "clones"
    assert result.config_path == root.resolve() / ".ikagent" / "config.json"


def test_returns_sentinel_outside_project(tmp_path: Path) -> None:
    result = discover_project_or_sentinel(tmp_path)

    assert isinstance(result, NoProjectSentinel)
    assert "ikagent init" in result.message


def test_returns_sentinel_for_missing_start(tmp_path: Path) -> None:
    result = discover_project_or_sentinel(tmp_path / "gone")

    assert isinstance(result, NoProjectSentinel)
    assert "does not exist" in result.message


def test_marker_file_is_not_a_project(tmp_path: Path) -> None:
    (tmp_path / ".ikagent").write_text("", encoding="utf-8")

    assert isinstance(discover_project_or_sentinel(tmp_path), NoProjectSentinel)


def test_project_context_at() -> None:
    project = ProjectContext.at(Path("/work/shop"))

    assert project.name == "shop"
    assert project.marker_dir == Path("/work/shop/.ikagent")
