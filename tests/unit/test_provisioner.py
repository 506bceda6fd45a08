"""Tests for image building and container composition."""

from pathlib import Path

import pytest

from ikagent.core.caches import CacheType
from ikagent.core.docker.types import Mount
from ikagent.core.project_discovery import ProjectContext
from ikagent.core.provisioner import (
    ENV_HASH_LABEL,
    ContainerOptions,
    build_image,
    cache_init_commands,
    container_spec,
    create_container,
    ensure_image,
    env_definition_hash,
    image_tag,
    is_image_stale,
)
from ikagent.core.settings import Settings
from tests.fakes.docker import FakeDocker

SETTINGS = Settings(credentials_dir=Path("/home/dev/.config/claude"))


def _project(tmp_path: Path, packages: str | None = "{ pkgs }: pkgs.nodejs\n") -> ProjectContext:
    root = tmp_path / "shop"
    (root / ".ikagent").mkdir(parents=True)
    if packages is not None:
        (root / ".ikagent" / "packages.nix").write_text(packages, encoding="utf-8")
    return ProjectContext.at(root)


def _never_confirm(message: str) -> bool:
    raise AssertionError(f"unexpected confirmation: {message}")


def test_image_tag() -> None:
    assert image_tag(SETTINGS, "shop") == "ikagent-shop"


def test_build_image_uses_project_files_and_labels_hash(tmp_path: Path) -> None:
    project = _project(tmp_path, packages="custom packages\n")
    docker = FakeDocker()

    tag = build_image(docker, SETTINGS, project)

    assert tag == "ikagent-shop"
    [call] = docker.build_calls
    assert call.tag == "ikagent-shop"
    assert call.dockerfile == call.build_context / "Dockerfile"
    assert call.labels == {ENV_HASH_LABEL: env_definition_hash(project)}
    assert call.context_files["packages.nix"] == "custom packages\n"
    assert "FROM" in call.context_files["Dockerfile"]
    # The temporary build context is cleaned up afterwards
    assert not call.build_context.exists()


def test_build_image_failure_removes_build_context(tmp_path: Path) -> None:
    project = _project(tmp_path)
    docker = FakeDocker(build_exit_code=1)

    with pytest.raises(RuntimeError, match="exit code 1"):
        build_image(docker, SETTINGS, project)

    [call] = docker.build_calls
    assert not call.build_context.exists()
    assert not docker.image_exists("ikagent-shop")


def test_build_image_falls_back_to_default_packages(tmp_path: Path) -> None:
    project = _project(tmp_path, packages=None)
    docker = FakeDocker()

    build_image(docker, SETTINGS, project)

    assert "nodejs" in docker.build_calls[0].context_files["packages.nix"]


def test_hash_changes_with_packages(tmp_path: Path) -> None:
    project = _project(tmp_path)
    before = env_definition_hash(project)

    (project.marker_dir / "packages.nix").write_text("changed\n", encoding="utf-8")

    assert env_definition_hash(project) != before


def test_staleness(tmp_path: Path) -> None:
    project = _project(tmp_path)
    current = env_definition_hash(project)

    fresh = FakeDocker(images={"ikagent-shop": {ENV_HASH_LABEL: current}})
    outdated = FakeDocker(images={"ikagent-shop": {ENV_HASH_LABEL: "old"}})
    unlabeled = FakeDocker(images={"ikagent-shop": {}})

    assert not is_image_stale(fresh, SETTINGS, project)
    assert is_image_stale(outdated, SETTINGS, project)
    assert is_image_stale(unlabeled, SETTINGS, project)


def test_ensure_image_builds_when_missing(tmp_path: Path) -> None:
    project = _project(tmp_path)
    docker = FakeDocker()

    built = ensure_image(docker, SETTINGS, project, rebuild=False, confirm=_never_confirm)

    assert built
    assert len(docker.build_calls) == 1


def test_ensure_image_skips_current_image(tmp_path: Path) -> None:
    project = _project(tmp_path)
    docker = FakeDocker(images={"ikagent-shop": {ENV_HASH_LABEL: env_definition_hash(project)}})

    built = ensure_image(docker, SETTINGS, project, rebuild=False, confirm=_never_confirm)

    assert not built
    assert docker.build_calls == []


def test_ensure_image_rebuild_forces_build(tmp_path: Path) -> None:
    project = _project(tmp_path)
    docker = FakeDocker(images={"ikagent-shop": {ENV_HASH_LABEL: env_definition_hash(project)}})

    assert ensure_image(docker, SETTINGS, project, rebuild=True, confirm=_never_confirm)
    assert len(docker.build_calls) == 1


def test_ensure_image_stale_asks_before_rebuilding(tmp_path: Path) -> None:
    project = _project(tmp_path)
    prompts: list[str] = []

    def decline(message: str) -> bool:
        prompts.append(message)
        return False

    docker = FakeDocker(images={"ikagent-shop": {ENV_HASH_LABEL: "old"}})
    assert not ensure_image(docker, SETTINGS, project, rebuild=False, confirm=decline)
    assert docker.build_calls == []
    assert len(prompts) == 1
    assert "out of date" in prompts[0]

    accepted = ensure_image(docker, SETTINGS, project, rebuild=False, confirm=lambda m: True)
    assert accepted
    assert len(docker.build_calls) == 1


def test_container_spec_without_caches() -> None:
    options = ContainerOptions(
        project="shop",
        branch="feature/x",
        clone_path=Path("/work/shop/.ikagent/clones/feature-x"),
        network="dev-services",
        env={"A": "1"},
    )

    spec = container_spec(SETTINGS, options)

    assert spec.name == "ikagent-shop-feature-x"
    assert spec.image == "ikagent-shop"
    assert spec.mounts == [
        Mount("/work/shop/.ikagent/clones/feature-x", "/workspace"),
        Mount("/home/dev/.config/claude", "/root/.config/claude", read_only=True),
    ]
    assert spec.env == {"A": "1"}
    assert spec.workdir == "/workspace"
    assert spec.network == "dev-services"
    assert spec.extra_hosts == ["host.docker.internal:host-gateway"]
    assert spec.command == ["sleep", "infinity"]


def test_container_spec_with_caches_and_env_precedence() -> None:
    options = ContainerOptions(
        project="shop",
        branch="main",
        clone_path=Path("/c/main"),
        caches=[CacheType.PNPM, CacheType.YARN],
        env={"YARN_CACHE_FOLDER": "/mine"},
    )

    spec = container_spec(SETTINGS, options)

    assert Mount("ikagent-cache", "/cache") in spec.mounts
    assert spec.env == {
        "XDG_CACHE_HOME": "/cache",
        "npm_config_store_dir": "/cache/pnpm",
        "YARN_CACHE_FOLDER": "/mine",
    }


def test_create_container_creates_cache_volume_once() -> None:
    docker = FakeDocker()
    options = ContainerOptions(
        project="shop", branch="main", clone_path=Path("/c/main"), caches=[CacheType.BUN]
    )

    create_container(docker, SETTINGS, options)
    create_container(
        docker, SETTINGS, ContainerOptions("shop", "dev", Path("/c/dev"), caches=[CacheType.BUN])
    )

    assert docker.created_volumes == ["ikagent-cache"]
    assert [spec.name for spec in docker.run_calls] == ["ikagent-shop-main", "ikagent-shop-dev"]


def test_create_container_without_caches_skips_volume() -> None:
    docker = FakeDocker()

    container_id = create_container(
        docker, SETTINGS, ContainerOptions("shop", "main", Path("/c/main"))
    )

    assert docker.created_volumes == []
    assert docker.containers["ikagent-shop-main"][0] == container_id


def test_cache_init_commands_in_request_order() -> None:
    assert cache_init_commands([CacheType.BUN, CacheType.NPM], SETTINGS) == [
        "mkdir -p /cache/bun",
        "mkdir -p /cache/npm",
        "npm config set cache /cache/npm",
    ]
