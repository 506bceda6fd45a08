"""Filesystem and in-container setup steps shared by init, create and destroy."""

import logging
import shutil
from pathlib import Path

from ikagent.cli.output import user_output
from ikagent.core.caches import CacheType
from ikagent.core.docker.abc import Docker

logger = logging.getLogger(__name__)

BASE_NIX_PACKAGES = ["nodejs"]

# npm ships with nodejs
_CACHE_NIX_PACKAGE: dict[CacheType, str | None] = {
    CacheType.PNPM: "pnpm",
    CacheType.BUN: "bun",
    CacheType.NPM: None,
    CacheType.YARN: "yarn",
}


class ScriptError(RuntimeError):
    """A script run inside the container exited non-zero."""

    def __init__(self, script: str, exit_code: int) -> None:
        super().__init__(f"Script failed with exit code {exit_code}: {script}")
        self.script = script
        self.exit_code = exit_code


def copy_files_to_clone(files: list[str], project_root: Path, clone_path: Path) -> None:
    """Copy files from the project root into the clone, keeping relative paths.

    Files missing from the project root are skipped.
    """
    for file in files:
        source = project_root / file
        dest = clone_path / file

        if not source.is_file():
            user_output(f"  Skipping {file} (not found)")
            continue

        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source, dest)
        user_output(f"  Copied {file}")


def run_scripts(
    docker: Docker, container: str, scripts: list[str], env: dict[str, str] | None = None
) -> None:
    """Run scripts in the container one by one, stopping at the first failure.

    Raises:
        ScriptError: If a script exits non-zero
    """
    for script in scripts:
        user_output(f"Running {script}...")
        exit_code = docker.exec_script(container, script, env or {})
        if exit_code != 0:
            logger.debug("Script %r exited %d in %s", script, exit_code, container)
            raise ScriptError(script, exit_code)


def add_to_gitignore(project_root: Path, line: str) -> bool:
    """Append `line` to .gitignore unless it is already present.

    Returns:
        True if the line was added
    """
    gitignore = project_root / ".gitignore"

    if gitignore.exists():
        content = gitignore.read_text(encoding="utf-8")
        if line in content.splitlines():
            return False
        prefix = "" if content.endswith("\n") or not content else "\n"
        gitignore.write_text(content + prefix + line + "\n", encoding="utf-8")
        return True

    gitignore.write_text(line + "\n", encoding="utf-8")
    return True


def generate_packages_nix(caches: list[CacheType]) -> str:
    """Render packages.nix: nodejs plus the nix package of each cache's manager."""
    packages = list(BASE_NIX_PACKAGES)
    for cache in caches:
        package = _CACHE_NIX_PACKAGE[cache]
        if package is not None and package not in packages:
            packages.append(package)

    package_list = "\n".join(f"    {p}" for p in packages)
    return f"""# Project-specific packages
let
  pkgs = import <nixpkgs> {{}};
in
pkgs.buildEnv {{
  name = "project-packages";
  paths = with pkgs; [
{package_list}
  ];
}}
"""


def write_packages_nix(marker_dir: Path, caches: list[CacheType]) -> Path:
    path = marker_dir / "packages.nix"
    path.write_text(generate_packages_nix(caches), encoding="utf-8")
    return path
