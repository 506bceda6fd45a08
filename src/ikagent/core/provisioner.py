"""Project images and per-branch containers.

Each project gets its own image, `<image_name>-<project>`, built from the
shared Dockerfile in ikagent/data plus the project's environment-definition
files (`.ikagent/packages.nix`). A hash of those files is stored as an image
label so a later run can tell the image is out of date.
"""

import hashlib
import logging
import shutil
import tempfile
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from ikagent.core.caches import CacheType
from ikagent.core.docker.abc import Docker
from ikagent.core.docker.types import ContainerSpec, Mount
from ikagent.core.naming import container_name
from ikagent.core.project_discovery import ProjectContext
from ikagent.core.settings import Settings

logger = logging.getLogger(__name__)

ENV_HASH_LABEL = "ikagent.env-hash"
ENV_DEFINITION_FILES = ("packages.nix",)
DATA_DIR = Path(__file__).parent.parent / "data"


@dataclass(frozen=True)
class ContainerOptions:
    """Inputs for create_container()."""

    project: str
    branch: str
    clone_path: Path
    network: str | None = None
    caches: list[CacheType] = field(default_factory=list)
    env: dict[str, str] = field(default_factory=dict)


def image_tag(settings: Settings, project_name: str) -> str:
    return f"{settings.image_name}-{project_name}"


def env_definition_files(project: ProjectContext) -> list[Path]:
    """The project's environment-definition files that exist, sorted by name."""
    candidates = [project.marker_dir / name for name in ENV_DEFINITION_FILES]
    return sorted(path for path in candidates if path.is_file())


def env_definition_hash(project: ProjectContext) -> str:
    """sha256 over the names and contents of the environment-definition files."""
    digest = hashlib.sha256()
    for path in env_definition_files(project):
        digest.update(path.name.encode("utf-8"))
        digest.update(b"\0")
        digest.update(path.read_bytes())
        digest.update(b"\0")
    return digest.hexdigest()


def build_image(docker: Docker, settings: Settings, project: ProjectContext) -> str:
    """Build the project image in a throwaway build context.

    The temporary context is removed whether or not the build succeeds.

    Returns:
        The image tag that was built

    Raises:
        RuntimeError: If docker build exits non-zero
    """
    tag = image_tag(settings, project.name)
    env_hash = env_definition_hash(project)

    with tempfile.TemporaryDirectory(prefix="ikagent-build-") as tmp:
        context_dir = Path(tmp)
        for shared in sorted(DATA_DIR.iterdir()):
            if shared.is_file():
                shutil.copy2(shared, context_dir / shared.name)
        # Project files replace the shared defaults of the same name
        for project_file in env_definition_files(project):
            shutil.copy2(project_file, context_dir / project_file.name)

        logger.debug("Building %s from %s (env hash %s)", tag, context_dir, env_hash)
        docker.build_image(
            tag,
            context_dir / "Dockerfile",
            context_dir,
            labels={ENV_HASH_LABEL: env_hash},
        )

    return tag


def is_image_stale(docker: Docker, settings: Settings, project: ProjectContext) -> bool:
    """Check whether the image was built from different environment files.

    An image without the hash label counts as stale. This is advisory; the
    caller decides whether to rebuild.
    """
    recorded = docker.get_image_label(image_tag(settings, project.name), ENV_HASH_LABEL)
    current = env_definition_hash(project)
    logger.debug("Image env hash: recorded=%s current=%s", recorded, current)
    return recorded != current


def ensure_image(
    docker: Docker,
    settings: Settings,
    project: ProjectContext,
    *,
    rebuild: bool,
    confirm: Callable[[str], bool],
) -> bool:
    """Make sure the project image exists, rebuilding when asked to.

    Args:
        rebuild: Build even if the image is present and current
        confirm: Asked whether to rebuild a stale image

    Returns:
        True if an image was built
    """
    tag = image_tag(settings, project.name)
    if rebuild or not docker.image_exists(tag):
        build_image(docker, settings, project)
        return True

    if is_image_stale(docker, settings, project):
        sources = ", ".join(ENV_DEFINITION_FILES)
        if confirm(f"Image {tag} is out of date with {sources}. Rebuild?"):
            build_image(docker, settings, project)
            return True

    return False


def ensure_cache_volume(docker: Docker, settings: Settings) -> None:
    """Create the shared cache volume unless it already exists."""
    if not docker.volume_exists(settings.cache_volume):
        logger.debug("Creating cache volume %s", settings.cache_volume)
        docker.create_volume(settings.cache_volume)


def container_spec(settings: Settings, options: ContainerOptions) -> ContainerSpec:
    """Compose the container for a clone.

    Env precedence, lowest to highest: cache home, per-cache vars, caller env.
    """
    mounts = [
        Mount(str(options.clone_path), settings.container_workspace),
        Mount(str(settings.credentials_dir), settings.container_credentials_dir, read_only=True),
    ]

    env: dict[str, str] = {}
    if options.caches:
        mounts.append(Mount(settings.cache_volume, settings.cache_mount))
        env["XDG_CACHE_HOME"] = settings.cache_mount
        for cache in options.caches:
            env.update(cache.env_vars(settings.cache_mount))
    env.update(options.env)

    return ContainerSpec(
        name=container_name(settings.container_prefix, options.project, options.branch),
        image=image_tag(settings, options.project),
        mounts=mounts,
        env=env,
        workdir=settings.container_workspace,
        network=options.network,
        extra_hosts=["host.docker.internal:host-gateway"],
        command=["sleep", "infinity"],
    )


def create_container(docker: Docker, settings: Settings, options: ContainerOptions) -> str:
    """Create a long-sleeping container for a clone.

    Returns:
        The new container's ID
    """
    if options.caches:
        ensure_cache_volume(docker, settings)
    return docker.run_container(container_spec(settings, options))


def cache_init_commands(caches: list[CacheType], settings: Settings) -> list[str]:
    """Init commands for the requested caches, in request order."""
    commands: list[str] = []
    for cache in caches:
        commands.extend(cache.init_commands(settings.cache_mount))
    return commands
