"""Container lookup by project/branch or by a user-typed name.

There is no stored mapping from branch to container: identity is the
deterministic container name, recomputed on every call.
"""

from ikagent.core.docker.abc import Docker
from ikagent.core.docker.types import ContainerInfo
from ikagent.core.naming import container_name, project_container_prefix
from ikagent.core.settings import Settings


def list_project_containers(
    docker: Docker, settings: Settings, project: str
) -> list[ContainerInfo]:
    """Containers belonging to `project`, matched on the full name prefix.

    Matching on `<prefix>-<project>-` works for hyphenated project names,
    which parse_container_name() cannot split correctly.
    """
    prefix = project_container_prefix(settings.container_prefix, project)
    containers = docker.list_containers(settings.container_prefix)
    return [c for c in containers if c.name.startswith(prefix)]


def get_container(
    docker: Docker, settings: Settings, project: str, branch: str
) -> ContainerInfo | None:
    """The container for (project, branch), if one exists."""
    name = container_name(settings.container_prefix, project, branch)
    for container in docker.list_containers(settings.container_prefix):
        if container.name == name:
            return container
    return None


def find_container_by_name(containers: list[ContainerInfo], term: str) -> ContainerInfo | None:
    """Resolve a user-supplied container reference.

    1. Exact container name, or a prefix of the container ID
    2. Otherwise a case-insensitive substring of `project/branch`,
       `project-branch` or the container name, which must match exactly one
       container. Ambiguous matches return None rather than guessing.
    """
    for container in containers:
        if container.name == term or container.id.startswith(term):
            return container

    needle = term.lower()
    matches = [
        c
        for c in containers
        if needle in f"{c.project}/{c.branch}".lower()
        or needle in f"{c.project}-{c.branch}".lower()
        or needle in c.name.lower()
    ]
    if len(matches) == 1:
        return matches[0]
    return None
