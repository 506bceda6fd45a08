"""Docker data types and pure command composition."""

from dataclasses import dataclass, field

from ikagent.core.naming import parse_container_name


@dataclass(frozen=True)
class ContainerInfo:
    """A container as reported by `docker ps`.

    `project` and `branch` are parsed back out of the name; see
    parse_container_name() for the limits of that parsing.
    """

    id: str
    name: str
    project: str
    branch: str
    status: str

    @property
    def is_running(self) -> bool:
        return self.status.lower().startswith("up")

    @property
    def short_id(self) -> str:
        return self.id[:12]

    @property
    def label(self) -> str:
        return f"{self.project}/{self.branch}"


@dataclass(frozen=True)
class Mount:
    """A bind mount or named volume mount (`-v source:target[:ro]`)."""

    source: str
    target: str
    read_only: bool = False

    def to_arg(self) -> str:
        suffix = ":ro" if self.read_only else ""
        return f"{self.source}:{self.target}{suffix}"


@dataclass(frozen=True)
class ContainerSpec:
    """Everything needed for one detached `docker run`."""

    name: str
    image: str
    mounts: list[Mount] = field(default_factory=list)
    env: dict[str, str] = field(default_factory=dict)
    workdir: str | None = None
    network: str | None = None
    extra_hosts: list[str] = field(default_factory=list)
    command: list[str] = field(default_factory=list)


def build_run_args(spec: ContainerSpec) -> list[str]:
    """Compose the `docker run -d ...` argument list for `spec`.

    Env vars are emitted in the spec's dict order; Docker keeps the last `-e`
    for a repeated key, but ContainerSpec.env already holds unique keys.
    """
    args = ["docker", "run", "-d", "--name", spec.name]

    for mount in spec.mounts:
        args.extend(["-v", mount.to_arg()])

    for key, value in spec.env.items():
        args.extend(["-e", f"{key}={value}"])

    if spec.workdir is not None:
        args.extend(["-w", spec.workdir])

    for host in spec.extra_hosts:
        args.append(f"--add-host={host}")

    if spec.network is not None:
        args.extend(["--network", spec.network])

    args.append(spec.image)
    args.extend(spec.command)
    return args


def parse_container_list(output: str, prefix: str) -> list[ContainerInfo]:
    """Parse `docker ps --format '{{.ID}}\\t{{.Names}}\\t{{.Status}}'` output."""
    containers: list[ContainerInfo] = []
    for line in output.splitlines():
        if not line.strip():
            continue
        parts = line.split("\t")
        container_id = parts[0] if len(parts) > 0 else ""
        name = parts[1] if len(parts) > 1 else ""
        status = parts[2] if len(parts) > 2 else ""
        project, branch = parse_container_name(prefix, name)
        containers.append(
            ContainerInfo(
                id=container_id, name=name, project=project, branch=branch, status=status
            )
        )
    return containers
