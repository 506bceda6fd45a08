"""Process-wide settings.

Provides the immutable Settings value loaded once at CLI entry point from
built-in defaults plus an optional ~/.config/ikagent/config.toml, and passed
explicitly to every component that needs an image name, a mount path or the
container prefix.
"""

import logging
import os
import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path

logger = logging.getLogger(__name__)

MARKER_DIR = ".ikagent"
CLONES_DIR = "clones"
CONFIG_FILE = "config.json"


@dataclass(frozen=True)
class Settings:
    """Immutable settings shared by all commands.

    Attributes:
        image_name: Base name of project images (`<image_name>-<project>`)
        container_prefix: First segment of every container name
        credentials_dir: Host directory mounted read-only into containers
        container_workspace: Mount point of the clone inside the container
        container_credentials_dir: Mount point of credentials_dir
        cache_volume: Name of the shared package-manager cache volume
        cache_mount: Mount point of the cache volume
        shell: Shell started by `attach`
    """

    image_name: str = "ikagent"
    container_prefix: str = "ikagent"
    credentials_dir: Path = Path.home() / ".config" / "claude"
    container_workspace: str = "/workspace"
    container_credentials_dir: str = "/root/.config/claude"
    cache_volume: str = "ikagent-cache"
    cache_mount: str = "/cache"
    shell: str = "zsh"


def default_settings_path() -> Path:
    env_path = os.environ.get("IKAGENT_CONFIG")
    if env_path:
        return Path(env_path).expanduser()
    return Path.home() / ".config" / "ikagent" / "config.toml"


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from TOML if present; otherwise return defaults.

    Example config:
      image_name = "my-dev"
      container_prefix = "dev"
      shell = "bash"

    Unknown keys are ignored. `credentials_dir` is expanded (`~`).
    """
    settings = Settings()
    cfg_path = path if path is not None else default_settings_path()
    if not cfg_path.exists():
        return settings

    data = tomllib.loads(cfg_path.read_text(encoding="utf-8"))
    known = {f.name for f in fields(Settings)}
    overrides: dict[str, object] = {}
    for key, value in data.items():
        if key not in known:
            logger.debug("Ignoring unknown settings key %r in %s", key, cfg_path)
            continue
        if key == "credentials_dir":
            overrides[key] = Path(str(value)).expanduser()
        else:
            overrides[key] = str(value)

    return replace(settings, **overrides)
