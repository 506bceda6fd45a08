"""Per-project provisioning config stored in `.ikagent/config.json`."""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from ikagent.cli.output import user_warning
from ikagent.core.caches import CacheType, parse_cache_types

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProjectConfig:
    """In-memory representation of `.ikagent/config.json`.

    Example config:
      {
        "copy": [".env.local"],
        "network": "dev-services",
        "init": ["pnpm install"],
        "teardown": ["./scripts/drop-db.sh"],
        "caches": ["pnpm"],
        "envFiles": [".env", ".env.local"],
        "envOverrides": {"DATABASE_NAME": "app_${IKAGENT_BRANCH_SAFE}"}
      }
    """

    copy: list[str] = field(default_factory=list)
    network: str | None = None
    init: list[str] = field(default_factory=list)
    teardown: list[str] = field(default_factory=list)
    caches: list[CacheType] = field(default_factory=list)
    env_files: list[str] = field(default_factory=list)
    env_overrides: dict[str, str] = field(default_factory=dict)

    def to_json_dict(self) -> dict[str, object]:
        return {
            "copy": list(self.copy),
            "network": self.network,
            "init": list(self.init),
            "teardown": list(self.teardown),
            "caches": [c.value for c in self.caches],
            "envFiles": list(self.env_files),
            "envOverrides": dict(self.env_overrides),
        }


def _str_list(data: dict, key: str) -> list[str]:
    value = data.get(key)
    if not isinstance(value, list):
        return []
    return [str(x) for x in value]


def parse_project_config(data: dict) -> ProjectConfig:
    """Build a ProjectConfig from decoded JSON, defaulting missing fields."""
    network = data.get("network")
    caches, unknown = parse_cache_types(_str_list(data, "caches"))
    if unknown:
        user_warning(f"Ignoring unknown cache types: {', '.join(unknown)}")

    overrides = data.get("envOverrides")
    env_overrides = (
        {str(k): str(v) for k, v in overrides.items()} if isinstance(overrides, dict) else {}
    )

    return ProjectConfig(
        copy=_str_list(data, "copy"),
        network=str(network) if network else None,
        init=_str_list(data, "init"),
        teardown=_str_list(data, "teardown"),
        caches=caches,
        env_files=_str_list(data, "envFiles"),
        env_overrides=env_overrides,
    )


def load_project_config(config_path: Path) -> ProjectConfig:
    """Load config.json if present; otherwise return defaults.

    A file that is not valid JSON (or not a JSON object) yields defaults with
    a warning rather than aborting the command.
    """
    if not config_path.exists():
        logger.debug("No project config at %s, using defaults", config_path)
        return ProjectConfig()

    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        user_warning(f"Could not parse {config_path} ({e.msg}), using defaults")
        return ProjectConfig()

    if not isinstance(data, dict):
        user_warning(f"Could not parse {config_path} (expected an object), using defaults")
        return ProjectConfig()

    return parse_project_config(data)


def save_project_config(config_path: Path, config: ProjectConfig) -> None:
    """Write the whole config to disk, creating the parent directory if needed."""
    config_path.parent.mkdir(parents=True, exist_ok=True)
    content = json.dumps(config.to_json_dict(), indent=2)
    config_path.write_text(content + "\n", encoding="utf-8")
