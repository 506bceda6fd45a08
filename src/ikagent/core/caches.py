"""Package-manager cache types.

Every container that asks for at least one cache mounts the same shared
volume. Each cache type lives in its own subdirectory of that volume and is
wired up through env vars plus a few shell commands run once after the
container starts.
"""

from enum import Enum


class CacheType(Enum):
    PNPM = "pnpm"
    BUN = "bun"
    NPM = "npm"
    YARN = "yarn"

    def cache_dir(self, cache_mount: str) -> str:
        return f"{cache_mount}/{self.value}"

    def env_vars(self, cache_mount: str) -> dict[str, str]:
        """Env vars redirecting this package manager into the shared volume."""
        return {_CACHE_ENV_VAR[self]: self.cache_dir(cache_mount)}

    def init_commands(self, cache_mount: str) -> list[str]:
        """Shell commands that prepare the cache inside a fresh container."""
        path = self.cache_dir(cache_mount)
        commands = [f"mkdir -p {path}"]
        configure = _CACHE_CONFIG_COMMAND[self]
        if configure is not None:
            commands.append(f"{configure} {path}")
        return commands


_CACHE_ENV_VAR: dict[CacheType, str] = {
    CacheType.PNPM: "npm_config_store_dir",
    CacheType.BUN: "BUN_INSTALL_CACHE_DIR",
    CacheType.NPM: "npm_config_cache",
    CacheType.YARN: "YARN_CACHE_FOLDER",
}

# bun reads BUN_INSTALL_CACHE_DIR directly and has no config command
_CACHE_CONFIG_COMMAND: dict[CacheType, str | None] = {
    CacheType.PNPM: "pnpm config set store-dir",
    CacheType.BUN: None,
    CacheType.NPM: "npm config set cache",
    CacheType.YARN: "yarn config set cache-folder",
}


def parse_cache_types(values: list[str]) -> tuple[list[CacheType], list[str]]:
    """Split raw config values into known cache types and unknown leftovers.

    Duplicates are dropped, first occurrence wins.
    """
    known: list[CacheType] = []
    unknown: list[str] = []
    valid = {c.value: c for c in CacheType}
    for value in values:
        cache = valid.get(value)
        if cache is None:
            unknown.append(value)
        elif cache not in known:
            known.append(cache)
    return known, unknown
