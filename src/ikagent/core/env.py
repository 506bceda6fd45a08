"""Container environment assembly.

The environment handed to a new container is built in layers, later layers
winning key-for-key:

1. `.env` files listed in the project config, in order
2. `envOverrides` from the project config, after template substitution

Override values may reference the built-in variables from
template_variables() as `${NAME}` or `$NAME`. Unknown references are left
untouched.
"""

import logging
import re
from collections.abc import Mapping
from pathlib import Path

from dotenv import dotenv_values

from ikagent.cli.output import user_warning
from ikagent.core.naming import sanitize_branch_for_id, sanitize_branch_safe
from ikagent.core.project_config import ProjectConfig

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\$\{(\w+)\}|\$(\w+)")


def template_variables(project: str, branch: str) -> dict[str, str]:
    """Built-in variables available to overrides and scripts.

    Example for project "shop", branch "Feature/X_1":
      IKAGENT_BRANCH=Feature/X_1
      IKAGENT_PROJECT=shop
      IKAGENT_BRANCH_SLUG=feature-x-1
      IKAGENT_BRANCH_SAFE=feature_x_1
    """
    return {
        "IKAGENT_BRANCH": branch,
        "IKAGENT_PROJECT": project,
        "IKAGENT_BRANCH_SLUG": sanitize_branch_for_id(branch),
        "IKAGENT_BRANCH_SAFE": sanitize_branch_safe(branch),
    }


def load_env_files(files: list[str], project_root: Path) -> dict[str, str]:
    """Load and merge env files in order (later files override earlier ones).

    Missing files are skipped with a warning. Keys declared without a value
    (a bare `KEY` line) are dropped.
    """
    merged: dict[str, str] = {}
    for file in files:
        file_path = project_root / file
        if not file_path.is_file():
            user_warning(f"{file} not found, skipping")
            continue
        values = dotenv_values(file_path, interpolate=False)
        logger.debug("Loaded %d keys from %s", len(values), file_path)
        for key, value in values.items():
            if value is not None:
                merged[key] = value
    return merged


def resolve_overrides(
    overrides: Mapping[str, str], variables: Mapping[str, str]
) -> dict[str, str]:
    """Substitute template variables into override values.

    Examples:
        >>> resolve_overrides({"DB": "app_${IKAGENT_BRANCH_SAFE}"},
        ...                   {"IKAGENT_BRANCH_SAFE": "feat_login"})
        {'DB': 'app_feat_login'}
        >>> resolve_overrides({"X": "${NOPE}"}, {})
        {'X': '${NOPE}'}
        >>> resolve_overrides({"PASS": "pa$$word"}, {})
        {'PASS': 'pa$$word'}
    """

    def substitute(match: re.Match[str]) -> str:
        return variables.get(match[1] or match[2], match[0])

    return {key: _PLACEHOLDER.sub(substitute, value) for key, value in overrides.items()}


def resolve_environment(
    config: ProjectConfig, project_root: Path, project: str, branch: str
) -> dict[str, str]:
    """Build the final container environment for `branch`."""
    env = load_env_files(config.env_files, project_root)
    env.update(resolve_overrides(config.env_overrides, template_variables(project, branch)))
    return env
