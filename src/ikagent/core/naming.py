"""Naming utilities for clones, containers and template values.

A branch name shows up in three naming domains that do not accept the same
characters, so each gets its own sanitizer:

- clone directories: only path separators are replaced
- Docker object names: `[A-Za-z0-9-]` only, case preserved
- identifiers (cache keys, database names, template values): lowercase slug

All functions are pure (no I/O). Container discovery relies on
container_name() being exactly reproducible, so never substitute one
sanitizer for another.
"""

import re
import unicodedata


def clone_dir_name(branch: str) -> str:
    """Directory name of the clone for `branch` (path separators become `-`).

    Examples:
        >>> clone_dir_name("feature/login")
        'feature-login'
    """
    return branch.replace("/", "-")


def sanitize_branch_for_container(branch: str) -> str:
    """Sanitize a branch name for use in a Docker container name.

    - Replaces characters outside `[A-Za-z0-9-]` with `-`
    - Collapses consecutive `-`

    Case is preserved and leading/trailing hyphens are kept, so the result is
    reproducible from the branch name alone.

    Examples:
        >>> sanitize_branch_for_container("Feature/X_1")
        'Feature-X-1'
        >>> sanitize_branch_for_container("fix//double")
        'fix-double'
    """
    replaced = re.sub(r"[^A-Za-z0-9-]", "-", branch)
    return re.sub(r"-+", "-", replaced)


def sanitize_branch_for_id(branch: str, separator: str = "-") -> str:
    """Slugify a branch name into a lowercase identifier.

    1. Unicode normalization (NFKD) and ASCII folding
    2. Lowercase
    3. Runs of non-alphanumeric characters become `separator`
    4. Leading/trailing separators are stripped

    Examples:
        >>> sanitize_branch_for_id("Feature/X_1")
        'feature-x-1'
        >>> sanitize_branch_for_id("Feature/X_1", separator="_")
        'feature_x_1'
        >>> sanitize_branch_for_id("café/Ünïcode")
        'cafe-unicode'
    """
    normalized = unicodedata.normalize("NFKD", branch)
    ascii_only = normalized.encode("ascii", "ignore").decode("ascii")
    lowered = ascii_only.lower()
    slug = re.sub(r"[^a-z0-9]+", separator, lowered)
    return slug.strip(separator)


def sanitize_branch_safe(branch: str) -> str:
    """Underscore slug, safe for database and shell identifiers."""
    return sanitize_branch_for_id(branch, separator="_")


def container_name(prefix: str, project: str, branch: str) -> str:
    """Deterministic container name: `<prefix>-<project>-<sanitized branch>`.

    Examples:
        >>> container_name("ikagent", "payments", "feature/x")
        'ikagent-payments-feature-x'
    """
    return f"{prefix}-{project}-{sanitize_branch_for_container(branch)}"


def project_container_prefix(prefix: str, project: str) -> str:
    """Name prefix shared by every container of `project`."""
    return f"{prefix}-{project}-"


def parse_container_name(prefix: str, name: str) -> tuple[str, str]:
    """Split a container name back into (project, branch).

    The project is taken to be the first `-` separated segment after the
    prefix. Project names that themselves contain `-` cannot be recovered
    this way; callers that know the project should match on
    project_container_prefix() instead.

    Examples:
        >>> parse_container_name("ikagent", "ikagent-shop-checkout-flow")
        ('shop', 'checkout-flow')
    """
    head = f"{prefix}-"
    remainder = name[len(head) :] if name.startswith(head) else name
    project, _, branch = remainder.partition("-")
    return project, branch
