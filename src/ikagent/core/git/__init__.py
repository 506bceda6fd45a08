"""Git operations subpackage.

This subpackage provides an abstraction over git subprocess calls with an
in-memory fake for tests.
"""

from ikagent.core.git.abc import Git
from ikagent.core.git.real import RealGit

__all__ = [
    "Git",
    "RealGit",
]
