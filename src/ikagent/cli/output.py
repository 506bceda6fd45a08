"""Output utilities for CLI commands.

Status messages, warnings and errors are for the human and go to stderr;
the `list` table is the only thing written to stdout.
"""

from typing import Any

import click


def user_output(message: Any | None = None, nl: bool = True) -> None:
    """Output informational message for the user (goes to stderr)."""
    click.echo(message, nl=nl, err=True)


def user_warning(message: str) -> None:
    """Output a yellow `Warning:` line (goes to stderr)."""
    user_output(click.style("Warning: ", fg="yellow") + message)
