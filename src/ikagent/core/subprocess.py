"""Subprocess execution with rich error context.

This is the only place ikagent spawns processes whose output it parses.
Every git and docker call goes through run_subprocess_with_context, which
turns a non-zero exit into a RuntimeError carrying the command, exit code
and captured output.
"""

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import IO, Any

logger = logging.getLogger(__name__)


def run_subprocess_with_context(
    cmd: Sequence[str],
    operation_context: str,
    cwd: Path | None = None,
    capture_output: bool = True,
    text: bool = True,
    encoding: str = "utf-8",
    check: bool = True,
    stdout: int | IO[Any] | None = None,
    stderr: int | IO[Any] | None = None,
    **kwargs: Any,
) -> subprocess.CompletedProcess[str]:
    """Execute subprocess with enriched error reporting.

    Wraps subprocess.run() to catch CalledProcessError and re-raise as RuntimeError
    with operation context, stderr output, and command details.

    Args:
        cmd: Command and arguments to execute
        operation_context: Human-readable description of operation
        cwd: Working directory for command execution
        capture_output: Whether to capture stdout/stderr (default: True)
        text: Whether to decode output as text (default: True)
        encoding: Text encoding to use (default: "utf-8")
        check: Whether to raise on non-zero exit (default: True)
        stdout: File descriptor or file object for stdout
        stderr: File descriptor or file object for stderr
        **kwargs: Additional arguments passed to subprocess.run()

    Returns:
        CompletedProcess instance from subprocess.run()

    Raises:
        RuntimeError: If command fails or the binary is not found
    """
    logger.debug("Running %s (cwd=%s)", _format_cmd(cmd), cwd)
    try:
        if capture_output and (stdout is not None or stderr is not None):
            capture_output = False

        run_kwargs: dict[str, Any] = dict(kwargs)
        if stdout is not None:
            run_kwargs["stdout"] = stdout
        if stderr is not None:
            run_kwargs["stderr"] = stderr

        return subprocess.run(
            cmd,
            cwd=cwd,
            capture_output=capture_output,
            text=text,
            encoding=encoding,
            check=check,
            **run_kwargs,
        )

    except subprocess.CalledProcessError as e:
        lines = [
            f"Failed to {operation_context}",
            f"Command: {_format_cmd(cmd)}",
            f"Exit code: {e.returncode}",
        ]
        for label, output in (("stdout", e.stdout), ("stderr", e.stderr)):
            text_output = _decode(output)
            if text_output:
                lines.append(f"{label}: {text_output}")
        raise RuntimeError("\n".join(lines)) from e

    except FileNotFoundError as e:
        raise RuntimeError(
            f"Command not found while trying to {operation_context}: {cmd[0]}\n"
            f"Full command: {_format_cmd(cmd)}"
        ) from e


def _format_cmd(cmd: Sequence[str]) -> str:
    return " ".join(str(arg) for arg in cmd)


def _decode(output: str | bytes | None) -> str:
    if not output:
        return ""
    if isinstance(output, bytes):
        output = output.decode("utf-8", errors="replace")
    return output.strip()


def run_succeeds(cmd: Sequence[str], cwd: Path | None = None) -> bool:
    """Run a command purely for its exit status.

    Used for probes like `git show-ref --verify --quiet` where a non-zero exit
    is an answer, not a failure.
    """
    logger.debug("Probing %s (cwd=%s)", _format_cmd(cmd), cwd)
    try:
        result = subprocess.run(cmd, cwd=cwd, capture_output=True, check=False)
    except FileNotFoundError:
        return False
    return result.returncode == 0
