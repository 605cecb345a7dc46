"""Subprocess execution with enriched error reporting."""

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import IO, Any

from git_wt.core.errors import GitCommandError

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
    """Execute subprocess and translate failures into GitCommandError.

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
        GitCommandError: If command fails or the binary is missing
    """
    if capture_output and (stdout is not None or stderr is not None):
        capture_output = False

    logger.debug("run %s (cwd=%s)", " ".join(str(arg) for arg in cmd), cwd)
    try:
        return subprocess.run(
            cmd,
            cwd=cwd,
            capture_output=capture_output,
            text=text,
            encoding=encoding,
            check=check,
            stdout=stdout,
            stderr=stderr,
            **kwargs,
        )
    except subprocess.CalledProcessError as e:
        raise GitCommandError(
            cmd,
            e.returncode,
            _combine_output(e.stdout, e.stderr),
            operation_context,
        ) from e
    except FileNotFoundError as e:
        raise GitCommandError(
            cmd,
            127,
            f"command not found: {cmd[0]}",
            operation_context,
        ) from e


def _combine_output(stdout: str | bytes | None, stderr: str | bytes | None) -> str:
    parts: list[str] = []
    for stream in (stdout, stderr):
        if not stream:
            continue
        text = stream if isinstance(stream, str) else stream.decode("utf-8", errors="replace")
        stripped = text.strip()
        if stripped:
            parts.append(stripped)
    return "\n".join(parts)
