"""Shell and git utilities.

Provides simple wrappers around subprocess calls for running shell commands,
git and gh, plus output formatting helpers.
"""

from __future__ import annotations

import subprocess
from pathlib import Path

from .errors import CommandError


def run(
    *args: str,
    check: bool = True,
    capture: bool = False,
    cwd: Path | None = None,
) -> subprocess.CompletedProcess[str]:
    """Run an arbitrary shell command.

    By default output streams directly to the terminal so users can see
    test and build progress. Pass capture=True to collect stdout/stderr.

    Args:
        *args: Command and arguments (e.g., "uv", "build").
        check: If True (default), raise CommandError on non-zero exit.
        capture: If True, capture stdout and stderr as text.
        cwd: Working directory for the command.

    Returns:
        CompletedProcess with returncode (and output when captured).
    """
    result = subprocess.run(args, capture_output=capture, text=True, cwd=cwd)
    if check and result.returncode != 0:
        stderr = (result.stderr or "").strip() if capture else ""
        raise CommandError(args, result.returncode, stderr)
    return result


def git(*args: str, check: bool = True) -> str:
    """Run git with captured output and return its stripped stdout.

    Pass check=False for queries where a non-zero exit is an answer
    rather than an error (rev-list against a missing upstream).
    """
    result = run("git", *args, check=check, capture=True)
    return result.stdout.strip()


def gh(*args: str, check: bool = True) -> str:
    """Run a GitHub CLI command and return stdout."""
    result = run("gh", *args, check=check, capture=True)
    return result.stdout.strip()


def step(msg: str) -> None:
    """Print a visually distinct step header.

    Used to separate major phases of the release in terminal output.
    """
    print(f"\n{'─' * 60}\n{msg}\n{'─' * 60}")


def info(msg: str) -> None:
    """Print an indented progress line."""
    print(f"  {msg}")

