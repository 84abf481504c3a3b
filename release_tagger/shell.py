"""Shell and git utilities.

Provides simple wrappers around subprocess calls for running shell commands
and git operations, plus output formatting helpers for GitHub Actions logs.
"""

from __future__ import annotations

import subprocess
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path


def git(*args: str, check: bool = True) -> str:
    """Run a git command and return stdout.

    Args:
        *args: Arguments to pass to git (e.g., "tag", "--list").
        check: If True (default), raise on non-zero exit. Set to False
               for commands that may legitimately fail (e.g., tag lookup).

    Returns:
        Stripped stdout from the git command.

    Raises:
        subprocess.CalledProcessError: If check is True and git fails.
    """
    result = subprocess.run(["git", *args], capture_output=True, text=True, check=check)
    return result.stdout.strip()


def run(
    *args: str, check: bool = True, cwd: str | Path | None = None
) -> subprocess.CompletedProcess[bytes]:
    """Run an arbitrary shell command.

    Unlike git(), this doesn't capture output - it streams directly to
    the terminal so users can see build progress, etc.

    Args:
        *args: Command and arguments (e.g., "docker", "build", ".").
        check: If True (default), raise on non-zero exit.
        cwd: Directory to run the command in (default: current directory).

    Returns:
        CompletedProcess with returncode for checking success.
    """
    return subprocess.run(args, check=check, cwd=cwd)


def step(msg: str) -> None:
    """Print a visually distinct step header.

    Used to separate major phases of the release in terminal output.
    """
    print(f"\n{'─' * 60}\n{msg}\n{'─' * 60}")


@contextmanager
def group(title: str) -> Iterator[None]:
    """Fold everything printed inside the block into a GitHub Actions group."""
    print(f"::group::{title}")
    try:
        yield
    finally:
        print("::endgroup::")


def warn(msg: str) -> None:
    """Print a non-fatal warning to stderr."""
    print(f"Warning: {msg}", file=sys.stderr)


def fatal(msg: str) -> None:
    """Print an error message and exit with code 1.

    Use for unrecoverable errors that should halt the release.
    """
    print(f"ERROR: {msg}", file=sys.stderr)
    sys.exit(1)
