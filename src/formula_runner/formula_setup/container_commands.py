"""Checked execution of auxiliary container runtime commands."""

from __future__ import annotations

import shlex
import subprocess
from collections.abc import Callable
from pathlib import Path

CommandRunner = Callable[[tuple[str, ...], Path], None]


class ContainerCommandError(Exception):
    """Raised when a container runtime command fails."""


def run_checked_command(command: tuple[str, ...], cwd: Path) -> None:
    """Run one runtime command and wrap subprocess errors with readable messages."""
    try:
        subprocess.run(list(command), cwd=cwd, check=True)
    except FileNotFoundError as exc:
        command_text = shlex.join(command)
        raise ContainerCommandError(f"Container command not found: {command_text}") from exc
    except subprocess.CalledProcessError as exc:
        command_text = shlex.join(command)
        raise ContainerCommandError(
            f"Container command failed with exit code {exc.returncode}: {command_text}"
        ) from exc
