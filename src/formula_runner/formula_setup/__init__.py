"""Formula setup domain exports."""

from .container_commands import ContainerCommandError, run_checked_command
from .local_post_run import LocalPostRunner
from .local_pre_run import LocalPreRunner, new_container_id

__all__ = [
    "ContainerCommandError",
    "LocalPostRunner",
    "LocalPreRunner",
    "new_container_id",
    "run_checked_command",
]
