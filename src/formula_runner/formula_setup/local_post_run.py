"""Local teardown of formula working directories and images."""

from __future__ import annotations

import logging
import shutil

from formula_runner.environment_channel.environment_channel import ENV_FILE
from formula_runner.execution_model.run_models import CleanupError, FormulaSetup

from .container_commands import CommandRunner, ContainerCommandError, run_checked_command

logger = logging.getLogger(__name__)


class LocalPostRunner:  # pylint: disable=too-few-public-methods
    """Removes the env file, the run image and the working directory.

    Every step is attempted; the first failure is raised afterwards.
    """

    def __init__(
        self, *, container_binary: str = "docker", run_command: CommandRunner | None = None
    ) -> None:
        self._container_binary = container_binary
        self._run_command = run_command or run_checked_command

    def post_run(self, setup: FormulaSetup, force_remove: bool) -> None:
        failures: list[str] = []

        try:
            (setup.pwd / ENV_FILE).unlink(missing_ok=True)
        except OSError as exc:
            failures.append(f"remove env file: {exc}")

        if force_remove:
            try:
                self._run_command(
                    (self._container_binary, "rmi", "-f", setup.container_id), setup.pwd.parent
                )
            except ContainerCommandError as exc:
                failures.append(str(exc))

        try:
            shutil.rmtree(setup.pwd)
        except FileNotFoundError:
            logger.debug("Working directory %s already removed", setup.pwd)
        except OSError as exc:
            failures.append(f"remove working directory: {exc}")

        if failures:
            raise CleanupError(f"Cleanup of {setup.container_id} incomplete: {failures[0]}")
