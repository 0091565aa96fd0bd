"""Environment side channel passed to the container through `--env-file`."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from formula_runner.execution_model.run_models import (
    ContainerInvocation,
    ContextFinder,
    InvocationBuildError,
)

from .env_file_writer import KeyValueFileWriter

ENV_FILE = ".env"
ENV_PATTERN = "{}={}"
DOCKER_EXECUTION_ENV = "DOCKER_EXECUTION"
PWD_ENV = "CURRENT_PWD"
ENV = "ENV"
CTX_ENV = "CONTEXT"
VERBOSE_ENV = "VERBOSE_MODE"

logger = logging.getLogger(__name__)


class EnvironmentChannelError(InvocationBuildError):
    """Raised when the env file cannot be written."""


class EnvironmentChannel:
    """Writes execution-context variables to the invocation and its env file."""

    def __init__(self, file_writer: KeyValueFileWriter, context_finder: ContextFinder) -> None:
        self._file = file_writer
        self._context_finder = context_finder

    def set_envs(
        self,
        invocation: ContainerInvocation,
        container_pwd: str,
        verbose: bool,
        target_file: Path,
    ) -> None:
        """Append the required variables to `invocation.env` and flush them all to the file."""
        context = self._context_finder.find()
        invocation.env.extend(
            [
                ENV_PATTERN.format(DOCKER_EXECUTION_ENV, "true"),
                ENV_PATTERN.format(PWD_ENV, container_pwd),
                ENV_PATTERN.format(ENV, context.current),
                ENV_PATTERN.format(CTX_ENV, context.current),
                ENV_PATTERN.format(VERBOSE_ENV, str(verbose).lower()),
            ]
        )
        self.write_all(invocation.env, target_file)

    def write_all(self, pairs: Sequence[str], target_file: Path) -> None:
        """Write each `KEY=VALUE` as a line, creating the file first if needed.

        Lines are appended to whatever the file already holds; callers that
        reuse a working directory must remove the file beforehand.
        """
        for pair in pairs:
            line = f"{pair}\n".encode()
            try:
                if not self._file.exists(target_file):
                    self._file.write(target_file, line)
                    continue
                self._file.append(target_file, line)
            except OSError as exc:
                raise EnvironmentChannelError(
                    f"Failed to write env file {target_file}: {exc}"
                ) from exc
        logger.debug("Wrote %d variables to %s", len(pairs), target_file)
