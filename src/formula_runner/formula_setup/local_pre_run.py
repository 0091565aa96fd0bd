"""Local preparation of formula working directories and images."""

from __future__ import annotations

import logging
import shutil
import uuid
from collections.abc import Callable
from pathlib import Path

from formula_runner.configuration import ConfigurationError, load_formula_config
from formula_runner.environment_channel.environment_channel import ENV_FILE
from formula_runner.execution_model.run_models import (
    FormulaDefinition,
    FormulaSetup,
    PreparationError,
)

from .container_commands import CommandRunner, ContainerCommandError, run_checked_command

ContainerIdFactory = Callable[[], str]

logger = logging.getLogger(__name__)


def new_container_id() -> str:
    return f"rit-{uuid.uuid4().hex[:12]}"


class LocalPreRunner:  # pylint: disable=too-few-public-methods
    """Copies the formula into a fresh working directory and builds its image there."""

    def __init__(
        self,
        *,
        work_root: Path,
        container_binary: str = "docker",
        run_command: CommandRunner | None = None,
        container_id_factory: ContainerIdFactory = new_container_id,
    ) -> None:
        self._work_root = work_root
        self._container_binary = container_binary
        self._run_command = run_command or run_checked_command
        self._container_id_factory = container_id_factory

    def pre_run(self, definition: FormulaDefinition) -> FormulaSetup:
        formula_dir = definition.formula_dir
        if not formula_dir.is_dir():
            raise PreparationError(f"Formula directory not found: {formula_dir}")

        container_id = self._container_id_factory()
        pwd = self._work_root / container_id
        try:
            config = load_formula_config(formula_dir)
            self._work_root.mkdir(parents=True, exist_ok=True)
            shutil.copytree(formula_dir, pwd, ignore=shutil.ignore_patterns(ENV_FILE))
            logger.debug("Building image %s from %s", container_id, pwd)
            self._run_command((self._container_binary, "build", "-t", container_id, "."), pwd)
        except (ConfigurationError, ContainerCommandError, OSError) as exc:
            shutil.rmtree(pwd, ignore_errors=True)
            raise PreparationError(f"Failed to prepare formula {definition.name}: {exc}") from exc

        return FormulaSetup(pwd=pwd, config=config, container_id=container_id)
