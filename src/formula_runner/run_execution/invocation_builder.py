"""Container `run` invocation construction."""

from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path

from formula_runner.environment_channel.environment_channel import ENV_FILE, EnvironmentChannel
from formula_runner.execution_model.run_models import (
    ContainerInvocation,
    FormulaSetup,
    InputType,
    Mount,
    ParsedFlags,
)
from formula_runner.input_resolution.input_dispatch import InputResolver

CONTAINER_PWD = "/app"
CONTAINER_STATE_DIR = "/root/.rit"

TerminalProbe = Callable[[], bool]


def stdout_is_terminal() -> bool:
    """Return whether the host's standard output is an interactive terminal."""
    return sys.stdout.isatty()


class InvocationBuilder:
    """Builds `<binary> run --rm --env-file .env [-it] -v ... --name <id> <id>`."""

    def __init__(
        self,
        *,
        input_resolver: InputResolver,
        environment_channel: EnvironmentChannel,
        home_dir: Path,
        container_binary: str = "docker",
        is_terminal: TerminalProbe = stdout_is_terminal,
    ) -> None:
        self._input_resolver = input_resolver
        self._environment_channel = environment_channel
        self._home_dir = home_dir
        self._container_binary = container_binary
        self._is_terminal = is_terminal

    def build(
        self,
        setup: FormulaSetup,
        input_type: InputType,
        verbose: bool,
        flags: ParsedFlags,
    ) -> ContainerInvocation:
        args = ["run", "--rm", "--env-file", ENV_FILE]

        # piped stdin and TTY allocation are mutually exclusive
        if self._is_terminal() and input_type != InputType.STDIN:
            args.append("-it")

        for volume in self.volumes(setup):
            args.extend(["-v", volume])

        args.extend(["--name", setup.container_id, setup.container_id])

        invocation = ContainerInvocation(
            binary=self._container_binary,
            args=args,
            cwd=setup.pwd,
        )

        strategy = self._input_resolver.resolve(input_type)
        strategy.inputs(invocation, setup, flags)

        self._environment_channel.set_envs(
            invocation, CONTAINER_PWD, verbose, setup.pwd / ENV_FILE
        )
        return invocation

    def volumes(self, setup: FormulaSetup) -> list[str]:
        """Mandatory mounts first, then the formula's own volumes in declared order."""
        mounts = [
            Mount(str(setup.pwd), CONTAINER_PWD).as_volume(),
            Mount(f"{self._home_dir}/.rit", CONTAINER_STATE_DIR).as_volume(),
        ]
        mounts.extend(volume for volume in setup.config.volumes if volume)
        return mounts
