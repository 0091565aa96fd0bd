"""Formula run use-case service."""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from collections.abc import Callable, Iterator
from contextlib import contextmanager

import click

from formula_runner.execution_model.run_models import (
    ContainerInvocation,
    ExecutionError,
    FormulaDefinition,
    FormulaSetup,
    InputType,
    ParsedFlags,
    PostRunner,
    PreRunner,
)

from .invocation_builder import InvocationBuilder

CleanupErrorSink = Callable[[Exception], None]
ProcessRunner = Callable[[ContainerInvocation], int]

logger = logging.getLogger(__name__)


def run_invocation(invocation: ContainerInvocation) -> int:
    """Run the container process to completion with the host's stdio and return its exit code."""
    completed = subprocess.run(
        invocation.argv,
        cwd=invocation.cwd,
        env=process_environment(invocation.env),
        stdin=invocation.stdin,
        stdout=invocation.stdout,
        stderr=invocation.stderr,
        check=False,
    )
    return completed.returncode


def process_environment(entries: list[str]) -> dict[str, str]:
    """Overlay `KEY=VALUE` entries on the host environment."""
    environment = dict(os.environ)
    for entry in entries:
        key, _, value = entry.partition("=")
        environment[key] = value
    return environment


def report_cleanup_error(exc: Exception) -> None:
    """Default cleanup sink: print the failure to stderr."""
    click.echo(f"warning: {exc}", err=True)


class FormulaRunner:
    """Prepares, launches and always cleans up one containerized formula run."""

    def __init__(
        self,
        *,
        pre_runner: PreRunner,
        post_runner: PostRunner,
        invocation_builder: InvocationBuilder,
        process_runner: ProcessRunner = run_invocation,
        on_cleanup_error: CleanupErrorSink | None = None,
    ) -> None:
        self._pre_runner = pre_runner
        self._post_runner = post_runner
        self._invocation_builder = invocation_builder
        self._process_runner = process_runner
        self._on_cleanup_error = on_cleanup_error or report_cleanup_error

    def run(
        self,
        definition: FormulaDefinition,
        input_type: InputType,
        verbose: bool,
        flags: ParsedFlags,
    ) -> None:
        """Run `definition` in a container.

        Preparation errors propagate without cleanup. Once a setup exists,
        post-run is invoked on every exit path; its failure is reported to the
        cleanup sink and never replaces the error raised by the run itself.
        """
        setup = self._pre_runner.pre_run(definition)
        logger.info("Running formula %s in container %s", definition.name, setup.container_id)

        with self._post_run_guard(setup):
            invocation = self._invocation_builder.build(setup, input_type, verbose, flags)
            self._execute(invocation)

    def _execute(self, invocation: ContainerInvocation) -> None:
        command_text = shlex.join(invocation.argv)
        logger.debug("Executing %s", command_text)
        try:
            exit_code = self._process_runner(invocation)
        except FileNotFoundError as exc:
            raise ExecutionError(f"Container runtime not found: {invocation.binary}") from exc
        if exit_code != 0:
            raise ExecutionError(
                f"Container exited with code {exit_code}: {command_text}", exit_code=exit_code
            )
        logger.debug("Container exited successfully")

    @contextmanager
    def _post_run_guard(self, setup: FormulaSetup) -> Iterator[None]:
        try:
            yield
        finally:
            try:
                self._post_runner.post_run(setup, True)
            except Exception as exc:  # pylint: disable=broad-exception-caught
                logger.error("Cleanup of container %s failed: %s", setup.container_id, exc)
                self._on_cleanup_error(exc)
