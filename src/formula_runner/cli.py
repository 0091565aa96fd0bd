"""Command line interface entry point."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from formula_runner.configuration import (
    ConfigurationError,
    RunnerSettings,
    load_runner_settings,
)
from formula_runner.environment_channel import (
    EnvironmentChannel,
    LocalFileWriter,
    StateDirContextFinder,
)
from formula_runner.execution_model import (
    ExecutionError,
    FormulaDefinition,
    FormulaRunError,
    InputType,
)
from formula_runner.formula_setup import LocalPostRunner, LocalPreRunner
from formula_runner.input_resolution import build_default_input_resolver
from formula_runner.run_execution import FormulaRunner, InvocationBuilder, report_cleanup_error

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


class CliError(Exception):
    """Custom CLI error."""

    def __init__(self, message: str, exit_code: int = 1) -> None:
        super().__init__(message)
        self.exit_code = exit_code


def build_formula_runner(settings: RunnerSettings) -> FormulaRunner:
    """Wire the local collaborators for one CLI invocation."""
    environment_channel = EnvironmentChannel(
        LocalFileWriter(), StateDirContextFinder(settings.state_dir)
    )
    invocation_builder = InvocationBuilder(
        input_resolver=build_default_input_resolver(),
        environment_channel=environment_channel,
        home_dir=settings.home_dir,
        container_binary=settings.container_binary,
    )
    return FormulaRunner(
        pre_runner=LocalPreRunner(
            work_root=settings.work_root, container_binary=settings.container_binary
        ),
        post_runner=LocalPostRunner(container_binary=settings.container_binary),
        invocation_builder=invocation_builder,
        on_cleanup_error=report_cleanup_error,
    )


def _cli_exit_code(container_exit_code: int | None) -> int:
    """Map a container exit code to the CLI exit code; signal deaths become 128 + signal."""
    if container_exit_code is None or container_exit_code == 0:
        return 1
    if container_exit_code < 0:
        return 128 - container_exit_code
    return container_exit_code


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format=LOG_FORMAT)


def _parse_input_flags(raw_inputs: tuple[str, ...]) -> dict[str, str]:
    flags: dict[str, str] = {}
    for raw in raw_inputs:
        name, separator, value = raw.partition("=")
        if not separator or not name.strip():
            raise click.BadParameter(f"expected KEY=VALUE, got {raw!r}", param_hint="--input")
        flags[name.strip()] = value
    return flags


def _load_settings(config_path: str | None) -> RunnerSettings:
    try:
        return load_runner_settings(config_path)
    except ConfigurationError as exc:
        raise CliError(str(exc)) from exc


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="formula-runner")
def cli() -> None:
    """Run formulas inside containers."""


@cli.command(name="run")
@click.argument("formula_dir", type=click.Path(path_type=Path, file_okay=False))
@click.option(
    "--input-mode",
    "input_mode",
    type=click.Choice([mode.value for mode in InputType]),
    default=InputType.PROMPT.value,
    show_default=True,
    help="How the formula receives its inputs",
)
@click.option(
    "--input",
    "raw_inputs",
    multiple=True,
    metavar="KEY=VALUE",
    help="Formula input used by the flag input mode (repeatable)",
)
@click.option("--verbose", is_flag=True, default=False, help="Enable verbose formula output.")
@click.option(
    "--config",
    "config_path",
    required=False,
    type=click.Path(path_type=str),
    help="Path to the runner YAML settings (defaults to ~/.rit/runner.yml)",
)
def run_formula(
    formula_dir: Path,
    input_mode: str,
    raw_inputs: tuple[str, ...],
    verbose: bool,
    config_path: str | None,
) -> None:
    """Build FORMULA_DIR into an image and run it in a container."""
    _configure_logging(verbose)
    flags = _parse_input_flags(raw_inputs)
    settings = _load_settings(config_path)
    definition = FormulaDefinition(name=formula_dir.name, formula_dir=formula_dir.resolve())
    try:
        build_formula_runner(settings).run(definition, InputType(input_mode), verbose, flags)
    except ExecutionError as exc:
        raise CliError(str(exc), exit_code=_cli_exit_code(exc.exit_code)) from exc
    except FormulaRunError as exc:
        raise CliError(str(exc)) from exc


@cli.command(name="context")
@click.option(
    "--config",
    "config_path",
    required=False,
    type=click.Path(path_type=str),
    help="Path to the runner YAML settings (defaults to ~/.rit/runner.yml)",
)
def show_context(config_path: str | None) -> None:
    """Print the execution context passed to formulas."""
    settings = _load_settings(config_path)
    try:
        context = StateDirContextFinder(settings.state_dir).find()
    except FormulaRunError as exc:
        raise CliError(str(exc)) from exc
    click.echo(context.current or "(none)")


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return exc.exit_code
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
