"""Tests for container invocation construction."""

from __future__ import annotations

from pathlib import Path

import pytest
from formula_runner.configuration.runtime_settings import FormulaConfig
from formula_runner.environment_channel.environment_channel import EnvironmentChannel
from formula_runner.environment_channel.env_file_writer import LocalFileWriter
from formula_runner.execution_model.run_models import (
    ExecutionContext,
    FormulaSetup,
    InputType,
    InvocationBuildError,
)
from formula_runner.input_resolution.input_dispatch import (
    InputResolver,
    UnsupportedInputModeError,
)
from formula_runner.run_execution.invocation_builder import InvocationBuilder

HOME = Path("/home/tester")


class FixedContextFinder:
    def find(self) -> ExecutionContext:
        return ExecutionContext(current="default")


class EnvAddingStrategy:
    def __init__(self) -> None:
        self.calls: list[tuple[FormulaSetup, dict[str, str]]] = []

    def inputs(self, invocation, setup, flags) -> None:
        self.calls.append((setup, dict(flags)))
        invocation.env.extend(f"{key.upper()}={value}" for key, value in flags.items())


class FailingStrategy:
    def inputs(self, invocation, setup, flags) -> None:
        raise InvocationBuildError("input collection failed")


def _setup(pwd: Path, volumes: tuple[str, ...] = (), container_id: str = "run-42") -> FormulaSetup:
    return FormulaSetup(pwd=pwd, config=FormulaConfig(volumes=volumes), container_id=container_id)


def _builder(*, is_terminal: bool, strategy=None) -> InvocationBuilder:
    resolved_strategy = strategy or EnvAddingStrategy()
    return InvocationBuilder(
        input_resolver=InputResolver({mode: resolved_strategy for mode in InputType}),
        environment_channel=EnvironmentChannel(LocalFileWriter(), FixedContextFinder()),
        home_dir=HOME,
        is_terminal=lambda: is_terminal,
    )


def _volume_args(args: list[str]) -> list[str]:
    return [args[index + 1] for index, arg in enumerate(args) if arg == "-v"]


def test_end_to_end_flag_mode_without_terminal(tmp_path: Path) -> None:
    setup = _setup(tmp_path, volumes=("/data:/data",))

    invocation = _builder(is_terminal=False).build(setup, InputType.FLAG, True, {})

    assert invocation.binary == "docker"
    assert invocation.args == [
        "run",
        "--rm",
        "--env-file",
        ".env",
        "-v",
        f"{tmp_path}:/app",
        "-v",
        f"{HOME}/.rit:/root/.rit",
        "-v",
        "/data:/data",
        "--name",
        "run-42",
        "run-42",
    ]
    assert (tmp_path / ".env").read_text(encoding="utf-8").splitlines() == [
        "DOCKER_EXECUTION=true",
        "CURRENT_PWD=/app",
        "ENV=default",
        "CONTEXT=default",
        "VERBOSE_MODE=true",
    ]


@pytest.mark.parametrize("input_type", [InputType.PROMPT, InputType.FLAG])
def test_terminal_and_non_stdin_mode_requests_tty(tmp_path: Path, input_type: InputType) -> None:
    invocation = _builder(is_terminal=True).build(_setup(tmp_path), input_type, False, {})

    assert invocation.args[:5] == ["run", "--rm", "--env-file", ".env", "-it"]


def test_stdin_mode_never_requests_tty_even_on_terminal(tmp_path: Path) -> None:
    invocation = _builder(is_terminal=True).build(_setup(tmp_path), InputType.STDIN, False, {})

    assert "-it" not in invocation.args


@pytest.mark.parametrize("input_type", list(InputType))
def test_non_terminal_stdout_never_requests_tty(tmp_path: Path, input_type: InputType) -> None:
    invocation = _builder(is_terminal=False).build(_setup(tmp_path), input_type, False, {})

    assert "-it" not in invocation.args


def test_extra_volumes_follow_mandatory_mounts_in_declared_order(tmp_path: Path) -> None:
    volumes = ("/b:/b", "/a:/a", "/b:/b")

    invocation = _builder(is_terminal=False).build(
        _setup(tmp_path, volumes=volumes), InputType.FLAG, False, {}
    )

    assert _volume_args(invocation.args) == [
        f"{tmp_path}:/app",
        f"{HOME}/.rit:/root/.rit",
        "/b:/b",
        "/a:/a",
        "/b:/b",
    ]


def test_no_extra_volumes_adds_only_mandatory_mounts(tmp_path: Path) -> None:
    invocation = _builder(is_terminal=False).build(_setup(tmp_path), InputType.FLAG, False, {})

    assert _volume_args(invocation.args) == [f"{tmp_path}:/app", f"{HOME}/.rit:/root/.rit"]


def test_name_and_final_argument_are_the_container_id(tmp_path: Path) -> None:
    invocation = _builder(is_terminal=True).build(
        _setup(tmp_path, container_id="rit-abc123"), InputType.PROMPT, False, {}
    )

    name_index = invocation.args.index("--name")
    assert invocation.args[name_index + 1] == "rit-abc123"
    assert invocation.args[-1] == "rit-abc123"
    assert name_index + 2 == len(invocation.args) - 1


def test_invocation_inherits_host_streams_and_runs_in_working_directory(tmp_path: Path) -> None:
    invocation = _builder(is_terminal=False).build(_setup(tmp_path), InputType.FLAG, False, {})

    assert invocation.stdin is None
    assert invocation.stdout is None
    assert invocation.stderr is None
    assert invocation.cwd == tmp_path


def test_strategy_entries_are_written_before_required_variables(tmp_path: Path) -> None:
    strategy = EnvAddingStrategy()
    setup = _setup(tmp_path)

    invocation = _builder(is_terminal=False, strategy=strategy).build(
        setup, InputType.FLAG, False, {"name": "world"}
    )

    assert strategy.calls == [(setup, {"name": "world"})]
    assert invocation.env[0] == "NAME=world"
    assert (tmp_path / ".env").read_text(encoding="utf-8").startswith("NAME=world\n")


def test_strategy_error_propagates_unchanged_and_skips_env_file(tmp_path: Path) -> None:
    with pytest.raises(InvocationBuildError, match="input collection failed"):
        _builder(is_terminal=False, strategy=FailingStrategy()).build(
            _setup(tmp_path), InputType.FLAG, False, {}
        )

    assert not (tmp_path / ".env").exists()


def test_unsupported_input_mode_fails_build(tmp_path: Path) -> None:
    builder = InvocationBuilder(
        input_resolver=InputResolver({InputType.FLAG: EnvAddingStrategy()}),
        environment_channel=EnvironmentChannel(LocalFileWriter(), FixedContextFinder()),
        home_dir=HOME,
        is_terminal=lambda: False,
    )

    with pytest.raises(UnsupportedInputModeError):
        builder.build(_setup(tmp_path), InputType.STDIN, False, {})


def test_container_binary_is_configurable(tmp_path: Path) -> None:
    builder = InvocationBuilder(
        input_resolver=InputResolver({InputType.FLAG: EnvAddingStrategy()}),
        environment_channel=EnvironmentChannel(LocalFileWriter(), FixedContextFinder()),
        home_dir=HOME,
        container_binary="podman",
        is_terminal=lambda: False,
    )

    invocation = builder.build(_setup(tmp_path), InputType.FLAG, False, {})

    assert invocation.argv[:2] == ["podman", "run"]
