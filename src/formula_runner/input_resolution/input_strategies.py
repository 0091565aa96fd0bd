"""Default input strategies exposing formula inputs as container environment variables."""

from __future__ import annotations

import json
import sys
from collections.abc import Callable, Mapping
from typing import IO, Any

import click

from formula_runner.execution_model.run_models import (
    ContainerInvocation,
    FormulaSetup,
    InputType,
    InvocationBuildError,
    ParsedFlags,
)

from .input_dispatch import InputResolver

PromptFunction = Callable[..., Any]


class InputResolutionError(InvocationBuildError):
    """Raised when formula inputs cannot be collected."""


class StdinInputStrategy:  # pylint: disable=too-few-public-methods
    """Reads a JSON object from standard input."""

    def __init__(self, stream: IO[str] | None = None) -> None:
        self._stream = stream

    def inputs(
        self, invocation: ContainerInvocation, setup: FormulaSetup, flags: ParsedFlags
    ) -> None:
        stream = self._stream or sys.stdin
        try:
            payload = json.load(stream)
        except json.JSONDecodeError as exc:
            raise InputResolutionError(f"Standard input is not valid JSON: {exc}") from exc
        if not isinstance(payload, Mapping):
            raise InputResolutionError("Standard input must be a JSON object.")
        invocation.env.extend(_env_entry(name, value) for name, value in payload.items())


class FlagInputStrategy:  # pylint: disable=too-few-public-methods
    """Takes inputs from parsed command-line flags, falling back to declared defaults."""

    def inputs(
        self, invocation: ContainerInvocation, setup: FormulaSetup, flags: ParsedFlags
    ) -> None:
        values = dict(flags)
        for declared in setup.config.inputs:
            if declared.name in values:
                continue
            if declared.default is None:
                raise InputResolutionError(f"Missing required input: {declared.name}")
            values[declared.name] = declared.default
        invocation.env.extend(_env_entry(name, value) for name, value in values.items())


class PromptInputStrategy:  # pylint: disable=too-few-public-methods
    """Asks for every declared input on the terminal."""

    def __init__(self, prompt: PromptFunction | None = None) -> None:
        self._prompt = prompt or click.prompt

    def inputs(
        self, invocation: ContainerInvocation, setup: FormulaSetup, flags: ParsedFlags
    ) -> None:
        for declared in setup.config.inputs:
            try:
                value = self._prompt(declared.label, default=declared.default)
            except click.Abort as exc:
                raise InputResolutionError("Input prompt aborted.") from exc
            invocation.env.append(_env_entry(declared.name, value))


def build_default_input_resolver(
    *, stdin: IO[str] | None = None, prompt: PromptFunction | None = None
) -> InputResolver:
    """Wire the stock strategy for every input mode."""
    return InputResolver(
        {
            InputType.STDIN: StdinInputStrategy(stdin),
            InputType.PROMPT: PromptInputStrategy(prompt),
            InputType.FLAG: FlagInputStrategy(),
        }
    )


def _env_entry(name: str, value: Any) -> str:
    if isinstance(value, bool):
        rendered = str(value).lower()
    elif isinstance(value, (Mapping, list)):
        rendered = json.dumps(value)
    else:
        rendered = str(value)
    # the env file holds exactly one KEY=VALUE per line
    if "\n" in rendered or "\r" in rendered or "\n" in name:
        raise InputResolutionError(f"Input {name!r} must not contain line breaks.")
    return f"{name.upper()}={rendered}"
