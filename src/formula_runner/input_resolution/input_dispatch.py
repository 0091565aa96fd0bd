"""Input mode dispatch."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Protocol

from formula_runner.execution_model.run_models import (
    ContainerInvocation,
    FormulaSetup,
    InputType,
    InvocationBuildError,
    ParsedFlags,
)


class UnsupportedInputModeError(InvocationBuildError):
    """Raised when no strategy handles the requested input mode."""


class InputStrategy(Protocol):  # pylint: disable=too-few-public-methods
    """Extends an invocation with mode-specific inputs."""

    def inputs(
        self, invocation: ContainerInvocation, setup: FormulaSetup, flags: ParsedFlags
    ) -> None: ...


class InputResolver:  # pylint: disable=too-few-public-methods
    """Closed lookup from input mode to strategy."""

    def __init__(self, strategies: Mapping[InputType, InputStrategy]) -> None:
        unknown = [mode for mode in strategies if not isinstance(mode, InputType)]
        if unknown:
            raise ValueError(f"Strategies must be keyed by InputType, got: {unknown!r}")
        self._strategies = MappingProxyType(dict(strategies))

    def resolve(self, input_type: InputType | str) -> InputStrategy:
        try:
            mode = InputType(input_type)
        except ValueError as exc:
            raise UnsupportedInputModeError(f"Unsupported input mode: {input_type!r}") from exc
        strategy = self._strategies.get(mode)
        if strategy is None:
            raise UnsupportedInputModeError(f"Unsupported input mode: {mode.value}")
        return strategy
