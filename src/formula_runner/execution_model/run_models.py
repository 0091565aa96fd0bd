"""Formula run entities, collaborator ports and error taxonomy."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import IO, Any, Protocol

from formula_runner.configuration.runtime_settings import FormulaConfig

ParsedFlags = Mapping[str, str]


class InputType(str, Enum):
    """How a formula receives its inputs."""

    STDIN = "stdin"
    PROMPT = "prompt"
    FLAG = "flag"


@dataclass(frozen=True)
class FormulaDefinition:
    """Identifies the formula to run."""

    name: str
    formula_dir: Path


@dataclass(frozen=True)
class FormulaSetup:
    """Prepared per-run state owned by exactly one run."""

    pwd: Path
    config: FormulaConfig
    container_id: str


@dataclass(frozen=True)
class ExecutionContext:
    """Snapshot of the active execution context."""

    current: str = ""


@dataclass(frozen=True)
class Mount:
    """Host directory bound into the container."""

    host_path: str
    container_path: str

    def as_volume(self) -> str:
        return f"{self.host_path}:{self.container_path}"


@dataclass
class ContainerInvocation:
    """Subprocess description, completed incrementally before execution."""

    binary: str
    args: list[str] = field(default_factory=list)
    env: list[str] = field(default_factory=list)
    cwd: Path | None = None
    # None inherits the host stream
    stdin: IO[Any] | None = None
    stdout: IO[Any] | None = None
    stderr: IO[Any] | None = None

    @property
    def argv(self) -> list[str]:
        return [self.binary, *self.args]


class PreRunner(Protocol):  # pylint: disable=too-few-public-methods
    """Prepares the working directory, config and container identity of a run."""

    def pre_run(self, definition: FormulaDefinition) -> FormulaSetup: ...


class PostRunner(Protocol):  # pylint: disable=too-few-public-methods
    """Tears down what a pre-run allocated."""

    def post_run(self, setup: FormulaSetup, force_remove: bool) -> None: ...


class ContextFinder(Protocol):  # pylint: disable=too-few-public-methods
    """Discovers the active execution context."""

    def find(self) -> ExecutionContext: ...


class FormulaRunError(Exception):
    """Base class for failures while running a formula."""


class PreparationError(FormulaRunError):
    """Raised when a run cannot be prepared."""


class InvocationBuildError(FormulaRunError):
    """Raised when the container invocation cannot be built."""


class ExecutionError(FormulaRunError):
    """Raised when the container process exits abnormally."""

    def __init__(self, message: str, *, exit_code: int | None = None) -> None:
        super().__init__(message)
        self.exit_code = exit_code


class CleanupError(FormulaRunError):
    """Raised when a run's resources cannot be reclaimed."""
