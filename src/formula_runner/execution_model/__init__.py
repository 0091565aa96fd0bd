"""Execution model exports."""

from .run_models import (
    CleanupError,
    ContainerInvocation,
    ContextFinder,
    ExecutionContext,
    ExecutionError,
    FormulaDefinition,
    FormulaRunError,
    FormulaSetup,
    InputType,
    InvocationBuildError,
    Mount,
    ParsedFlags,
    PostRunner,
    PreparationError,
    PreRunner,
)

__all__ = [
    "CleanupError",
    "ContainerInvocation",
    "ContextFinder",
    "ExecutionContext",
    "ExecutionError",
    "FormulaDefinition",
    "FormulaRunError",
    "FormulaSetup",
    "InputType",
    "InvocationBuildError",
    "Mount",
    "ParsedFlags",
    "PostRunner",
    "PreparationError",
    "PreRunner",
]
