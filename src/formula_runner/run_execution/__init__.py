"""Run execution domain exports."""

from .formula_run_use_case import FormulaRunner, report_cleanup_error, run_invocation
from .invocation_builder import (
    CONTAINER_PWD,
    CONTAINER_STATE_DIR,
    InvocationBuilder,
    stdout_is_terminal,
)

__all__ = [
    "CONTAINER_PWD",
    "CONTAINER_STATE_DIR",
    "FormulaRunner",
    "InvocationBuilder",
    "report_cleanup_error",
    "run_invocation",
    "stdout_is_terminal",
]
