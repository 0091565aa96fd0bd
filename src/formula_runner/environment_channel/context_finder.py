"""Execution context discovery from the host state directory."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

import yaml

from formula_runner.execution_model.run_models import ExecutionContext, InvocationBuildError

CONTEXT_FILENAME = "env.json"

logger = logging.getLogger(__name__)


class ContextLookupError(InvocationBuildError):
    """Raised when the current execution context cannot be read."""


class StateDirContextFinder:  # pylint: disable=too-few-public-methods
    """Reads `<state_dir>/env.json`; a missing file means no active context."""

    def __init__(self, state_dir: Path) -> None:
        self._path = state_dir / CONTEXT_FILENAME

    def find(self) -> ExecutionContext:
        if not self._path.exists():
            logger.debug("No context file at %s, using empty context", self._path)
            return ExecutionContext()
        try:
            parsed = yaml.safe_load(self._path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as exc:
            raise ContextLookupError(f"Failed to read context file {self._path}: {exc}") from exc
        if parsed is None:
            return ExecutionContext()
        if not isinstance(parsed, Mapping):
            raise ContextLookupError(f"Context file root must be a mapping: {self._path}")
        current = parsed.get("current_env") or ""
        if not isinstance(current, str):
            raise ContextLookupError("current_env must be a string.")
        return ExecutionContext(current=current)
