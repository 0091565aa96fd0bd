"""Configuration domain entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class RunnerSettings:
    """Host-side settings for launching formula containers."""

    container_binary: str
    home_dir: Path
    work_root: Path

    @property
    def state_dir(self) -> Path:
        return self.home_dir / ".rit"


@dataclass(frozen=True)
class FormulaInput:
    """One input a formula declares in its config file."""

    name: str
    label: str
    default: str | None = None


@dataclass(frozen=True)
class FormulaConfig:
    """Per-formula settings read from the formula's `config.yml`."""

    volumes: tuple[str, ...] = ()
    inputs: tuple[FormulaInput, ...] = ()
