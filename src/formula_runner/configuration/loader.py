"""Configuration loader service."""

from __future__ import annotations

import tempfile
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

from .runtime_settings import FormulaConfig, FormulaInput, RunnerSettings

DEFAULT_CONTAINER_BINARY = "docker"
DEFAULT_SETTINGS_FILENAME = "runner.yml"
FORMULA_CONFIG_FILENAME = "config.yml"


class ConfigurationError(Exception):
    """Raised when a configuration file is invalid."""


def default_settings_path(home_dir: Path | None = None) -> Path:
    """Return `~/.rit/runner.yml` for the given (or current) user home."""
    return (home_dir or Path.home()) / ".rit" / DEFAULT_SETTINGS_FILENAME


def load_runner_settings(
    settings_path: Path | str | None = None, *, home_dir: Path | None = None
) -> RunnerSettings:
    """Load runner settings, falling back to defaults when the file is absent."""
    resolved_home = home_dir or Path.home()
    path = Path(settings_path) if settings_path else default_settings_path(resolved_home)
    parsed = _load_yaml_mapping(path, missing_ok=settings_path is None)

    container_binary = _require_non_empty_string(
        parsed.get("container_binary", DEFAULT_CONTAINER_BINARY), "container_binary"
    )
    home_value = parsed.get("home_dir")
    home = (
        Path(_require_non_empty_string(home_value, "home_dir")).expanduser()
        if home_value is not None
        else resolved_home
    )
    work_root_value = parsed.get("work_root")
    work_root = (
        _resolve_path(path.parent, _require_non_empty_string(work_root_value, "work_root"))
        if work_root_value is not None
        else Path(tempfile.gettempdir()) / "formula-runner"
    )
    return RunnerSettings(container_binary=container_binary, home_dir=home, work_root=work_root)


def load_formula_config(formula_dir: Path | str) -> FormulaConfig:
    """Load `config.yml` from a formula directory; absent file means empty config."""
    path = Path(formula_dir) / FORMULA_CONFIG_FILENAME
    parsed = _load_yaml_mapping(path, missing_ok=True)
    return FormulaConfig(
        volumes=_normalize_string_sequence(parsed.get("volumes"), "volumes"),
        inputs=_parse_inputs(parsed.get("inputs")),
    )


def _load_yaml_mapping(path: Path, *, missing_ok: bool) -> Mapping[str, Any]:
    if not path.exists():
        if missing_ok:
            return {}
        raise ConfigurationError(f"Configuration file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse configuration file {path}: {exc}") from exc

    if parsed is None:
        return {}
    if not isinstance(parsed, Mapping):
        raise ConfigurationError(f"Configuration root must be a mapping: {path}")
    return parsed


def _parse_inputs(value: Any) -> tuple[FormulaInput, ...]:
    if value is None:
        return ()
    if not isinstance(value, Sequence) or isinstance(value, str):
        raise ConfigurationError("inputs must be a list of mappings.")
    inputs = []
    for index, item in enumerate(value):
        if not isinstance(item, Mapping):
            raise ConfigurationError(f"inputs[{index}] must be a mapping.")
        name = _require_non_empty_string(item.get("name"), f"inputs[{index}].name")
        label = item.get("label") or name
        if not isinstance(label, str):
            raise ConfigurationError(f"inputs[{index}].label must be a string.")
        default = item.get("default")
        inputs.append(
            FormulaInput(
                name=name,
                label=label,
                default=None if default is None else str(default),
            )
        )
    return tuple(inputs)


def _normalize_string_sequence(value: Any, field_name: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        stripped = value.strip()
        return (stripped,) if stripped else ()
    if isinstance(value, Sequence):
        normalized = []
        for item in value:
            if not isinstance(item, str):
                raise ConfigurationError(f"{field_name} entries must be strings.")
            stripped = item.strip()
            if stripped:
                normalized.append(stripped)
        return tuple(normalized)
    raise ConfigurationError(f"{field_name} must be a string or list of strings.")


def _resolve_path(base_path: Path, raw_path: str) -> Path:
    candidate = Path(raw_path).expanduser()
    if not candidate.is_absolute():
        return (base_path / candidate).resolve()
    return candidate


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped
