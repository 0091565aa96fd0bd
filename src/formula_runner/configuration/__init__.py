"""Configuration domain exports."""

from .loader import (
    DEFAULT_CONTAINER_BINARY,
    FORMULA_CONFIG_FILENAME,
    ConfigurationError,
    default_settings_path,
    load_formula_config,
    load_runner_settings,
)
from .runtime_settings import FormulaConfig, FormulaInput, RunnerSettings

__all__ = [
    "FormulaConfig",
    "FormulaInput",
    "RunnerSettings",
    "ConfigurationError",
    "DEFAULT_CONTAINER_BINARY",
    "FORMULA_CONFIG_FILENAME",
    "default_settings_path",
    "load_formula_config",
    "load_runner_settings",
]
