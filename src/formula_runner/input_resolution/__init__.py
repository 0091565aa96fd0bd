"""Input resolution domain exports."""

from .input_dispatch import InputResolver, InputStrategy, UnsupportedInputModeError
from .input_strategies import (
    FlagInputStrategy,
    InputResolutionError,
    PromptInputStrategy,
    StdinInputStrategy,
    build_default_input_resolver,
)

__all__ = [
    "FlagInputStrategy",
    "InputResolutionError",
    "InputResolver",
    "InputStrategy",
    "PromptInputStrategy",
    "StdinInputStrategy",
    "UnsupportedInputModeError",
    "build_default_input_resolver",
]
