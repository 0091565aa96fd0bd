"""Environment channel domain exports."""

from .context_finder import ContextLookupError, StateDirContextFinder
from .env_file_writer import KeyValueFileWriter, LocalFileWriter
from .environment_channel import ENV_FILE, EnvironmentChannel, EnvironmentChannelError

__all__ = [
    "ENV_FILE",
    "ContextLookupError",
    "EnvironmentChannel",
    "EnvironmentChannelError",
    "KeyValueFileWriter",
    "LocalFileWriter",
    "StateDirContextFinder",
]
