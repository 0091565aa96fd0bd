"""Key/value side-channel file access."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol


class KeyValueFileWriter(Protocol):
    """File operations the environment channel needs."""

    def exists(self, path: Path) -> bool: ...

    def write(self, path: Path, data: bytes) -> None: ...

    def append(self, path: Path, data: bytes) -> None: ...


class LocalFileWriter:
    """Writer backed by the local filesystem."""

    def exists(self, path: Path) -> bool:
        return path.exists()

    def write(self, path: Path, data: bytes) -> None:
        path.write_bytes(data)

    def append(self, path: Path, data: bytes) -> None:
        with path.open("ab") as handle:
            handle.write(data)
