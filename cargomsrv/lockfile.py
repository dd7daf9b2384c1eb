"""Temporarily moving a crate's lockfile out of the way."""

from __future__ import annotations

import enum
import os
from pathlib import Path
from typing import Union

from cargomsrv.errors import CargoIoError, IoErrorKind, IoErrorSource

CARGO_LOCK = "Cargo.lock"
CARGO_LOCK_REPLACEMENT = "Cargo.lock-ignored-for-cargo-msrv"


class _State(enum.Enum):
    START = "start"
    MOVED = "moved"
    COMPLETE = "complete"


class LockfileHandler:
    """Moves a lockfile aside and back again; usable as a context manager."""

    def __init__(self, lock_file: Union[str, "os.PathLike[str]"]) -> None:
        self.path = Path(lock_file)
        self._state = _State.START

    @property
    def replacement_path(self) -> Path:
        return self.path.parent / CARGO_LOCK_REPLACEMENT

    @property
    def is_moved(self) -> bool:
        return self._state is _State.MOVED

    def move_lockfile(self) -> "LockfileHandler":
        """Rename the lockfile to its replacement name."""
        if self._state is not _State.START:
            raise RuntimeError("the lockfile has already been moved")
        self._rename(self.path, self.replacement_path)
        self._state = _State.MOVED
        return self

    def move_lockfile_back(self) -> "LockfileHandler":
        """Restore the lockfile from its replacement name."""
        if self._state is not _State.MOVED:
            raise RuntimeError("the lockfile has not been moved")
        self._rename(self.replacement_path, self.path)
        self._state = _State.COMPLETE
        return self

    def _rename(self, source: Path, destination: Path) -> None:
        try:
            source.replace(destination)
        except OSError as error:
            raise CargoIoError(
                error, IoErrorSource(IoErrorKind.RENAME_FILE, self.path)
            ) from error

    def __enter__(self) -> "LockfileHandler":
        return self.move_lockfile()

    def __exit__(self, exc_type, exc, tb) -> None:
        if self.is_moved:
            self.move_lockfile_back()