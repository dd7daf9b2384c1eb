"""Running rustup as a child process."""

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass
from functools import cached_property
from typing import Optional, Sequence, Union

from cargomsrv.errors import CargoIoError, IoErrorKind, IoErrorSource

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


@dataclass
class RustupOutput:
    """Captured output and exit status of a finished rustup process."""

    raw_stdout: bytes
    raw_stderr: bytes
    returncode: int

    @cached_property
    def stdout(self) -> str:
        return self.raw_stdout.decode("utf-8", errors="replace")

    @cached_property
    def stderr(self) -> str:
        return self.raw_stderr.decode("utf-8", errors="replace")

    @property
    def success(self) -> bool:
        return self.returncode == 0


@dataclass
class RustupCommand:
    """A rustup invocation: its arguments, working directory and which streams to capture."""

    args: Sequence[PathLike] = ()
    cwd: Optional[PathLike] = None
    capture_stdout: bool = False
    capture_stderr: bool = False
    program: str = "rustup"

    def run(self) -> RustupOutput:
        """Execute `rustup run [...]`."""
        return self.execute("run")

    def install(self) -> RustupOutput:
        """Execute `rustup install [...]`."""
        return self.execute("install")

    def show(self) -> RustupOutput:
        """Execute `rustup show [...]`."""
        return self.execute("show")

    def execute(self, cmd: str) -> RustupOutput:
        """Execute the rustup sub-command `cmd` with the configured arguments."""
        args = [os.fspath(arg) for arg in self.args]
        logger.debug("cmd=%r args=%r", cmd, args)

        stdout = subprocess.PIPE if self.capture_stdout else subprocess.DEVNULL
        stderr = subprocess.PIPE if self.capture_stderr else subprocess.DEVNULL

        try:
            process = subprocess.Popen(
                [self.program, cmd, *args], cwd=self.cwd, stdout=stdout, stderr=stderr
            )
        except OSError as error:
            raise CargoIoError(
                error, IoErrorSource(IoErrorKind.SPAWN_PROCESS, cmd)
            ) from error

        with process:
            try:
                out, err = process.communicate()
            except OSError as error:
                process.kill()
                raise CargoIoError(
                    error,
                    IoErrorSource(IoErrorKind.WAIT_FOR_PROCESS_AND_COLLECT_OUTPUT, cmd),
                ) from error

        return RustupOutput(out or b"", err or b"", process.returncode)