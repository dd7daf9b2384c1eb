"""Checking whether a crate builds with a given Rust toolchain."""

from __future__ import annotations

import contextlib
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from cargomsrv.command import RustupCommand
from cargomsrv.config import Config
from cargomsrv.download import download_toolchain
from cargomsrv.errors import (
    CargoIoError,
    IoErrorKind,
    IoErrorSource,
    UnableToRunCheckError,
)
from cargomsrv.lockfile import CARGO_LOCK, LockfileHandler

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckOutcome:
    """The result of running the check command with one toolchain."""

    toolchain: str
    success: bool
    stderr: str = ""


def _crate_root(config: Config) -> Path:
    return config.crate_path if config.crate_path is not None else Path.cwd()


def remove_lockfile(config: Config) -> None:
    """Delete the crate's `Cargo.lock`, if there is one."""
    lock_file = _crate_root(config) / CARGO_LOCK
    if not lock_file.is_file():
        return
    try:
        lock_file.unlink()
    except OSError as error:
        raise CargoIoError(
            error, IoErrorSource(IoErrorKind.REMOVE_FILE, lock_file)
        ) from error


class RustupToolchainCheck:
    """Installs a toolchain with rustup and runs the check command with it."""

    def __init__(self, downloader: Callable[[str], object] = download_toolchain) -> None:
        self._download = downloader

    def check(self, config: Config, toolchain: str) -> CheckOutcome:
        """Run the configured check command with the toolchain `toolchain`."""
        logger.info("ignore_lockfile_enabled=%s", config.ignore_lockfile)

        cargo_lock = _crate_root(config) / CARGO_LOCK
        with contextlib.ExitStack() as stack:
            # Move the lockfile aside while checking if the user chose to ignore it.
            if config.ignore_lockfile and cargo_lock.is_file():
                stack.enter_context(LockfileHandler(cargo_lock))

            self._prepare(toolchain, config)
            return self._run_check_command(toolchain, config)

    def _prepare(self, toolchain: str, config: Config) -> None:
        self._download(toolchain)
        if config.ignore_lockfile:
            remove_lockfile(config)

    def _run_check_command(self, toolchain: str, config: Config) -> CheckOutcome:
        command = [toolchain, *config.check_command]
        try:
            output = RustupCommand(
                args=command, cwd=config.crate_path, capture_stderr=True
            ).run()
        except CargoIoError as error:
            raise UnableToRunCheckError() from error

        if output.success:
            return CheckOutcome(toolchain, True)

        logger.info(
            "try_building run failed: toolchain=%s cmd=%r stderr=%r",
            toolchain,
            " ".join(command),
            output.stderr,
        )
        return CheckOutcome(toolchain, False, output.stderr)