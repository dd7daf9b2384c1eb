"""Errors raised by cargomsrv."""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass
from typing import Optional, Union

PathOrText = Union[str, "os.PathLike[str]"]


class CargoMSRVError(Exception):
    """Base class of every error reported by cargomsrv."""

    default_message = "An unexpected error occurred."

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(self.default_message if message is None else message)

    @property
    def message(self) -> str:
        return str(self.args[0])


class IoErrorKind(enum.Enum):
    """What the program was doing when an I/O operation failed."""

    CURRENT_DIR = "Unable to determine current working directory"
    OPEN_FILE = "Unable to open file '{}'"
    READ_FILE = "Unable to read file '{}'"
    WRITE_FILE = "Unable to write file '{}'"
    REMOVE_FILE = "Unable to remove file '{}'"
    RENAME_FILE = "Unable to rename file '{}'"
    SPAWN_PROCESS = "Unable to spawn process '{}'"
    WAIT_FOR_PROCESS_AND_COLLECT_OUTPUT = (
        "Unable to collect output from '{}', or process did not terminate properly"
    )


@dataclass(frozen=True)
class IoErrorSource:
    """The operation, and the file or process it concerned, behind an I/O error."""

    kind: IoErrorKind
    subject: Optional[PathOrText] = None

    def __str__(self) -> str:
        if self.subject is None:
            return self.kind.value.format("")
        return self.kind.value.format(os.fspath(self.subject))


class CargoIoError(CargoMSRVError):
    """An operating-system error, together with what caused it."""

    def __init__(self, error: OSError, source: IoErrorSource) -> None:
        super().__init__(f"IO error: '{error}'. caused by: '{source}'.")
        self.error = error
        self.source = source


class InvalidConfigError(CargoMSRVError):
    """A configuration value could not be accepted."""


class DefaultHostTripleNotFoundError(CargoMSRVError):
    default_message = "The default host triple (target) could not be found."


class NoCrateRootFoundError(CargoMSRVError):
    default_message = "No crate root found for given crate"


class WorkspaceFoundError(CargoMSRVError):
    default_message = (
        "Unable to set MSRV for workspace, try setting it for individual packages instead."
    )


class NoMSRVKeyInCargoTomlError(CargoMSRVError):
    def __init__(self, path: PathOrText) -> None:
        super().__init__(
            "Unable to find key 'package.rust-version' (or 'package.metadata.msrv') "
            f"in '{os.fspath(path)}'"
        )
        self.path = path


class ParseTomlError(CargoMSRVError):
    def __init__(self, detail: object) -> None:
        super().__init__(f"Unable to parse Cargo.toml: {detail}")
        self.detail = detail


class RustReleasesSourceParseError(CargoMSRVError):
    def __init__(self, source: str) -> None:
        super().__init__(f"Unable to parse rust-releases source from '{source}'")
        self.source = source


class RustupInstallFailedError(CargoMSRVError):
    def __init__(self, toolchain: str) -> None:
        super().__init__(f"Unable to install toolchain with `rustup install {toolchain}`.")
        self.toolchain = toolchain


class RustupRunWithCommandFailedError(CargoMSRVError):
    default_message = "Check toolchain (with `rustup run <toolchain> <command>`) failed."


class ToolchainNotInstalledError(CargoMSRVError):
    default_message = (
        "The given toolchain could not be found. Run `rustup toolchain list` "
        "for an overview of installed toolchains."
    )


class UnknownTargetError(CargoMSRVError):
    default_message = (
        "The given target could not be found. Run `rustup target list` "
        "for an overview of available toolchains."
    )


class UnableToAccessLogFolderError(CargoMSRVError):
    default_message = (
        "Unable to access log folder, run with --no-log to try again without logging."
    )


class UnableToFindAnyGoodVersionError(CargoMSRVError):
    def __init__(self, command: str) -> None:
        super().__init__(
            "Unable to find a Minimum Supported Rust Version (MSRV).\n\n"
            f"If you think this result is erroneous, please run: `{command}` manually.\n\n"
            "If the above does succeed, or you think cargo-msrv errored in another way, "
            "please feel free to\nreport the issue.\n\n"
            "Thank you in advance!"
        )
        self.command = command


class UnableToInitTracingError(CargoMSRVError):
    default_message = "Unable to init logger, run with --no-log to try again without logging."


class UnableToParseCliArgsError(CargoMSRVError):
    default_message = "Unable to parse the CLI arguments. Use `cargo msrv help` for more info."


class UnableToRunCheckError(CargoMSRVError):
    default_message = (
        "Unable to run the checking command. If --check <cmd> is specified, "
        "you could try to verify if you can run the cmd manually."
    )


class SetMsrvNotATableError(CargoMSRVError):
    default_message = (
        "Unable to set the MSRV in the 'package.metadata' table: "
        "'package.metadata' is not a table"
    )