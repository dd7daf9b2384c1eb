"""Options given on the command line, grouped as the commands take them."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from cargomsrv.config import (
    ListMsrvVariant,
    OutputFormat,
    ReleaseSource,
    TracingTargetOption,
)
from cargomsrv.errors import CargoMSRVError
from cargomsrv.log_level import LogLevel
from cargomsrv.manifest import BareVersion, BareVersionError


class ParseEditionError(CargoMSRVError):
    """The given text names no supported Rust edition."""

    def __init__(self, edition: str) -> None:
        super().__init__(f"Edition '{edition}' is not supported")
        self.edition = edition


class ParseEditionOrVersionError(CargoMSRVError):
    """The given text is neither an edition nor a bare version."""

    def __init__(
        self,
        value: str,
        edition_error: ParseEditionError,
        version_error: BareVersionError,
    ) -> None:
        super().__init__(
            f"Value '{value}' could not be parsed as a valid Rust version: "
            f"{edition_error} + {version_error}"
        )
        self.value = value
        self.edition_error = edition_error
        self.version_error = version_error


class Edition(enum.Enum):
    """A Rust edition."""

    EDITION_2015 = "2015"
    EDITION_2018 = "2018"
    EDITION_2021 = "2021"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: str) -> "Edition":
        try:
            return cls(value)
        except ValueError:
            raise ParseEditionError(value) from None

    def as_bare_version(self) -> BareVersion:
        """The first Rust version that supports this edition."""
        return _EDITION_VERSIONS[self]


_EDITION_VERSIONS = {
    Edition.EDITION_2015: BareVersion(1, 0, 0),
    Edition.EDITION_2018: BareVersion(1, 31, 0),
    Edition.EDITION_2021: BareVersion(1, 56, 0),
}

EditionOrVersion = Union[Edition, BareVersion]


def parse_edition_or_version(value: str) -> EditionOrVersion:
    """Parse an edition alias such as "2018", or otherwise a bare version."""
    try:
        return Edition.parse(value)
    except ParseEditionError as edition_error:
        try:
            return BareVersion.parse(value)
        except BareVersionError as version_error:
            raise ParseEditionOrVersionError(
                value, edition_error, version_error
            ) from version_error


@dataclass(frozen=True)
class RustReleasesOpts:
    """Which Rust releases are taken into account."""

    min: Optional[EditionOrVersion] = None
    max: Optional[BareVersion] = None
    include_all_patch_releases: bool = False
    release_source: ReleaseSource = ReleaseSource.RUST_CHANGELOG


@dataclass(frozen=True)
class FindOpts:
    """Options of the top-level (find) command."""

    bisect: bool = False
    linear: bool = False
    write_toolchain_file: bool = False
    ignore_lockfile: bool = False
    no_read_min_edition: bool = False
    no_check_feedback: bool = False
    rust_releases_opts: RustReleasesOpts = field(default_factory=RustReleasesOpts)
    target: Optional[str] = None
    custom_check_command: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class UserOutputOpts:
    output_format: OutputFormat = OutputFormat.HUMAN
    no_user_output: bool = False


@dataclass(frozen=True)
class DebugOutputOpts:
    no_log: bool = False
    log_target: TracingTargetOption = TracingTargetOption.FILE
    log_level: LogLevel = LogLevel.INFO


@dataclass(frozen=True)
class SharedOpts:
    """Options shared between all commands."""

    path: Optional[Path] = None
    user_output_opts: UserOutputOpts = field(default_factory=UserOutputOpts)
    debug_output_opts: DebugOutputOpts = field(default_factory=DebugOutputOpts)


@dataclass(frozen=True)
class ListOpts:
    variant: ListMsrvVariant = ListMsrvVariant.ORDERED_BY_MSRV


@dataclass(frozen=True)
class SetOpts:
    msrv: BareVersion


@dataclass(frozen=True)
class ShowOpts:
    pass


@dataclass(frozen=True)
class VerifyOpts:
    rust_releases_opts: RustReleasesOpts = field(default_factory=RustReleasesOpts)
    target: Optional[str] = None
    custom_check_command: List[str] = field(default_factory=list)
    rust_version: Optional[BareVersion] = None


SubCommandOpts = Union[ListOpts, SetOpts, ShowOpts, VerifyOpts]


@dataclass(frozen=True)
class CargoMsrvOpts:
    """Everything given to `cargo msrv`."""

    find_opts: FindOpts = field(default_factory=FindOpts)
    shared_opts: SharedOpts = field(default_factory=SharedOpts)
    subcommand: Optional[SubCommandOpts] = None
    verify: bool = False