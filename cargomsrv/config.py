"""Run configuration: the mode to run in and the options that steer it."""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple, Union

from cargomsrv.errors import InvalidConfigError, RustReleasesSourceParseError
from cargomsrv.log_level import LogLevel
from cargomsrv.manifest import BareVersion


class OutputFormat(enum.Enum):
    """How user output is presented."""

    HUMAN = "human"
    """Progress rendered to stderr."""
    JSON = "json"
    """JSON status updates printed to stdout."""
    NONE = "none"
    """No output; meant for debugging and testing."""

    def __str__(self) -> str:
        return self.value

    @classmethod
    def custom_formats(cls) -> Tuple[str, ...]:
        """The formats a user may choose on the command line."""
        return (cls.HUMAN.value, cls.JSON.value)

    @classmethod
    def parse(cls, value: str) -> "OutputFormat":
        if value in cls.custom_formats():
            return cls(value)
        raise InvalidConfigError(f"Given output format '{value}' is not valid")


class ModeIntent(enum.Enum):
    """What the program has been asked to do."""

    FIND = "determine-msrv"
    LIST = "list-msrv"
    VERIFY = "verify-msrv"
    SET = "set-msrv"
    SHOW = "show-msrv"

    def __str__(self) -> str:
        return self.value


class ReleaseSource(enum.Enum):
    """Where the index of Rust releases is fetched from."""

    RUST_CHANGELOG = "rust-changelog"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def variants(cls) -> Tuple[str, ...]:
        return tuple(source.value for source in cls)

    @classmethod
    def parse(cls, value: str) -> "ReleaseSource":
        try:
            return cls(value)
        except ValueError:
            raise RustReleasesSourceParseError(value) from None


class SearchMethod(enum.Enum):
    """How the space of Rust versions is searched."""

    LINEAR = "linear"
    BISECT = "bisect"

    def __str__(self) -> str:
        return self.value


class TracingTargetOption(enum.Enum):
    """Where logs are written."""

    FILE = "file"
    STDOUT = "stdout"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: str) -> "TracingTargetOption":
        try:
            return cls(value)
        except ValueError:
            raise InvalidConfigError(f"Given log target '{value}' is not valid") from None


@dataclass(frozen=True)
class TracingOptions:
    """Logging settings; when absent from a Config, logging is disabled."""

    target: TracingTargetOption = TracingTargetOption.FILE
    level: LogLevel = LogLevel.INFO


class ListMsrvVariant(enum.Enum):
    """Which dependencies the list command shows, and in what order."""

    DIRECT_DEPS = "direct-deps"
    ORDERED_BY_MSRV = "ordered-by-msrv"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def variants(cls) -> Tuple[str, ...]:
        return tuple(variant.value for variant in cls)

    @classmethod
    def parse(cls, value: str) -> "ListMsrvVariant":
        try:
            return cls(value)
        except ValueError:
            raise InvalidConfigError(f"No such list variant '{value}'") from None


@dataclass(frozen=True)
class ListCmdConfig:
    variant: ListMsrvVariant = ListMsrvVariant.ORDERED_BY_MSRV


@dataclass(frozen=True)
class SetCmdConfig:
    msrv: BareVersion


@dataclass(frozen=True)
class VerifyCmdConfig:
    rust_version: Optional[BareVersion] = None


@dataclass(frozen=True)
class ShowCmdConfig:
    pass


SubCommandConfig = Union[ListCmdConfig, SetCmdConfig, ShowCmdConfig, VerifyCmdConfig, None]


def _default_check_command() -> List[str]:
    return ["cargo", "check"]


@dataclass
class Config:
    """Everything a run needs to know; build variants with `dataclasses.replace`."""

    mode_intent: ModeIntent
    target: str
    check_command: List[str] = field(default_factory=_default_check_command)
    crate_path: Optional[Path] = None
    include_all_patch_releases: bool = False
    minimum_version: Optional[BareVersion] = None
    maximum_version: Optional[BareVersion] = None
    search_method: SearchMethod = SearchMethod.BISECT
    output_toolchain_file: bool = False
    ignore_lockfile: bool = False
    output_format: OutputFormat = OutputFormat.HUMAN
    release_source: ReleaseSource = ReleaseSource.RUST_CHANGELOG
    tracing: Optional[TracingOptions] = None
    no_read_min_version: Optional[BareVersion] = None
    no_check_feedback: bool = False
    sub_command_config: SubCommandConfig = None

    def __post_init__(self) -> None:
        if self.crate_path is not None and not isinstance(self.crate_path, Path):
            self.crate_path = Path(os.fspath(self.crate_path))
        self.check_command = list(self.check_command)

    def check_command_string(self) -> str:
        return " ".join(self.check_command)

    def list_config(self) -> ListCmdConfig:
        return self._sub_command(ListCmdConfig)

    def set_config(self) -> SetCmdConfig:
        return self._sub_command(SetCmdConfig)

    def verify_config(self) -> VerifyCmdConfig:
        return self._sub_command(VerifyCmdConfig)

    def _sub_command(self, kind: type):
        if isinstance(self.sub_command_config, kind):
            return self.sub_command_config
        raise TypeError(
            f"sub-command configuration is {type(self.sub_command_config).__name__}, "
            f"not {kind.__name__}"
        )