"""Reading the minimum supported Rust version from a Cargo manifest."""

from __future__ import annotations

import enum
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Iterable, Optional, TypeVar

import tomlkit
from tomlkit.exceptions import TOMLKitError
from tomlkit.items import InlineTable

from cargomsrv.errors import CargoMSRVError, ParseTomlError

U64_MAX = 2**64 - 1

_VERSION = re.compile(
    r"^(\d+)\.(\d+)(?:\.(\d+))?(?:-([0-9A-Za-z.-]*))?(?:\+(.*))?$",
    re.ASCII | re.DOTALL,
)

V = TypeVar("V")


class BareVersionErrorKind(enum.Enum):
    """Why a version string could not be parsed as a bare version."""

    EMPTY_INPUT = "Expected a version number, but the given input was empty"
    EXPECTED_NUMBER = "Expected a non-negative number as version component"
    TOO_FEW_COMPONENTS = "Expected a two or three component version number"
    TOO_MANY_COMPONENTS = "Expected at most three version components"
    NUMBER_TOO_LARGE = "Version component is too large"
    PRE_RELEASE_MODIFIER_NOT_ALLOWED = "Pre-release modifier is not allowed"
    BUILD_METADATA_NOT_ALLOWED = "Build metadata is not allowed"


class BareVersionError(CargoMSRVError):
    """A version string is not a valid two or three component Rust version."""

    def __init__(self, kind: BareVersionErrorKind, text: str) -> None:
        super().__init__(
            f"Unable to parse minimum rust version: {kind.value} (got '{text}')"
        )
        self.kind = kind
        self.text = text


class NoVersionMatchesManifestMsrvError(CargoMSRVError):
    """No available release matches the MSRV given in the manifest."""

    def __init__(self, version: "BareVersion") -> None:
        super().__init__(
            f"The MSRV requirement ({version}) in the Cargo manifest did not match "
            "any available version"
        )
        self.version = version


def _components(version: Any) -> tuple:
    try:
        return version.major, version.minor, version.patch
    except AttributeError:
        major, minor, patch = tuple(version)[:3]
        return major, minor, patch


@dataclass(frozen=True)
class BareVersion:
    """A Rust version of two (`major.minor`) or three (`major.minor.patch`) components."""

    major: int
    minor: int
    patch: Optional[int] = None

    @property
    def is_two_components(self) -> bool:
        return self.patch is None

    def __str__(self) -> str:
        if self.patch is None:
            return f"{self.major}.{self.minor}"
        return f"{self.major}.{self.minor}.{self.patch}"

    @classmethod
    def parse(cls, text: str) -> "BareVersion":
        """Parse a version without pre-release or build modifiers."""
        match = _VERSION.match(text)
        if match is None:
            raise BareVersionError(_classify_failure(text), text)

        major, minor, patch, pre, build = match.groups()
        if pre is not None:
            raise BareVersionError(
                BareVersionErrorKind.PRE_RELEASE_MODIFIER_NOT_ALLOWED, text
            )
        if build is not None:
            raise BareVersionError(BareVersionErrorKind.BUILD_METADATA_NOT_ALLOWED, text)

        numbers = [int(part) for part in (major, minor, patch) if part is not None]
        if any(number > U64_MAX for number in numbers):
            raise BareVersionError(BareVersionErrorKind.NUMBER_TOO_LARGE, text)
        return cls(*numbers)

    def try_to_semver(self, available: Iterable[V]) -> V:
        """Return the first available version this version resolves to.

        A two component version matches any release with the same major and minor;
        a three component version also requires a patch at least as large.
        """
        for candidate in available:
            major, minor, patch = _components(candidate)
            if major != self.major or minor != self.minor:
                continue
            if self.patch is None or patch >= self.patch:
                return candidate
        raise NoVersionMatchesManifestMsrvError(self)


def _classify_failure(text: str) -> BareVersionErrorKind:
    if not text:
        return BareVersionErrorKind.EMPTY_INPUT
    parts = text.split(".")
    if not all(part.isascii() and part.isdigit() for part in parts):
        return BareVersionErrorKind.EXPECTED_NUMBER
    if len(parts) > 3:
        return BareVersionErrorKind.TOO_MANY_COMPONENTS
    return BareVersionErrorKind.TOO_FEW_COMPONENTS


def _table(value: Any) -> Optional[Mapping]:
    """A regular (non-inline) table, or None."""
    if isinstance(value, Mapping) and not isinstance(value, InlineTable):
        return value
    return None


def _table_like(value: Any) -> Optional[Mapping]:
    return value if isinstance(value, Mapping) else None


def _string(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, str) else None


def find_minimum_rust_version(document: Mapping) -> Optional[str]:
    """Find the MSRV in `package.rust-version`, falling back to `package.metadata.msrv`."""
    package = _table(document.get("package"))
    if package is None:
        return None

    rust_version = _string(package.get("rust-version"))
    if rust_version is not None:
        return rust_version

    metadata = _table_like(package.get("metadata"))
    if metadata is None:
        return None
    return _string(metadata.get("msrv"))


@dataclass(frozen=True)
class CargoManifest:
    """The values of a `Cargo.toml` manifest that matter for finding an MSRV."""

    minimum_rust_version: Optional[BareVersion] = None

    @classmethod
    def from_document(cls, document: Mapping) -> "CargoManifest":
        version = find_minimum_rust_version(document)
        if version is None:
            return cls(None)
        return cls(BareVersion.parse(version))


class CargoManifestParser:
    """Parser for `Cargo.toml` files."""

    def parse(self, contents: str) -> tomlkit.TOMLDocument:
        """Parse TOML text into a document."""
        try:
            return tomlkit.parse(contents)
        except TOMLKitError as error:
            raise ParseTomlError(error) from error

    def parse_manifest(self, contents: str) -> CargoManifest:
        """Parse TOML text into a CargoManifest."""
        return CargoManifest.from_document(self.parse(contents))