from pathlib import Path

import pytest

from cargomsrv.errors import (
    CargoIoError,
    CargoMSRVError,
    DefaultHostTripleNotFoundError,
    InvalidConfigError,
    IoErrorKind,
    IoErrorSource,
    NoCrateRootFoundError,
    NoMSRVKeyInCargoTomlError,
    ParseTomlError,
    RustReleasesSourceParseError,
    RustupInstallFailedError,
    SetMsrvNotATableError,
    UnableToFindAnyGoodVersionError,
    UnableToRunCheckError,
    UnknownTargetError,
    WorkspaceFoundError,
)


@pytest.mark.parametrize(
    "error",
    [
        DefaultHostTripleNotFoundError(),
        NoCrateRootFoundError(),
        WorkspaceFoundError(),
        UnknownTargetError(),
        UnableToRunCheckError(),
        SetMsrvNotATableError(),
        InvalidConfigError("bad"),
    ],
)
def test_errors_are_cargo_msrv_errors_with_message(error):
    assert isinstance(error, CargoMSRVError)
    assert str(error) == error.message
    assert error.message


def test_fixed_messages():
    assert str(NoCrateRootFoundError()) == "No crate root found for given crate"
    assert str(DefaultHostTripleNotFoundError()) == (
        "The default host triple (target) could not be found."
    )


def test_generic_message_is_kept():
    assert str(CargoMSRVError("some text")) == "some text"


def test_install_failed_names_toolchain():
    error = RustupInstallFailedError("1.56.0-x86_64-unknown-linux-gnu")
    assert "rustup install 1.56.0-x86_64-unknown-linux-gnu" in str(error)
    assert error.toolchain == "1.56.0-x86_64-unknown-linux-gnu"


def test_release_source_parse_error():
    error = RustReleasesSourceParseError("nope")
    assert str(error) == "Unable to parse rust-releases source from 'nope'"


def test_no_msrv_key_mentions_path(tmp_path):
    manifest = tmp_path / "Cargo.toml"
    error = NoMSRVKeyInCargoTomlError(manifest)
    assert str(manifest) in str(error)
    assert "package.rust-version" in str(error)


def test_parse_toml_error_carries_detail():
    assert str(ParseTomlError("oops")) == "Unable to parse Cargo.toml: oops"


def test_unable_to_find_good_version_mentions_command():
    error = UnableToFindAnyGoodVersionError("cargo check")
    assert "`cargo check`" in str(error)
    assert error.command == "cargo check"


def test_io_error_source_formats_path():
    path = Path("some") / "Cargo.lock"
    source = IoErrorSource(IoErrorKind.REMOVE_FILE, path)
    assert str(source) == f"Unable to remove file '{path}'"


def test_io_error_source_without_subject():
    source = IoErrorSource(IoErrorKind.CURRENT_DIR)
    assert str(source) == "Unable to determine current working directory"


def test_cargo_io_error_message_and_fields():
    os_error = FileNotFoundError("missing")
    source = IoErrorSource(IoErrorKind.SPAWN_PROCESS, "rustup")
    error = CargoIoError(os_error, source)
    assert error.error is os_error
    assert error.source == source
    assert str(error) == f"IO error: '{os_error}'. caused by: '{source}'."