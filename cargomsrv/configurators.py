"""Turning parsed command-line options into a run configuration."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import replace
from pathlib import Path
from typing import Callable, Optional, Tuple, Union

from tomlkit.items import InlineTable

from cargomsrv import fetch
from cargomsrv.config import (
    Config,
    ListCmdConfig,
    ModeIntent,
    OutputFormat,
    SearchMethod,
    SetCmdConfig,
    TracingOptions,
    VerifyCmdConfig,
)
from cargomsrv.errors import CargoIoError, IoErrorKind, IoErrorSource
from cargomsrv.manifest import BareVersion, CargoManifestParser
from cargomsrv.options import (
    CargoMsrvOpts,
    Edition,
    ListOpts,
    SetOpts,
    ShowOpts,
    VerifyOpts,
)

Configurator = Callable[[Config, CargoMsrvOpts], Config]

CARGO_MANIFEST = "Cargo.toml"


def make_mode(opts: CargoMsrvOpts) -> ModeIntent:
    """The mode selected by the sub-command, or by the deprecated `--verify` flag."""
    subcommand = opts.subcommand
    if isinstance(subcommand, ListOpts):
        return ModeIntent.LIST
    if isinstance(subcommand, ShowOpts):
        return ModeIntent.SHOW
    if isinstance(subcommand, SetOpts):
        return ModeIntent.SET
    if isinstance(subcommand, VerifyOpts):
        return ModeIntent.VERIFY
    return ModeIntent.VERIFY if opts.verify else ModeIntent.FIND


def _current_dir() -> Path:
    try:
        return Path.cwd()
    except OSError as error:
        raise CargoIoError(error, IoErrorSource(IoErrorKind.CURRENT_DIR)) from error


def minimum_version_from_manifest(
    crate_path: Optional[Union[str, "os.PathLike[str]"]],
) -> Optional[BareVersion]:
    """The first Rust version supporting the edition named in the crate's manifest.

    The manifest is looked for in `crate_path`, or in the current directory when it
    is None. Returns None when the manifest names no edition.
    """
    folder = Path(crate_path) if crate_path is not None else _current_dir()
    manifest = folder / CARGO_MANIFEST

    try:
        contents = manifest.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as error:
        raise CargoIoError(error, IoErrorSource(IoErrorKind.READ_FILE, manifest)) from error

    document = CargoManifestParser().parse(contents)
    package = document.get("package")
    if not isinstance(package, Mapping) or isinstance(package, InlineTable):
        return None

    edition = package.get("edition")
    if not isinstance(edition, str):
        return None
    return Edition.parse(str(edition)).as_bare_version()


def _custom_check_command(config: Config, opts: CargoMsrvOpts) -> Config:
    subcommand = opts.subcommand
    if isinstance(subcommand, VerifyOpts):
        command = subcommand.custom_check_command
    elif subcommand is None:
        command = opts.find_opts.custom_check_command
    else:
        return config

    if not command:
        return config
    return replace(config, check_command=list(command))


def _path(config: Config, opts: CargoMsrvOpts) -> Config:
    return replace(config, crate_path=opts.shared_opts.path)


def _target(config: Config, opts: CargoMsrvOpts) -> Config:
    target = opts.find_opts.target
    return config if target is None else replace(config, target=target)


def _min_version(config: Config, opts: CargoMsrvOpts) -> Config:
    minimum = opts.find_opts.rust_releases_opts.min
    if minimum is not None:
        version = minimum.as_bare_version() if isinstance(minimum, Edition) else minimum
        return replace(config, minimum_version=version)

    if opts.find_opts.no_read_min_edition:
        return config

    version = minimum_version_from_manifest(config.crate_path)
    return config if version is None else replace(config, minimum_version=version)


def _max_version(config: Config, opts: CargoMsrvOpts) -> Config:
    maximum = opts.find_opts.rust_releases_opts.max
    return config if maximum is None else replace(config, maximum_version=maximum)


def _search_method(config: Config, opts: CargoMsrvOpts) -> Config:
    linear, bisect = opts.find_opts.linear, opts.find_opts.bisect
    if linear and not bisect:
        method = SearchMethod.LINEAR
    else:
        method = SearchMethod.BISECT
    return replace(config, search_method=method)


def _include_all_patch_releases(config: Config, opts: CargoMsrvOpts) -> Config:
    return replace(
        config,
        include_all_patch_releases=opts.find_opts.rust_releases_opts.include_all_patch_releases,
    )


def _output_toolchain_file(config: Config, opts: CargoMsrvOpts) -> Config:
    return replace(config, output_toolchain_file=opts.find_opts.write_toolchain_file)


def _ignore_lockfile(config: Config, opts: CargoMsrvOpts) -> Config:
    return replace(config, ignore_lockfile=opts.find_opts.ignore_lockfile)


def _user_output(config: Config, opts: CargoMsrvOpts) -> Config:
    user_output = opts.shared_opts.user_output_opts
    if user_output.no_user_output:
        return replace(config, output_format=OutputFormat.NONE)
    return replace(config, output_format=user_output.output_format)


def _release_source(config: Config, opts: CargoMsrvOpts) -> Config:
    return replace(config, release_source=opts.find_opts.rust_releases_opts.release_source)


def _tracing(config: Config, opts: CargoMsrvOpts) -> Config:
    debug = opts.shared_opts.debug_output_opts
    if debug.no_log:
        return config
    return replace(config, tracing=TracingOptions(debug.log_target, debug.log_level))


def _check_feedback(config: Config, opts: CargoMsrvOpts) -> Config:
    return replace(config, no_check_feedback=opts.find_opts.no_check_feedback)


def _sub_command(config: Config, opts: CargoMsrvOpts) -> Config:
    subcommand = opts.subcommand
    if isinstance(subcommand, ListOpts):
        return replace(config, sub_command_config=ListCmdConfig(subcommand.variant))
    if isinstance(subcommand, SetOpts):
        return replace(config, sub_command_config=SetCmdConfig(subcommand.msrv))
    if isinstance(subcommand, VerifyOpts):
        return replace(config, sub_command_config=VerifyCmdConfig(subcommand.rust_version))

    if opts.verify:
        return replace(config, sub_command_config=VerifyCmdConfig(None))
    return config


_CONFIGURATORS: Tuple[Configurator, ...] = (
    _custom_check_command,
    _path,
    _target,
    _min_version,
    _max_version,
    _search_method,
    _include_all_patch_releases,
    _output_toolchain_file,
    _ignore_lockfile,
    _user_output,
    _release_source,
    _tracing,
    _check_feedback,
    _sub_command,
)


def config_from_opts(opts: CargoMsrvOpts, default_target: Optional[str] = None) -> Config:
    """Build the run configuration from parsed options.

    When `default_target` is None, the default host triple is asked of rustup.
    """
    target = fetch.default_target() if default_target is None else default_target
    config = Config(make_mode(opts), target)
    for configure in _CONFIGURATORS:
        config = configure(config, opts)
    return config


def test_config_from_opts(opts: CargoMsrvOpts, default_target: Optional[str] = None) -> Config:
    """Like `config_from_opts`, but with user output switched off; meant for testing."""
    return replace(config_from_opts(opts, default_target), output_format=OutputFormat.NONE)


test_config_from_opts.__test__ = False