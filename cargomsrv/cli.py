"""The `cargo msrv` command line."""

from __future__ import annotations

import argparse
import os
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Tuple, TypeVar

from cargomsrv.config import (
    ListMsrvVariant,
    OutputFormat,
    ReleaseSource,
    TracingTargetOption,
)
from cargomsrv.errors import CargoMSRVError
from cargomsrv.log_level import LogLevel
from cargomsrv.manifest import BareVersion
from cargomsrv.options import (
    CargoMsrvOpts,
    DebugOutputOpts,
    FindOpts,
    ListOpts,
    RustReleasesOpts,
    SetOpts,
    SharedOpts,
    ShowOpts,
    SubCommandOpts,
    UserOutputOpts,
    VerifyOpts,
    parse_edition_or_version,
)

T = TypeVar("T")

_CUSTOM_CHECK_HELP = """\
You may provide a custom compatibility `check` command as the last argument (only
when this argument is provided via the double dash syntax, e.g. `$ cargo msrv -- custom
command`.
This custom check command will then be used to validate whether a toolchain version is
compatible.
A custom `check` command should be runnable by rustup, as they will be passed on to
rustup like so: `rustup run <toolchain> <COMMAND...>`. NB: You only need to provide the
<COMMAND...> part.

By default, the custom check command is `cargo check`.
"""


def modify_args(args: Iterable) -> List[str]:
    """Insert the `msrv` sub-command when the program is run as `cargo-msrv` directly.

    Run through cargo, the arguments hold both the program and `msrv`; run directly they
    do not, so the program name is replaced by `cargo` and `msrv` added where missing.
    """
    result = [os.fsdecode(arg) for arg in args]
    if len(result) >= 2 and result[0].endswith(("cargo-msrv", "cargo-msrv.exe")):
        result[0] = "cargo"
        if result[1] != "msrv":
            result.insert(1, "msrv")
    return result


def _argument_type(parse: Callable[[str], T], name: str) -> Callable[[str], T]:
    def convert(text: str) -> T:
        try:
            return parse(text)
        except CargoMSRVError as error:
            raise argparse.ArgumentTypeError(str(error)) from error

    convert.__name__ = name
    return convert


def _add_shared_options(parser: argparse.ArgumentParser, suppress: bool) -> None:
    def default(value):
        return argparse.SUPPRESS if suppress else value

    parser.add_argument(
        "--path", metavar="DIR", type=Path, default=default(None),
        help="Path to cargo project directory",
    )
    parser.add_argument(
        "--output-format", metavar="FORMAT", choices=OutputFormat.custom_formats(),
        default=default(str(OutputFormat.HUMAN)), help="Set the format of user output",
    )
    parser.add_argument(
        "--no-user-output", action="store_true", default=default(False),
        help="Disable user output",
    )
    parser.add_argument(
        "--no-log", action="store_true", default=default(False), help="Disable logging"
    )
    parser.add_argument(
        "--log-target", metavar="LOG TARGET",
        choices=[option.value for option in TracingTargetOption],
        default=default(str(TracingTargetOption.FILE)),
        help="Specify where the program should output its logs",
    )
    parser.add_argument(
        "--log-level", metavar="LEVEL", type=_argument_type(LogLevel.parse, "log level"),
        default=default(LogLevel.default()),
        help="Specify the severity of logs which should be",
    )


def _add_rust_releases_options(parser: argparse.ArgumentParser, prefix: str) -> None:
    parser.add_argument(
        "--min", "--minimum", dest=f"{prefix}min", metavar="VERSION_SPEC or EDITION",
        type=_argument_type(parse_edition_or_version, "version or edition"),
        help="Least recent version or edition to take into account",
    )
    parser.add_argument(
        "--max", "--maximum", dest=f"{prefix}max", metavar="VERSION_SPEC",
        type=_argument_type(BareVersion.parse, "version"),
        help="Most recent version to take into account",
    )
    parser.add_argument(
        "--include-all-patch-releases", dest=f"{prefix}include_all_patch_releases",
        action="store_true", help="Include all patch releases, instead of only the last",
    )
    parser.add_argument(
        "--release-source", dest=f"{prefix}release_source", metavar="SOURCE",
        choices=ReleaseSource.variants(), default=str(ReleaseSource.RUST_CHANGELOG),
    )
    parser.add_argument(
        "--target", dest=f"{prefix}target", metavar="TARGET",
        help="Check against a custom target (instead of the rustup default)",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the parser for `cargo msrv [OPTIONS] [SUBCOMMAND]`.

    A custom check command after `--` is split off by `parse_args` before parsing.
    """
    parser = argparse.ArgumentParser(prog="cargo", allow_abbrev=False)
    commands = parser.add_subparsers(dest="command", metavar="COMMAND")
    commands.required = True

    msrv = commands.add_parser(
        "msrv",
        help="Find your Minimum Supported Rust Version!",
        description="Find your Minimum Supported Rust Version!",
        epilog=_CUSTOM_CHECK_HELP,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False,
    )
    method = msrv.add_mutually_exclusive_group()
    method.add_argument(
        "--bisect", action="store_true", help="Use a binary search to find the MSRV (default)"
    )
    method.add_argument(
        "--linear", action="store_true", help="Use a linear search to find the MSRV"
    )
    msrv.add_argument(
        "--write-toolchain-file", "--toolchain-file", dest="write_toolchain_file",
        action="store_true",
        help="Pin the MSRV by writing the version to a rust-toolchain file",
    )
    msrv.add_argument(
        "--ignore-lockfile", action="store_true",
        help="Temporarily remove the lockfile, so it will not interfere with the building process",
    )
    msrv.add_argument(
        "--no-read-min-edition", action="store_true",
        help="Don't read the `edition` of the crate and do not use its value to reduce the search space",
    )
    msrv.add_argument(
        "--no-check-feedback", action="store_true",
        help="Don't print the result of compatibility checks",
    )
    _add_rust_releases_options(msrv, prefix="")
    _add_shared_options(msrv, suppress=False)
    msrv.add_argument("--verify", action="store_true", help=argparse.SUPPRESS)

    subcommands = msrv.add_subparsers(dest="subcommand", metavar="SUBCOMMAND")

    list_parser = subcommands.add_parser(
        "list", help="Display the MSRV's of dependencies", allow_abbrev=False
    )
    list_parser.add_argument(
        "--variant", choices=ListMsrvVariant.variants(),
        default=str(ListMsrvVariant.ORDERED_BY_MSRV),
        help="Display the MSRV's of crates that your crate depends on",
    )
    _add_shared_options(list_parser, suppress=True)

    set_parser = subcommands.add_parser(
        "set", help="Set the MSRV of the current crate to a given version",
        allow_abbrev=False,
    )
    set_parser.add_argument(
        "set_msrv", metavar="MSRV", type=_argument_type(BareVersion.parse, "version"),
        help="The version to be set as MSRV",
    )
    _add_shared_options(set_parser, suppress=True)

    show_parser = subcommands.add_parser(
        "show", help="Show the MSRV of your crate, as specified in the Cargo manifest",
        allow_abbrev=False,
    )
    _add_shared_options(show_parser, suppress=True)

    verify_parser = subcommands.add_parser(
        "verify", help="Verify whether the MSRV is satisfiable", allow_abbrev=False
    )
    _add_rust_releases_options(verify_parser, prefix="verify_")
    verify_parser.add_argument(
        "--rust-version", metavar="rust-version",
        type=_argument_type(BareVersion.parse, "version"),
        help="Toolchain version to verify; read from the Cargo manifest when not given",
    )
    _add_shared_options(verify_parser, suppress=True)

    return parser


def _split_custom_command(argv: List[str]) -> Tuple[List[str], List[str]]:
    if "--" not in argv:
        return argv, []
    index = argv.index("--")
    return argv[:index], argv[index + 1:]


def _rust_releases_opts(namespace: argparse.Namespace, prefix: str) -> RustReleasesOpts:
    return RustReleasesOpts(
        min=getattr(namespace, f"{prefix}min"),
        max=getattr(namespace, f"{prefix}max"),
        include_all_patch_releases=getattr(namespace, f"{prefix}include_all_patch_releases"),
        release_source=ReleaseSource.parse(getattr(namespace, f"{prefix}release_source")),
    )


def _subcommand(
    namespace: argparse.Namespace, custom: List[str]
) -> Optional[SubCommandOpts]:
    name = namespace.subcommand
    if name == "list":
        return ListOpts(ListMsrvVariant.parse(namespace.variant))
    if name == "set":
        return SetOpts(namespace.set_msrv)
    if name == "show":
        return ShowOpts()
    if name == "verify":
        return VerifyOpts(
            rust_releases_opts=_rust_releases_opts(namespace, "verify_"),
            target=namespace.verify_target,
            custom_check_command=custom,
            rust_version=namespace.rust_version,
        )
    return None


def parse_args(args: Iterable) -> CargoMsrvOpts:
    """Parse a full argument list, program name first; exits on invalid input."""
    argv = modify_args(args)[1:]
    before, custom = _split_custom_command(argv)

    parser = build_parser()
    namespace = parser.parse_args(before)

    if custom and namespace.subcommand not in (None, "verify"):
        parser.error(
            f"a custom check command is not accepted by the '{namespace.subcommand}' command"
        )

    find_opts = FindOpts(
        bisect=namespace.bisect,
        linear=namespace.linear,
        write_toolchain_file=namespace.write_toolchain_file,
        ignore_lockfile=namespace.ignore_lockfile,
        no_read_min_edition=namespace.no_read_min_edition,
        no_check_feedback=namespace.no_check_feedback,
        rust_releases_opts=_rust_releases_opts(namespace, ""),
        target=namespace.target,
        custom_check_command=custom if namespace.subcommand is None else [],
    )
    shared_opts = SharedOpts(
        path=namespace.path,
        user_output_opts=UserOutputOpts(
            output_format=OutputFormat.parse(namespace.output_format),
            no_user_output=namespace.no_user_output,
        ),
        debug_output_opts=DebugOutputOpts(
            no_log=namespace.no_log,
            log_target=TracingTargetOption.parse(namespace.log_target),
            log_level=namespace.log_level,
        ),
    )
    return CargoMsrvOpts(
        find_opts=find_opts,
        shared_opts=shared_opts,
        subcommand=_subcommand(namespace, custom),
        verify=namespace.verify,
    )