# cargomsrv

A library of building blocks for working out the Minimum Supported Rust
Version (MSRV) of a Cargo crate. It reads the MSRV from a `Cargo.toml`
manifest, turns `cargo msrv`-style arguments into a complete run
configuration, and drives `rustup` to install toolchains and run a
compatibility check (by default `cargo check`) with them.

`rustup` must be on your `PATH` for anything that installs toolchains, runs
checks or asks for the default target. Parsing manifests, versions and
options works without it.

## Reading the MSRV from a manifest

`CargoManifestParser` (in `cargomsrv.manifest`) takes the MSRV from
`package.rust-version`, falling back to `package.metadata.msrv` (a regular or
inline table):

```python
from cargomsrv.manifest import CargoManifestParser

contents = """
[package]
name = "some"
version = "0.1.0"
edition = "2018"
rust-version = "1.56"
"""

manifest = CargoManifestParser().parse_manifest(contents)
print(manifest.minimum_rust_version)   # 1.56
```

Invalid TOML raises `ParseTomlError`. Versions must have two or three
numeric components; empty input, non-numeric or too many components, numbers
above 2**64 - 1, and pre-release or build suffixes raise `BareVersionError`.

```python
from cargomsrv.manifest import BareVersion

BareVersion.parse("1.54.0")   # BareVersion(major=1, minor=54, patch=0)
BareVersion.parse("1.54")     # BareVersion(major=1, minor=54, patch=None)
```

`BareVersion.try_to_semver(available)` returns the first version in
`available` that matches: same major and minor, and for a three component
version a patch at least as large. Candidates may be objects with `major`,
`minor` and `patch` attributes or plain tuples. When nothing matches,
`NoVersionMatchesManifestMsrvError` is raised.

## Editions

`cargomsrv.options.Edition` maps an edition to the first Rust version that
supports it: `2015`, `2018` and `2021` give 1.0.0, 1.31.0 and 1.56.0.

```python
from cargomsrv.options import Edition, parse_edition_or_version

Edition.parse("2018").as_bare_version()   # 1.31.0
parse_edition_or_version("1.40")          # a plain version works too
```

## From arguments to configuration

`cargomsrv.cli.parse_args` takes a full argument list, program name first,
given either as `cargo msrv ...` or `cargo-msrv ...` (`modify_args` inserts
the missing `msrv`). Anything after `--` becomes the custom check command.
Invalid arguments make it exit, as `argparse` does. The result is a
`CargoMsrvOpts`; `cargomsrv.configurators.config_from_opts` turns it into a
`Config`:

```python
from cargomsrv.cli import parse_args
from cargomsrv.configurators import config_from_opts

opts = parse_args([
    "cargo", "msrv", "--linear", "--no-read-min-edition",
    "--path", "my-crate", "--", "cargo", "build",
])
config = config_from_opts(opts, "x86_64-unknown-linux-gnu")

config.mode_intent             # ModeIntent.FIND
config.search_method           # SearchMethod.LINEAR
config.check_command_string()  # "cargo build"
```

The sub-commands `list [--variant]`, `set <MSRV>`, `show` and
`verify [--rust-version]` select the other modes; the hidden `--verify` flag
also selects verify. Unless `--min` or `--no-read-min-edition` is given, the
crate's `edition` from `Cargo.toml` becomes the minimum version. When no
default target is passed to `config_from_opts`, it is read from
`rustup show` (`cargomsrv.fetch.default_target`).
`test_config_from_opts` does the same with user output switched off.

## Working with rustup

- `cargomsrv.command.RustupCommand` runs `rustup run|install|show|<cmd>` and
  returns a `RustupOutput` with decoded `stdout`, `stderr` and `success`.
- `cargomsrv.download.download_toolchain(spec)` installs a toolchain with the
  minimal profile, raising `RustupInstallFailedError` on failure.
- `cargomsrv.fetch.is_target_available(name)` checks `rustup target list`,
  raising `UnknownTargetError` when the target is absent.
- `cargomsrv.check.RustupToolchainCheck(...).check(config, toolchain)`
  installs the toolchain and runs the configured check command in the crate
  folder, returning a `CheckOutcome` (`toolchain`, `success`, `stderr`). With
  `ignore_lockfile` set, `Cargo.lock` is moved aside during the check and
  put back afterwards.
- `cargomsrv.lockfile.LockfileHandler` moves a lockfile aside and back; it
  also works as a context manager.

## Logging

`cargomsrv.log_level.LogLevel.parse` accepts a name (`trace`, `debug`,
`info`, `warn`, `error`, any case) or a number from 1 (error) to 5 (trace);
anything else raises `ParseLogLevelError`.

`cargomsrv.log_setup.init_tracing(TracingConfig.from_options(config.tracing))`
attaches a handler to the `cargomsrv` logger: JSON lines in a daily-rotated
`cargo-msrv-log` file in the user data folder (`log_folder()`), or plain text
on stdout. A second call raises `UnableToInitTracingError`.

## Errors

Every failure is raised as a subclass of `cargomsrv.errors.CargoMSRVError`,
so a single `except CargoMSRVError` catches them all. Exit codes are in
`cargomsrv.exit_code.ExitCode` (`SUCCESS` = 0, `FAILURE` = 1).

## What this package does not do

The package has no console command of its own. It does not fetch an index of
Rust releases, does not search that index for the MSRV (linear or bisect),
does not list dependency MSRVs, write a new MSRV into a manifest, show or
verify it, write a toolchain file, or report progress to the user. It
provides the configuration, manifest, rustup and checking pieces such a
program is built from.