import dataclasses
from pathlib import Path

import pytest

from cargomsrv.config import (
    Config,
    ListCmdConfig,
    ListMsrvVariant,
    ModeIntent,
    OutputFormat,
    ReleaseSource,
    SearchMethod,
    SetCmdConfig,
    ShowCmdConfig,
    TracingOptions,
    TracingTargetOption,
    VerifyCmdConfig,
)
from cargomsrv.errors import InvalidConfigError, RustReleasesSourceParseError
from cargomsrv.log_level import LogLevel
from cargomsrv.manifest import BareVersion


@pytest.mark.parametrize("text", ["human", "json"])
def test_output_format_round_trip(text):
    assert str(OutputFormat.parse(text)) == text


@pytest.mark.parametrize("text", ["none", "HUMAN", "", "xml"])
def test_output_format_rejects(text):
    with pytest.raises(InvalidConfigError) as info:
        OutputFormat.parse(text)
    assert f"'{text}'" in str(info.value)


def test_output_format_custom_formats():
    assert OutputFormat.custom_formats() == ("human", "json")
    assert str(OutputFormat.NONE) == "none"


@pytest.mark.parametrize(
    "mode, expected",
    [
        (ModeIntent.FIND, "determine-msrv"),
        (ModeIntent.LIST, "list-msrv"),
        (ModeIntent.VERIFY, "verify-msrv"),
        (ModeIntent.SET, "set-msrv"),
        (ModeIntent.SHOW, "show-msrv"),
    ],
)
def test_mode_intent_names(mode, expected):
    config = Config(mode, "t")
    assert str(config.mode_intent) == expected


def test_release_source_round_trip():
    for name in ReleaseSource.variants():
        assert str(ReleaseSource.parse(name)) == name
    assert ReleaseSource.parse("rust-changelog") is ReleaseSource.RUST_CHANGELOG


def test_release_source_rejects():
    with pytest.raises(RustReleasesSourceParseError) as info:
        ReleaseSource.parse("elsewhere")
    assert info.value.source == "elsewhere"


@pytest.mark.parametrize(
    "text, expected",
    [("file", TracingTargetOption.FILE), ("stdout", TracingTargetOption.STDOUT)],
)
def test_tracing_target_parse(text, expected):
    assert TracingTargetOption.parse(text) is expected


def test_tracing_target_rejects():
    with pytest.raises(InvalidConfigError):
        TracingTargetOption.parse("stderr")


def test_tracing_options_defaults():
    options = TracingOptions()
    assert options.target is TracingTargetOption.FILE
    assert options.level is LogLevel.INFO


def test_list_variant_round_trip():
    for name in ListMsrvVariant.variants():
        assert str(ListMsrvVariant.parse(name)) == name
    assert ListMsrvVariant.variants() == ("direct-deps", "ordered-by-msrv")


def test_list_variant_rejects():
    with pytest.raises(InvalidConfigError) as info:
        ListMsrvVariant.parse("all")
    assert "No such list variant 'all'" == str(info.value)


def test_config_defaults():
    config = Config(ModeIntent.FIND, "x86_64-unknown-linux-gnu")
    assert config.check_command == ["cargo", "check"]
    assert config.check_command_string() == "cargo check"
    assert config.search_method is SearchMethod.BISECT
    assert config.output_format is OutputFormat.HUMAN
    assert config.release_source is ReleaseSource.RUST_CHANGELOG
    assert config.tracing is None
    assert config.crate_path is None
    assert config.sub_command_config is None


def test_config_check_commands_are_independent():
    first = Config(ModeIntent.FIND, "t")
    second = Config(ModeIntent.FIND, "t")
    first.check_command.append("--workspace")
    assert second.check_command == ["cargo", "check"]
    assert first.check_command_string() == "cargo check --workspace"


def test_config_crate_path_becomes_path():
    config = Config(ModeIntent.FIND, "t", crate_path="some/dir")
    assert config.crate_path == Path("some/dir")


def test_config_replace_keeps_other_fields():
    config = Config(ModeIntent.FIND, "t", ignore_lockfile=True)
    changed = dataclasses.replace(config, output_format=OutputFormat.NONE)
    assert changed.output_format is OutputFormat.NONE
    assert changed.ignore_lockfile is True
    assert config.output_format is OutputFormat.HUMAN


def test_config_list_config():
    sub = ListCmdConfig(ListMsrvVariant.DIRECT_DEPS)
    config = Config(ModeIntent.LIST, "t", sub_command_config=sub)
    assert config.list_config() is sub
    with pytest.raises(TypeError):
        config.set_config()


def test_config_set_config():
    sub = SetCmdConfig(BareVersion.parse("1.56"))
    config = Config(ModeIntent.SET, "t", sub_command_config=sub)
    assert config.set_config().msrv == BareVersion(1, 56)
    with pytest.raises(TypeError):
        config.verify_config()


def test_config_verify_config():
    config = Config(ModeIntent.VERIFY, "t", sub_command_config=VerifyCmdConfig())
    assert config.verify_config().rust_version is None
    with pytest.raises(TypeError):
        config.list_config()


def test_config_show_has_no_typed_accessor():
    config = Config(ModeIntent.SHOW, "t", sub_command_config=ShowCmdConfig())
    for accessor in (config.list_config, config.set_config, config.verify_config):
        with pytest.raises(TypeError):
            accessor()


def test_list_cmd_config_default_variant():
    assert ListCmdConfig().variant is ListMsrvVariant.ORDERED_BY_MSRV