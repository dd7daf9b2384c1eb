import subprocess

import pytest

from cargomsrv.check import CheckOutcome, RustupToolchainCheck, remove_lockfile
from cargomsrv.config import Config, ModeIntent
from cargomsrv.errors import RustupInstallFailedError, UnableToRunCheckError
from cargomsrv.lockfile import CARGO_LOCK, CARGO_LOCK_REPLACEMENT

SPEC = "1.56.0-x86_64-unknown-linux-gnu"


class _FakeProcess:
    def __init__(self, returncode):
        self.returncode = returncode

    def communicate(self):
        return b"", (b"boom" if self.returncode else b"")

    def kill(self):
        pass

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return None


class FakeRustup:
    def __init__(self, lock_path):
        self.lock_path = lock_path
        self.returncodes = {}
        self.failing_spawns = set()
        self.calls = []
        self.lock_seen = []

    def popen(self, argv, cwd=None, stdout=None, stderr=None):
        subcommand = argv[1]
        if subcommand in self.failing_spawns:
            raise FileNotFoundError(2, "No such file or directory", argv[0])
        self.calls.append((list(argv), cwd))
        self.lock_seen.append(self.lock_path.exists())
        return _FakeProcess(self.returncodes.get(subcommand, 0))


@pytest.fixture
def fake_rustup(monkeypatch, tmp_path):
    fake = FakeRustup(tmp_path / CARGO_LOCK)
    monkeypatch.setattr(subprocess, "Popen", fake.popen)
    return fake


def make_config(path, **kwargs):
    return Config(
        mode_intent=ModeIntent.FIND,
        target="x86_64-unknown-linux-gnu",
        crate_path=path,
        **kwargs,
    )


def test_successful_check(fake_rustup, tmp_path):
    outcome = RustupToolchainCheck().check(make_config(tmp_path), SPEC)

    assert outcome == CheckOutcome(SPEC, True)
    assert fake_rustup.calls[0][0] == ["rustup", "install", "--profile", "minimal", SPEC]
    assert fake_rustup.calls[1] == (["rustup", "run", SPEC, "cargo", "check"], tmp_path)


def test_failed_check_keeps_stderr(fake_rustup, tmp_path):
    fake_rustup.returncodes["run"] = 101

    outcome = RustupToolchainCheck().check(make_config(tmp_path), SPEC)

    assert outcome.success is False
    assert outcome.stderr == "boom"
    assert outcome.toolchain == SPEC


def test_custom_check_command_is_passed_to_rustup(fake_rustup, tmp_path):
    config = make_config(tmp_path, check_command=["cargo", "build"])

    RustupToolchainCheck().check(config, SPEC)

    assert fake_rustup.calls[-1][0] == ["rustup", "run", SPEC, "cargo", "build"]


def test_install_failure_raises(fake_rustup, tmp_path):
    fake_rustup.returncodes["install"] = 1

    with pytest.raises(RustupInstallFailedError):
        RustupToolchainCheck().check(make_config(tmp_path), SPEC)
    assert [argv[1] for argv, _ in fake_rustup.calls] == ["install"]


def test_downloader_receives_spec(fake_rustup, tmp_path):
    requested = []

    RustupToolchainCheck(downloader=requested.append).check(make_config(tmp_path), SPEC)

    assert requested == [SPEC]
    assert [argv[1] for argv, _ in fake_rustup.calls] == ["run"]


def test_unable_to_spawn_check(fake_rustup, tmp_path):
    fake_rustup.failing_spawns.add("run")

    with pytest.raises(UnableToRunCheckError):
        RustupToolchainCheck(downloader=lambda spec: None).check(make_config(tmp_path), SPEC)


def test_ignored_lockfile_is_moved_aside_and_restored(fake_rustup, tmp_path):
    lock = tmp_path / CARGO_LOCK
    lock.write_text("original")

    outcome = RustupToolchainCheck().check(make_config(tmp_path, ignore_lockfile=True), SPEC)

    assert outcome.success is True
    assert fake_rustup.lock_seen == [False, False]
    assert lock.read_text() == "original"
    assert not (tmp_path / CARGO_LOCK_REPLACEMENT).exists()


def test_lockfile_kept_in_place_when_not_ignored(fake_rustup, tmp_path):
    lock = tmp_path / CARGO_LOCK
    lock.write_text("original")

    outcome = RustupToolchainCheck().check(make_config(tmp_path), SPEC)

    assert outcome == CheckOutcome(SPEC, True)
    assert fake_rustup.lock_seen == [True, True]
    assert lock.read_text() == "original"


def test_lockfile_restored_when_check_cannot_run(fake_rustup, tmp_path):
    lock = tmp_path / CARGO_LOCK
    lock.write_text("original")
    fake_rustup.failing_spawns.add("run")

    with pytest.raises(UnableToRunCheckError):
        RustupToolchainCheck().check(make_config(tmp_path, ignore_lockfile=True), SPEC)

    assert lock.read_text() == "original"
    assert not (tmp_path / CARGO_LOCK_REPLACEMENT).exists()


def test_remove_lockfile_deletes_file(tmp_path):
    (tmp_path / CARGO_LOCK).write_text("lock")

    remove_lockfile(make_config(tmp_path))

    assert list(tmp_path.iterdir()) == []


def test_remove_lockfile_without_lockfile(tmp_path):
    (tmp_path / "Cargo.toml").write_text("[package]")

    remove_lockfile(make_config(tmp_path))

    assert [p.name for p in tmp_path.iterdir()] == ["Cargo.toml"]


def test_remove_lockfile_ignores_directories(tmp_path):
    (tmp_path / CARGO_LOCK).mkdir()

    remove_lockfile(make_config(tmp_path))

    assert (tmp_path / CARGO_LOCK).is_dir()