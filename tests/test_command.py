import sys

import pytest

from cargomsrv.command import RustupCommand, RustupOutput
from cargomsrv.errors import CargoIoError, IoErrorKind

SCRIPT = "import sys\nprint(' '.join(sys.argv[1:]))\n"


@pytest.mark.parametrize("subcommand", ["run", "install", "show"])
def test_named_subcommands_pass_arguments(tmp_path, subcommand):
    (tmp_path / subcommand).write_text(SCRIPT)
    command = RustupCommand(
        args=["a", "b"],
        cwd=tmp_path,
        capture_stdout=True,
        program=sys.executable,
    )
    output = getattr(command, subcommand)()
    assert output.stdout.strip() == "a b"
    assert output.success


def test_execute_captures_stdout_and_stderr():
    command = RustupCommand(
        args=["import sys; print('out'); print('err', file=sys.stderr)"],
        capture_stdout=True,
        capture_stderr=True,
        program=sys.executable,
    )
    output = command.execute("-c")
    assert output.stdout.strip() == "out"
    assert output.stderr.strip() == "err"


def test_uncaptured_streams_are_empty():
    command = RustupCommand(args=["print('out')"], program=sys.executable)
    output = command.execute("-c")
    assert output.stdout == ""
    assert output.stderr == ""


def test_exit_status_is_reported():
    command = RustupCommand(args=["raise SystemExit(3)"], program=sys.executable)
    output = command.execute("-c")
    assert output.returncode == 3
    assert not output.success


def test_working_directory_is_used(tmp_path):
    command = RustupCommand(
        args=["import os; print(os.getcwd())"],
        cwd=tmp_path,
        capture_stdout=True,
        program=sys.executable,
    )
    output = command.execute("-c")
    assert output.stdout.strip() == str(tmp_path.resolve()) or output.stdout.strip() == str(
        tmp_path
    )


def test_spawn_failure_raises_io_error(tmp_path):
    command = RustupCommand(program=str(tmp_path / "does-not-exist"))
    with pytest.raises(CargoIoError) as info:
        command.show()
    assert info.value.source.kind is IoErrorKind.SPAWN_PROCESS
    assert info.value.source.subject == "show"


def test_output_decoding_is_lossy():
    output = RustupOutput(b"ok\xff", b"\xfe", 0)
    assert output.stdout == "ok\ufffd"
    assert output.stderr == "\ufffd"
    assert output.success