"""Querying rustup for targets."""

from __future__ import annotations

from cargomsrv.command import RustupCommand
from cargomsrv.errors import DefaultHostTripleNotFoundError, UnknownTargetError


def is_target_available(name: str) -> bool:
    """Return True if `rustup target list` lists the given target; raise otherwise."""
    output = RustupCommand(args=["list"], capture_stdout=True).execute("target")

    # Each target sits on its own line, possibly followed by "(installed)" or "(default)".
    for line in output.stdout.splitlines():
        words = line.split()
        if words and words[0] == name:
            return True

    raise UnknownTargetError()


def default_target() -> str:
    """Return the default host triple reported on the first line of `rustup show`."""
    output = RustupCommand(capture_stdout=True).show()

    lines = output.stdout.splitlines()
    if not lines:
        raise DefaultHostTripleNotFoundError()

    words = lines[0].split()
    if len(words) < 3:
        raise DefaultHostTripleNotFoundError()
    return words[2]