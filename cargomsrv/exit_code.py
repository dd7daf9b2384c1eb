"""Process exit codes."""

import enum


class ExitCode(enum.IntEnum):
    """Exit codes returned by the command."""

    SUCCESS = 0
    FAILURE = 1