"""Log levels accepted on the command line."""

from __future__ import annotations

import enum
import logging
from typing import Optional, Tuple

from cargomsrv.errors import CargoMSRVError

TRACE = 5
logging.addLevelName(TRACE, "TRACE")


class ParseLogLevelError(CargoMSRVError):
    """The given text names no log level."""

    def __init__(self, given_input: str, valid_options_formatted: str) -> None:
        super().__init__(
            f"The given log level '{given_input}' does not exist, "
            f"valid options are: {valid_options_formatted}]"
        )
        self.given_input = given_input
        self.valid_options_formatted = valid_options_formatted


class LogLevel(enum.Enum):
    TRACE = "trace"
    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"

    def __str__(self) -> str:
        return self.name.capitalize()

    @classmethod
    def variants(cls) -> Tuple[str, ...]:
        return tuple(level.value for level in cls)

    @classmethod
    def default(cls) -> "LogLevel":
        return cls.INFO

    @classmethod
    def parse(cls, value: str) -> "LogLevel":
        """Parse a level from a number (1 = error .. 5 = trace) or a name, ignoring case."""
        level = _parse_number(value) or _parse_name(value)
        if level is None:
            raise ParseLogLevelError(value, ",".join(cls.variants()))
        return level

    def to_logging_level(self) -> int:
        return _LOGGING_LEVELS[self]


def _parse_number(value: str) -> Optional[LogLevel]:
    digits = value[1:] if value.startswith("+") else value
    if not digits or not digits.isascii() or not digits.isdigit():
        return None
    return _NUMERIC_LEVELS.get(int(digits))


def _parse_name(value: str) -> Optional[LogLevel]:
    if not value.isascii():
        return None
    lowered = value.lower()
    return next((level for level in LogLevel if level.value == lowered), None)


_NUMERIC_LEVELS = {
    1: LogLevel.ERROR,
    2: LogLevel.WARN,
    3: LogLevel.INFO,
    4: LogLevel.DEBUG,
    5: LogLevel.TRACE,
}

_LOGGING_LEVELS = {
    LogLevel.TRACE: TRACE,
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARN: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
}