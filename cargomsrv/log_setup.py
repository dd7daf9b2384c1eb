"""Setting up log output, to a rolling file or to stdout."""

from __future__ import annotations

import datetime
import json
import logging
import logging.handlers
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import platformdirs

from cargomsrv.config import TracingOptions, TracingTargetOption
from cargomsrv.errors import UnableToAccessLogFolderError, UnableToInitTracingError

APP_NAME = "cargo-msrv"
LOG_FILE_NAME = "cargo-msrv-log"
PACKAGE_LOGGER = "cargomsrv"

_MARKER = "_cargomsrv_tracing"


def log_folder() -> Path:
    """The local data folder that log files are written to."""
    try:
        return Path(platformdirs.user_data_path(APP_NAME, appauthor=False))
    except (OSError, RuntimeError) as error:
        raise UnableToAccessLogFolderError() from error


@dataclass(frozen=True)
class TracingTarget:
    """Where logs go: a folder on disk, or stdout when `folder` is None."""

    folder: Optional[Path] = None

    @classmethod
    def to_disk(cls, folder: Path) -> "TracingTarget":
        return cls(Path(folder))

    @classmethod
    def stdout(cls) -> "TracingTarget":
        return cls(None)

    @property
    def is_stdout(self) -> bool:
        return self.folder is None

    @classmethod
    def from_option(cls, option: TracingTargetOption) -> "TracingTarget":
        if option is TracingTargetOption.FILE:
            return cls.to_disk(log_folder())
        return cls.stdout()


@dataclass(frozen=True)
class TracingConfig:
    """A resolved logging level (as used by `logging`) and target."""

    level: int
    target: TracingTarget

    @classmethod
    def from_options(cls, options: TracingOptions) -> "TracingConfig":
        return cls(
            level=options.level.to_logging_level(),
            target=TracingTarget.from_option(options.target),
        )


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.datetime.fromtimestamp(
                record.created, tz=datetime.timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "target": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def _file_handler(folder: Path) -> logging.Handler:
    try:
        folder.mkdir(parents=True, exist_ok=True)
        handler = logging.handlers.TimedRotatingFileHandler(
            folder / LOG_FILE_NAME, when="midnight", encoding="utf-8", delay=True
        )
    except OSError as error:
        raise UnableToInitTracingError() from error
    handler.setFormatter(_JsonFormatter())
    return handler


def _stdout_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    return handler


def init_tracing(tracing_config: TracingConfig) -> logging.Handler:
    """Install a log handler on the package logger and return it.

    Raises UnableToInitTracingError if logging has already been set up. The caller
    should close the returned handler when done, to flush what was written.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    if any(getattr(handler, _MARKER, False) for handler in logger.handlers):
        raise UnableToInitTracingError()

    target = tracing_config.target
    if target.is_stdout:
        handler = _stdout_handler()
    else:
        handler = _file_handler(target.folder)

    setattr(handler, _MARKER, True)
    handler.setLevel(tracing_config.level)
    logger.setLevel(tracing_config.level)
    logger.addHandler(handler)

    if not target.is_stdout:
        logger.debug("log_folder=%s", target.folder)
    return handler