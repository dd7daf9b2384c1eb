"""Installing Rust toolchains with rustup."""

from __future__ import annotations

import logging

from cargomsrv.command import RustupCommand, RustupOutput
from cargomsrv.errors import RustupInstallFailedError

logger = logging.getLogger(__name__)


def download_toolchain(spec: str) -> RustupOutput:
    """Install the toolchain `spec` with the minimal profile, raising if rustup fails."""
    logger.info("installing toolchain %s", spec)

    output = RustupCommand(
        args=["--profile", "minimal", spec],
        capture_stdout=True,
        capture_stderr=True,
    ).install()

    if not output.success:
        logger.error(
            "rustup failed to install toolchain %s; stdout=%r stderr=%r",
            spec,
            output.stdout,
            output.stderr,
        )
        raise RustupInstallFailedError(spec)

    return output