"""Production SiteBuilder that runs the generator as a subprocess."""

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path

import click

from pagedeploy.cli.output import user_output
from pagedeploy.core.site_builder.abc import DEFAULT_BUILD_COMMAND, SiteBuilder, build_args

logger = logging.getLogger(__name__)

COMMAND_NOT_FOUND_STATUS = 127


class RealSiteBuilder(SiteBuilder):
    """Runs `<command> --destination DIR --config A,B` in the source directory.

    Output is not captured so the generator's own progress and error messages
    go straight to the CI log.
    """

    def build(
        self,
        source: Path,
        destination: Path,
        config_files: list[Path],
        *,
        command: Sequence[str] = DEFAULT_BUILD_COMMAND,
    ) -> int:
        if not command:
            raise ValueError("Build command must not be empty")

        args = build_args(command, destination, config_files)
        logger.debug("Running site builder: %s (cwd=%s)", args, source)
        try:
            result = subprocess.run(args, cwd=source, check=False)
        except FileNotFoundError:
            # Same status a shell reports for a missing command
            user_output(click.style("Error: ", fg="red") + f"Command not found: {args[0]}")
            return COMMAND_NOT_FOUND_STATUS
        return result.returncode
