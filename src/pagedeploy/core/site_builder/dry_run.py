"""Dry-run SiteBuilder wrapper."""

from collections.abc import Sequence
from pathlib import Path

from pagedeploy.cli.output import user_output
from pagedeploy.core.site_builder.abc import DEFAULT_BUILD_COMMAND, SiteBuilder, build_args


class DryRunSiteBuilder(SiteBuilder):
    """Prints the build that would run and reports success without building."""

    def __init__(self, wrapped: SiteBuilder) -> None:
        self._wrapped = wrapped

    def build(
        self,
        source: Path,
        destination: Path,
        config_files: list[Path],
        *,
        command: Sequence[str] = DEFAULT_BUILD_COMMAND,
    ) -> int:
        args = build_args(command, destination, config_files)
        user_output(f"[DRY RUN] Would run: {' '.join(args)}")
        return 0
