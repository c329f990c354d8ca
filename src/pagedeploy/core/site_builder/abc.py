"""Static-site builder abstraction.

The builder is an external program (Jekyll by default). The deploy pipeline
only needs its exit status, so the interface is a single build() call.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from pathlib import Path

DEFAULT_BUILD_COMMAND = ("jekyll", "build")


def build_args(command: Sequence[str], destination: Path, config_files: list[Path]) -> list[str]:
    """Assemble the full argument list for a build.

    Example:
        >>> build_args(["jekyll", "build"], Path("_site"), [Path("_config.yml")])
        ['jekyll', 'build', '--destination', '_site', '--config', '_config.yml']
    """
    config_arg = ",".join(str(path) for path in config_files)
    return [*command, "--destination", str(destination), "--config", config_arg]


class SiteBuilder(ABC):
    """Abstract interface for invoking the static-site generator."""

    @abstractmethod
    def build(
        self,
        source: Path,
        destination: Path,
        config_files: list[Path],
        *,
        command: Sequence[str] = DEFAULT_BUILD_COMMAND,
    ) -> int:
        """Build the site.

        Args:
            source: Directory holding the site sources (the build runs here)
            destination: Directory the generated site is written to
            config_files: Settings files, later files overriding earlier keys
            command: Builder executable and leading arguments

        Returns:
            Exit status of the builder process
        """
        ...
