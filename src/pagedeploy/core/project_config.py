import shlex
import tomllib
from dataclasses import dataclass
from pathlib import Path

from pagedeploy.core.errors import ConfigurationError

DEFAULT_SITE_CONFIG = "_config.yml"
DEFAULT_BRANCH_CONFIG = "_config_branch.yml"
DEFAULT_OUTPUT_DIR = "_site"


@dataclass(frozen=True)
class ProjectSettings:
    """Project defaults from `[tool.pagedeploy]` in the source root's pyproject.toml.

    Example:
      [tool.pagedeploy]
      output_dir = "_site"
      branch_config = "_config_branch.yml"
      build_command = ["bundle", "exec", "jekyll", "build"]
      deploy_branch = "gh-pages"
    """

    site_config: str
    branch_config: str
    output_dir: str
    build_command: list[str] | None
    deploy_branch: str | None

    @staticmethod
    def defaults() -> "ProjectSettings":
        return ProjectSettings(
            site_config=DEFAULT_SITE_CONFIG,
            branch_config=DEFAULT_BRANCH_CONFIG,
            output_dir=DEFAULT_OUTPUT_DIR,
            build_command=None,
            deploy_branch=None,
        )


def load_project_settings(source_root: Path) -> ProjectSettings:
    """Read `[tool.pagedeploy]` from pyproject.toml if present; otherwise return defaults."""
    pyproject_path = source_root / "pyproject.toml"
    if not pyproject_path.exists():
        return ProjectSettings.defaults()

    with pyproject_path.open("rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"Could not parse {pyproject_path}: {e}") from e

    section = data.get("tool", {}).get("pagedeploy")
    if section is None:
        return ProjectSettings.defaults()

    build_command = section.get("build_command")
    if build_command is not None:
        if isinstance(build_command, str):
            build_command = shlex.split(build_command)
        if not isinstance(build_command, list) or not build_command:
            raise ConfigurationError(
                f"'tool.pagedeploy.build_command' in {pyproject_path} must be a non-empty list"
            )
        build_command = [str(part) for part in build_command]

    deploy_branch = section.get("deploy_branch")

    return ProjectSettings(
        site_config=str(section.get("site_config", DEFAULT_SITE_CONFIG)),
        branch_config=str(section.get("branch_config", DEFAULT_BRANCH_CONFIG)),
        output_dir=str(section.get("output_dir", DEFAULT_OUTPUT_DIR)),
        build_command=build_command,
        deploy_branch=str(deploy_branch) if deploy_branch else None,
    )
