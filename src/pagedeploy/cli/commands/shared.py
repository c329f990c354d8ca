"""Helpers shared by the deploy and plan commands."""

import shlex
from pathlib import Path

import click

from pagedeploy.cli.output import user_output
from pagedeploy.core.context import DeployContext
from pagedeploy.core.deploy import DeployRequest
from pagedeploy.core.environment import DEFAULT_DEPLOY_BRANCH
from pagedeploy.core.project_config import load_project_settings
from pagedeploy.core.site_builder.abc import DEFAULT_BUILD_COMMAND


def exit_with_error(message: str, exit_code: int = 1) -> None:
    """Print a red "Error:" line and exit."""
    user_output(click.style("Error: ", fg="red") + message)
    raise SystemExit(exit_code)


def resolve_path(base: Path, value: str | Path) -> Path:
    path = Path(value)
    if path.is_absolute():
        return path
    return base / path


def resolve_source_root(ctx: DeployContext, source: Path | None) -> Path:
    if source is None:
        return ctx.cwd
    return resolve_path(ctx.cwd, source)


def build_request(
    ctx: DeployContext,
    *,
    source: Path | None,
    config: str | None,
    branch_config: str | None,
    output_dir: str | None,
    builder: str | None,
) -> DeployRequest:
    """Combine CLI options, `[tool.pagedeploy]` and the environment into a request.

    Precedence: CLI option, then environment (deploy branch only), then
    pyproject.toml, then built-in defaults.
    """
    source_root = resolve_source_root(ctx, source)
    settings = load_project_settings(source_root)

    if builder is not None:
        build_command = shlex.split(builder)
        if not build_command:
            exit_with_error("--builder must not be empty")
    elif settings.build_command is not None:
        build_command = settings.build_command
    else:
        build_command = list(DEFAULT_BUILD_COMMAND)

    deploy_branch = ctx.env.deploy_branch or settings.deploy_branch or DEFAULT_DEPLOY_BRANCH

    return DeployRequest(
        source_root=source_root,
        site_config_path=resolve_path(source_root, config or settings.site_config),
        branch_config_path=resolve_path(source_root, branch_config or settings.branch_config),
        output_root=resolve_path(source_root, output_dir or settings.output_dir),
        deploy_branch=deploy_branch,
        build_command=tuple(build_command),
    )


source_option = click.option(
    "--source",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Site source directory (defaults to the current directory).",
)
config_option = click.option(
    "--config",
    "config",
    default=None,
    help="Primary site settings file, relative to the source directory.",
)
