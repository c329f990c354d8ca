"""Deploy command: build the site for the current branch and publish it."""

import logging
from pathlib import Path

import click

from pagedeploy.cli.commands.shared import (
    build_request,
    config_option,
    exit_with_error,
    source_option,
)
from pagedeploy.cli.output import user_output
from pagedeploy.core.context import DeployContext
from pagedeploy.core.deploy import run_deploy
from pagedeploy.core.errors import ConfigurationError

logger = logging.getLogger(__name__)


@click.command("deploy")
@source_option
@config_option
@click.option(
    "--branch-config",
    default=None,
    help="Generated per-branch settings file, relative to the source directory.",
)
@click.option(
    "--output-dir",
    default=None,
    help="Build output root; becomes the scratch repository that is pushed.",
)
@click.option(
    "--builder",
    default=None,
    help='Site builder command, e.g. "bundle exec jekyll build".',
)
@click.pass_obj
def deploy_cmd(
    ctx: DeployContext,
    source: Path | None,
    config: str | None,
    branch_config: str | None,
    output_dir: str | None,
    builder: str | None,
) -> None:
    """Build the site and push it to the deploy branch.

    The stable branch deploys to the root of the deploy branch, each version
    branch to its own subdirectory. Other branches only get a validation
    build under CI.

    \b
    Exit status:
      0    deployed, or nothing to deploy
      1    configuration or git error
      3    site build failed
      5    fetching the deploy branch failed
      120  branch is not deployable (outside CI)
      128  deploy attempted outside CI
    """
    if ctx.dry_run:
        user_output(click.style("Dry-run mode:", fg="cyan", bold=True) + " No changes will be made\n")

    try:
        request = build_request(
            ctx,
            source=source,
            config=config,
            branch_config=branch_config,
            output_dir=output_dir,
            builder=builder,
        )
        logger.debug("Deploy request: %s", request)
        result = run_deploy(ctx, request)
    except (ConfigurationError, RuntimeError) as e:
        exit_with_error(str(e))
        return

    logger.debug(
        "Deploy finished: %s",
        " -> ".join(state.value for state in result.machine.history),
    )
    raise SystemExit(result.exit_code)
