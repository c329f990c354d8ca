import logging
import os

import click

from pagedeploy.cli.commands.deploy import deploy_cmd
from pagedeploy.cli.commands.plan_cmd import plan_cmd
from pagedeploy.core.context import create_context
from pagedeploy.core.environment import DEBUG_VAR

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags


def _configure_logging() -> None:
    # Enable debug logging if PAGEDEPLOY_DEBUG environment variable is set
    if os.getenv(DEBUG_VAR):
        logging.basicConfig(level=logging.DEBUG, format="[DEBUG %(name)s:%(lineno)d] %(message)s")


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="pagedeploy")
@click.option("--dry-run", is_flag=True, help="Print git and build commands instead of running them.")
@click.option("-q", "--quiet", is_flag=True, help="Only print warnings and errors.")
@click.pass_context
def cli(ctx: click.Context, dry_run: bool, quiet: bool) -> None:
    """Build a static documentation site and publish it to a deploy branch."""
    _configure_logging()
    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        ctx.obj = create_context(dry_run=dry_run, quiet=quiet)


cli.add_command(deploy_cmd)
cli.add_command(plan_cmd)


def main() -> None:
    """CLI entry point used by the `pagedeploy` console script."""
    cli()
