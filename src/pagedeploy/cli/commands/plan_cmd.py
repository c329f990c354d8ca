"""Plan command: show how the current branch would be built and deployed."""

from pathlib import Path

import click
from pydantic import BaseModel
from rich.console import Console
from rich.table import Table

from pagedeploy.cli.commands.shared import (
    config_option,
    exit_with_error,
    resolve_path,
    resolve_source_root,
    source_option,
)
from pagedeploy.cli.json_output import emit_json, json_error_boundary
from pagedeploy.core.context import DeployContext
from pagedeploy.core.deploy import resolve_branch
from pagedeploy.core.errors import ConfigurationError
from pagedeploy.core.planning import BranchClassification, classify, plan_paths
from pagedeploy.core.project_config import load_project_settings
from pagedeploy.core.site_config import load_site_config


class PlanReport(BaseModel):
    """Machine-readable plan for one branch."""

    branch: str
    classification: str
    stable_branch: str
    version_branches: list[str]
    output_dir: str | None
    baseurl: str | None
    deploys: bool


def build_plan_report(
    ctx: DeployContext, source_root: Path, config: str | None, branch: str | None
) -> PlanReport:
    settings = load_project_settings(source_root)
    config_path = resolve_path(source_root, config or settings.site_config)
    site_config = load_site_config(config_path)

    if branch is None:
        branch = resolve_branch(ctx, source_root)

    classification = classify(branch, site_config.policy)
    output_dir: str | None = None
    baseurl: str | None = None
    if classification is not BranchClassification.UNRECOGNIZED:
        plan = plan_paths(branch, classification, site_config.baseurl, Path(settings.output_dir))
        output_dir = str(plan.output_branch)
        baseurl = plan.baseurl

    return PlanReport(
        branch=branch,
        classification=classification.value,
        stable_branch=site_config.policy.stable,
        version_branches=site_config.policy.version_branches,
        output_dir=output_dir,
        baseurl=baseurl,
        deploys=classification is not BranchClassification.UNRECOGNIZED,
    )


@click.command("plan")
@source_option
@config_option
@click.option("--branch", default=None, help="Branch to plan for (defaults to the current one).")
@click.option(
    "--format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format.",
)
@click.pass_obj
@json_error_boundary
def plan_cmd(
    ctx: DeployContext,
    source: Path | None,
    config: str | None,
    branch: str | None,
    format: str,
) -> None:
    """Show the classification, output directory and baseurl for a branch.

    Read-only: nothing is built, written or pushed.
    """
    source_root = resolve_source_root(ctx, source)

    if format == "json":
        report = build_plan_report(ctx, source_root, config, branch)
        emit_json(report.model_dump(mode="json"))
        return

    try:
        report = build_plan_report(ctx, source_root, config, branch)
    except ConfigurationError as e:
        exit_with_error(str(e))
        return

    table = Table(show_header=False, box=None)
    table.add_column("field", style="bold")
    table.add_column("value")
    table.add_row("branch", f"[cyan]{report.branch}[/cyan]")
    table.add_row("classification", report.classification)
    table.add_row("stable branch", report.stable_branch)
    table.add_row("version branches", ", ".join(report.version_branches) or "-")
    if report.deploys:
        table.add_row("output", report.output_dir or "")
        table.add_row("baseurl", report.baseurl or "")
    else:
        table.add_row("deploys", "[yellow]no (validation build only under CI)[/yellow]")

    Console().print(table)
