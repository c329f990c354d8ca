"""Deploy orchestrator: build the site for the current branch and publish it.

The run is a linear pipeline driven through DeployMachine. Each step either
advances to the next state or moves to a terminal abort state; the caller
turns the final state into the process exit code.
"""

import logging
import shutil
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from pagedeploy.core.context import DeployContext
from pagedeploy.core.deploy_machine import DeployMachine, DeployState
from pagedeploy.core.environment import DEFAULT_DEPLOY_BRANCH
from pagedeploy.core.errors import ConfigurationError
from pagedeploy.core.planning import (
    BranchClassification,
    PathPlan,
    classify,
    directory_name,
    plan_paths,
)
from pagedeploy.core.remote import to_ssh_url
from pagedeploy.core.site_builder.abc import DEFAULT_BUILD_COMMAND
from pagedeploy.core.site_config import SiteConfig, load_site_config, write_branch_config

logger = logging.getLogger(__name__)

SOURCE_REMOTE = "origin"
DEPLOY_REMOTE = "deploy"
# Tells GitHub Pages to serve the tree as-is instead of running its own Jekyll
NO_TEMPLATING_MARKER = ".nojekyll"


@dataclass(frozen=True)
class DeployRequest:
    """Everything a run needs besides the injected context.

    All paths are absolute or relative to the process working directory.
    """

    source_root: Path
    site_config_path: Path
    branch_config_path: Path
    output_root: Path
    deploy_branch: str = DEFAULT_DEPLOY_BRANCH
    build_command: Sequence[str] = DEFAULT_BUILD_COMMAND


@dataclass(frozen=True)
class SourceRevision:
    """Commit the site was built from."""

    sha: str
    dirty: bool

    @property
    def label(self) -> str:
        return f"{self.sha}+" if self.dirty else self.sha


@dataclass
class DeployResult:
    machine: DeployMachine
    branch: str | None = None
    classification: BranchClassification | None = None
    plan: PathPlan | None = None
    commit_message: str | None = None
    restored_paths: list[str] = field(default_factory=list)

    @property
    def exit_code(self) -> int:
        return self.machine.exit_code


def resolve_branch(ctx: DeployContext, source_root: Path) -> str:
    """Branch being built: the environment override, else the checked-out branch.

    Raises:
        ConfigurationError: If neither source yields a branch (detached HEAD)
    """
    if ctx.env.branch_override:
        logger.debug("Branch from environment: %s", ctx.env.branch_override)
        return ctx.env.branch_override

    branch = ctx.git.get_current_branch(source_root)
    if not branch:
        raise ConfigurationError(
            "Could not determine the current branch (detached HEAD?). "
            "Set DEPLOY_SOURCE_BRANCH to the branch being built."
        )
    logger.debug("Branch from git: %s", branch)
    return branch


def format_commit_message(revision: SourceRevision, branch: str) -> str:
    return f"Deploy {revision.label} from branch {branch}"


def run_deploy(ctx: DeployContext, request: DeployRequest) -> DeployResult:
    """Run the full build and deploy pipeline.

    Raises:
        ConfigurationError: If settings are missing or the branch cannot be resolved
        RuntimeError: If a git command that must succeed fails
    """
    result = DeployResult(machine=DeployMachine())
    machine = result.machine

    branch = resolve_branch(ctx, request.source_root)
    result.branch = branch
    machine.advance(DeployState.BRANCH_RESOLVED)

    site_config = load_site_config(request.site_config_path)
    classification = classify(branch, site_config.policy)
    result.classification = classification
    machine.advance(DeployState.CLASSIFIED)
    ctx.feedback.info(f"Branch '{branch}' is a {classification.value} branch")

    if classification is BranchClassification.UNRECOGNIZED:
        _handle_unrecognized(ctx, request, result)
        return result

    plan = plan_paths(branch, classification, site_config.baseurl, request.output_root)
    result.plan = plan

    revision = SourceRevision(
        sha=ctx.git.get_head_commit(request.source_root),
        dirty=ctx.git.has_uncommitted_changes(request.source_root),
    )

    _synthesize_branch_config(ctx, request, site_config, branch, plan)

    ctx.feedback.info(f"Building site into {plan.output_branch} (baseurl '{plan.baseurl}')")
    status = ctx.builder.build(
        request.source_root,
        plan.output_branch,
        [request.site_config_path, request.branch_config_path],
        command=request.build_command,
    )
    if status != 0:
        ctx.feedback.error(f"Error: site build failed with exit status {status}")
        machine.advance(DeployState.ABORTED_BUILD_FAILED)
        return result
    machine.advance(DeployState.BUILT)
    ctx.feedback.success("Site built")

    if not ctx.env.is_ci:
        ctx.feedback.error(
            "Error: refusing to deploy outside of CI. Set CI=true to deploy from this session."
        )
        machine.advance(DeployState.ABORTED_NOT_CI)
        return result
    machine.advance(DeployState.DEPLOY_GUARD_CHECKED)

    _publish(ctx, request, site_config, plan, revision, result)
    return result


def _handle_unrecognized(ctx: DeployContext, request: DeployRequest, result: DeployResult) -> None:
    machine = result.machine

    if not ctx.env.is_ci:
        ctx.feedback.error(
            f"Error: branch '{result.branch}' is neither the stable branch nor a version "
            "branch; nothing to build or deploy."
        )
        machine.advance(DeployState.ABORTED_UNRECOGNIZED)
        return

    ctx.feedback.warning(
        f"Branch '{result.branch}' is not deployable; running a validation build only."
    )
    status = ctx.builder.build(
        request.source_root,
        request.output_root,
        [request.site_config_path],
        command=request.build_command,
    )
    if status == 0:
        ctx.feedback.success("Validation build succeeded")
    else:
        ctx.feedback.error(f"Error: validation build failed with exit status {status}")
    machine.finish_dry_build(status)


def _synthesize_branch_config(
    ctx: DeployContext,
    request: DeployRequest,
    site_config: SiteConfig,
    branch: str,
    plan: PathPlan,
) -> None:
    if ctx.dry_run:
        ctx.feedback.info(
            f"[DRY RUN] Would write branch={branch} baseurl={plan.baseurl} "
            f"to {request.branch_config_path}"
        )
        return

    write_branch_config(
        request.branch_config_path,
        branch=branch,
        baseurl=plan.baseurl,
        baseurl_root=site_config.baseurl,
    )


def _publish(
    ctx: DeployContext,
    request: DeployRequest,
    site_config: SiteConfig,
    plan: PathPlan,
    revision: SourceRevision,
    result: DeployResult,
) -> None:
    machine = result.machine
    git = ctx.git
    scratch = plan.output_root
    deploy_ref = f"{DEPLOY_REMOTE}/{request.deploy_branch}"

    origin_url = git.get_remote_url(request.source_root, SOURCE_REMOTE)
    if origin_url is None:
        raise ConfigurationError(
            f"Remote '{SOURCE_REMOTE}' is not configured in {request.source_root}"
        )
    deploy_url = to_ssh_url(origin_url)
    logger.debug("Deploy remote: %s (from %s)", deploy_url, origin_url)

    if not ctx.dry_run:
        scratch.mkdir(parents=True, exist_ok=True)
        _remove_stale_repository(scratch)
    git.init_repository(scratch)
    git.set_config(scratch, "user.name", ctx.env.identity.name)
    git.set_config(scratch, "user.email", ctx.env.identity.email)
    git.add_remote(scratch, DEPLOY_REMOTE, deploy_url)
    machine.advance(DeployState.REMOTE_CONFIGURED)

    ctx.feedback.info(f"Fetching {request.deploy_branch} from {deploy_url}")
    if not git.fetch_shallow(scratch, DEPLOY_REMOTE, request.deploy_branch):
        ctx.feedback.error(f"Error: could not fetch '{request.deploy_branch}' from {deploy_url}")
        machine.advance(DeployState.ABORTED_FETCH_FAILED)
        return
    machine.advance(DeployState.FETCHED)

    git.reset_to(scratch, deploy_ref)

    if result.classification is BranchClassification.STABLE:
        for version_branch in site_config.policy.configured_branches:
            name = directory_name(version_branch)
            if git.restore_path(scratch, deploy_ref, name):
                result.restored_paths.append(name)
            else:
                logger.debug("No deployed output for '%s' to preserve", name)
        _ensure_marker(ctx, scratch)
    machine.advance(DeployState.RESET)

    if plan.directory_name is None:
        git.stage(scratch, ".")
    else:
        git.stage(scratch, plan.directory_name)
    machine.advance(DeployState.STAGED)

    message = format_commit_message(revision, result.branch or "")
    result.commit_message = message
    if not git.commit(scratch, message):
        ctx.feedback.warning("Nothing to commit; the deployed site is already up to date.")
        machine.advance(DeployState.EMPTY_COMMIT)
        return
    machine.advance(DeployState.COMMITTED)

    git.push(scratch, DEPLOY_REMOTE, f"HEAD:{request.deploy_branch}")
    machine.advance(DeployState.PUSHED)
    ctx.feedback.success(f"Deployed {revision.label} to {request.deploy_branch}")


def _ensure_marker(ctx: DeployContext, scratch: Path) -> None:
    marker = scratch / NO_TEMPLATING_MARKER
    if ctx.dry_run:
        ctx.feedback.info(f"[DRY RUN] Would create {marker}")
        return
    marker.touch(exist_ok=True)


def _remove_stale_repository(scratch: Path) -> None:
    # Builders keep dotfiles in the destination, so a previous run's repository survives
    stale = scratch / ".git"
    if stale.exists():
        logger.debug("Removing scratch repository left by a previous run: %s", stale)
        shutil.rmtree(stale)
