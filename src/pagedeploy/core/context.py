"""Application context with dependency injection."""

from dataclasses import dataclass
from pathlib import Path

import click

from pagedeploy.cli.output import user_output
from pagedeploy.core.environment import DeployEnvironment, DeployIdentity
from pagedeploy.core.git.abc import Git
from pagedeploy.core.git.dry_run import DryRunGit
from pagedeploy.core.git.real import RealGit
from pagedeploy.core.site_builder.abc import SiteBuilder
from pagedeploy.core.site_builder.dry_run import DryRunSiteBuilder
from pagedeploy.core.site_builder.real import RealSiteBuilder
from pagedeploy.core.user_feedback import InteractiveFeedback, SuppressedFeedback, UserFeedback


@dataclass(frozen=True)
class DeployContext:
    """Immutable context holding all dependencies for a deploy run.

    Created at CLI entry point and threaded through the application.
    Frozen to prevent accidental modification at runtime.
    """

    git: Git
    builder: SiteBuilder
    feedback: UserFeedback
    env: DeployEnvironment
    cwd: Path  # Current working directory at CLI invocation
    dry_run: bool

    @staticmethod
    def for_test(
        git: Git | None = None,
        builder: SiteBuilder | None = None,
        feedback: UserFeedback | None = None,
        env: DeployEnvironment | None = None,
        cwd: Path | None = None,
        dry_run: bool = False,
    ) -> "DeployContext":
        """Create test context with optional pre-configured integration classes.

        Args:
            git: Optional Git implementation. If None, creates empty FakeGit.
            builder: Optional SiteBuilder. If None, creates FakeSiteBuilder
                that succeeds.
            feedback: Optional UserFeedback. If None, creates FakeUserFeedback.
            env: Optional DeployEnvironment. If None, a CI environment with
                default identity and no branch override.
            cwd: Optional current working directory. If None, uses
                Path("/test/default/cwd").
            dry_run: Whether to wrap gateways in dry-run wrappers.

        Example:
            >>> git = FakeGit(current_branches={Path("/site"): "v2"})
            >>> ctx = DeployContext.for_test(git=git, cwd=Path("/site"))
        """
        from tests.fakes.git import FakeGit
        from tests.fakes.site_builder import FakeSiteBuilder
        from tests.fakes.user_feedback import FakeUserFeedback

        if git is None:
            git = FakeGit()

        if builder is None:
            builder = FakeSiteBuilder()

        if feedback is None:
            feedback = FakeUserFeedback()

        if env is None:
            env = DeployEnvironment(
                is_ci=True,
                branch_override=None,
                identity=DeployIdentity(name="Test Deployer", email="test@example.com"),
                deploy_branch=None,
            )

        # Apply dry-run wrappers if needed (matching production behavior)
        if dry_run:
            git = DryRunGit(git)
            builder = DryRunSiteBuilder(builder)

        return DeployContext(
            git=git,
            builder=builder,
            feedback=feedback,
            env=env,
            cwd=cwd or Path("/test/default/cwd"),
            dry_run=dry_run,
        )


def safe_cwd() -> tuple[Path | None, str | None]:
    """Get current working directory, detecting if it no longer exists.

    Returns:
        tuple[Path | None, str | None]: (path, error_message)
        - If successful: (Path, None)
        - If directory deleted: (None, error_message)
    """
    try:
        cwd_path = Path.cwd()
        return (cwd_path, None)
    except (FileNotFoundError, OSError):
        return (
            None,
            "Current working directory no longer exists",
        )


def create_context(*, dry_run: bool, quiet: bool = False) -> DeployContext:
    """Create production context with real implementations.

    Args:
        dry_run: If True, wrap gateways with dry-run wrappers that print
                 intended mutations without executing them
        quiet: If True, suppress informational and success lines

    Returns:
        DeployContext with real implementations
    """
    cwd, error_msg = safe_cwd()
    if cwd is None:
        assert error_msg is not None
        user_output(click.style("Error: ", fg="red") + error_msg)
        raise SystemExit(1)

    git: Git = RealGit()
    builder: SiteBuilder = RealSiteBuilder()

    feedback: UserFeedback
    if quiet:
        feedback = SuppressedFeedback()
    else:
        feedback = InteractiveFeedback()

    if dry_run:
        git = DryRunGit(git)
        builder = DryRunSiteBuilder(builder)

    return DeployContext(
        git=git,
        builder=builder,
        feedback=feedback,
        env=DeployEnvironment.from_os(),
        cwd=cwd,
        dry_run=dry_run,
    )
