"""Production Git implementation using subprocess.

This module provides the real Git implementation that executes actual git
commands via subprocess.
"""

import logging
import subprocess
from pathlib import Path

from pagedeploy.core.git.abc import Git
from pagedeploy.core.subprocess import run_subprocess_with_context

logger = logging.getLogger(__name__)


class RealGit(Git):
    """Production implementation using subprocess.

    All git operations execute actual git commands via subprocess.
    """

    def get_current_branch(self, cwd: Path) -> str | None:
        """Get the currently checked-out branch."""
        result = subprocess.run(
            ["git", "rev-parse", "--abbrev-ref", "HEAD"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            return None

        branch = result.stdout.strip()
        if branch == "HEAD":
            return None

        return branch

    def get_head_commit(self, cwd: Path) -> str:
        """Get the full commit SHA of HEAD."""
        result = run_subprocess_with_context(
            ["git", "rev-parse", "HEAD"],
            operation_context="resolve HEAD commit",
            cwd=cwd,
        )
        return result.stdout.strip()

    def has_uncommitted_changes(self, cwd: Path) -> bool:
        """Check if the working tree has uncommitted changes."""
        result = run_subprocess_with_context(
            ["git", "status", "--porcelain"],
            operation_context="check working tree status",
            cwd=cwd,
        )
        return bool(result.stdout.strip())

    def get_remote_url(self, cwd: Path, remote: str) -> str | None:
        """Get the configured URL of a remote."""
        result = subprocess.run(
            ["git", "config", "--get", f"remote.{remote}.url"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            return None

        url = result.stdout.strip()
        return url or None

    def init_repository(self, cwd: Path) -> None:
        """Initialize a new, empty repository in cwd."""
        run_subprocess_with_context(
            ["git", "init", "--quiet"],
            operation_context=f"initialize repository in {cwd}",
            cwd=cwd,
        )

    def set_config(self, cwd: Path, key: str, value: str) -> None:
        """Set a repository-local config value."""
        run_subprocess_with_context(
            ["git", "config", key, value],
            operation_context=f"set git config '{key}'",
            cwd=cwd,
        )

    def add_remote(self, cwd: Path, name: str, url: str) -> None:
        """Register a named remote."""
        run_subprocess_with_context(
            ["git", "remote", "add", name, url],
            operation_context=f"add remote '{name}'",
            cwd=cwd,
        )

    def fetch_shallow(self, cwd: Path, remote: str, branch: str) -> bool:
        """Fetch only the tip commit of a branch from a remote."""
        # Output is not captured so network progress and errors reach the CI log
        result = subprocess.run(
            ["git", "fetch", "--depth", "1", remote, branch],
            cwd=cwd,
            check=False,
        )
        logger.debug("git fetch %s %s exited %d", remote, branch, result.returncode)
        return result.returncode == 0

    def reset_to(self, cwd: Path, ref: str) -> None:
        """Move HEAD and the index to ref, leaving the working tree untouched."""
        run_subprocess_with_context(
            ["git", "reset", "--quiet", ref],
            operation_context=f"reset to '{ref}'",
            cwd=cwd,
        )

    def restore_path(self, cwd: Path, ref: str, path: str) -> bool:
        """Discard working tree changes to path by checking it out from ref."""
        result = subprocess.run(
            ["git", "checkout", ref, "--", path],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            logger.debug("git checkout %s -- %s failed: %s", ref, path, result.stderr.strip())
            return False
        return True

    def stage(self, cwd: Path, pathspec: str) -> None:
        """Stage additions, modifications and deletions under pathspec."""
        run_subprocess_with_context(
            ["git", "add", "--all", "--", pathspec],
            operation_context=f"stage '{pathspec}'",
            cwd=cwd,
        )

    def commit(self, cwd: Path, message: str) -> bool:
        """Commit the staged changes."""
        result = subprocess.run(
            ["git", "commit", "--quiet", "-m", message],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            logger.debug("git commit exited %d: %s", result.returncode, result.stdout.strip())
            return False
        return True

    def push(self, cwd: Path, remote: str, refspec: str) -> None:
        """Push refspec to the remote."""
        run_subprocess_with_context(
            ["git", "push", remote, refspec],
            operation_context=f"push '{refspec}' to '{remote}'",
            cwd=cwd,
        )
