"""Dry-run Git wrapper.

This module provides a Git wrapper that prevents execution of mutating
operations while delegating read-only operations to the wrapped implementation.
"""

from pathlib import Path

from pagedeploy.cli.output import user_output
from pagedeploy.core.git.abc import Git


class DryRunGit(Git):
    """Wrapper that prints mutating git commands instead of running them.

    Usage:
        real_ops = RealGit()
        dry_run_ops = DryRunGit(real_ops)

        # Prints "[DRY RUN] Would run: git push deploy HEAD:gh-pages"
        dry_run_ops.push(scratch_root, "deploy", "HEAD:gh-pages")
    """

    def __init__(self, wrapped: Git) -> None:
        """Create a dry-run wrapper around a Git implementation.

        Args:
            wrapped: The Git implementation to wrap (usually RealGit or FakeGit)
        """
        self._wrapped = wrapped

    # Read-only operations: delegate to wrapped implementation

    def get_current_branch(self, cwd: Path) -> str | None:
        return self._wrapped.get_current_branch(cwd)

    def get_head_commit(self, cwd: Path) -> str:
        return self._wrapped.get_head_commit(cwd)

    def has_uncommitted_changes(self, cwd: Path) -> bool:
        return self._wrapped.has_uncommitted_changes(cwd)

    def get_remote_url(self, cwd: Path, remote: str) -> str | None:
        return self._wrapped.get_remote_url(cwd, remote)

    # Mutating operations: print dry-run message instead of executing

    def init_repository(self, cwd: Path) -> None:
        user_output(f"[DRY RUN] Would run: git init (in {cwd})")

    def set_config(self, cwd: Path, key: str, value: str) -> None:
        user_output(f"[DRY RUN] Would run: git config {key} {value}")

    def add_remote(self, cwd: Path, name: str, url: str) -> None:
        user_output(f"[DRY RUN] Would run: git remote add {name} {url}")

    def fetch_shallow(self, cwd: Path, remote: str, branch: str) -> bool:
        user_output(f"[DRY RUN] Would run: git fetch --depth 1 {remote} {branch}")
        return True

    def reset_to(self, cwd: Path, ref: str) -> None:
        user_output(f"[DRY RUN] Would run: git reset {ref}")

    def restore_path(self, cwd: Path, ref: str, path: str) -> bool:
        user_output(f"[DRY RUN] Would run: git checkout {ref} -- {path}")
        return True

    def stage(self, cwd: Path, pathspec: str) -> None:
        user_output(f"[DRY RUN] Would run: git add --all -- {pathspec}")

    def commit(self, cwd: Path, message: str) -> bool:
        user_output(f'[DRY RUN] Would run: git commit -m "{message}"')
        return True

    def push(self, cwd: Path, remote: str, refspec: str) -> None:
        user_output(f"[DRY RUN] Would run: git push {remote} {refspec}")
