"""High-level git operations interface.

This module provides a clean abstraction over git subprocess calls, making the
deploy pipeline testable without a real repository or network.

Architecture:
- Git: Abstract base class defining the interface
- RealGit: Production implementation using subprocess
- DryRunGit: Wrapper that prints mutations instead of executing them
"""

from abc import ABC, abstractmethod
from pathlib import Path


class Git(ABC):
    """Abstract interface for git operations.

    All implementations (real, dry-run and fake) must implement this interface.
    This interface contains ONLY runtime operations - no test setup methods.

    Operations whose failure is an expected outcome of a deploy (fetch, path
    restore, commit) report it through their return value. Every other
    operation raises RuntimeError when git exits non-zero.
    """

    # Source repository queries

    @abstractmethod
    def get_current_branch(self, cwd: Path) -> str | None:
        """Get the currently checked-out branch, or None on detached HEAD."""
        ...

    @abstractmethod
    def get_head_commit(self, cwd: Path) -> str:
        """Get the full commit SHA of HEAD."""
        ...

    @abstractmethod
    def has_uncommitted_changes(self, cwd: Path) -> bool:
        """Check if the working tree has uncommitted changes.

        Uses git status --porcelain, so staged, modified and untracked files
        all count as changes.
        """
        ...

    @abstractmethod
    def get_remote_url(self, cwd: Path, remote: str) -> str | None:
        """Get the configured URL of a remote, or None if it is not configured."""
        ...

    # Scratch repository operations

    @abstractmethod
    def init_repository(self, cwd: Path) -> None:
        """Initialize a new, empty repository in cwd."""
        ...

    @abstractmethod
    def set_config(self, cwd: Path, key: str, value: str) -> None:
        """Set a repository-local config value (e.g. user.name)."""
        ...

    @abstractmethod
    def add_remote(self, cwd: Path, name: str, url: str) -> None:
        """Register a named remote."""
        ...

    @abstractmethod
    def fetch_shallow(self, cwd: Path, remote: str, branch: str) -> bool:
        """Fetch only the tip commit of a branch from a remote.

        Args:
            cwd: Repository directory
            remote: Remote name
            branch: Branch name on the remote

        Returns:
            True if the fetch succeeded, False if git exited non-zero
        """
        ...

    @abstractmethod
    def reset_to(self, cwd: Path, ref: str) -> None:
        """Move HEAD and the index to ref, leaving the working tree untouched."""
        ...

    @abstractmethod
    def restore_path(self, cwd: Path, ref: str, path: str) -> bool:
        """Discard working tree changes to path by checking it out from ref.

        Returns:
            True if the path was restored, False if ref does not contain it
        """
        ...

    @abstractmethod
    def stage(self, cwd: Path, pathspec: str) -> None:
        """Stage additions, modifications and deletions under pathspec."""
        ...

    @abstractmethod
    def commit(self, cwd: Path, message: str) -> bool:
        """Commit the staged changes.

        Returns:
            True if a new commit was created, False if git refused to commit
            (typically because nothing was staged)
        """
        ...

    @abstractmethod
    def push(self, cwd: Path, remote: str, refspec: str) -> None:
        """Push refspec to the remote."""
        ...
