"""Git operations subpackage.

This subpackage provides abstractions over git operations with support for
testing via fakes and dry-run via wrappers.
"""

from pagedeploy.core.git.abc import Git
from pagedeploy.core.git.dry_run import DryRunGit
from pagedeploy.core.git.real import RealGit

__all__ = [
    "Git",
    "RealGit",
    "DryRunGit",
]
