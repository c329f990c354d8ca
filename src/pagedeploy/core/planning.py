"""Branch classification and output path planning.

Pure functions: nothing here touches git, the filesystem or the environment.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from pagedeploy.core.site_config import VersionPolicy

# The branch that carries work in progress deploys under a friendlier name
RESERVED_BRANCH = "master"
RESERVED_BRANCH_DIRECTORY = "wip"


class BranchClassification(Enum):
    STABLE = "stable"
    VERSION = "version"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class PathPlan:
    """Where a build is written and which baseurl it is served under.

    For STABLE builds output_branch == output_root and directory_name is None.
    For VERSION builds output_branch is output_root / directory_name.
    """

    output_root: Path
    output_branch: Path
    baseurl: str
    directory_name: str | None


def classify(branch: str, policy: VersionPolicy) -> BranchClassification:
    """Classify a branch against the version policy. The stable branch always wins."""
    if branch == policy.stable:
        return BranchClassification.STABLE
    if branch in policy.branches:
        return BranchClassification.VERSION
    return BranchClassification.UNRECOGNIZED


def directory_name(branch: str) -> str:
    """Name of the deploy subdirectory for a version branch."""
    if branch == RESERVED_BRANCH:
        return RESERVED_BRANCH_DIRECTORY
    return branch


def root_baseurl(baseurl: str) -> str:
    """Configured baseurl without trailing slashes."""
    return baseurl.rstrip("/")


def plan_paths(
    branch: str,
    classification: BranchClassification,
    baseurl: str,
    output_root: Path,
) -> PathPlan:
    """Compute output directories and baseurl for a classified branch.

    Raises:
        ValueError: If the branch is UNRECOGNIZED (it has no deploy location)
    """
    root = root_baseurl(baseurl)

    if classification is BranchClassification.STABLE:
        return PathPlan(
            output_root=output_root,
            output_branch=output_root,
            baseurl=root,
            directory_name=None,
        )

    if classification is BranchClassification.VERSION:
        name = directory_name(branch)
        return PathPlan(
            output_root=output_root,
            output_branch=output_root / name,
            baseurl=f"{root}/{name}",
            directory_name=name,
        )

    raise ValueError(f"Branch '{branch}' is not deployable")
