"""Snapshot of the process environment consumed by a deploy run.

The environment is read once at the CLI entry point so the rest of the
pipeline works from an immutable value instead of os.environ.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass

CI_MARKER_VAR = "CI"
# First non-empty variable wins
BRANCH_OVERRIDE_VARS = ("DEPLOY_SOURCE_BRANCH", "TRAVIS_BRANCH", "GITHUB_REF_NAME")
COMMITTER_NAME_VAR = "GIT_NAME"
COMMITTER_EMAIL_VAR = "GIT_EMAIL"
DEPLOY_BRANCH_VAR = "DEPLOY_BRANCH"
DEBUG_VAR = "PAGEDEPLOY_DEBUG"

DEFAULT_COMMITTER_NAME = "Site Deploy"
DEFAULT_COMMITTER_EMAIL = "deploy@localhost"
DEFAULT_DEPLOY_BRANCH = "gh-pages"

_FALSE_VALUES = frozenset({"", "0", "false", "no"})


@dataclass(frozen=True)
class DeployIdentity:
    """Committer identity configured in the scratch repository."""

    name: str
    email: str


@dataclass(frozen=True)
class DeployEnvironment:
    """Environment-derived inputs of a deploy run."""

    is_ci: bool
    branch_override: str | None
    identity: DeployIdentity
    deploy_branch: str | None

    @staticmethod
    def from_mapping(environ: Mapping[str, str]) -> "DeployEnvironment":
        """Build a snapshot from an environment mapping (normally os.environ)."""
        branch_override: str | None = None
        for var in BRANCH_OVERRIDE_VARS:
            value = environ.get(var, "").strip()
            if value:
                branch_override = value
                break

        deploy_branch = environ.get(DEPLOY_BRANCH_VAR, "").strip() or None

        return DeployEnvironment(
            is_ci=_is_truthy(environ.get(CI_MARKER_VAR)),
            branch_override=branch_override,
            identity=DeployIdentity(
                name=environ.get(COMMITTER_NAME_VAR, "").strip() or DEFAULT_COMMITTER_NAME,
                email=environ.get(COMMITTER_EMAIL_VAR, "").strip() or DEFAULT_COMMITTER_EMAIL,
            ),
            deploy_branch=deploy_branch,
        )

    @staticmethod
    def from_os() -> "DeployEnvironment":
        return DeployEnvironment.from_mapping(os.environ)


def _is_truthy(value: str | None) -> bool:
    if value is None:
        return False
    return value.strip().lower() not in _FALSE_VALUES
