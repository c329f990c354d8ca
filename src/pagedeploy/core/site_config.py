"""Site settings files: the primary config and the synthesized branch config.

The primary file (`_config.yml`) is owned by the site and read only. The
secondary file is rewritten on every run with values computed for the branch
being built; the builder merges it over the primary file.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from pagedeploy.core.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_STABLE_BRANCH = "master"

BRANCH_KEY = "branch"
BASEURL_KEY = "baseurl"
BASEURL_ROOT_KEY = "baseurl_root"


@dataclass(frozen=True)
class VersionPolicy:
    """Which branches deploy where.

    The stable branch deploys to the root of the deploy branch, every name in
    `branches` to its own subdirectory. A stable name that also appears in
    `branches` is still treated as stable.
    """

    stable: str
    branches: frozenset[str]

    @property
    def configured_branches(self) -> list[str]:
        """Every configured version branch name, including the stable one, sorted."""
        return sorted(self.branches)

    @property
    def version_branches(self) -> list[str]:
        """Version branch names excluding the stable branch, sorted."""
        return sorted(b for b in self.branches if b != self.stable)


@dataclass(frozen=True)
class SiteConfig:
    """Settings read from the primary config file."""

    path: Path
    baseurl: str
    policy: VersionPolicy


def _read_yaml_mapping(path: Path) -> dict[str, Any]:
    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Could not parse {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Expected a mapping at the top level of {path}")
    return data


def load_site_config(path: Path) -> SiteConfig:
    """Load the primary settings file.

    Example:
      baseurl: /docs
      versions:
        stable: master
        branches:
          - v2
          - v3

    Raises:
        ConfigurationError: If the file is missing, malformed, or lacks
            `baseurl` or `versions.branches`
    """
    if not path.exists():
        raise ConfigurationError(f"Site config not found at {path}")

    data = _read_yaml_mapping(path)

    if BASEURL_KEY not in data:
        raise ConfigurationError(f"Missing '{BASEURL_KEY}' in {path}")
    baseurl = data[BASEURL_KEY]
    baseurl = "" if baseurl is None else str(baseurl)

    versions = data.get("versions")
    if not isinstance(versions, dict):
        raise ConfigurationError(f"Missing 'versions' section in {path}")

    branches = versions.get("branches")
    if branches is None:
        branches = []
    if not isinstance(branches, list):
        raise ConfigurationError(f"'versions.branches' in {path} must be a list")

    stable = versions.get("stable")
    stable = DEFAULT_STABLE_BRANCH if stable is None else str(stable)

    policy = VersionPolicy(stable=stable, branches=frozenset(str(b) for b in branches))
    logger.debug("Loaded %s: baseurl=%r stable=%r branches=%s", path, baseurl, stable, branches)
    return SiteConfig(path=path, baseurl=baseurl, policy=policy)


def write_branch_config(path: Path, *, branch: str, baseurl: str, baseurl_root: str) -> dict[str, Any]:
    """Layer the computed branch values over the secondary settings file.

    Existing unrelated keys are preserved in their original order. The file is
    created if it does not exist.

    Returns:
        The mapping that was written
    """
    data = _read_yaml_mapping(path) if path.exists() else {}

    data[BRANCH_KEY] = branch
    data[BASEURL_KEY] = baseurl
    data[BASEURL_ROOT_KEY] = baseurl_root

    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)

    logger.debug("Wrote %s: %s", path, data)
    return data
