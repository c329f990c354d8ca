"""Tests for reading the deploy environment."""

from pagedeploy.core.environment import (
    DEFAULT_COMMITTER_EMAIL,
    DEFAULT_COMMITTER_NAME,
    DeployEnvironment,
)


def test_empty_environment_uses_defaults() -> None:
    env = DeployEnvironment.from_mapping({})

    assert env.is_ci is False
    assert env.branch_override is None
    assert env.identity.name == DEFAULT_COMMITTER_NAME
    assert env.identity.email == DEFAULT_COMMITTER_EMAIL
    assert env.deploy_branch is None


def test_ci_marker_values() -> None:
    assert DeployEnvironment.from_mapping({"CI": "true"}).is_ci is True
    assert DeployEnvironment.from_mapping({"CI": "1"}).is_ci is True
    assert DeployEnvironment.from_mapping({"CI": "false"}).is_ci is False
    assert DeployEnvironment.from_mapping({"CI": "0"}).is_ci is False
    assert DeployEnvironment.from_mapping({"CI": ""}).is_ci is False


def test_branch_override_prefers_first_non_empty_variable() -> None:
    env = DeployEnvironment.from_mapping(
        {"DEPLOY_SOURCE_BRANCH": "", "TRAVIS_BRANCH": "v2", "GITHUB_REF_NAME": "v3"}
    )

    assert env.branch_override == "v2"


def test_branch_override_from_github_actions() -> None:
    env = DeployEnvironment.from_mapping({"GITHUB_REF_NAME": "master"})

    assert env.branch_override == "master"


def test_identity_and_deploy_branch_from_environment() -> None:
    env = DeployEnvironment.from_mapping(
        {
            "GIT_NAME": "Docs Bot",
            "GIT_EMAIL": "bot@example.com",
            "DEPLOY_BRANCH": "site",
        }
    )

    assert env.identity.name == "Docs Bot"
    assert env.identity.email == "bot@example.com"
    assert env.deploy_branch == "site"
