"""End-to-end deploy against real git repositories on disk.

The deploy remote is a local bare repository reached through a file:// URL,
which passes through remote URL conversion unchanged. The site builder is
still a fake that writes a single index.html.
"""

import shutil
import subprocess
from pathlib import Path

import pytest

from pagedeploy.core.context import DeployContext
from pagedeploy.core.deploy import DeployRequest, run_deploy
from pagedeploy.core.deploy_machine import DeployState, ExitCode
from pagedeploy.core.git.real import RealGit
from tests.fakes.site_builder import FakeSiteBuilder
from tests.test_utils.site import ci_env, write_site_config

pytestmark = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")

IDENTITY = ["-c", "user.name=Seeder", "-c", "user.email=seeder@example.com"]


def _git(cwd: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", *IDENTITY, *args],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


@pytest.fixture(autouse=True)
def isolated_git_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(tmp_path / "gitconfig"))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")


@pytest.fixture
def remote(tmp_path: Path) -> Path:
    """Bare repository whose gh-pages branch already holds a deployed v3."""
    bare = tmp_path / "remote.git"
    bare.mkdir()
    _git(bare, "init", "--quiet", "--bare")

    seed = tmp_path / "seed"
    (seed / "v3").mkdir(parents=True)
    (seed / "index.html").write_text("old root\n", encoding="utf-8")
    (seed / "v3" / "index.html").write_text("v3 docs\n", encoding="utf-8")
    _git(seed, "init", "--quiet")
    _git(seed, "add", "--all")
    _git(seed, "commit", "--quiet", "-m", "Initial deploy")
    _git(seed, "push", "--quiet", str(bare), "HEAD:refs/heads/gh-pages")
    return bare


@pytest.fixture
def source(tmp_path: Path, remote: Path) -> Path:
    root = tmp_path / "source"
    write_site_config(root, baseurl="/docs/", branches=["v2", "v3", "master"])
    (root / ".gitignore").write_text("_site/\n_config_branch.yml\n", encoding="utf-8")
    _git(root, "init", "--quiet")
    _git(root, "add", "--all")
    _git(root, "commit", "--quiet", "-m", "Site sources")
    _git(root, "remote", "add", "origin", remote.as_uri())
    return root


def _request(source: Path) -> DeployRequest:
    return DeployRequest(
        source_root=source,
        site_config_path=source / "_config.yml",
        branch_config_path=source / "_config_branch.yml",
        output_root=source / "_site",
    )


def _deployed_files(remote: Path) -> set[str]:
    listing = _git(remote, "ls-tree", "-r", "--name-only", "gh-pages")
    return set(listing.splitlines())


def test_stable_deploy_preserves_version_directories(source: Path, remote: Path) -> None:
    ctx = DeployContext.for_test(
        git=RealGit(),
        builder=FakeSiteBuilder(create_output=True),
        env=ci_env(branch="master"),
        cwd=source,
    )
    sha = _git(source, "rev-parse", "HEAD")

    result = run_deploy(ctx, _request(source))

    assert result.exit_code == ExitCode.SUCCESS
    assert result.machine.state is DeployState.PUSHED
    assert result.restored_paths == ["v3"]
    assert _deployed_files(remote) == {".nojekyll", "index.html", "v3/index.html"}
    assert _git(remote, "log", "-1", "--format=%s", "gh-pages") == (
        f"Deploy {sha} from branch master"
    )
    assert _git(remote, "show", "gh-pages:v3/index.html") == "v3 docs"


def test_version_deploy_adds_subdirectory(source: Path, remote: Path) -> None:
    ctx = DeployContext.for_test(
        git=RealGit(),
        builder=FakeSiteBuilder(create_output=True),
        env=ci_env(branch="v2"),
        cwd=source,
    )

    result = run_deploy(ctx, _request(source))

    assert result.exit_code == ExitCode.SUCCESS
    assert _deployed_files(remote) == {"index.html", "v2/index.html", "v3/index.html"}
    assert _git(remote, "show", "gh-pages:index.html") == "old root"


def test_dirty_source_is_marked_in_commit(source: Path, remote: Path) -> None:
    (source / "draft.md").write_text("wip\n", encoding="utf-8")
    ctx = DeployContext.for_test(
        git=RealGit(),
        builder=FakeSiteBuilder(create_output=True),
        env=ci_env(branch="v2"),
        cwd=source,
    )

    run_deploy(ctx, _request(source))

    assert _git(remote, "log", "-1", "--format=%s", "gh-pages").endswith("+ from branch v2")


def test_missing_deploy_branch_is_fetch_failure(tmp_path: Path, source: Path) -> None:
    empty = tmp_path / "empty.git"
    empty.mkdir()
    _git(empty, "init", "--quiet", "--bare")
    _git(source, "remote", "set-url", "origin", empty.as_uri())
    ctx = DeployContext.for_test(
        git=RealGit(),
        builder=FakeSiteBuilder(create_output=True),
        env=ci_env(branch="v2"),
        cwd=source,
    )

    result = run_deploy(ctx, _request(source))

    assert result.exit_code == ExitCode.FETCH_FAILED
    assert result.machine.state is DeployState.ABORTED_FETCH_FAILED


def test_stable_branch_listed_as_version_keeps_its_directory(
    tmp_path: Path, remote: Path
) -> None:
    root = tmp_path / "stable-source"
    write_site_config(root, baseurl="/docs/", stable="v3", branches=["master", "v2", "v3"])
    (root / ".gitignore").write_text("_site/\n_config_branch.yml\n", encoding="utf-8")
    _git(root, "init", "--quiet")
    _git(root, "add", "--all")
    _git(root, "commit", "--quiet", "-m", "Site sources")
    _git(root, "remote", "add", "origin", remote.as_uri())
    ctx = DeployContext.for_test(
        git=RealGit(),
        builder=FakeSiteBuilder(create_output=True),
        env=ci_env(branch="v3"),
        cwd=root,
    )

    result = run_deploy(ctx, _request(root))

    assert result.exit_code == ExitCode.SUCCESS
    assert result.restored_paths == ["v3"]
    assert _deployed_files(remote) == {".nojekyll", "index.html", "v3/index.html"}
    assert _git(remote, "show", "gh-pages:v3/index.html") == "v3 docs"


def test_second_deploy_in_same_workspace_is_empty(source: Path, remote: Path) -> None:
    ctx = DeployContext.for_test(
        git=RealGit(),
        builder=FakeSiteBuilder(create_output=True),
        env=ci_env(branch="v2"),
        cwd=source,
    )
    first = run_deploy(ctx, _request(source))
    tip = _git(remote, "rev-parse", "gh-pages")

    second = run_deploy(ctx, _request(source))

    assert first.machine.state is DeployState.PUSHED
    assert second.exit_code == ExitCode.SUCCESS
    assert second.machine.state is DeployState.EMPTY_COMMIT
    assert _git(remote, "rev-parse", "gh-pages") == tip
