"""Fake implementation of Git for testing.

FakeGit is an in-memory implementation: queries answer from constructor
state, mutations are recorded for assertions and never touch a repository.
"""

from pathlib import Path

from pagedeploy.core.git.abc import Git


class FakeGit(Git):
    """In-memory fake implementation of git operations.

    Constructor Injection:
    - All query answers are provided via constructor parameters
    - Mutating calls are recorded in `operations` in call order

    Examples:
        # Source repo on branch v2 with an https origin
        >>> git = FakeGit(
        ...     current_branches={Path("/site"): "v2"},
        ...     remote_urls={(Path("/site"), "origin"): "https://github.com/o/site.git"},
        ... )

        # Deploy branch cannot be fetched
        >>> git = FakeGit(fetch_succeeds=False)

        # Deployed tree only has output for v2
        >>> git = FakeGit(deployed_paths={"v2"})
    """

    def __init__(
        self,
        *,
        current_branches: dict[Path, str] | None = None,
        head_commits: dict[Path, str] | None = None,
        dirty_paths: set[Path] | None = None,
        remote_urls: dict[tuple[Path, str], str] | None = None,
        fetch_succeeds: bool = True,
        deployed_paths: set[str] | None = None,
        commit_succeeds: bool = True,
    ) -> None:
        self._current_branches = current_branches or {}
        self._head_commits = head_commits or {}
        self._dirty_paths = dirty_paths or set()
        self._remote_urls = remote_urls or {}
        self._fetch_succeeds = fetch_succeeds
        self._deployed_paths = deployed_paths
        self._commit_succeeds = commit_succeeds
        self._operations: list[tuple[str, ...]] = []
        self._commits: list[str] = []

    # Queries

    def get_current_branch(self, cwd: Path) -> str | None:
        return self._current_branches.get(cwd)

    def get_head_commit(self, cwd: Path) -> str:
        return self._head_commits.get(cwd, "0" * 40)

    def has_uncommitted_changes(self, cwd: Path) -> bool:
        return cwd in self._dirty_paths

    def get_remote_url(self, cwd: Path, remote: str) -> str | None:
        return self._remote_urls.get((cwd, remote))

    # Mutations

    def init_repository(self, cwd: Path) -> None:
        self._operations.append(("init", str(cwd)))

    def set_config(self, cwd: Path, key: str, value: str) -> None:
        self._operations.append(("config", key, value))

    def add_remote(self, cwd: Path, name: str, url: str) -> None:
        self._operations.append(("remote-add", name, url))

    def fetch_shallow(self, cwd: Path, remote: str, branch: str) -> bool:
        self._operations.append(("fetch", remote, branch))
        return self._fetch_succeeds

    def reset_to(self, cwd: Path, ref: str) -> None:
        self._operations.append(("reset", ref))

    def restore_path(self, cwd: Path, ref: str, path: str) -> bool:
        self._operations.append(("restore", ref, path))
        if self._deployed_paths is None:
            return True
        return path in self._deployed_paths

    def stage(self, cwd: Path, pathspec: str) -> None:
        self._operations.append(("stage", pathspec))

    def commit(self, cwd: Path, message: str) -> bool:
        self._operations.append(("commit", message))
        if self._commit_succeeds:
            self._commits.append(message)
        return self._commit_succeeds

    def push(self, cwd: Path, remote: str, refspec: str) -> None:
        self._operations.append(("push", remote, refspec))

    # Test assertions

    @property
    def operations(self) -> list[tuple[str, ...]]:
        """Mutating calls in order, as (operation, *args) tuples.

        This property is for test assertions only.
        """
        return self._operations.copy()

    @property
    def operation_names(self) -> list[str]:
        """Just the operation names of `operations`, in order."""
        return [op[0] for op in self._operations]

    @property
    def commits(self) -> list[str]:
        """Messages of commits that succeeded."""
        return self._commits.copy()

    def calls_to(self, name: str) -> list[tuple[str, ...]]:
        """Arguments of every recorded call to the named operation."""
        return [op[1:] for op in self._operations if op[0] == name]
