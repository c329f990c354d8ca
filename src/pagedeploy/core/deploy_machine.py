"""States, transitions and exit codes of a deploy run.

A run starts in INIT and walks forward one state per step. Every abort is a
named terminal state with its own exit code, so the orchestrator never exits
from the middle of a step.
"""

import logging
from enum import Enum, IntEnum

logger = logging.getLogger(__name__)


class ExitCode(IntEnum):
    SUCCESS = 0
    CONFIG_ERROR = 1
    BUILD_FAILED = 3
    FETCH_FAILED = 5
    UNRECOGNIZED_BRANCH = 120
    NOT_CI = 128


class DeployState(Enum):
    INIT = "init"
    BRANCH_RESOLVED = "branch-resolved"
    CLASSIFIED = "classified"
    BUILT = "built"
    DEPLOY_GUARD_CHECKED = "deploy-guard-checked"
    REMOTE_CONFIGURED = "remote-configured"
    FETCHED = "fetched"
    RESET = "reset"
    STAGED = "staged"
    COMMITTED = "committed"

    # Terminal states
    DRY_BUILT = "dry-built"
    EMPTY_COMMIT = "empty-commit"
    PUSHED = "pushed"
    ABORTED_UNRECOGNIZED = "aborted-unrecognized"
    ABORTED_BUILD_FAILED = "aborted-build-failed"
    ABORTED_NOT_CI = "aborted-not-ci"
    ABORTED_FETCH_FAILED = "aborted-fetch-failed"

    @property
    def is_terminal(self) -> bool:
        return not TRANSITIONS[self]


TRANSITIONS: dict[DeployState, frozenset[DeployState]] = {
    DeployState.INIT: frozenset({DeployState.BRANCH_RESOLVED}),
    DeployState.BRANCH_RESOLVED: frozenset({DeployState.CLASSIFIED}),
    DeployState.CLASSIFIED: frozenset(
        {
            DeployState.BUILT,
            DeployState.DRY_BUILT,
            DeployState.ABORTED_UNRECOGNIZED,
            DeployState.ABORTED_BUILD_FAILED,
        }
    ),
    DeployState.BUILT: frozenset({DeployState.DEPLOY_GUARD_CHECKED, DeployState.ABORTED_NOT_CI}),
    DeployState.DEPLOY_GUARD_CHECKED: frozenset({DeployState.REMOTE_CONFIGURED}),
    DeployState.REMOTE_CONFIGURED: frozenset(
        {DeployState.FETCHED, DeployState.ABORTED_FETCH_FAILED}
    ),
    DeployState.FETCHED: frozenset({DeployState.RESET}),
    DeployState.RESET: frozenset({DeployState.STAGED}),
    DeployState.STAGED: frozenset({DeployState.COMMITTED, DeployState.EMPTY_COMMIT}),
    DeployState.COMMITTED: frozenset({DeployState.PUSHED}),
    DeployState.DRY_BUILT: frozenset(),
    DeployState.EMPTY_COMMIT: frozenset(),
    DeployState.PUSHED: frozenset(),
    DeployState.ABORTED_UNRECOGNIZED: frozenset(),
    DeployState.ABORTED_BUILD_FAILED: frozenset(),
    DeployState.ABORTED_NOT_CI: frozenset(),
    DeployState.ABORTED_FETCH_FAILED: frozenset(),
}

# DRY_BUILT is absent: it exits with the builder's own status
TERMINAL_EXIT_CODES: dict[DeployState, ExitCode] = {
    DeployState.EMPTY_COMMIT: ExitCode.SUCCESS,
    DeployState.PUSHED: ExitCode.SUCCESS,
    DeployState.ABORTED_UNRECOGNIZED: ExitCode.UNRECOGNIZED_BRANCH,
    DeployState.ABORTED_BUILD_FAILED: ExitCode.BUILD_FAILED,
    DeployState.ABORTED_NOT_CI: ExitCode.NOT_CI,
    DeployState.ABORTED_FETCH_FAILED: ExitCode.FETCH_FAILED,
}


class InvalidTransitionError(Exception):
    """Raised when a run tries to move to a state not reachable from the current one."""

    def __init__(self, current: DeployState, target: DeployState) -> None:
        super().__init__(f"Invalid deploy transition: {current.value} -> {target.value}")
        self.current = current
        self.target = target


class DeployMachine:
    """Tracks the state of one deploy run and enforces the transition table."""

    def __init__(self) -> None:
        self._state = DeployState.INIT
        self._history: list[DeployState] = [DeployState.INIT]
        self._build_status: int | None = None

    @property
    def state(self) -> DeployState:
        return self._state

    @property
    def history(self) -> list[DeployState]:
        return self._history.copy()

    @property
    def is_finished(self) -> bool:
        return self._state.is_terminal

    def advance(self, target: DeployState) -> None:
        if target not in TRANSITIONS[self._state]:
            raise InvalidTransitionError(self._state, target)
        logger.debug("Deploy state: %s -> %s", self._state.value, target.value)
        self._state = target
        self._history.append(target)

    def finish_dry_build(self, build_status: int) -> None:
        """Enter DRY_BUILT, recording the builder status used as the exit code."""
        self.advance(DeployState.DRY_BUILT)
        self._build_status = build_status

    @property
    def exit_code(self) -> int:
        """Exit code of the finished run.

        Raises:
            RuntimeError: If the run has not reached a terminal state
        """
        if not self.is_finished:
            raise RuntimeError(f"Deploy run has not finished (state: {self._state.value})")
        if self._state is DeployState.DRY_BUILT:
            assert self._build_status is not None
            return self._build_status
        return int(TERMINAL_EXIT_CODES[self._state])
