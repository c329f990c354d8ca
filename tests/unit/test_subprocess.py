"""Tests for subprocess wrapper with rich error context."""

import subprocess
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from pagedeploy.core.subprocess import run_subprocess_with_context


def test_success_case_returns_completed_process() -> None:
    """Test that successful subprocess execution returns CompletedProcess."""
    with patch("pagedeploy.core.subprocess.subprocess.run") as mock_run:
        mock_result = Mock(spec=subprocess.CompletedProcess)
        mock_result.returncode = 0
        mock_result.stdout = "abc123\n"
        mock_result.stderr = ""
        mock_run.return_value = mock_result

        result = run_subprocess_with_context(
            ["git", "rev-parse", "HEAD"],
            operation_context="resolve HEAD commit",
            cwd=Path("/site"),
        )

        assert result == mock_result
        assert result.stdout == "abc123\n"

        mock_run.assert_called_once_with(
            ["git", "rev-parse", "HEAD"],
            cwd=Path("/site"),
            capture_output=True,
            text=True,
            encoding="utf-8",
            check=True,
        )


def test_failure_with_stderr_includes_stderr_in_error() -> None:
    """Test that subprocess failure with stderr includes stderr in error message."""
    with patch("pagedeploy.core.subprocess.subprocess.run") as mock_run:
        mock_run.side_effect = subprocess.CalledProcessError(
            returncode=128,
            cmd=["git", "push", "deploy", "HEAD:gh-pages"],
            stderr="fatal: Could not read from remote repository.",
        )

        with pytest.raises(RuntimeError) as exc_info:
            run_subprocess_with_context(
                ["git", "push", "deploy", "HEAD:gh-pages"],
                operation_context="push 'HEAD:gh-pages' to 'deploy'",
                cwd=Path("/site/_site"),
            )

        error_message = str(exc_info.value)
        assert "Failed to push 'HEAD:gh-pages' to 'deploy'" in error_message
        assert "Command: git push deploy HEAD:gh-pages" in error_message
        assert "Exit code: 128" in error_message
        assert "stderr: fatal: Could not read from remote repository." in error_message


def test_failure_with_stdout_includes_stdout_in_error() -> None:
    with patch("pagedeploy.core.subprocess.subprocess.run") as mock_run:
        mock_run.side_effect = subprocess.CalledProcessError(
            returncode=1,
            cmd=["git", "add", "--all", "--", "v2"],
            output="warning: could not open directory\n",
        )

        with pytest.raises(RuntimeError) as exc_info:
            run_subprocess_with_context(
                ["git", "add", "--all", "--", "v2"],
                operation_context="stage 'v2'",
            )

        assert "stdout: warning: could not open directory" in str(exc_info.value)


def test_failure_with_empty_stderr_omits_stderr_line() -> None:
    """Test that subprocess failure with whitespace-only stderr omits the stderr line."""
    with patch("pagedeploy.core.subprocess.subprocess.run") as mock_run:
        mock_run.side_effect = subprocess.CalledProcessError(
            returncode=1,
            cmd=["command"],
            stderr="   \n  ",
        )

        with pytest.raises(RuntimeError) as exc_info:
            run_subprocess_with_context(["command"], operation_context="run command")

        error_message = str(exc_info.value)
        assert "Failed to run command" in error_message
        assert "Exit code: 1" in error_message
        assert "stderr:" not in error_message


def test_missing_binary_raises_runtime_error() -> None:
    with patch("pagedeploy.core.subprocess.subprocess.run") as mock_run:
        original_error = FileNotFoundError(2, "No such file or directory", "git")
        mock_run.side_effect = original_error

        with pytest.raises(RuntimeError) as exc_info:
            run_subprocess_with_context(["git", "init"], operation_context="initialize repository")

        assert "Command not found while trying to initialize repository: git" in str(exc_info.value)
        assert exc_info.value.__cause__ is original_error


def test_exception_chaining_preserved() -> None:
    """Test that original CalledProcessError is preserved via exception chaining."""
    with patch("pagedeploy.core.subprocess.subprocess.run") as mock_run:
        original_error = subprocess.CalledProcessError(
            returncode=1,
            cmd=["git", "status"],
            stderr="fatal: not a git repository",
        )
        mock_run.side_effect = original_error

        with pytest.raises(RuntimeError) as exc_info:
            run_subprocess_with_context(["git", "status"], operation_context="check git status")

        assert exc_info.value.__cause__ is original_error



def test_output_is_always_captured_as_text() -> None:
    """Test that callers only choose the command and working directory."""
    with patch("pagedeploy.core.subprocess.subprocess.run") as mock_run:
        mock_run.return_value = Mock(spec=subprocess.CompletedProcess, returncode=0)

        run_subprocess_with_context(["git", "init", "--quiet"], operation_context="init")

        mock_run.assert_called_once_with(
            ["git", "init", "--quiet"],
            cwd=None,
            capture_output=True,
            text=True,
            encoding="utf-8",
            check=True,
        )
