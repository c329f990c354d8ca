"""User-facing diagnostic output with mode awareness."""

from abc import ABC, abstractmethod

import click

from pagedeploy.cli.output import user_output


class UserFeedback(ABC):
    """Provides user-facing status lines for each deploy step.

    Two modes:
    - Interactive: Show all diagnostics (info, success, warnings, errors)
    - Quiet: Suppress info and success, keep warnings and errors

    Usage:
        ctx.feedback.info("Fetching gh-pages...")
        ctx.feedback.success("Pushed to gh-pages")
        ctx.feedback.warning("Nothing to commit")
        ctx.feedback.error("Error: build failed")
    """

    @abstractmethod
    def info(self, message: str) -> None:
        """Show informational message (suppressed in quiet mode)."""

    @abstractmethod
    def success(self, message: str) -> None:
        """Show success message (suppressed in quiet mode)."""

    @abstractmethod
    def warning(self, message: str) -> None:
        """Show warning message (always shown)."""

    @abstractmethod
    def error(self, message: str) -> None:
        """Show error message (always shown)."""


class InteractiveFeedback(UserFeedback):
    """Feedback shown in interactive mode (all messages)."""

    def info(self, message: str) -> None:
        user_output(click.style(message, fg="cyan"))

    def success(self, message: str) -> None:
        user_output(click.style(message, fg="green"))

    def warning(self, message: str) -> None:
        user_output(click.style(message, fg="yellow"))

    def error(self, message: str) -> None:
        user_output(click.style(message, fg="red"))


class SuppressedFeedback(UserFeedback):
    """Feedback for --quiet runs: only warnings and errors reach the terminal."""

    def info(self, message: str) -> None:
        pass

    def success(self, message: str) -> None:
        pass

    def warning(self, message: str) -> None:
        user_output(click.style(message, fg="yellow"))

    def error(self, message: str) -> None:
        user_output(click.style(message, fg="red"))
