"""Output utilities for CLI commands with clear intent.

user_output() writes diagnostics to stderr so stdout stays clean for
machine-readable results written with machine_output().
"""

from typing import Any

import click


def user_output(message: Any = "", *, nl: bool = True) -> None:
    """Write a human-facing message to stderr."""
    click.echo(message, err=True, nl=nl)


def machine_output(message: Any = "", *, nl: bool = True) -> None:
    """Write a machine-readable result to stdout."""
    click.echo(message, nl=nl)
