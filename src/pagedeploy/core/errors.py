"""Exceptions raised by the deploy pipeline."""


class ConfigurationError(Exception):
    """A required setting is missing or malformed, or the run cannot be set up.

    Raised from config loading and branch resolution; the CLI reports it as a
    red "Error:" line and exits 1.
    """
