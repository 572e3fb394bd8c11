"""Exceptions that escape the fix engine."""

from __future__ import annotations


class ChainfixError(Exception):
    """Base class for chainfix errors."""


class ProjectConfigError(ChainfixError):
    """The project configuration could not be loaded or is invalid.

    The message carries the compiler's formatted diagnostic text.
    """


class FrontEndError(ChainfixError):
    """The TypeScript compiler could not be located or run."""
