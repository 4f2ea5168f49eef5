"""
Exception types raised by exemplars.

Failures from generator strategies and from the target class constructor are
never wrapped; they surface to the generation caller unchanged.
"""

from __future__ import annotations


class ExemplarError(Exception):
    """Base class for errors raised by exemplars itself."""


class DeclarationError(ExemplarError, ValueError):
    """A generator registration is malformed or conflicts with an existing one."""


class ExemplarFileError(ExemplarError):
    """An exemplar file exists but cannot be turned into generator declarations."""

    def __init__(self, path, message: str):
        self.path = path
        super().__init__(f"{path}: {message}")
