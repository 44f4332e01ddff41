"""Failure kinds of the watch cycle.

None of these ever reach the scheduler: each one degrades to "do nothing this
cycle" and the next tick retries.
"""
from __future__ import annotations


class WatchError(Exception):
    """Base class for dir-watch-media failures."""


class DirectoryUnavailable(WatchError):
    """The watched directory is missing or cannot be read."""

    def __init__(self, directory: str, reason: str = "") -> None:
        self.directory = directory
        self.reason = reason
        message = f"directory unavailable: {directory}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class ConsumerUnresolvable(WatchError):
    """The downstream consumer could not be resolved."""
