"""Exceptions raised at the edges of the break timer."""

from __future__ import annotations


class BreakSchedulerError(Exception):
    """Base class for break scheduler errors."""


class DurationParseError(BreakSchedulerError, ValueError):
    """Duration text could not be parsed into seconds."""

    def __init__(self, text: str, reason: str = "invalid format"):
        self.text = text
        self.reason = reason
        super().__init__(f"Cannot parse duration {text!r}: {reason}")


class InvalidConfigurationError(BreakSchedulerError, ValueError):
    """A configuration edit was rejected before reaching the scheduler."""
