"""Duration expressions: free-form text edits to whole seconds and back.

Accepted forms::

    "90"        -> 90         bare numbers are seconds
    "1h2m3s"    -> 3723       any subset/order of h, m, s
    "1m-30s"    -> 30         signed terms are summed
    "+5m"       -> prev + 300 a leading sign is relative to the previous value
    "-30s"      -> prev - 30
    ""          -> prev       empty edit keeps the previous value
"""

from __future__ import annotations

import math
import re

from break_scheduler.timer.errors import DurationParseError


UNIT_SECONDS = {
    "h": 3600,
    "m": 60,
    "s": 1,
}

_WHITESPACE = re.compile(r"\s+")
_TERM_SPLIT = re.compile(r"(?=[+-])")
# Every group but the last carries a unit letter, so a digit run splits one way only.
_TERM_BODY = re.compile(r"(?:\d+[a-z])*\d+[a-z]?")
_GROUP = re.compile(r"(\d+)([a-z]?)")


def parse_duration(text: str, previous_value: int) -> int:
    """Parse a duration expression into seconds.

    Args:
        text: The raw expression typed by the user
        previous_value: The value currently in effect, used for empty and
            relative (``+``/``-`` prefixed) expressions

    Returns:
        Seconds. May be negative for a relative subtraction; callers decide
        whether to accept it (see ``validate_duration``).

    Raises:
        DurationParseError: On any malformed term or unknown unit.
    """
    cleaned = _WHITESPACE.sub("", text).lower()
    if not cleaned:
        return previous_value

    if cleaned[0] in "+-":
        magnitude = parse_duration(cleaned[1:], 0)
        return previous_value - magnitude if cleaned[0] == "-" else previous_value + magnitude

    terms = [term for term in _TERM_SPLIT.split(cleaned) if term]
    return sum(_parse_term(term, text) for term in terms)


def _parse_term(term: str, text: str) -> int:
    sign = -1 if term.startswith("-") else 1
    body = term[1:] if term[0] in "+-" else term

    if not _TERM_BODY.fullmatch(body):
        raise DurationParseError(text, f"malformed term {term!r}")

    total = 0
    for digits, unit in _GROUP.findall(body):
        factor = UNIT_SECONDS.get(unit or "s")
        if factor is None:
            raise DurationParseError(text, f"unknown unit {unit!r}")
        try:
            value = int(digits)
        except ValueError as e:
            raise DurationParseError(text, "number too large") from e
        total += value * factor
    return sign * total


def validate_duration(value: float) -> int:
    """Accept a parsed value only if it is a finite, non-negative number."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DurationParseError(str(value), "not a number")
    if not math.isfinite(value) or value < 0:
        raise DurationParseError(str(value), "duration must be zero or positive")
    if value != int(value):
        raise DurationParseError(str(value), "fractional seconds are not supported")
    return int(value)


def parse_duration_edit(text: str, previous_value: int) -> int:
    """Parse an edit and reject results that cannot be used as a duration."""
    return validate_duration(parse_duration(text, previous_value))


def format_duration(seconds: int) -> str:
    """Format seconds as the canonical edit text, e.g. ``"1h 2m 3s"``."""
    if seconds <= 0:
        return "0s"

    hours, remainder = divmod(seconds, 3600)
    minutes, secs = divmod(remainder, 60)

    parts = []
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    if secs:
        parts.append(f"{secs}s")
    return " ".join(parts)
