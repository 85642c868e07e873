"""Activity level codec (core domain).

Levels are ordered from least to most restrictive. Rule files may use either
the integer or the keyword, so both directions live here.
"""

from __future__ import annotations

import re

LEVEL_KEYWORDS = ("all", "messages", "hilights", "none")

ALL = 1
MESSAGES = 2
HILIGHTS = 3
NONE = 4

_DIGITS = re.compile(r"[0-9]+")


class InvalidLevelError(ValueError):
    """Raised when a numeric level is not one of 1-4."""


def is_known_keyword(value: str) -> bool:
    return value.lower() in LEVEL_KEYWORDS


def level_from_input(value: str) -> int:
    """Return the numeric level for a digit string or keyword.

    Unrecognized text decays to ``all`` (1). Digit strings are returned
    as-is without a range check.
    """

    if _DIGITS.fullmatch(value):
        return int(value)
    lowered = value.lower()
    # Most restrictive first; "all" is the fallthrough.
    for level in (NONE, HILIGHTS, MESSAGES):
        if lowered == LEVEL_KEYWORDS[level - 1]:
            return level
    return ALL


def input_from_level(level: int) -> str:
    """Return the keyword for a numeric level."""

    if isinstance(level, bool) or not isinstance(level, int) or not ALL <= level <= NONE:
        raise InvalidLevelError(f"Invalid numeric data level: {level}")
    return LEVEL_KEYWORDS[level - 1]
