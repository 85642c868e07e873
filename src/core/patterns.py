"""Name pattern parsing and matching (core domain).

A pattern is one of three shapes:
- ``*`` matches any name and reports ``*`` as the label
- ``/body/`` (any non-word character on both ends, non-empty body) is a
  case-insensitive regex searched in the name; the label is ``body``
- anything else is compared to the name case-insensitively; the label is
  the pattern itself

Patterns are compiled once when rules are loaded, not per match.
"""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Optional, Union

WILDCARD = "*"

_DELIMITED = re.compile(r"(\W)(.+)\1", re.DOTALL)


@dataclass(frozen=True)
class WildcardPattern:
    raw: str = WILDCARD

    def match(self, name: str) -> Optional[str]:
        return WILDCARD


@dataclass(frozen=True)
class RegexPattern:
    raw: str
    body: str
    compiled: re.Pattern

    def match(self, name: str) -> Optional[str]:
        if self.compiled.search(name):
            return self.body
        return None


@dataclass(frozen=True)
class ExactPattern:
    raw: str

    def match(self, name: str) -> Optional[str]:
        if name.lower() == self.raw.lower():
            return self.raw
        return None


Pattern = Union[WildcardPattern, RegexPattern, ExactPattern]


def parse_pattern(raw: str) -> Pattern:
    """Classify and compile a pattern.

    Raises ``re.error`` when a delimited pattern has an invalid regex body.
    """

    if raw == WILDCARD:
        return WildcardPattern()

    delimited = _DELIMITED.fullmatch(raw)
    if delimited:
        body = delimited.group(2)
        return RegexPattern(raw=raw, body=body, compiled=re.compile(body, re.IGNORECASE))

    return ExactPattern(raw=raw)


def match(raw: str, name: str) -> Optional[str]:
    """Parse ``raw`` and match it against ``name``.

    Returns the matched label, or None when there is no match.
    """

    return parse_pattern(raw).match(name)
