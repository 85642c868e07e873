"""Rule and rule table structures (core domain)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from core.levels import level_from_input
from core.patterns import Pattern

WINDOW = "window"
CHANNEL = "channel"
QUERY = "query"

KINDS = (WINDOW, CHANNEL, QUERY)
ITEM_KINDS = (CHANNEL, QUERY)


@dataclass(frozen=True)
class Rule:
    """A compiled (pattern, level) pair.

    ``level_spec`` is kept as written in the map file and only turned into a
    number when the rule matches.
    """

    pattern: Pattern
    level_spec: str

    @property
    def raw_pattern(self) -> str:
        return self.pattern.raw

    @property
    def level(self) -> int:
        return level_from_input(self.level_spec)


@dataclass(frozen=True)
class RuleMatch:
    """The first rule that matched a name, with its resolved level."""

    index: int
    rule: Rule
    label: str
    level: int


@dataclass
class RuleTable:
    """Ordered rule lists, one per entity kind."""

    window: List[Rule] = field(default_factory=list)
    channel: List[Rule] = field(default_factory=list)
    query: List[Rule] = field(default_factory=list)

    def rules_for(self, kind: str) -> List[Rule]:
        kind = kind.lower()
        if kind == WINDOW:
            return self.window
        if kind == CHANNEL:
            return self.channel
        if kind == QUERY:
            return self.query
        raise ValueError(f"can't look up rules for kind: {kind}")

    def append(self, kind: str, rule: Rule) -> None:
        self.rules_for(kind).append(rule)

    def __len__(self) -> int:
        return len(self.window) + len(self.channel) + len(self.query)


def first_match(name: str, rules: List[Rule]) -> Optional[RuleMatch]:
    """Return the first rule matching ``name`` in list order."""

    for index, rule in enumerate(rules):
        label = rule.pattern.match(name)
        if label is None:
            continue
        return RuleMatch(index=index, rule=rule, label=label, level=rule.level)
    return None
