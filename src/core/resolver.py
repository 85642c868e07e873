"""Threshold resolution (core domain).

Walks the rule list for an entity kind in order and returns the level of
the first match, or the configured fallback when nothing matches.
"""

from __future__ import annotations

from typing import Optional

from core.config import FallbackThresholds
from core.levels import input_from_level
from core.rules_engine import ITEM_KINDS, WINDOW, RuleMatch, RuleTable, first_match
from core.trace import Tracer


class ThresholdResolver:
    """Resolve the minimum activity level for windows, channels and queries.

    ``table`` and ``fallbacks`` are replaced wholesale on reload and on a
    settings change; they are never edited in place.
    """

    def __init__(
        self,
        table: Optional[RuleTable] = None,
        fallbacks: Optional[FallbackThresholds] = None,
        tracer: Optional[Tracer] = None,
    ) -> None:
        self.table = table if table is not None else RuleTable()
        self.fallbacks = fallbacks or FallbackThresholds()
        self.tracer = tracer or Tracer()

    def lookup(self, kind: str, name: str) -> Optional[RuleMatch]:
        kind = kind.lower()
        hit = first_match(name, self.table.rules_for(kind))
        if hit is not None and self.tracer.enabled:
            label = name or "(unnamed)"
            self.tracer.emit(
                f"{label} ({kind}) matches '{hit.label}' → '{input_from_level(hit.level)}' ({hit.level})"
            )
        return hit

    def resolve_specific(self, kind: str, name: str) -> Optional[int]:
        """Return the level of the first matching rule, or None."""

        hit = self.lookup(kind, name)
        return hit.level if hit is not None else None

    def resolve_item_threshold(self, kind: str, name: str) -> int:
        kind = kind.lower()
        if kind not in ITEM_KINDS:
            raise ValueError(f"can't look up item threshold for kind: {kind}")
        level = self.resolve_specific(kind, name)
        if level is not None:
            return level
        return self.fallbacks.for_kind(kind)

    def resolve_window_threshold(self, name: str) -> int:
        level = self.resolve_specific(WINDOW, name)
        if level is not None:
            return level
        return self.fallbacks.window

    def resolve(self, kind: str, name: str) -> int:
        """Resolve any kind, including the fallback."""

        if kind.lower() == WINDOW:
            return self.resolve_window_threshold(name)
        return self.resolve_item_threshold(kind, name)
