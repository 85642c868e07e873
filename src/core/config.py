"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.rules_engine import CHANNEL, QUERY, WINDOW


@dataclass(frozen=True)
class FallbackThresholds:
    """Thresholds applied when no rule matches an entity."""

    window: int = 1
    channel: int = 1
    query: int = 1

    def for_kind(self, kind: str) -> int:
        if kind == WINDOW:
            return self.window
        if kind == CHANNEL:
            return self.channel
        if kind == QUERY:
            return self.query
        raise ValueError(f"No fallback threshold for kind: {kind}")


@dataclass(frozen=True)
class EngineConfig:
    """Settings consumed by the mapping service and the suppression engine."""

    map_file: str
    debug: bool = False
    fallbacks: FallbackThresholds = FallbackThresholds()
