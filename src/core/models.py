"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any host-specific types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


@dataclass
class Window:
    """A host window holding zero or more conversation items."""

    refnum: int
    name: str = ""
    data_level: int = 0


@dataclass
class ConversationItem:
    """A channel or query as seen by the host."""

    kind: str
    name: str
    window_refnum: int
    data_level: int = 0


class Verdict(str, Enum):
    PASS = "pass"
    SUPPRESS = "suppress"


@dataclass(frozen=True)
class CancelEvent:
    """Stop the host from processing the current event any further."""


@dataclass(frozen=True)
class ForceRevert:
    """Revert the pending hilight of a window."""

    window_refnum: int


Effect = Union[CancelEvent, ForceRevert]


@dataclass(frozen=True)
class Decision:
    """Result of evaluating one host event."""

    verdict: Verdict
    effects: tuple[Effect, ...] = ()
    threshold: Optional[int] = None

    @property
    def suppressed(self) -> bool:
        return self.verdict is Verdict.SUPPRESS


PASS = Decision(Verdict.PASS)


@dataclass
class SuppressionContext:
    """State carried from an item decision to the window and alert decisions."""

    mute_alert: bool = False
    revert_window: Optional[int] = None

    def reset(self) -> None:
        self.mute_alert = False
        self.revert_window = None


@dataclass(frozen=True)
class ThresholdRow:
    """One resolved threshold, as printed by ``query`` and ``show``."""

    kind: str
    index: int
    name: str
    level: int


@dataclass(frozen=True)
class MappingRow:
    """One rule as printed by ``list``."""

    index: int
    pattern: str
    level_spec: str


@dataclass
class MappingListing:
    window: list[MappingRow] = field(default_factory=list)
    channel: list[MappingRow] = field(default_factory=list)
    query: list[MappingRow] = field(default_factory=list)
