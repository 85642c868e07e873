"""Suppression decisions for host activity events.

This module is host-agnostic. Handlers return a Decision describing what
the host should do; ``apply_decision`` turns it into HostPort calls.

Hosts deliver events in a fixed order for a single piece of activity:
1) the item level change
2) the level change of the window holding that item
3) the alert (beep), if any

An item that stays below its threshold also holds back its window and the
alert that follow it.
"""

from __future__ import annotations

import logging
from typing import Optional

from core.models import (
    PASS,
    CancelEvent,
    ConversationItem,
    Decision,
    ForceRevert,
    SuppressionContext,
    Verdict,
    Window,
)
from core.ports import HostPort
from core.resolver import ThresholdResolver
from core.trace import Tracer

LOGGER = logging.getLogger(__name__)


def _below_threshold(level: int, threshold: int) -> bool:
    # Level 0 means no activity and is never held back.
    return 0 < level < threshold


def _outcome(inhibit: bool, threshold: int) -> str:
    return f"< {threshold}, inhibit" if inhibit else f">= {threshold}, pass"


class SuppressionEngine:
    """Decide whether item, window and alert events may surface."""

    def __init__(self, resolver: ThresholdResolver, tracer: Optional[Tracer] = None) -> None:
        self._resolver = resolver
        self._tracer = tracer or resolver.tracer
        self._context = SuppressionContext()

    @property
    def context(self) -> SuppressionContext:
        return self._context

    def on_item_level_changed(self, item: ConversationItem, old_level: Optional[int]) -> Decision:
        """Handle a level increase on a channel or query."""

        old_level = old_level or 0
        new_level = item.data_level
        if new_level <= old_level:
            return PASS

        self._context.reset()
        threshold = self._resolver.resolve_item_threshold(item.kind, item.name)
        inhibit = _below_threshold(new_level, threshold)
        if self._tracer.enabled:
            self._tracer.emit(
                f'{item.name}: witem {item.kind}:"{item.name}" {old_level} → {new_level} '
                f"({_outcome(inhibit, threshold)})"
            )
        if not inhibit:
            return Decision(Verdict.PASS, threshold=threshold)

        self._context.mute_alert = True
        self._context.revert_window = item.window_refnum
        return Decision(Verdict.SUPPRESS, (CancelEvent(),), threshold)

    def on_window_level_changed(self, window: Window, old_level: Optional[int]) -> Decision:
        """Handle a level increase on a window."""

        if self._tracer.active:
            return self._revert(window)

        if self._context.revert_window is not None and self._context.revert_window == window.refnum:
            LOGGER.debug("Window %s held back by a suppressed item", window.refnum)
            return self._revert(window)

        old_level = old_level or 0
        new_level = window.data_level
        if new_level <= old_level:
            return PASS

        threshold = self._resolver.resolve_window_threshold(window.name)
        inhibit = _below_threshold(new_level, threshold)
        if self._tracer.enabled:
            label = window.name or "(unnamed)"
            self._tracer.emit(
                f'{label}: window "{window.name}" {old_level} → {new_level} '
                f"({_outcome(inhibit, threshold)})"
            )
        if not inhibit:
            return Decision(Verdict.PASS, threshold=threshold)
        return self._revert(window, threshold)

    def on_alert_requested(self) -> Decision:
        """Hold back the alert tone that follows a suppressed item."""

        if self._context.mute_alert:
            return Decision(Verdict.SUPPRESS, (CancelEvent(),))
        return PASS

    @staticmethod
    def _revert(window: Window, threshold: Optional[int] = None) -> Decision:
        return Decision(
            Verdict.SUPPRESS,
            (CancelEvent(), ForceRevert(window.refnum)),
            threshold,
        )


def apply_decision(decision: Decision, host: HostPort) -> None:
    """Translate decision effects into host calls, in order."""

    for effect in decision.effects:
        if isinstance(effect, CancelEvent):
            host.stop_event()
        elif isinstance(effect, ForceRevert):
            host.dehilight_window(effect.window_refnum)
        else:
            raise ValueError(f"Unsupported effect: {effect!r}")
