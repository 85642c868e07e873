"""In-memory host adapter.

Implements HostPort, DiagnosticSink and EntityDirectoryPort over plain
Window and ConversationItem objects, and feeds activity through the
suppression engine in the same order a chat client raises its events.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Callable, Iterable, Optional

from core.mappings import MappingService
from core.models import ConversationItem, Decision, Window
from core.processor import SuppressionEngine, apply_decision
from core.rules_engine import CHANNEL, QUERY

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActivityOutcome:
    """Decisions taken for one piece of item activity."""

    item: Decision
    window: Decision
    alert: Optional[Decision] = None


class InMemoryHost:
    """Host adapter that keeps windows and items in memory."""

    def __init__(
        self,
        windows: Iterable[Window] = (),
        items: Iterable[ConversationItem] = (),
        debug_window: Optional[int] = None,
    ) -> None:
        self._windows: dict[int, Window] = {window.refnum: window for window in windows}
        self._items: list[ConversationItem] = list(items)
        self._service: Optional[MappingService] = None
        # Diagnostics printed into this window raise its level, like any text.
        self.debug_window = debug_window
        self.output: list[str] = []
        self.dehilighted: list[int] = []
        self.stopped_events = 0
        self.beeps = 0

    def attach(self, service: MappingService) -> None:
        self._service = service
        service.tracer.sink = self

    # EntityDirectoryPort

    def channels(self) -> list[ConversationItem]:
        return [item for item in self._items if item.kind == CHANNEL]

    def queries(self) -> list[ConversationItem]:
        return [item for item in self._items if item.kind == QUERY]

    def windows(self) -> list[Window]:
        return sorted(self._windows.values(), key=lambda window: window.refnum)

    # HostPort

    def stop_event(self) -> None:
        self.stopped_events += 1

    def dehilight_window(self, refnum: int) -> None:
        window = self.window(refnum)
        window.data_level = 0
        self.dehilighted.append(refnum)
        LOGGER.debug("Window %s dehilighted", refnum)

    # DiagnosticSink

    def print_diagnostic(self, message: str) -> None:
        self.output.append(message)
        if self.debug_window is not None and self.debug_window in self._windows:
            self.raise_window(self.debug_window, 1)

    # Lookups

    def window(self, refnum: int) -> Window:
        try:
            return self._windows[refnum]
        except KeyError:
            raise KeyError(f"No window with refnum {refnum}") from None

    def item(self, name: str) -> ConversationItem:
        lowered = name.lower()
        for item in self._items:
            if item.name.lower() == lowered:
                return item
        raise KeyError(f"No channel or query named {name}")

    # Event delivery

    def _dispatch(self, handler: Callable[..., Decision], *args) -> Decision:
        decision = handler(*args)
        apply_decision(decision, self)
        return decision

    def raise_window(self, refnum: int, level: int) -> Decision:
        """Raise a window's level and emit the window event."""

        window = self.window(refnum)
        old_level = window.data_level
        if level > old_level:
            window.data_level = level
        return self._dispatch(self._service_engine().on_window_level_changed, window, old_level)

    def raise_item(self, name: str, level: int, beep: bool = False) -> ActivityOutcome:
        """Deliver activity on an item: item event, window event, then alert."""

        engine = self._service_engine()
        item = self.item(name)
        old_level = item.data_level
        if level > old_level:
            item.data_level = level
        item_decision = self._dispatch(engine.on_item_level_changed, item, old_level)
        window_decision = self.raise_window(item.window_refnum, level)

        alert_decision = None
        if beep:
            alert_decision = self.request_alert()
        return ActivityOutcome(item=item_decision, window=window_decision, alert=alert_decision)

    def request_alert(self) -> Decision:
        decision = self._dispatch(self._service_engine().on_alert_requested)
        if not decision.suppressed:
            self.beeps += 1
        return decision

    def _service_engine(self) -> SuppressionEngine:
        if self._service is None:
            raise RuntimeError("No mapping service attached to the host")
        return self._service.engine
