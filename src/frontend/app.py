"""Main Textual app for the actgate map inspector."""

from __future__ import annotations

from typing import Any

from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Center, Container, Horizontal, Vertical
from textual.widgets import Button, ContentSwitcher, Footer, Static, Tab, Tabs

from core.levels import input_from_level
from core.loader import MapFileError
from core.mappings import MappingService
from core.rules_engine import CHANNEL, QUERY, WINDOW

from .constants import ACCENT
from .state import MapState
from .tabs.mappings import MappingsTab
from .tabs.tester import TesterTab


class MapInspectorApp(App):
    """Browse the loaded mappings and test names against them."""

    BINDINGS = [
        ("ctrl+r", "reload_map", "Reload"),
        ("q", "quit", "Quit"),
    ]

    CSS = """
    Screen {
        background: #1c1714;
        color: #efe6dd;
    }

    #header {
        height: 7;
        padding: 1 4;
        border-bottom: solid #3a302a;
    }

    #header-left, #header-right {
        width: 1fr;
    }

    #header-right {
        content-align: right top;
        text-align: right;
    }

    .subtle {
        color: #cbbfb3;
    }

    .status-error {
        color: #e06c75;
    }

    #tabs-bar {
        height: 5;
        padding: 0 4;
        border-bottom: solid #3a302a;
    }

    .panel-title {
        text-style: bold;
        padding: 1 0;
    }

    #content {
        height: 1fr;
        padding: 0 4;
    }

    #tester-actions {
        height: 3;
    }
    """

    def __init__(self, service: MappingService, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.service = service
        # Traces must not be printed over the TUI; they still reach the log.
        self.service.tracer.sink = None
        self.map_state = MapState()

    def compose(self) -> ComposeResult:
        with Container(id="header"):
            with Horizontal(id="header-row"):
                with Vertical(id="header-left"):
                    yield Static(self._title_text(), id="title")
                    yield Static(f"map: {self.service.config.map_file}", classes="subtle")
                with Vertical(id="header-right"):
                    yield Static(self._fallbacks_text(), classes="subtle")
                    yield Static("", id="header-status")
                    yield Horizontal(Button("Reload", id="reload-btn"), id="header-actions")

        with Container(id="tabs-bar"):
            with Center(id="tabs-center"):
                yield Tabs(
                    Tab("Windows", id=WINDOW),
                    Tab("Channels", id=CHANNEL),
                    Tab("Queries", id=QUERY),
                    Tab("Tester", id="tester"),
                    id="tabs",
                )

        with ContentSwitcher(id="content"):
            yield MappingsTab(WINDOW, id=WINDOW)
            yield MappingsTab(CHANNEL, id=CHANNEL)
            yield MappingsTab(QUERY, id=QUERY)
            yield TesterTab(id="tester")
        yield Footer()

    def on_mount(self) -> None:
        self._load_map()
        self._set_active_tab(CHANNEL)

    def on_tabs_tab_activated(self, event: Tabs.TabActivated) -> None:
        tab_id = event.tab.id or ""
        if not tab_id:
            label = event.tab.label
            if hasattr(label, "plain"):
                label = label.plain
            tab_id = str(label).strip().lower()
        self._set_active_tab(tab_id)

    def _set_active_tab(self, tab_id: str) -> None:
        switcher = self.query_one("#content", ContentSwitcher)
        switcher.current = tab_id

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "reload-btn":
            self.action_reload_map()

    def action_reload_map(self) -> None:
        self._load_map()

    def _load_map(self) -> None:
        try:
            result = self.service.load()
        except MapFileError as exc:
            # The previous table is still in place; only report the failure.
            self.map_state.error = str(exc)
        else:
            self.map_state.loaded = True
            self.map_state.rules = len(result.table)
            self.map_state.skipped = result.skipped
            self.map_state.error = None
        self._refresh_header()
        self._refresh_tables()

    def _refresh_header(self) -> None:
        status = self.query_one("#header-status", Static)
        status.remove_class("status-error")
        if self.map_state.error:
            status.add_class("status-error")
        status.update(self.map_state.status())

    def _refresh_tables(self) -> None:
        listing = self.service.list_mappings()
        for tab in self.query(MappingsTab):
            tab.show_rows(getattr(listing, tab.kind))

    def _fallbacks_text(self) -> str:
        fallbacks = self.service.config.fallbacks
        return "fallbacks: " + ", ".join(
            f"{kind}={input_from_level(fallbacks.for_kind(kind))}" for kind in (WINDOW, CHANNEL, QUERY)
        )

    @staticmethod
    def _title_text() -> Text:
        return Text.assemble(
            ("ACT", ACCENT),
            ("GATE > Map Inspector", "bold"),
        )
