"""Tester tab: resolve a name against the loaded mappings."""

from __future__ import annotations

from rich.text import Text
from textual import on
from textual.containers import Container, Horizontal, Vertical
from textual.widgets import Button, Input, Static

from adapters.formatting import format_level
from core.rules_engine import CHANNEL, KINDS


class TesterTab(Container):
    """Type a name and see which rule wins for each kind."""

    def compose(self):
        with Vertical(id="tester-panel"):
            yield Static("Name tester", classes="panel-title")
            yield Input(placeholder="#channel, nick or window name", id="tester-name")
            with Horizontal(id="tester-actions"):
                yield Button("Test", id="tester-run", variant="primary")
            yield Static("", id="tester-result")

    @on(Input.Submitted, "#tester-name")
    def _on_submitted(self) -> None:
        self.run_test()

    @on(Button.Pressed, "#tester-run")
    def _on_run(self) -> None:
        self.run_test()

    def run_test(self) -> None:
        name = self.query_one("#tester-name", Input).value.strip()
        result = self.query_one("#tester-result", Static)
        if not name:
            result.update(Text("Enter a name to test", style="italic"))
            return

        resolver = self.app.service.resolver
        lines = Text()
        for kind in KINDS:
            hit = resolver.lookup(kind, name)
            if hit is None:
                level = resolver.fallbacks.for_kind(kind)
                source = "fallback"
            else:
                level = hit.level
                source = f"rule {hit.index} '{hit.label}'"
            style = "bold" if kind == CHANNEL else ""
            lines.append(f"{kind:<8} {format_level(level):<14} {source}\n", style=style)
        result.update(lines)
