"""Mappings tab: one DataTable per rule kind."""

from __future__ import annotations

from typing import Any

from textual.containers import Container, Vertical
from textual.widgets import DataTable, Static

from core.models import MappingRow


class MappingsTab(Container):
    """Read-only view of the rules loaded for one kind."""

    def __init__(self, kind: str, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.kind = kind
        self._table_ready = False

    def compose(self):
        with Vertical(classes="mappings-panel"):
            yield Static(f"{self.kind} mappings", classes="panel-title")
            yield DataTable(id=f"{self.kind}-table", cursor_type="row")

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.add_column("#", key="index", width=5)
        table.add_column("pattern", key="pattern", width=40)
        table.add_column("min.level", key="level", width=12)
        table.zebra_stripes = True
        self._table_ready = True
        self.show_rows(getattr(self.app.service.list_mappings(), self.kind))

    def show_rows(self, rows: list[MappingRow]) -> None:
        if not self._table_ready:
            return
        table = self.query_one(DataTable)
        table.clear()
        for row in rows:
            table.add_row(str(row.index), row.pattern, row.level_spec, key=str(row.index))
