"""State container for map loading."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class MapState:
    loaded: bool = False
    rules: int = 0
    skipped: int = 0
    error: str | None = None

    def status(self) -> str:
        if self.error and not self.loaded:
            return f"map: not loaded ({self.error})"
        if self.error:
            return f"map: reload failed ({self.error}), keeping {self.rules} rules"
        text = f"map: {self.rules} rules loaded"
        if self.skipped:
            text += f", {self.skipped} lines skipped"
        return text
