"""Debug tracing with a re-entrancy guard.

Writing a trace into the host can itself raise window activity. While a
trace is being written, ``active`` is true so the window handler can revert
that activity instead of evaluating it.
"""

from __future__ import annotations

import logging
from typing import Optional

from core.ports import DiagnosticSink

LOGGER = logging.getLogger(__name__)

TRACE_PREFIX = "actgate debug: "


class Tracer:
    def __init__(self, sink: Optional[DiagnosticSink] = None, enabled: bool = False) -> None:
        self.sink = sink
        self.enabled = enabled
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def emit(self, message: str) -> None:
        if not self.enabled:
            return
        LOGGER.debug(message)
        if self.sink is None:
            return
        self._active = True
        try:
            self.sink.print_diagnostic(TRACE_PREFIX + message)
        finally:
            self._active = False
