"""Ports (interfaces) used by the core.

Ports define the minimal contracts the host chat client has to satisfy so
that the core can be driven by a real client or by the in-memory host.
"""

from __future__ import annotations

from typing import Iterable, Protocol

from core.models import ConversationItem, Window


class DiagnosticSink(Protocol):
    """Where debug traces are written for the user to see."""

    def print_diagnostic(self, message: str) -> None:
        ...


class HostPort(Protocol):
    """Effects the engine can ask the host to perform."""

    def stop_event(self) -> None:
        ...

    def dehilight_window(self, refnum: int) -> None:
        ...


class EntityDirectoryPort(Protocol):
    """Live entities known to the host, used by ``show``."""

    def channels(self) -> Iterable[ConversationItem]:
        ...

    def queries(self) -> Iterable[ConversationItem]:
        ...

    def windows(self) -> Iterable[Window]:
        ...
