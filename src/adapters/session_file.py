"""Session snapshot and event script files.

A session file describes the windows and items of a chat client session so
``show`` and ``replay`` can run without a live client:

    {
      "debug_window": 1,
      "windows": [
        {"refnum": 1, "name": "(status)", "items": []},
        {"refnum": 2, "name": "", "items": [{"kind": "channel", "name": "#python"}]}
      ]
    }

An event script is JSON lines, one event per line:

    {"item": "#python", "level": 2, "beep": true}
    {"window": 1, "level": 3}
    {"beep": true}
"""

from __future__ import annotations

from dataclasses import dataclass
import json
import logging
from pathlib import Path
from typing import Any, Iterable, Iterator, Optional

from adapters.memory_host import InMemoryHost
from core.models import ConversationItem, Decision, Window
from core.rules_engine import ITEM_KINDS

LOGGER = logging.getLogger(__name__)


class SessionFileError(ValueError):
    """Raised when a session or event file has an unexpected shape."""


@dataclass(frozen=True)
class ReplayStep:
    """One replayed event with the decisions the engine took."""

    lineno: int
    target: str
    level: Optional[int]
    decisions: tuple[tuple[str, Decision], ...]


def build_host(data: dict[str, Any]) -> InMemoryHost:
    """Build an in-memory host from a parsed session document."""

    if not isinstance(data, dict):
        raise SessionFileError("session root must be an object")

    windows: list[Window] = []
    items: list[ConversationItem] = []
    for entry in data.get("windows", []):
        try:
            refnum = int(entry["refnum"])
        except (KeyError, TypeError, ValueError) as exc:
            raise SessionFileError(f"window entry needs a numeric refnum: {entry!r}") from exc
        windows.append(Window(refnum=refnum, name=str(entry.get("name") or "")))
        for raw_item in entry.get("items", []) or []:
            kind = str(raw_item.get("kind", "")).lower()
            if kind not in ITEM_KINDS:
                raise SessionFileError(f"item kind must be channel or query: {raw_item!r}")
            name = raw_item.get("name")
            if not name:
                raise SessionFileError(f"item needs a name: {raw_item!r}")
            items.append(ConversationItem(kind=kind, name=str(name), window_refnum=refnum))

    debug_window = data.get("debug_window")
    return InMemoryHost(
        windows=windows,
        items=items,
        debug_window=int(debug_window) if debug_window is not None else None,
    )


def load_session(path: str | Path) -> InMemoryHost:
    """Load a session snapshot file into an in-memory host."""

    with open(path, "r", encoding="utf-8") as handle:
        try:
            data = json.load(handle)
        except json.JSONDecodeError as exc:
            raise SessionFileError(f"session file error: {exc.msg}") from exc
    return build_host(data)


def iter_events(lines: Iterable[str]) -> Iterator[tuple[int, dict[str, Any]]]:
    """Yield (line number, event) pairs, skipping blank and comment lines."""

    for lineno, line in enumerate(lines, start=1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        try:
            event = json.loads(line)
        except json.JSONDecodeError as exc:
            raise SessionFileError(f"line {lineno}: {exc.msg}") from exc
        if not isinstance(event, dict):
            raise SessionFileError(f"line {lineno}: event must be an object")
        yield lineno, event


def replay(host: InMemoryHost, events: Iterable[tuple[int, dict[str, Any]]]) -> list[ReplayStep]:
    """Feed events through the host and collect the decisions."""

    steps: list[ReplayStep] = []
    for lineno, event in events:
        beep = bool(event.get("beep", False))
        if "item" in event:
            level = int(event.get("level", 0))
            outcome = host.raise_item(str(event["item"]), level, beep=beep)
            decisions = [("item", outcome.item), ("window", outcome.window)]
            if outcome.alert is not None:
                decisions.append(("alert", outcome.alert))
            steps.append(ReplayStep(lineno, str(event["item"]), level, tuple(decisions)))
        elif "window" in event:
            level = int(event.get("level", 0))
            decision = host.raise_window(int(event["window"]), level)
            steps.append(ReplayStep(lineno, f"window {event['window']}", level, (("window", decision),)))
        elif beep:
            decision = host.request_alert()
            steps.append(ReplayStep(lineno, "beep", None, (("alert", decision),)))
        else:
            raise SessionFileError(f"line {lineno}: expected an item, window or beep event")
        LOGGER.debug("Replayed line %s", lineno)
    return steps
