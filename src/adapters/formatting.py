"""Shared output formatting helpers.

Keeping formatting here keeps the CLI and the inspector consistent.
"""

from __future__ import annotations

from typing import Iterable

from adapters.session_file import ReplayStep
from core.levels import input_from_level
from core.models import Decision, MappingRow, ThresholdRow

PREFIX = "actgate"


def format_error(message: str) -> str:
    return f"{PREFIX}: ERROR: {message}"


def format_info(message: str) -> str:
    return f"{PREFIX}: {message}"


def format_level(level: int) -> str:
    """Return ``level (keyword)``, e.g. ``3 (hilights)``."""

    return f"{level} ({input_from_level(level)})"


def format_mapping_table(rows: Iterable[MappingRow]) -> str:
    return "\n".join(f"{row.index:4d}: {row.pattern:<40} {row.level_spec:<10}" for row in rows)


def format_query_rows(rows: list[ThresholdRow]) -> str:
    """Align names the way ``query`` prints them."""

    width = max((len(row.name) for row in rows), default=0)
    return "\n".join(
        f"{PREFIX} {row.kind} map: {row.name:>{width}} → {format_level(row.level)}" for row in rows
    )


def format_show_rows(rows: Iterable[ThresholdRow]) -> str:
    return "\n".join(
        f"{row.index:4d}: {row.name or '(unnamed)':<40} → {format_level(row.level)}" for row in rows
    )


def format_decision(decision: Decision) -> str:
    text = decision.verdict.value
    if decision.threshold is not None:
        text = f"{text} (threshold {format_level(decision.threshold)})"
    return text


def format_replay(steps: Iterable[ReplayStep]) -> str:
    lines = []
    for step in steps:
        level = "" if step.level is None else f" @{step.level}"
        parts = ", ".join(f"{name}: {format_decision(decision)}" for name, decision in step.decisions)
        lines.append(f"{step.lineno:4d}: {step.target}{level} → {parts}")
    return "\n".join(lines)
