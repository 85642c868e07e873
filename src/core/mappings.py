"""Mapping service: owns the loaded rule table and answers commands."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from core.config import EngineConfig
from core.loader import LoadResult, load_rule_table, save_rule_table
from core.models import MappingListing, MappingRow, ThresholdRow
from core.ports import DiagnosticSink, EntityDirectoryPort
from core.processor import SuppressionEngine
from core.resolver import ThresholdResolver
from core.rules_engine import CHANNEL, QUERY, WINDOW, Rule
from core.trace import Tracer

LOGGER = logging.getLogger(__name__)

_SHOW_ORDER = (CHANNEL, QUERY, WINDOW)


def _rows(rules: List[Rule]) -> list[MappingRow]:
    return [
        MappingRow(index=index, pattern=rule.raw_pattern, level_spec=rule.level_spec)
        for index, rule in enumerate(rules)
    ]


class MappingService:
    """Wires config, resolver and engine together for one host session."""

    def __init__(self, config: EngineConfig, sink: Optional[DiagnosticSink] = None) -> None:
        self.config = config
        self.tracer = Tracer(sink, enabled=config.debug)
        self.resolver = ThresholdResolver(fallbacks=config.fallbacks, tracer=self.tracer)
        self.engine = SuppressionEngine(self.resolver, self.tracer)
        self.changed_since_save = False

    def apply_config(self, config: EngineConfig) -> None:
        """Pick up changed settings without touching the loaded rules."""

        self.config = config
        self.tracer.enabled = config.debug
        self.resolver.fallbacks = config.fallbacks

    def load(self) -> LoadResult:
        """Replace the rule table with the map file contents.

        On MapFileError the previous table stays in place.
        """

        LOGGER.info("Loading mappings from %s", self.config.map_file)
        result = load_rule_table(self.config.map_file, self.config.fallbacks)
        self.resolver.table = result.table
        self.changed_since_save = False
        if result.skipped:
            LOGGER.warning(
                "Skipped %s malformed line(s) in %s: %s",
                result.skipped,
                self.config.map_file,
                ", ".join(str(lineno) for lineno in result.skipped_lines),
            )
        LOGGER.info("%s rules are loaded", len(result.table))
        return result

    reload = load

    def save(self) -> None:
        save_rule_table(self.config.map_file, self.resolver.table)

    def autosave(self) -> None:
        if self.changed_since_save:
            self.save()

    def list_mappings(self) -> MappingListing:
        table = self.resolver.table
        return MappingListing(
            window=_rows(table.window),
            channel=_rows(table.channel),
            query=_rows(table.query),
        )

    def query(self, names: Iterable[str], kind: str = CHANNEL) -> list[ThresholdRow]:
        """Resolve each name for ``kind``, including the fallback."""

        return [
            ThresholdRow(kind=kind, index=index, name=name, level=self.resolver.resolve(kind, name))
            for index, name in enumerate(names)
        ]

    def show(self, directory: EntityDirectoryPort, kind: Optional[str] = None) -> list[ThresholdRow]:
        """Resolve the threshold of every live entity, optionally for one kind."""

        rows: list[ThresholdRow] = []
        for current in _SHOW_ORDER if kind is None else (kind,):
            if current == CHANNEL:
                for index, item in enumerate(directory.channels()):
                    rows.append(ThresholdRow(CHANNEL, index, item.name, self.resolver.resolve(CHANNEL, item.name)))
            elif current == QUERY:
                for index, item in enumerate(directory.queries()):
                    rows.append(ThresholdRow(QUERY, index, item.name, self.resolver.resolve(QUERY, item.name)))
            elif current == WINDOW:
                for window in directory.windows():
                    rows.append(
                        ThresholdRow(WINDOW, window.refnum, window.name, self.resolver.resolve(WINDOW, window.name))
                    )
            else:
                raise ValueError(f"Unknown kind: {current}")
        return rows
