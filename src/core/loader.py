"""Map file parsing and template generation (core domain).

The map file is line oriented: ``kind pattern level``, separated by
whitespace. Blank lines and ``#`` comments are skipped. Lines that do not
have exactly three fields are skipped without failing the load, so older
map files keep working; the number of skipped lines is reported instead.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
import re
from typing import Iterable, Optional

from core.config import FallbackThresholds
from core.levels import ALL, NONE, input_from_level, is_known_keyword
from core.patterns import match, parse_pattern
from core.rules_engine import KINDS, Rule, RuleTable

LOGGER = logging.getLogger(__name__)

MAP_FORMAT_VERSION = "1.0"

_SKIP_LINE = re.compile(r"\s*(?:#|$)")
_RULE_LINE = re.compile(r"\s*(\S+)\s+(\S+)\s+(\S+)\s*")
_DIGITS = re.compile(r"[0-9]+")


class MapFileError(Exception):
    """Raised when the map file cannot be read or created."""


class SaveNotImplementedError(Exception):
    """Raised by every attempt to write rules back to the map file."""


@dataclass(frozen=True)
class LoadResult:
    """Outcome of parsing a map file."""

    table: RuleTable
    skipped_lines: tuple[int, ...] = ()
    created: bool = False

    @property
    def skipped(self) -> int:
        return len(self.skipped_lines)


def _kinds_for(kind_field: str) -> list[str]:
    # The kind column goes through the same matcher as names, so "*" or a
    # delimited regex selects several lists at once.
    return [kind for kind in KINDS if match(kind_field, kind) is not None]


def _parse_rule(pattern_field: str, level_field: str, lineno: int) -> Optional[Rule]:
    try:
        pattern = parse_pattern(pattern_field)
    except re.error as exc:
        LOGGER.warning("Line %s: invalid regex %r (%s)", lineno, pattern_field, exc)
        return None

    if _DIGITS.fullmatch(level_field):
        if not ALL <= int(level_field) <= NONE:
            LOGGER.warning("Line %s: level %s is out of range 1-4", lineno, level_field)
            return None
    elif not is_known_keyword(level_field):
        LOGGER.warning("Line %s: unknown level %r, treating it as 'all'", lineno, level_field)

    return Rule(pattern=pattern, level_spec=level_field)


def parse_rule_lines(lines: Iterable[str]) -> LoadResult:
    """Build a rule table from map file lines, in file order."""

    table = RuleTable()
    skipped: list[int] = []

    for lineno, line in enumerate(lines, start=1):
        line = line.rstrip("\n")
        if _SKIP_LINE.match(line):
            continue

        fields = _RULE_LINE.fullmatch(line)
        if not fields:
            LOGGER.debug("Line %s skipped: expected 'kind pattern level'", lineno)
            skipped.append(lineno)
            continue

        kind_field, pattern_field, level_field = fields.groups()
        try:
            kinds = _kinds_for(kind_field)
        except re.error:
            kinds = []
        if not kinds:
            LOGGER.debug("Line %s skipped: %r selects no kind", lineno, kind_field)
            skipped.append(lineno)
            continue

        rule = _parse_rule(pattern_field, level_field, lineno)
        if rule is None:
            skipped.append(lineno)
            continue

        for kind in kinds:
            table.append(kind, rule)

    return LoadResult(table=table, skipped_lines=tuple(skipped))


def render_template(fallbacks: FallbackThresholds) -> str:
    """Return the commented map file written when none exists yet."""

    window = input_from_level(fallbacks.window)
    channel = input_from_level(fallbacks.channel)
    query = input_from_level(fallbacks.query)

    return f"""\
# actgate mappings file (version:{MAP_FORMAT_VERSION})
#
# type: window, channel, query
# name: full name to match, /regexp/, or * (for all)
# min.level: none, messages, hilights, all, or 1,2,3,4
#
# type\tname\tmin.level


# EXAMPLES
#
### only indicate activity in the status window if messages were displayed:
# window\t(status)\tmessages
#
### never ever indicate activity for any item bound to this window:
# window\toubliette\tnone
#
### indicate activity on all messages in debian-related channels:
# channel\t/^#debian/\tmessages
#
### display any text (incl. joins etc.) for the '#actgate' channel:
# channel\t#actgate\tall
#
### otherwise ignore everything in channels, unless a hilight is triggered:
# channel\t*\thilights
#
### make somebot only get your attention if they hilight you:
# query\tsomebot\thilights
#
### otherwise we want to see everything in queries:
# query\t*\tall

# DEFAULTS:
# window\t*\t{window}
# channel\t*\t{channel}
# query\t*\t{query}
"""


def write_template(path: Path, fallbacks: FallbackThresholds) -> None:
    content = render_template(fallbacks)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise MapFileError(f"Cannot create mappings file: {exc.strerror or exc}") from exc
    LOGGER.info("Created new/empty mappings file: %s", path)


def load_rule_table(path: str | Path, fallbacks: FallbackThresholds) -> LoadResult:
    """Read the map file at ``path``, creating a template if it is missing."""

    path = Path(path).expanduser()
    if not path.exists():
        write_template(path, fallbacks)
        return LoadResult(table=RuleTable(), created=True)

    try:
        with path.open("r", encoding="utf-8") as handle:
            return parse_rule_lines(handle)
    except (OSError, UnicodeDecodeError) as exc:
        reason = exc.strerror if isinstance(exc, OSError) and exc.strerror else exc
        raise MapFileError(f"Cannot open mappings file: {reason}") from exc


def save_rule_table(path: str | Path, table: RuleTable) -> None:
    """Writing rules back is not supported."""

    raise SaveNotImplementedError("saving not yet implemented")
