from __future__ import annotations

import pytest

from core.config import FallbackThresholds
from core.loader import (
    MapFileError,
    SaveNotImplementedError,
    load_rule_table,
    parse_rule_lines,
    render_template,
    save_rule_table,
)
from core.rules_engine import RuleTable

SAMPLE = """\
# comment line
   # indented comment

channel /^#myco-/ messages
channel * hilights
query   somebot   hilights   
query * all
window (status) 2
this line is malformed
channel too many fields here
"""


def _patterns(rules) -> list[str]:
    return [rule.raw_pattern for rule in rules]


def test_parse_keeps_file_order_per_kind() -> None:
    result = parse_rule_lines(SAMPLE.splitlines())

    assert _patterns(result.table.channel) == ["/^#myco-/", "*"]
    assert _patterns(result.table.query) == ["somebot", "*"]
    assert _patterns(result.table.window) == ["(status)"]
    assert result.table.window[0].level == 2


def test_malformed_lines_are_skipped_and_counted() -> None:
    result = parse_rule_lines(SAMPLE.splitlines(keepends=True))

    assert result.skipped == 2
    assert result.skipped_lines == (9, 10)
    assert len(result.table) == 5


def test_kind_column_goes_through_the_matcher() -> None:
    lines = [
        "* #everywhere none",
        "/^(channel|query)$/ #items messages",
        "CHANNEL #upper hilights",
        "server #nowhere all",
    ]
    result = parse_rule_lines(lines)

    assert _patterns(result.table.window) == ["#everywhere"]
    assert _patterns(result.table.channel) == ["#everywhere", "#items", "#upper"]
    assert _patterns(result.table.query) == ["#everywhere", "#items"]
    assert result.skipped_lines == (4,)


def test_level_specs_resolve_lazily() -> None:
    result = parse_rule_lines(["channel #a loud", "channel #b NONE", "channel #c 3"])

    assert [rule.level_spec for rule in result.table.channel] == ["loud", "NONE", "3"]
    assert [rule.level for rule in result.table.channel] == [1, 4, 3]


def test_out_of_range_numeric_levels_are_skipped() -> None:
    result = parse_rule_lines(["channel #a 9", "channel #b 0", "channel #c 4"])

    assert _patterns(result.table.channel) == ["#c"]
    assert result.skipped_lines == (1, 2)


def test_invalid_regex_lines_are_skipped() -> None:
    result = parse_rule_lines(["channel /(/ all", "channel #ok all"])

    assert _patterns(result.table.channel) == ["#ok"]
    assert result.skipped == 1


def test_missing_file_is_created_from_template(tmp_path) -> None:
    path = tmp_path / "nested" / "map"
    fallbacks = FallbackThresholds(window=1, channel=3, query=2)

    result = load_rule_table(path, fallbacks)

    assert result.created
    assert len(result.table) == 0
    content = path.read_text(encoding="utf-8")
    assert "# window\t*\tall" in content
    assert "# channel\t*\thilights" in content
    assert "# query\t*\tmessages" in content


def test_template_contains_no_active_rules() -> None:
    template = render_template(FallbackThresholds())
    result = parse_rule_lines(template.splitlines())

    assert len(result.table) == 0
    assert result.skipped == 0


def test_existing_file_is_parsed(tmp_path) -> None:
    path = tmp_path / "map"
    path.write_text(SAMPLE, encoding="utf-8")

    result = load_rule_table(path, FallbackThresholds())

    assert not result.created
    assert len(result.table.channel) == 2


def test_unreadable_file_raises_map_file_error(tmp_path) -> None:
    with pytest.raises(MapFileError):
        load_rule_table(tmp_path, FallbackThresholds())


def test_uncreatable_file_raises_map_file_error(tmp_path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")

    with pytest.raises(MapFileError):
        load_rule_table(blocker / "map", FallbackThresholds())


def test_save_is_not_implemented(tmp_path) -> None:
    with pytest.raises(SaveNotImplementedError, match="not yet implemented"):
        save_rule_table(tmp_path / "map", RuleTable())
