from __future__ import annotations

from adapters.formatting import (
    format_decision,
    format_error,
    format_mapping_table,
    format_query_rows,
    format_show_rows,
)
from core.models import Decision, MappingRow, ThresholdRow, Verdict


def test_error_lines_carry_the_prefix() -> None:
    assert format_error("saving not yet implemented") == "actgate: ERROR: saving not yet implemented"


def test_mapping_table_columns() -> None:
    table = format_mapping_table([MappingRow(0, "/^#myco-/", "messages"), MappingRow(1, "*", "3")])

    lines = table.splitlines()
    assert lines[0].startswith("   0: /^#myco-/ ")
    assert lines[0].rstrip().endswith("messages")
    assert len(lines[1].rstrip()) == len("   1: ") + 40 + 1 + 1


def test_query_rows_are_right_aligned() -> None:
    text = format_query_rows([ThresholdRow("channel", 0, "#myco-eng", 2), ThresholdRow("channel", 1, "#a", 3)])

    assert text.splitlines() == [
        "actgate channel map: #myco-eng → 2 (messages)",
        "actgate channel map:        #a → 3 (hilights)",
    ]


def test_show_rows_label_unnamed_windows() -> None:
    text = format_show_rows([ThresholdRow("window", 3, "", 1)])

    assert text.startswith("   3: (unnamed)")
    assert text.endswith("→ 1 (all)")


def test_decision_summary() -> None:
    assert format_decision(Decision(Verdict.PASS)) == "pass"
    assert format_decision(Decision(Verdict.SUPPRESS, threshold=3)) == "suppress (threshold 3 (hilights))"
