from __future__ import annotations

import dataclasses

import pytest

from adapters.session_file import build_host
from core.config import EngineConfig, FallbackThresholds
from core.loader import MapFileError, SaveNotImplementedError
from core.mappings import MappingService


def _service(tmp_path, text: str | None = None, **kwargs) -> MappingService:
    map_file = tmp_path / "map"
    if text is not None:
        map_file.write_text(text, encoding="utf-8")
    return MappingService(EngineConfig(map_file=str(map_file), **kwargs))


def _levels(service: MappingService, *names: str) -> list[int]:
    return [row.level for row in service.query(names)]


def test_reload_replaces_the_table_wholesale(tmp_path) -> None:
    service = _service(tmp_path, "channel #old none\n")
    service.load()
    assert _levels(service, "#old") == [4]

    (tmp_path / "map").write_text("channel #new none\n", encoding="utf-8")
    service.reload()

    assert _levels(service, "#old", "#new") == [1, 4]


def test_failed_load_keeps_previous_rules(tmp_path) -> None:
    service = _service(tmp_path, "channel #old none\n")
    service.load()

    service.apply_config(dataclasses.replace(service.config, map_file=str(tmp_path)))
    with pytest.raises(MapFileError):
        service.load()

    assert _levels(service, "#old") == [4]


def test_missing_map_file_gives_empty_table(tmp_path) -> None:
    service = _service(tmp_path)

    result = service.load()

    assert result.created
    assert (tmp_path / "map").exists()
    assert service.list_mappings().channel == []


def test_save_always_fails_and_autosave_is_a_no_op(tmp_path) -> None:
    service = _service(tmp_path, "")
    service.load()

    with pytest.raises(SaveNotImplementedError):
        service.save()
    service.autosave()
    assert not service.changed_since_save


def test_apply_config_updates_fallbacks_and_debug(tmp_path) -> None:
    service = _service(tmp_path, "")
    service.load()

    service.apply_config(
        dataclasses.replace(service.config, debug=True, fallbacks=FallbackThresholds(channel=3))
    )

    assert service.tracer.enabled
    assert _levels(service, "#any") == [3]


def test_query_uses_requested_kind(tmp_path) -> None:
    service = _service(tmp_path, "window #a none\nquery #a messages\n")
    service.load()

    assert [row.level for row in service.query(["#a"], "window")] == [4]
    assert [row.level for row in service.query(["#a"], "query")] == [2]
    assert [row.level for row in service.query(["#a"])] == [1]


def test_list_mappings_rows(tmp_path) -> None:
    service = _service(tmp_path, "channel /^#myco-/ messages\nchannel * hilights\n")
    service.load()

    rows = service.list_mappings().channel

    assert [(row.index, row.pattern, row.level_spec) for row in rows] == [
        (0, "/^#myco-/", "messages"),
        (1, "*", "hilights"),
    ]


def test_show_covers_live_entities_in_kind_order(tmp_path) -> None:
    service = _service(tmp_path, "channel #a hilights\nwindow * messages\n")
    service.load()
    host = build_host(
        {
            "windows": [
                {"refnum": 7, "name": "main", "items": [{"kind": "channel", "name": "#a"}, {"kind": "query", "name": "bob"}]},
            ]
        }
    )

    rows = service.show(host)

    assert [(row.kind, row.index, row.name, row.level) for row in rows] == [
        ("channel", 0, "#a", 3),
        ("query", 0, "bob", 1),
        ("window", 7, "main", 2),
    ]
    assert [row.kind for row in service.show(host, "query")] == ["query"]
