from __future__ import annotations

import pytest

from adapters.session_file import SessionFileError, build_host, iter_events, load_session, replay
from core.config import EngineConfig
from core.mappings import MappingService


def _host(tmp_path):
    map_file = tmp_path / "map"
    map_file.write_text("channel #quiet hilights\n", encoding="utf-8")
    service = MappingService(EngineConfig(map_file=str(map_file)))
    service.load()
    host = build_host(
        {"windows": [{"refnum": 2, "name": "", "items": [{"kind": "channel", "name": "#quiet"}]}]}
    )
    host.attach(service)
    return host


def test_build_host_rejects_unknown_item_kind() -> None:
    with pytest.raises(SessionFileError):
        build_host({"windows": [{"refnum": 1, "items": [{"kind": "dcc", "name": "x"}]}]})


def test_build_host_requires_refnum() -> None:
    with pytest.raises(SessionFileError):
        build_host({"windows": [{"name": "main"}]})


def test_load_session_reports_bad_json(tmp_path) -> None:
    path = tmp_path / "session.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(SessionFileError):
        load_session(path)


def test_iter_events_skips_blank_and_comment_lines() -> None:
    events = list(iter_events(["# header", "", '{"beep": true}']))

    assert events == [(3, {"beep": True})]


def test_replay_collects_decisions_in_host_order(tmp_path) -> None:
    host = _host(tmp_path)
    events = iter_events(['{"item": "#quiet", "level": 2, "beep": true}', '{"window": 2, "level": 1}', '{"beep": true}'])

    steps = replay(host, events)

    assert [name for name, _ in steps[0].decisions] == ["item", "window", "alert"]
    assert all(decision.suppressed for _, decision in steps[0].decisions)
    assert steps[1].decisions[0][1].suppressed
    assert steps[2].decisions[0][1].suppressed


def test_replay_rejects_unknown_events(tmp_path) -> None:
    host = _host(tmp_path)

    with pytest.raises(SessionFileError):
        replay(host, iter_events(['{"level": 2}']))
