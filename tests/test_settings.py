from __future__ import annotations

import json
import os

import pytest

import settings


def test_defaults_when_config_is_empty() -> None:
    loaded = settings.build_settings({})

    assert loaded.engine.map_file == os.path.expanduser(settings.DEFAULT_MAP_FILE)
    assert loaded.engine.debug is False
    assert (loaded.engine.fallbacks.window, loaded.engine.fallbacks.channel, loaded.engine.fallbacks.query) == (1, 1, 1)
    assert loaded.logging == {}


def test_fallback_thresholds_are_read_per_kind() -> None:
    loaded = settings.build_settings({"fallback_thresholds": {"channel": 3, "query": "2"}})

    assert loaded.engine.fallbacks.channel == 3
    assert loaded.engine.fallbacks.query == 2
    assert loaded.engine.fallbacks.window == 1


@pytest.mark.parametrize("value", [0, 5])
def test_fallback_thresholds_out_of_range_are_rejected(value: int) -> None:
    with pytest.raises(ValueError):
        settings.build_settings({"fallback_thresholds": {"window": value}})


def test_relative_map_file_is_relative_to_config_dir(tmp_path) -> None:
    loaded = settings.build_settings({"map_file": "maps/actgate"}, base_dir=str(tmp_path))

    assert loaded.engine.map_file == os.path.join(str(tmp_path), "maps/actgate")


def test_load_settings_reads_json(tmp_path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"debug": True, "map_file": "map"}), encoding="utf-8")

    loaded = settings.load_settings(str(path))

    assert loaded.engine.debug is True
    assert loaded.engine.map_file == os.path.join(str(tmp_path), "map")
    assert loaded.path == str(path)


def test_load_settings_missing_file_uses_defaults(tmp_path) -> None:
    loaded = settings.load_settings(str(tmp_path / "absent.json"))

    assert loaded.engine.fallbacks.channel == 1


def test_non_object_config_is_rejected(tmp_path) -> None:
    path = tmp_path / "config.json"
    path.write_text("[]", encoding="utf-8")

    with pytest.raises(ValueError):
        settings.load_settings(str(path))


def test_config_path_honours_environment(monkeypatch, tmp_path) -> None:
    target = str(tmp_path / "custom.json")
    monkeypatch.setenv("ACTGATE_CONFIG", target)

    assert settings.config_path() == target
