"""Static configuration for actgate.

All user-editable settings (map file, debug, fallback thresholds, logging)
live in a single JSON file. ``ACTGATE_CONFIG`` (also read from ``.env``)
points at a different file. A missing file means defaults everywhere.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import json
import os
from typing import Any, Optional

from dotenv import load_dotenv

from core.config import EngineConfig, FallbackThresholds
from core.levels import ALL, NONE
from core.rules_engine import KINDS

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

# Where config.json is looked up unless ACTGATE_CONFIG says otherwise.
DEFAULT_CONFIG_PATH = os.path.join(PROJECT_ROOT, "config.json")

# The map file lives next to the rest of the user's chat client state.
DEFAULT_MAP_FILE = os.path.join("~", ".actgate", "map")


@dataclass(frozen=True)
class Settings:
    """Everything the app layer needs from config.json."""

    engine: EngineConfig
    logging: dict[str, Any] = field(default_factory=dict)
    path: Optional[str] = None


def config_path() -> str:
    load_dotenv()
    return os.getenv("ACTGATE_CONFIG") or DEFAULT_CONFIG_PATH


def _load_json_config(path: str) -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(path):
        return {}

    with open(path, "r", encoding="utf-8") as handle:
        data = json.load(handle)
    if not isinstance(data, dict):
        raise ValueError("config root must be an object")
    return data


def _threshold(raw: dict, kind: str) -> int:
    value = int(raw.get(kind, ALL))
    if not ALL <= value <= NONE:
        raise ValueError(f"fallback_thresholds.{kind} must be between {ALL} and {NONE}, got {value}")
    return value


def _map_file(raw_value: Optional[str], base_dir: str) -> str:
    path = os.path.expanduser(raw_value or DEFAULT_MAP_FILE)
    if not os.path.isabs(path):
        # Relative paths are relative to the config file, not the cwd.
        path = os.path.join(base_dir, path)
    return path


def build_settings(raw: dict, base_dir: str = PROJECT_ROOT, path: Optional[str] = None) -> Settings:
    """Turn the parsed config document into typed settings."""

    fallbacks_raw = raw.get("fallback_thresholds", {}) or {}
    fallbacks = FallbackThresholds(**{kind: _threshold(fallbacks_raw, kind) for kind in KINDS})
    engine = EngineConfig(
        map_file=_map_file(raw.get("map_file"), base_dir),
        debug=bool(raw.get("debug", False)),
        fallbacks=fallbacks,
    )
    return Settings(engine=engine, logging=raw.get("logging", {}) or {}, path=path)


def load_settings(path: Optional[str] = None) -> Settings:
    """Read settings from ``path`` (or the configured location)."""

    path = path or config_path()
    raw = _load_json_config(path)
    return build_settings(raw, base_dir=os.path.dirname(os.path.abspath(path)), path=path)
