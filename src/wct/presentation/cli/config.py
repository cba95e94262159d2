"""CLI configuration helpers for loading per-user options."""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict

logger = logging.getLogger(__name__)

_DEFAULT_LOG_LEVEL = "WARNING"
_DEFAULT_DAMAGE_STEP = 1
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def get_user_data_dir() -> Path:
    """Return the per-user data directory."""
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / "WarbandTracker"
        return Path.home() / "WarbandTracker"
    return Path.home() / ".config" / "warband_tracker"


def get_default_config_path() -> Path:
    """Return the default per-user config path."""
    return get_user_data_dir() / "config.json"


def get_snapshot_dir() -> Path:
    """Return the per-user snapshot directory."""
    return get_user_data_dir() / "snapshots"


def default_config() -> Dict[str, Any]:
    return {"log_level": _DEFAULT_LOG_LEVEL, "damage_step": _DEFAULT_DAMAGE_STEP}


def _normalize_log_level(value: object) -> str:
    if isinstance(value, str) and value.upper() in _LOG_LEVELS:
        return value.upper()
    return _DEFAULT_LOG_LEVEL


def _normalize_damage_step(value: object) -> int:
    if isinstance(value, int) and not isinstance(value, bool) and value > 0:
        return value
    return _DEFAULT_DAMAGE_STEP


def _normalize(raw: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "log_level": _normalize_log_level(raw.get("log_level")),
        "damage_step": _normalize_damage_step(raw.get("damage_step")),
    }


def load_config(path: Path | None = None) -> Dict[str, Any]:
    """Load config from disk or return defaults."""
    config_path = path or get_default_config_path()
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return default_config()
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", config_path, exc)
        return default_config()
    if not isinstance(raw, dict):
        return default_config()
    return _normalize(raw)

