import json
from pathlib import Path

from wct.presentation.cli import config


def test_missing_config_returns_defaults(tmp_path: Path) -> None:
    assert config.load_config(tmp_path / "nope.json") == {"log_level": "WARNING", "damage_step": 1}


def test_config_values_are_normalized(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"log_level": "debug", "damage_step": 3}), encoding="utf-8")

    assert config.load_config(path) == {"log_level": "DEBUG", "damage_step": 3}


def test_invalid_values_fall_back(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"log_level": "LOUD", "damage_step": 0}), encoding="utf-8")

    assert config.load_config(path) == {"log_level": "WARNING", "damage_step": 1}


def test_corrupt_config_falls_back(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")

    assert config.load_config(path) == config.default_config()


def test_user_data_dir_on_posix(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(config.os, "name", "posix")
    monkeypatch.setattr(config.Path, "home", lambda: tmp_path)

    assert config.get_snapshot_dir() == tmp_path / ".config" / "warband_tracker" / "snapshots"
