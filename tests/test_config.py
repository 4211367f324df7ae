"""Tests for configuration loading."""

from __future__ import annotations

import json
import os
from pathlib import Path

from queue_keeper import config


def test_load_defaults_when_missing(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(config, "get_config_dir", lambda: tmp_path)
    loaded = config.load_config()
    assert loaded == config.PersistenceConfig()
    assert loaded.playlist_file == "~~/persistent_playlist.txt"
    assert loaded.load_mode == "append"


def test_load_defaults_when_corrupt(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(config, "get_config_dir", lambda: tmp_path)
    (tmp_path / config.CONFIG_FILENAME).write_text("{not-json", encoding="utf-8")
    assert config.load_config() == config.PersistenceConfig()


def test_load_defaults_when_not_a_mapping(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(config, "get_config_dir", lambda: tmp_path)
    (tmp_path / config.CONFIG_FILENAME).write_text("[1, 2]", encoding="utf-8")
    assert config.load_config() == config.PersistenceConfig()


def test_load_defaults_when_read_fails(monkeypatch, tmp_path: Path) -> None:
    config_path = tmp_path / config.CONFIG_FILENAME
    config_path.write_text("{}", encoding="utf-8")

    def boom(*_args, **_kwargs) -> str:
        raise OSError("nope")

    monkeypatch.setattr(config, "get_config_path", lambda: config_path)
    monkeypatch.setattr(Path, "read_text", boom)
    assert config.load_config() == config.PersistenceConfig()


def test_load_reads_all_keys(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(config, "get_config_dir", lambda: tmp_path)
    data = {
        "playlist_file": "/srv/queue.txt",
        "save_on_playlist_change": False,
        "save_on_exit": False,
        "load_on_start": False,
        "load_mode": "replace",
    }
    (tmp_path / config.CONFIG_FILENAME).write_text(json.dumps(data), encoding="utf-8")
    assert config.load_config() == config.PersistenceConfig(**data)


def test_config_from_mapping_sanitizes_values() -> None:
    raw = {
        "playlist_file": "",
        "save_on_playlist_change": "no",
        "save_on_exit": 0,
        "load_on_start": None,
        "load_mode": "shuffle",
    }
    cfg = config._config_from_mapping(raw)
    assert cfg == config.PersistenceConfig()


def test_expand_config_path(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(config, "get_config_dir", lambda: tmp_path)
    monkeypatch.setattr(config.Path, "home", lambda: tmp_path / "home")
    assert config.expand_config_path("~~/queue.txt") == tmp_path / "queue.txt"
    assert config.expand_config_path("~~") == tmp_path
    assert config.expand_config_path("/abs/queue.txt") == Path("/abs/queue.txt")
    assert config.expand_config_path("relative.txt") == Path("relative.txt")


def test_expand_config_path_home(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("USERPROFILE", str(tmp_path))
    assert config.expand_config_path("~/queue.txt") == tmp_path / "queue.txt"


def test_get_config_dir_os_defaults(monkeypatch, tmp_path: Path) -> None:
    if os.name == "nt":
        monkeypatch.setenv("APPDATA", str(tmp_path))
        path = config.get_config_dir("keeper")
        assert path == tmp_path / "keeper"
        monkeypatch.delenv("APPDATA", raising=False)
        monkeypatch.setattr(config.Path, "home", lambda: tmp_path)
        path = config.get_config_dir("keeper")
        assert path == tmp_path / "AppData" / "Roaming" / "keeper"
    else:
        monkeypatch.setattr(config, "_is_macos", lambda: False)
        xdg = tmp_path / "xdg"
        monkeypatch.setenv("XDG_CONFIG_HOME", str(xdg))
        path = config.get_config_dir("keeper")
        assert path == xdg / "keeper"
        assert path.is_dir()
