"""Configuration loading for queue-keeper."""

from __future__ import annotations

from dataclasses import dataclass
import json
import logging
import os
from pathlib import Path
from typing import Any

from queue_keeper.host import LOAD_MODES, LoadMode

logger = logging.getLogger(__name__)

APP_NAME = "queue-keeper"
CONFIG_FILENAME = "queue_keeper.json"
DEFAULT_PLAYLIST_FILE = "~~/persistent_playlist.txt"


@dataclass(frozen=True)
class PersistenceConfig:
    """Immutable persistence options loaded from disk."""

    playlist_file: str = DEFAULT_PLAYLIST_FILE
    save_on_playlist_change: bool = True
    save_on_exit: bool = True
    load_on_start: bool = True
    load_mode: LoadMode = "append"


def get_config_dir(app_name: str = APP_NAME) -> Path:
    """Return the per-user config directory for the current platform."""
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            root = Path(base)
        else:
            root = Path.home() / "AppData" / "Roaming"
        return _ensure_dir(root / app_name)
    elif os.name == "posix":
        if _is_macos():
            return _ensure_dir(
                Path.home() / "Library" / "Application Support" / app_name
            )
        base = os.environ.get("XDG_CONFIG_HOME")
        root = Path(base) if base else Path.home() / ".config"
        return _ensure_dir(root / app_name)
    else:
        return _ensure_dir(Path.home() / ".config" / app_name)


def get_config_path() -> Path:
    """Return the full config file path."""
    return get_config_dir() / CONFIG_FILENAME


def expand_config_path(template: str) -> Path:
    """Expand ``~~/`` to the config directory and ``~`` to the home directory."""
    if template == "~~":
        return get_config_dir()
    if template.startswith("~~/") or template.startswith("~~\\"):
        return get_config_dir() / template[3:]
    return Path(template).expanduser()


def load_config() -> PersistenceConfig:
    """Load configuration from disk, falling back to defaults on error."""
    path = get_config_path()
    if not path.exists():
        logger.info("No config at %s, using defaults", path)
        return PersistenceConfig()
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        logger.exception("Failed to load config from %s", path)
        return PersistenceConfig()
    if not isinstance(raw, dict):
        return PersistenceConfig()
    return _config_from_mapping(raw)


def _ensure_dir(path: Path) -> Path:
    """Create the directory if needed and return the path."""
    path.mkdir(parents=True, exist_ok=True)
    return path


def _is_macos() -> bool:
    """Return True when running on macOS."""
    if not hasattr(os, "uname"):
        return False
    return os.uname().sysname == "Darwin"


def _get_bool(raw: dict[str, Any], key: str, default: bool) -> bool:
    """Fetch a boolean value, ignoring values of the wrong type."""
    value = raw.get(key, default)
    if isinstance(value, bool):
        return value
    return default


def _get_str(
    raw: dict[str, Any],
    key: str,
    default: str,
    *,
    allow_empty: bool = False,
) -> str:
    """Fetch a string value, optionally allowing empty strings."""
    value = raw.get(key, default)
    if not isinstance(value, str):
        return default
    if not value and not allow_empty:
        return default
    return value


def _config_from_mapping(raw: dict[str, Any]) -> PersistenceConfig:
    """Normalize raw JSON data into a PersistenceConfig."""
    load_mode = raw.get("load_mode", "append")
    if load_mode not in LOAD_MODES:
        logger.warning("Unknown load_mode %r, using append", load_mode)
        load_mode = "append"
    return PersistenceConfig(
        playlist_file=_get_str(raw, "playlist_file", DEFAULT_PLAYLIST_FILE),
        save_on_playlist_change=_get_bool(raw, "save_on_playlist_change", True),
        save_on_exit=_get_bool(raw, "save_on_exit", True),
        load_on_start=_get_bool(raw, "load_on_start", True),
        load_mode=load_mode,
    )
