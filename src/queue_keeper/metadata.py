"""Display titles for queue entries."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path, PurePath

import mutagen

from queue_keeper.paths import is_remote, resolve_absolute

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrackMeta:
    artist: str | None
    title: str | None


_EMPTY = TrackMeta(artist=None, title=None)
_TRACK_META_CACHE: dict[str, TrackMeta] = {}


def _extract_text(value: object | None) -> str | None:
    if value is None:
        return None
    if hasattr(value, "text"):
        value = getattr(value, "text")
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if value is None:
        return None
    if isinstance(value, bytes):
        text = value.decode("utf-8", errors="replace")
    else:
        text = str(value)
    text = text.strip()
    return text or None


def _read_tag(tags: object | None, keys: tuple[str, ...]) -> str | None:
    getter = getattr(tags, "get", None)
    if getter is None:
        return None
    for key in keys:
        try:
            value = getter(key)
        except Exception:
            continue
        text = _extract_text(value)
        if text:
            return text
    return None


def read_track_meta(path: Path) -> TrackMeta:
    """Best-effort tag lookup; unreadable or untagged files yield empty meta."""
    try:
        audio = mutagen.File(path)
    except Exception as exc:
        logger.debug("No tags for %s: %s", path, exc)
        return _EMPTY
    if not audio:
        return _EMPTY
    tags = getattr(audio, "tags", None)
    artist = _read_tag(tags, ("artist", "ARTIST", "TPE1", "TPE2", "\xa9ART", "aART"))
    title = _read_tag(tags, ("title", "TITLE", "TIT2", "\xa9nam"))
    return TrackMeta(artist=artist, title=title)


def get_track_meta(path: str, working_dir: str | None = None) -> TrackMeta:
    if is_remote(path):
        return _EMPTY
    key = resolve_absolute(path, working_dir)
    cached = _TRACK_META_CACHE.get(key)
    if cached is not None:
        return cached
    meta = read_track_meta(Path(key)) if Path(key).is_file() else _EMPTY
    _TRACK_META_CACHE[key] = meta
    return meta


def format_display_title(path: str, meta: TrackMeta | None = None) -> str:
    if meta and meta.title:
        if meta.artist:
            return f"{meta.artist} – {meta.title}"
        return meta.title
    if is_remote(path):
        return path
    return PurePath(path.replace("\\", "/")).name or path


def display_title(path: str, working_dir: str | None = None) -> str:
    return format_display_title(path, get_track_meta(path, working_dir))
