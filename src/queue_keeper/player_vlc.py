"""VLC-backed playback for the queue player."""

from __future__ import annotations

import logging
import threading
from typing import Any, Optional, cast

logger = logging.getLogger(__name__)

vlc: Any | None = None
_VLC_IMPORT_ERROR: Optional[Exception] = None


def _load_vlc() -> None:
    global vlc
    global _VLC_IMPORT_ERROR
    if vlc is not None or _VLC_IMPORT_ERROR is not None:
        return
    try:
        import vlc as vlc_module  # type: ignore
    except (ImportError, OSError, NotImplementedError) as exc:  # pragma: no cover
        vlc = None
        _VLC_IMPORT_ERROR = exc
    else:
        vlc = cast(Any, vlc_module)
        _VLC_IMPORT_ERROR = None


class VlcPlayer:
    """Thin wrapper around python-vlc's MediaPlayer."""

    def __init__(self) -> None:
        _load_vlc()
        if vlc is None:
            raise RuntimeError(
                "VLC backend is unavailable. Install VLC and the python-vlc package."
            ) from _VLC_IMPORT_ERROR
        self._instance = cast(Any, vlc).Instance()
        self._player = self._instance.media_player_new()
        self._current_media: Optional[str] = None
        self._end_reached = threading.Event()
        self._attach_end_reached_event()

    def _attach_end_reached_event(self) -> None:
        vlc_module = cast(Any, vlc)
        try:
            event_manager = self._player.event_manager()
            event_manager.event_attach(
                vlc_module.EventType.MediaPlayerEndReached, self._handle_end_reached
            )
        except AttributeError:
            logger.warning("VLC end-of-media events unavailable; no auto-advance")

    def _handle_end_reached(self, event: object) -> None:
        # Called on a libvlc thread; only flag it for the UI tick to consume.
        del event
        self._end_reached.set()

    @property
    def current_media(self) -> Optional[str]:
        """Return the current media path if loaded."""
        return self._current_media

    def consume_end_reached(self) -> bool:
        """Return True if an end-reached event fired since last check."""
        if self._end_reached.is_set():
            self._end_reached.clear()
            return True
        return False

    def load(self, path: str) -> None:
        """Load a local path or URI into the player."""
        media = self._instance.media_new(path)
        self._player.set_media(media)
        self._current_media = path
        self._end_reached.clear()

    def unload(self) -> None:
        self.stop()
        self._current_media = None

    def play(self) -> None:
        self._player.play()

    def pause(self) -> None:
        self._player.pause()

    def stop(self) -> None:
        self._player.stop()

    def get_state(self) -> str:
        """Return a best-effort playback state string."""
        state = self._player.get_state()
        if state is None:
            return "unknown"
        name = getattr(state, "name", None)
        if isinstance(name, str):
            return name.lower()
        return str(state).lower()
