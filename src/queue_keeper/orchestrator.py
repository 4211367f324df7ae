"""Wire host notifications to queue save and load."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence

from queue_keeper.config import PersistenceConfig
from queue_keeper.host import QueueHost, QueueItem, SaveTrigger, TimerHandle
from queue_keeper.reconciler import load_queue
from queue_keeper.serializer import save_queue
from queue_keeper.session import SessionState

logger = logging.getLogger(__name__)

SAVE_DEBOUNCE_SECONDS = 1.0
STARTUP_DELAY_SECONDS = 0.5


class QueuePersistence:
    """Keeps a host's playback queue in sync with the persisted queue file.

    Handlers run on the host's event loop one at a time, so the session
    flags and the pending debounce timer need no locking.
    """

    def __init__(
        self,
        host: QueueHost,
        config: PersistenceConfig,
        state: Optional[SessionState] = None,
    ) -> None:
        self.host = host
        self.config = config
        self.state = state or SessionState()
        self.target: Path = host.resolve_config_path(config.playlist_file)
        self._pending_save: Optional[TimerHandle] = None
        self._installed = False

    def install(self) -> None:
        """Subscribe to host events and schedule the startup load."""
        if self._installed:
            logger.warning("Queue persistence already installed")
            return
        self._installed = True
        if self.config.save_on_playlist_change:
            self.host.subscribe("queue-changed", self.handle_queue_changed)
        if self.config.save_on_exit:
            self.host.subscribe("shutdown", self.handle_shutdown)
        if self.config.load_on_start:
            self.host.schedule_after_delay(STARTUP_DELAY_SECONDS, self.handle_startup)
        else:
            self.state.load_completed = True
        logger.info("Queue persistence installed (file=%s)", self.target)

    @property
    def save_pending(self) -> bool:
        return self._pending_save is not None

    def handle_queue_changed(self, items: Sequence[QueueItem]) -> None:
        if not items:
            return
        self._schedule_save()

    def handle_shutdown(self) -> None:
        self._cancel_pending_save()
        self.save("shutdown")

    def handle_startup(self) -> None:
        if self.state.load_completed:
            return
        try:
            load_queue(self.host, self.target, self.state, self.config.load_mode)
        except Exception:
            logger.exception("Startup queue load failed")
        finally:
            self.state.load_completed = True

    def save_now(self) -> bool:
        self._cancel_pending_save()
        return self.save("manual")

    def save(self, trigger: SaveTrigger) -> bool:
        return save_queue(self.host, self.target, self.state, trigger=trigger)

    def _schedule_save(self) -> None:
        self._cancel_pending_save()
        self._pending_save = self.host.schedule_after_delay(
            SAVE_DEBOUNCE_SECONDS, self._run_pending_save
        )

    def _run_pending_save(self) -> None:
        self._pending_save = None
        self.save("change")

    def _cancel_pending_save(self) -> None:
        if self._pending_save is None:
            return
        self._pending_save.stop()
        self._pending_save = None
