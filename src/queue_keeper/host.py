"""Host player capabilities consumed by the persistence layer."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Literal, Optional, Protocol

LoadMode = Literal["append", "replace"]
HostEvent = Literal["queue-changed", "shutdown"]
SaveTrigger = Literal["change", "shutdown", "manual"]

LOAD_MODES: tuple[LoadMode, ...] = ("append", "replace")


@dataclass(frozen=True)
class QueueItem:
    """One playback-queue entry."""

    path: str


class TimerHandle(Protocol):
    def stop(self) -> Any: ...


class QueueHost(Protocol):
    """What a media player must expose for its queue to be persisted."""

    def get_queue(self) -> list[QueueItem]: ...

    def get_queue_count(self) -> int: ...

    def append_or_replace(self, path: str, mode: LoadMode) -> None: ...

    def get_working_directory(self) -> Optional[str]: ...

    def resolve_config_path(self, template: str) -> Path: ...

    def subscribe(self, event: HostEvent, handler: Callable[..., None]) -> None: ...

    def schedule_after_delay(
        self, seconds: float, callback: Callable[[], None]
    ) -> TimerHandle: ...
