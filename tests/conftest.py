"""Pytest configuration and fakes for queue-keeper."""

from __future__ import annotations

from collections import defaultdict
import os
from pathlib import Path
from typing import Callable, Iterable, Optional

import pytest

from queue_keeper.host import LoadMode, QueueItem


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    del config
    if os.environ.get("QUEUE_KEEPER_CI") != "1":
        return
    skip_vlc = pytest.mark.skip(reason="Skipping VLC-dependent tests in CI.")
    for item in items:
        if "vlc" in item.keywords:
            item.add_marker(skip_vlc)


class FakeTimer:
    def __init__(self, due: float, callback: Callable[[], None], seq: int) -> None:
        self.due = due
        self.callback = callback
        self.seq = seq
        self.stopped = False
        self.fired = False

    def stop(self) -> None:
        self.stopped = True


class FakeHost:
    """In-memory player queue with a manual clock."""

    def __init__(
        self, working_dir: Optional[str] = None, paths: Iterable[str] = ()
    ) -> None:
        self.items = [QueueItem(path) for path in paths]
        self.working_dir = working_dir
        self.handlers: dict[str, list[Callable[..., None]]] = defaultdict(list)
        self.timers: list[FakeTimer] = []
        self.inserts: list[tuple[str, LoadMode]] = []
        self.now = 0.0

    def get_queue(self) -> list[QueueItem]:
        return list(self.items)

    def get_queue_count(self) -> int:
        return len(self.items)

    def append_or_replace(self, path: str, mode: LoadMode) -> None:
        if mode == "replace":
            self.items.clear()
        self.items.append(QueueItem(path))
        self.inserts.append((path, mode))
        self.emit_queue_changed()

    def get_working_directory(self) -> Optional[str]:
        return self.working_dir

    def resolve_config_path(self, template: str) -> Path:
        return Path(template)

    def subscribe(self, event: str, handler: Callable[..., None]) -> None:
        self.handlers[event].append(handler)

    def schedule_after_delay(
        self, seconds: float, callback: Callable[[], None]
    ) -> FakeTimer:
        timer = FakeTimer(self.now + seconds, callback, len(self.timers))
        self.timers.append(timer)
        return timer

    def emit_queue_changed(self) -> None:
        for handler in list(self.handlers["queue-changed"]):
            handler(self.get_queue())

    def emit_shutdown(self) -> None:
        for handler in list(self.handlers["shutdown"]):
            handler()

    def pending_timers(self) -> list[FakeTimer]:
        return [t for t in self.timers if not t.stopped and not t.fired]

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            due = [t for t in self.pending_timers() if t.due <= target]
            if not due:
                break
            timer = min(due, key=lambda t: (t.due, t.seq))
            self.now = timer.due
            timer.fired = True
            timer.callback()
        self.now = target


@pytest.fixture
def make_host(tmp_path: Path) -> Callable[..., FakeHost]:
    def factory(*paths: str, working_dir: Optional[str] = None) -> FakeHost:
        return FakeHost(working_dir or str(tmp_path), paths)

    return factory


@pytest.fixture
def media(tmp_path: Path) -> Callable[[str], Path]:
    """Create a small placeholder media file under ``tmp_path``."""

    def factory(name: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("x", encoding="utf-8")
        return path

    return factory
