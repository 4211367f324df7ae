"""Textual queue player that keeps its queue across sessions."""

from __future__ import annotations

from collections import defaultdict
import logging
import os
from pathlib import Path
from typing import Callable, Iterable, Optional, Protocol

try:
    from textual.app import App, ComposeResult
    from textual.binding import Binding
    from textual.containers import Vertical
    from textual.css.query import NoMatches
    from textual.timer import Timer
    from textual.widgets import DataTable, Header, Input, Static
    from rich.text import Text
except ImportError as exc:  # pragma: no cover - depends on environment
    raise RuntimeError(
        "Textual is required for the TUI. Install the 'textual' dependency."
    ) from exc

from queue_keeper.config import PersistenceConfig, expand_config_path
from queue_keeper.host import HostEvent, LoadMode, QueueItem
from queue_keeper.logging_setup import set_console_level
from queue_keeper.metadata import display_title
from queue_keeper.orchestrator import QueuePersistence
from queue_keeper.reachability import is_reachable

logger = logging.getLogger(__name__)


class Player(Protocol):
    @property
    def current_media(self) -> Optional[str]: ...

    def load(self, path: str) -> None: ...

    def unload(self) -> None: ...

    def play(self) -> None: ...

    def pause(self) -> None: ...

    def get_state(self) -> str: ...

    def consume_end_reached(self) -> bool: ...


def _clean_input_path(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
        value = value[1:-1]
    return value


class QueueKeeperApp(App):
    """Queue player that persists its playback queue."""

    TITLE = "Queue Keeper"
    CSS = """
    #queue_table {
        height: 1fr;
    }
    #add_input {
        dock: bottom;
    }
    #status_line {
        height: 1;
        color: $text-muted;
    }
    """

    BINDINGS = [
        Binding("a", "focus_add", "Add"),
        Binding("space", "toggle_playback", "Play/Pause"),
        Binding("n", "next_track", "Next"),
        Binding("d", "remove_selected", "Remove"),
        Binding("c", "clear_queue", "Clear"),
        Binding("ctrl+s", "save_now", "Save Queue"),
        Binding("escape", "focus_queue", "Queue", show=False),
        Binding("q", "quit_app", "Quit"),
    ]

    def __init__(
        self,
        *,
        player: Player,
        config: PersistenceConfig,
        paths: Iterable[str] = (),
        working_dir: Optional[str] = None,
    ) -> None:
        super().__init__()
        self.player = player
        self._initial_paths = list(paths)
        self._working_dir = working_dir or os.getcwd()
        self._queue_items: list[QueueItem] = []
        self._event_handlers: dict[str, list[Callable[..., None]]] = (
            defaultdict(list)
        )
        self._playing_index: Optional[int] = None
        self._shutdown_fired = False
        self._queue_table: Optional[DataTable] = None
        self._status_line: Optional[Static] = None
        self.persistence = QueuePersistence(self, config)

    # --- Host capabilities used by QueuePersistence ---
    def get_queue(self) -> list[QueueItem]:
        return list(self._queue_items)

    def get_queue_count(self) -> int:
        return len(self._queue_items)

    def append_or_replace(self, path: str, mode: LoadMode) -> None:
        if mode == "replace":
            self._queue_items.clear()
            self._playing_index = None
            self.player.unload()
        self._queue_items.append(QueueItem(path))
        if mode == "replace":
            self._play_index(0)
        self._queue_changed()

    def get_working_directory(self) -> Optional[str]:
        return self._working_dir

    def resolve_config_path(self, template: str) -> Path:
        return expand_config_path(template)

    def subscribe(self, event: HostEvent, handler: Callable[..., None]) -> None:
        self._event_handlers[event].append(handler)

    def schedule_after_delay(
        self, seconds: float, callback: Callable[[], None]
    ) -> Timer:
        return self.set_timer(seconds, callback)

    # --- Notifications ---
    def _queue_changed(self) -> None:
        self._refresh_table()
        items = self.get_queue()
        for handler in list(self._event_handlers["queue-changed"]):
            handler(items)

    def notify_shutdown(self) -> None:
        if self._shutdown_fired:
            return
        self._shutdown_fired = True
        handlers = list(self._event_handlers["shutdown"])
        logger.info("Shutdown: notifying %d handler(s)", len(handlers))
        for handler in handlers:
            handler()

    # --- Widget composition ---
    def compose(self) -> ComposeResult:
        yield Header(show_clock=False)
        with Vertical(id="body"):
            yield DataTable(id="queue_table")
            yield Static("", id="status_line", markup=False)
        yield Input(placeholder="Add a file path or URL", id="add_input")

    async def on_mount(self) -> None:
        self._queue_table = self.query_one("#queue_table", DataTable)
        self._queue_table.add_column("#", key="pos")
        self._queue_table.add_column("Title", key="title")
        self._queue_table.add_column("Path", key="path")
        self._queue_table.cursor_type = "row"
        self.persistence.install()
        for path in self._initial_paths:
            self.append_or_replace(path, "append")
        self._refresh_table()
        self.set_interval(0.25, self._on_tick)
        self.set_focus(self._queue_table)
        logger.info("TUI mounted with %d queued entries", len(self._queue_items))

    def on_unmount(self) -> None:
        self.notify_shutdown()

    # --- Internal helpers ---
    def _set_message(self, text: str) -> None:
        if self._status_line is None:
            try:
                self._status_line = self.query_one("#status_line", Static)
            except NoMatches:
                logger.debug("Status line not mounted: %s", text)
                return
        self._status_line.update(text)

    def _selected_index(self) -> Optional[int]:
        if not self._queue_table or not self._queue_items:
            return None
        row = self._queue_table.cursor_row
        if row < 0 or row >= len(self._queue_items):
            return None
        return row

    def _row_cells(self, index: int, item: QueueItem) -> tuple[Text, Text, Text]:
        marker = "▶" if index == self._playing_index else str(index + 1)
        style = "" if is_reachable(item.path, self._working_dir) else "dim strike"
        return (
            Text(marker),
            Text(display_title(item.path, self._working_dir), style=style),
            Text(item.path, style=style or "dim"),
        )

    def _refresh_table(self) -> None:
        if not self._queue_table:
            return
        cursor = self._queue_table.cursor_row
        self._queue_table.clear()
        for index, item in enumerate(self._queue_items):
            self._queue_table.add_row(*self._row_cells(index, item), key=str(index))
        if self._queue_items:
            last = len(self._queue_items) - 1
            self._queue_table.move_cursor(row=max(0, min(cursor, last)))
        self.sub_title = f"{len(self._queue_items)} queued"

    def _play_index(self, index: int) -> None:
        if index < 0 or index >= len(self._queue_items):
            return
        item = self._queue_items[index]
        if not is_reachable(item.path, self._working_dir):
            self._set_message(f"Missing: {item.path}")
            logger.warning("Not playing missing file: %s", item.path)
            return
        self.player.load(item.path)
        self.player.play()
        self._playing_index = index
        self._set_message(f"Playing: {display_title(item.path, self._working_dir)}")
        self._refresh_table()

    def _on_tick(self) -> None:
        if not self.player.consume_end_reached():
            return
        if self._playing_index is None:
            return
        next_index = self._playing_index + 1
        if next_index >= len(self._queue_items):
            self._playing_index = None
            self._set_message("End of queue")
            self._refresh_table()
            return
        self._play_index(next_index)

    # --- Actions ---
    def action_focus_add(self) -> None:
        self.query_one("#add_input", Input).focus()

    def action_focus_queue(self) -> None:
        if self._queue_table:
            self.set_focus(self._queue_table)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        path = _clean_input_path(event.value)
        event.input.value = ""
        if not path:
            return
        self.append_or_replace(path, "append")
        self._set_message(f"Added: {path}")
        self.action_focus_queue()

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        del event
        self.action_play_selected()

    def action_play_selected(self) -> None:
        index = self._selected_index()
        if index is None:
            self._set_message("Queue is empty")
            return
        self._play_index(index)

    def action_toggle_playback(self) -> None:
        state = self.player.get_state()
        if state == "playing":
            self.player.pause()
            self._set_message("Paused")
            return
        if self.player.current_media is None:
            self.action_play_selected()
            return
        self.player.play()
        self._set_message("Playing")

    def action_next_track(self) -> None:
        if not self._queue_items:
            self._set_message("Queue is empty")
            return
        start = -1 if self._playing_index is None else self._playing_index
        if start + 1 >= len(self._queue_items):
            self._set_message("End of queue")
            return
        self._play_index(start + 1)

    def action_remove_selected(self) -> None:
        index = self._selected_index()
        if index is None:
            return
        removed = self._queue_items.pop(index)
        if self._playing_index is not None:
            if index == self._playing_index:
                self.player.unload()
                self._playing_index = None
            elif index < self._playing_index:
                self._playing_index -= 1
        self._set_message(f"Removed: {removed.path}")
        self._queue_changed()

    def action_clear_queue(self) -> None:
        if not self._queue_items:
            return
        self._queue_items.clear()
        self._playing_index = None
        self.player.unload()
        self._set_message("Queue cleared")
        self._queue_changed()

    def action_save_now(self) -> None:
        if self.persistence.save_now():
            self._set_message(f"Queue saved to {self.persistence.target}")
        else:
            self._set_message("Queue not saved (see log)")

    def action_quit_app(self) -> None:
        logger.info("TUI exit requested")
        self.notify_shutdown()
        self.player.unload()
        self.exit()


def run_tui(
    player: Player,
    config: PersistenceConfig,
    paths: Iterable[str] = (),
) -> int:
    """Run the TUI and return an exit code."""
    logger.info("TUI start playlist_file=%s", config.playlist_file)
    set_console_level(logging.WARNING)
    app = QueueKeeperApp(player=player, config=config, paths=paths)
    app.run()
    app.notify_shutdown()
    logger.info("TUI exit")
    return 0
