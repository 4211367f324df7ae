"""Write the live queue to the persisted queue file."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, Optional

from queue_keeper.host import QueueHost, QueueItem, SaveTrigger
from queue_keeper.paths import resolve_absolute
from queue_keeper.reachability import any_reachable
from queue_keeper.session import SessionState

logger = logging.getLogger(__name__)


def format_queue_lines(
    items: Iterable[QueueItem], working_dir: Optional[str] = None
) -> list[str]:
    """Render queue entries as they are stored: local paths made absolute."""
    return [resolve_absolute(item.path, working_dir) for item in items]


def save_queue(
    host: QueueHost,
    target: Path,
    state: SessionState,
    *,
    trigger: SaveTrigger = "change",
) -> bool:
    """Persist the host queue to ``target``; return True if it was written."""
    if state.save_suppressed:
        logger.debug("Save suppressed during load (trigger=%s)", trigger)
        return False
    items = host.get_queue()
    if not items:
        logger.info("Queue is empty, nothing to save")
        return False
    if trigger == "shutdown" and not state.load_completed:
        logger.info("Skipping save on shutdown because the queue was never loaded")
        return False
    working_dir = host.get_working_directory()
    if not any_reachable((item.path for item in items), working_dir):
        logger.info("Queue contains only missing files, skipping save")
        return False

    lines = format_queue_lines(items, working_dir)
    logger.info("Saving queue to %s", target)
    temp_path = target.with_name(target.name + ".tmp")
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(temp_path, "w", encoding="utf-8", newline="\n") as handle:
            for line in lines:
                handle.write(line + "\n")
        os.replace(temp_path, target)
    except OSError as exc:
        logger.error("Failed to write queue file %s: %s", target, exc)
        return False
    logger.info("Queue saved with %d entries", len(lines))
    return True
