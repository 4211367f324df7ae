"""Read the persisted queue file back into the live queue."""

from __future__ import annotations

import logging
from pathlib import Path

from queue_keeper.host import LoadMode, QueueHost
from queue_keeper.paths import comparison_key
from queue_keeper.reachability import is_reachable
from queue_keeper.session import SessionState

logger = logging.getLogger(__name__)

SUPPRESS_RELEASE_SECONDS = 1.0


def read_queue_file(path: Path) -> list[str]:
    """Return the non-blank lines of a persisted queue file."""
    with open(path, "r", encoding="utf-8") as handle:
        lines = [line.rstrip("\r\n") for line in handle]
    return [line for line in lines if line.strip()]


def _in_live_queue(host: QueueHost, entry: str, working_dir: str | None) -> bool:
    key = comparison_key(entry, working_dir)
    return any(
        comparison_key(item.path, working_dir) == key for item in host.get_queue()
    )


def load_queue(
    host: QueueHost,
    target: Path,
    state: SessionState,
    mode: LoadMode = "append",
) -> int:
    """Insert persisted entries into the host queue and return how many."""
    logger.info("Loading queue from %s", target)
    if not is_reachable(str(target)):
        logger.info("Queue file does not exist, skipping load")
        return 0
    try:
        entries = read_queue_file(target)
    except (OSError, UnicodeDecodeError) as exc:
        logger.error("Failed to read queue file %s: %s", target, exc)
        return 0

    def release() -> None:
        state.save_suppressed = False
        logger.debug("Save suppression released")

    state.save_suppressed = True
    working_dir = host.get_working_directory()
    next_mode: LoadMode = mode
    count = 0
    try:
        for entry in entries:
            if _in_live_queue(host, entry, working_dir):
                logger.debug("Skipping duplicate queue entry: %s", entry)
                continue
            # Unreachable local files are never handed to the player.
            if not is_reachable(entry, working_dir):
                logger.warning("File does not exist: %s", entry)
                continue
            host.append_or_replace(entry, next_mode)
            next_mode = "append"
            count += 1
    finally:
        host.schedule_after_delay(SUPPRESS_RELEASE_SECONDS, release)
    logger.info("Loaded %d entries from saved queue", count)
    return count
