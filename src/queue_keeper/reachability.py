"""Existence checks for queue entries."""

from __future__ import annotations

import os
from typing import Iterable, Optional

from queue_keeper.paths import is_remote, resolve_absolute


def is_reachable(path: str, working_dir: Optional[str] = None) -> bool:
    """Return True when ``path`` should be treated as playable.

    Remote URIs are trusted without probing. Local paths must stat.
    """
    if is_remote(path):
        return True
    try:
        os.stat(resolve_absolute(path, working_dir))
    except (OSError, ValueError):
        return False
    return True


def any_reachable(paths: Iterable[str], working_dir: Optional[str] = None) -> bool:
    return any(is_reachable(path, working_dir) for path in paths)
