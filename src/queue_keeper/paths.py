"""Path classification and comparison helpers for queue entries."""

from __future__ import annotations

from enum import Enum
import os
import re
from typing import Optional

_REMOTE_RE = re.compile(r"^[A-Za-z]+://")
_DRIVE_RE = re.compile(r"^[A-Za-z]:\\")


class PathKind(Enum):
    """How a queue entry's path string should be treated."""

    REMOTE = "remote"
    ABSOLUTE = "absolute"
    RELATIVE = "relative"


def classify(path: str) -> PathKind:
    """Classify a path string without touching the filesystem."""
    if _REMOTE_RE.match(path):
        return PathKind.REMOTE
    if path.startswith("/") or _DRIVE_RE.match(path):
        return PathKind.ABSOLUTE
    return PathKind.RELATIVE


def is_remote(path: str) -> bool:
    return classify(path) is PathKind.REMOTE


def resolve_absolute(path: str, working_dir: Optional[str] = None) -> str:
    """Return ``path`` joined onto ``working_dir`` when it is relative.

    Remote URIs and absolute paths are returned unchanged. When the host
    cannot report a working directory the process cwd is used instead.
    """
    if classify(path) is not PathKind.RELATIVE:
        return path
    base = working_dir or os.getcwd()
    return os.path.join(base, path)


def normalize_for_comparison(path: str) -> str:
    """Fold separators, trailing slashes and case for equality checks only."""
    folded = path.replace("\\", "/").rstrip("/")
    return folded.lower()


def comparison_key(path: str, working_dir: Optional[str] = None) -> str:
    return normalize_for_comparison(resolve_absolute(path, working_dir))
