"""Per-run persistence state."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class SessionState:
    """Flags shared by the save and load handlers for one player run.

    ``load_completed`` flips once the startup load ran (or was skipped).
    ``save_suppressed`` is only set while a load is inserting entries.
    """

    load_completed: bool = False
    save_suppressed: bool = False
