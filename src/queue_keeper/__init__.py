"""Persist a media player's playback queue across sessions."""

__version__ = "0.1.0"
