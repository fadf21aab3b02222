"""Data models for song representation."""

from musicbox.models.note import NoteEvent
from musicbox.models.track import Track
from musicbox.models.song import Mode, SongState

__all__ = [
    "NoteEvent",
    "Track",
    "Mode",
    "SongState",
]
