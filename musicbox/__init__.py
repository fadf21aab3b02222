"""
musicbox - Compact share codec for Music Box Composer songs.

This library provides tools to:
- Encode a song (tempo, loop, length, key, mode and three tracks of notes)
  into a short URL-safe string
- Decode strings written by every format version ever shipped
- Inspect encoded strings bit by bit

Example usage:
    from musicbox import SongState, encode_song, decode_song

    song = SongState.create_empty(beat_count=16)
    song.high_piano.add_note(0, "C", velocity=0.8)

    encoded = encode_song(song)       # "v5_..."
    restored = decode_song(encoded)   # SongState, or None if undecodable
"""

__version__ = "0.5.0"
__author__ = "Music Box Composer Contributors"

from musicbox.formats.reader import SongReader, decode_song
from musicbox.formats.writer import SongWriter, encode_song
from musicbox.formats.framing import DecodeError, UnknownVersionError
from musicbox.models.note import NoteEvent
from musicbox.models.song import Mode, SongState
from musicbox.models.track import Track

__all__ = [
    "SongReader",
    "SongWriter",
    "decode_song",
    "encode_song",
    "DecodeError",
    "UnknownVersionError",
    "NoteEvent",
    "Mode",
    "SongState",
    "Track",
]
