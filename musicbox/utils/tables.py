"""
Music Box Composer lookup tables.

The position of an entry in each table is its index on the wire, so the
order must never change. Index 0 of every symbol table is the empty symbol.
"""

import re
from types import MappingProxyType
from typing import Optional, Tuple

# Chromatic pitch classes used by both piano tracks (4 bits on the wire)
PIANO_NOTES: Tuple[str, ...] = (
    "",
    "C",
    "C#",
    "D",
    "D#",
    "E",
    "F",
    "F#",
    "G",
    "G#",
    "A",
    "A#",
    "B",
)

# Percussion sounds (3 bits on the wire, so "cowbell" at index 8 does not fit)
PERC_NOTES: Tuple[str, ...] = (
    "",
    "kick",
    "snare",
    "hihat",
    "clap",
    "tom",
    "cymbal",
    "shaker",
    "cowbell",
)

# Diatonic tables used by the first two formats, before the piano keyboard.
# Melody notes are played in octave 5 and bass notes in octave 3 regardless
# of the digit in the name.
LEGACY_MELODY_NOTES: Tuple[str, ...] = ("", "C4", "D4", "E4", "F4", "G4", "A4", "B4", "C5")
LEGACY_BASS_NOTES: Tuple[str, ...] = ("", "C3", "D3", "E3", "F3", "G3", "A3")

# Key signatures: values are indices into PIANO_NOTES allowed by the key
KEY_SIGNATURES = MappingProxyType(
    {
        "C Major": (1, 3, 5, 6, 8, 10, 12),
        "G Major": (1, 3, 5, 7, 8, 10, 12),
        "D Major": (1, 2, 3, 5, 7, 9, 10, 12),
        "A Major": (1, 2, 4, 6, 7, 9, 11),
        "E Major": (1, 2, 4, 6, 8, 9, 11),
        "B Major": (1, 2, 4, 5, 7, 9, 11),
        "F Major": (1, 3, 5, 6, 8, 10, 11),
        "Bb Major": (1, 3, 4, 6, 8, 10, 11),
        "Eb Major": (1, 3, 4, 6, 8, 9, 11),
        "A Minor": (1, 3, 4, 6, 8, 9, 11),
        "E Minor": (1, 3, 5, 6, 8, 10, 11),
        "B Minor": (1, 2, 4, 6, 7, 9, 11),
        "D Minor": (1, 3, 4, 6, 8, 9, 10),
        "G Minor": (1, 3, 4, 5, 7, 9, 10),
        "C Minor": (1, 3, 4, 6, 7, 9, 10),
        "Freeform": (1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12),
    }
)

KEY_NAMES: Tuple[str, ...] = tuple(KEY_SIGNATURES)
DEFAULT_KEY = "C Major"

# Mode names by wire index (2 bits, index 3 unused)
MODE_NAMES: Tuple[str, ...] = ("kid", "tween", "studio")

# Playback speeds: (milliseconds per beat, label)
SPEEDS: Tuple[Tuple[int, str], ...] = (
    (350, "slow"),
    (200, "walk"),
    (130, "run"),
    (80, "fast"),
)
DEFAULT_SPEED_INDEX = 1

# Song lengths in beats
BEAT_LENGTHS: Tuple[int, ...] = (16, 32, 48, 64)
LEGACY_BEAT_LENGTHS: Tuple[int, ...] = (8, 16, 24, 32)
DEFAULT_BEAT_COUNT = 16

# Tempo range for studio mode
MIN_BPM = 40
MAX_BPM = 200
DEFAULT_BPM = 120

# Note field ranges
MIN_DURATION = 1
MAX_DURATION = 8
MIN_OCTAVE = 2
MAX_OCTAVE = 6
VELOCITY_LEVELS = 15  # 4 bits: 0-15
DEFAULT_VELOCITY = 0.8

# Track numbers and the octave each piano track plays in by default
HIGH_PIANO_TRACK = 1
LOW_PIANO_TRACK = 2
PERCUSSION_TRACK = 3
TRACK_NUMBERS: Tuple[int, ...] = (HIGH_PIANO_TRACK, LOW_PIANO_TRACK, PERCUSSION_TRACK)
DEFAULT_OCTAVES = MappingProxyType({HIGH_PIANO_TRACK: 5, LOW_PIANO_TRACK: 3})

# URL query key holding the encoded song
QUERY_KEY = "c"


def lookup(table: Tuple[str, ...], index: int) -> Optional[str]:
    """
    Return the non-empty symbol at index, or None.

    Index 0 and anything outside the table both mean "no note".
    """
    if 0 < index < len(table):
        return table[index]
    return None


def index_of(table: Tuple[str, ...], symbol: Optional[str]) -> int:
    """Return the wire index of symbol in table, 0 when unknown."""
    if not symbol:
        return 0
    try:
        return table.index(symbol)
    except ValueError:
        return 0


def strip_octave(note_name: str) -> str:
    """Remove a trailing octave number: 'C#4' -> 'C#'."""
    return re.sub(r"\d+$", "", note_name)


def get_key_name(index: int) -> str:
    """Get key name from wire index, falling back to C Major."""
    if 0 <= index < len(KEY_NAMES):
        return KEY_NAMES[index]
    return DEFAULT_KEY


def get_allowed_pitches(key_name: str) -> Tuple[str, ...]:
    """Get the pitch classes playable in a key signature."""
    indices = KEY_SIGNATURES.get(key_name, KEY_SIGNATURES["Freeform"])
    return tuple(PIANO_NOTES[i] for i in indices)
