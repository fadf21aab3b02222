"""
Bit layouts of every shipped song format version.

Each version is described as data: the header fields in order, then the
per-beat fields of each track in order. A song is the header followed by
one fixed-width record per beat, so the bit offset of any field can be
computed without decoding the fields before it.

Format summary (MSB first):

    Version  Header                                    Bits/beat
    v1       speed:2 loop:1 length:2                   10  (4 + 3 + 3)
    v2       speed:2 loop:1 length:2                   16  (4+3, 3+3, 3)
    v3       speed:2 loop:1 length:2 key:4             17  (4+3, 4+3, 3)
    v4       mode:2 speed:2 loop:1 length:2 key:4      29  (4+3+4, 4+3+4, 3+4)
    v5       mode:2 speed:2 loop:1 length:2 key:4      35  (4+3+4+3, 4+3+4+3, 3+4)

Piano fields are pitch, duration-1, velocity*15, octave-2; percussion has
pitch and (from v4) velocity only.
"""

from dataclasses import dataclass
from typing import Dict, Tuple

from musicbox.models.song import snap_beat_count
from musicbox.utils.tables import (
    BEAT_LENGTHS,
    DEFAULT_BEAT_COUNT,
    HIGH_PIANO_TRACK,
    LEGACY_BASS_NOTES,
    LEGACY_BEAT_LENGTHS,
    LEGACY_MELODY_NOTES,
    LOW_PIANO_TRACK,
    PERC_NOTES,
    PERCUSSION_TRACK,
    PIANO_NOTES,
)


@dataclass(frozen=True)
class FieldSpec:
    """A named fixed-width bit field."""

    name: str
    width: int


@dataclass(frozen=True)
class TrackLayout:
    """
    Per-beat fields of one track.

    Widths of 0 mean the field is not stored in this version.
    """

    track: int
    pitch_table: Tuple[str, ...]
    pitch_bits: int
    duration_bits: int = 0
    velocity_bits: int = 0
    octave_bits: int = 0

    @property
    def fields(self) -> Tuple[FieldSpec, ...]:
        """Stored fields in wire order."""
        specs = (
            FieldSpec("pitch", self.pitch_bits),
            FieldSpec("duration", self.duration_bits),
            FieldSpec("velocity", self.velocity_bits),
            FieldSpec("octave", self.octave_bits),
        )
        return tuple(spec for spec in specs if spec.width > 0)

    @property
    def width(self) -> int:
        """Bits used by this track per beat."""
        return sum(spec.width for spec in self.fields)


@dataclass(frozen=True)
class FormatLayout:
    """
    Complete bit layout of one format version.

    Attributes:
        version: Version number used in the "v<N>_" tag
        header: Header fields in wire order
        tracks: Per-beat track layouts in wire order
        beat_lengths: Song lengths addressed by the header length index
    """

    version: int
    header: Tuple[FieldSpec, ...]
    tracks: Tuple[TrackLayout, ...]
    beat_lengths: Tuple[int, ...] = BEAT_LENGTHS

    @property
    def header_bits(self) -> int:
        return sum(spec.width for spec in self.header)

    @property
    def beat_bits(self) -> int:
        return sum(track.width for track in self.tracks)

    def beat_count(self, length_index: int) -> int:
        """
        Map a header length index to a current song length.

        Older versions used a shorter preset list; their lengths are snapped
        up to the nearest current preset.
        """
        if 0 <= length_index < len(self.beat_lengths):
            return snap_beat_count(self.beat_lengths[length_index])
        return DEFAULT_BEAT_COUNT

    def total_bits(self, beat_count: int) -> int:
        """Number of meaningful bits in a song of beat_count beats."""
        return self.header_bits + self.beat_bits * beat_count


_SPEED = FieldSpec("speed", 2)
_LOOP = FieldSpec("loop", 1)
_LENGTH = FieldSpec("length", 2)
_KEY = FieldSpec("key", 4)
_MODE = FieldSpec("mode", 2)


LAYOUTS: Dict[int, FormatLayout] = {
    # v1: melody/bass/percussion, no durations
    1: FormatLayout(
        version=1,
        header=(_SPEED, _LOOP, _LENGTH),
        tracks=(
            TrackLayout(HIGH_PIANO_TRACK, LEGACY_MELODY_NOTES, 4),
            TrackLayout(LOW_PIANO_TRACK, LEGACY_BASS_NOTES, 3),
            TrackLayout(PERCUSSION_TRACK, PERC_NOTES, 3),
        ),
        beat_lengths=LEGACY_BEAT_LENGTHS,
    ),
    # v2: adds melody and bass durations
    2: FormatLayout(
        version=2,
        header=(_SPEED, _LOOP, _LENGTH),
        tracks=(
            TrackLayout(HIGH_PIANO_TRACK, LEGACY_MELODY_NOTES, 4, duration_bits=3),
            TrackLayout(LOW_PIANO_TRACK, LEGACY_BASS_NOTES, 3, duration_bits=3),
            TrackLayout(PERCUSSION_TRACK, PERC_NOTES, 3),
        ),
        beat_lengths=LEGACY_BEAT_LENGTHS,
    ),
    # v3: chromatic piano tracks, key signature, 16-64 beats
    3: FormatLayout(
        version=3,
        header=(_SPEED, _LOOP, _LENGTH, _KEY),
        tracks=(
            TrackLayout(HIGH_PIANO_TRACK, PIANO_NOTES, 4, duration_bits=3),
            TrackLayout(LOW_PIANO_TRACK, PIANO_NOTES, 4, duration_bits=3),
            TrackLayout(PERCUSSION_TRACK, PERC_NOTES, 3),
        ),
    ),
    # v4: composer mode and per-note velocity
    4: FormatLayout(
        version=4,
        header=(_MODE, _SPEED, _LOOP, _LENGTH, _KEY),
        tracks=(
            TrackLayout(HIGH_PIANO_TRACK, PIANO_NOTES, 4, duration_bits=3, velocity_bits=4),
            TrackLayout(LOW_PIANO_TRACK, PIANO_NOTES, 4, duration_bits=3, velocity_bits=4),
            TrackLayout(PERCUSSION_TRACK, PERC_NOTES, 3, velocity_bits=4),
        ),
    ),
    # v5: per-note octave on both piano tracks
    5: FormatLayout(
        version=5,
        header=(_MODE, _SPEED, _LOOP, _LENGTH, _KEY),
        tracks=(
            TrackLayout(
                HIGH_PIANO_TRACK, PIANO_NOTES, 4, duration_bits=3, velocity_bits=4, octave_bits=3
            ),
            TrackLayout(
                LOW_PIANO_TRACK, PIANO_NOTES, 4, duration_bits=3, velocity_bits=4, octave_bits=3
            ),
            TrackLayout(PERCUSSION_TRACK, PERC_NOTES, 3, velocity_bits=4),
        ),
    ),
}

LATEST_VERSION = max(LAYOUTS)
