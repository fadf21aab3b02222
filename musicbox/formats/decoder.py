"""
Per-version song decoders.

Every shipped format keeps its own decoder forever so old share URLs keep
working. Each decoder returns a fully populated SongState; fields the
format never stored take the defaults declared next to the decoder.

Adding a format means adding a layout, a defaults record and an entry in
DECODERS. Existing decoders are never edited.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Optional, Sequence

from musicbox.formats.layouts import LAYOUTS, FormatLayout, TrackLayout
from musicbox.models.note import NoteEvent
from musicbox.models.song import Mode, SongState
from musicbox.utils.bits import BitReader
from musicbox.utils.tables import (
    DEFAULT_KEY,
    DEFAULT_OCTAVES,
    DEFAULT_VELOCITY,
    MAX_OCTAVE,
    MIN_OCTAVE,
    PERCUSSION_TRACK,
    VELOCITY_LEVELS,
    get_key_name,
    lookup,
    strip_octave,
)


@dataclass(frozen=True)
class DecodeDefaults:
    """
    Values used for fields a format version does not store.

    Fields the version does store ignore their default, except octaves,
    which also replace stored octave values outside 2-6.
    """

    mode: Mode
    key_name: str
    duration: int
    velocity: float
    octaves: Mapping[int, int]


# v1: speed, loop, length and pitches only
V1_DEFAULTS = DecodeDefaults(
    mode=Mode.KID,
    key_name=DEFAULT_KEY,
    duration=1,
    velocity=DEFAULT_VELOCITY,
    octaves=DEFAULT_OCTAVES,
)

# v2: durations stored
V2_DEFAULTS = DecodeDefaults(
    mode=Mode.KID,
    key_name=DEFAULT_KEY,
    duration=1,
    velocity=DEFAULT_VELOCITY,
    octaves=DEFAULT_OCTAVES,
)

# v3: key signature stored
V3_DEFAULTS = DecodeDefaults(
    mode=Mode.KID,
    key_name=DEFAULT_KEY,
    duration=1,
    velocity=DEFAULT_VELOCITY,
    octaves=DEFAULT_OCTAVES,
)

# v4: mode and velocity stored
V4_DEFAULTS = DecodeDefaults(
    mode=Mode.KID,
    key_name=DEFAULT_KEY,
    duration=1,
    velocity=DEFAULT_VELOCITY,
    octaves=DEFAULT_OCTAVES,
)

# v5: octave stored
V5_DEFAULTS = DecodeDefaults(
    mode=Mode.KID,
    key_name=DEFAULT_KEY,
    duration=1,
    velocity=DEFAULT_VELOCITY,
    octaves=DEFAULT_OCTAVES,
)


def read_header(reader: BitReader, layout: FormatLayout) -> Dict[str, int]:
    """Read the raw header fields of a layout."""
    return {spec.name: reader.read(spec.width) for spec in layout.header}


def read_track_fields(reader: BitReader, track_layout: TrackLayout) -> Dict[str, int]:
    """Read the raw per-beat fields of one track."""
    return {spec.name: reader.read(spec.width) for spec in track_layout.fields}


def build_note(
    beat: int,
    raw: Dict[str, int],
    track_layout: TrackLayout,
    defaults: DecodeDefaults,
) -> Optional[NoteEvent]:
    """
    Turn the raw fields of one track at one beat into a note.

    Returns:
        NoteEvent, or None for the empty symbol and out-of-range pitches
    """
    symbol = lookup(track_layout.pitch_table, raw["pitch"])
    if symbol is None:
        return None

    if track_layout.track == PERCUSSION_TRACK:
        duration = 1
        octave = None
    else:
        duration = raw["duration"] + 1 if "duration" in raw else defaults.duration
        octave = defaults.octaves[track_layout.track]
        if "octave" in raw and raw["octave"] + MIN_OCTAVE <= MAX_OCTAVE:
            octave = raw["octave"] + MIN_OCTAVE

    if "velocity" in raw:
        velocity = raw["velocity"] / VELOCITY_LEVELS
    else:
        velocity = defaults.velocity

    return NoteEvent(
        beat=beat,
        pitch=strip_octave(symbol),
        duration=duration,
        velocity=velocity,
        octave=octave,
    )


def decode_layout(
    bits: Sequence[int], layout: FormatLayout, defaults: DecodeDefaults
) -> SongState:
    """
    Decode a bitstream with the given layout.

    Missing trailing bits read as 0, so truncated input yields empty beats.
    """
    reader = BitReader(bits)
    header = read_header(reader, layout)

    song = SongState(
        mode=Mode.from_index(header["mode"]) if "mode" in header else defaults.mode,
        speed_index=header["speed"],
        loop=bool(header["loop"]),
        beat_count=layout.beat_count(header["length"]),
        key_name=get_key_name(header["key"]) if "key" in header else defaults.key_name,
    )

    for beat in range(song.beat_count):
        for track_layout in layout.tracks:
            raw = read_track_fields(reader, track_layout)
            note = build_note(beat, raw, track_layout, defaults)
            if note is not None:
                song.tracks[track_layout.track].set_note(note)

    return song


def decode_v1(bits: Sequence[int]) -> SongState:
    """
    Decode v1: 5-bit header, 10 bits per beat.

    Pitches index the diatonic melody/bass tables; every note lasts one
    beat at the default velocity, melody in octave 5 and bass in octave 3.
    Lengths 8/16/24/32 become 16/16/32/32.
    """
    return decode_layout(bits, LAYOUTS[1], V1_DEFAULTS)


def decode_v2(bits: Sequence[int]) -> SongState:
    """Decode v2: as v1 with 3-bit durations on melody and bass (16 bits per beat)."""
    return decode_layout(bits, LAYOUTS[2], V2_DEFAULTS)


def decode_v3(bits: Sequence[int]) -> SongState:
    """Decode v3: chromatic piano tracks and key signature (17 bits per beat)."""
    return decode_layout(bits, LAYOUTS[3], V3_DEFAULTS)


def decode_v4(bits: Sequence[int]) -> SongState:
    """Decode v4: composer mode and 4-bit velocities (29 bits per beat)."""
    return decode_layout(bits, LAYOUTS[4], V4_DEFAULTS)


def decode_v5(bits: Sequence[int]) -> SongState:
    """Decode v5: per-note octaves on both piano tracks (35 bits per beat)."""
    return decode_layout(bits, LAYOUTS[5], V5_DEFAULTS)


DECODERS: Dict[int, Callable[[Sequence[int]], SongState]] = {
    1: decode_v1,
    2: decode_v2,
    3: decode_v3,
    4: decode_v4,
    5: decode_v5,
}
