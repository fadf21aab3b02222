"""Test configuration and fixtures."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from musicbox.formats.framing import join_version, to_base64url
from musicbox.formats.layouts import LAYOUTS
from musicbox.models.song import Mode, SongState
from musicbox.utils.bits import bits_to_bytes, push_bits


def build_encoded(version, header, beats=(), tagged=True):
    """
    Build an encoded string field by field for any format version.

    Args:
        version: Format version whose layout to follow
        header: Raw header values by field name (missing fields are 0)
        beats: One entry per beat, each a sequence of raw track field
            dicts in track order (missing fields are 0)
        tagged: Prefix the "v<N>_" tag
    """
    layout = LAYOUTS[version]
    bits = []
    for spec in layout.header:
        push_bits(bits, header.get(spec.name, 0), spec.width)
    for record in beats:
        for track_layout, values in zip(layout.tracks, record):
            for spec in track_layout.fields:
                push_bits(bits, values.get(spec.name, 0), spec.width)

    payload = to_base64url(bits_to_bytes(bits))
    return join_version(version, payload) if tagged else payload


@pytest.fixture
def encode_fields():
    """Return the field-by-field string builder."""
    return build_encoded


@pytest.fixture
def empty_song():
    """Return an empty default song."""
    return SongState.create_empty()


@pytest.fixture
def sample_song():
    """Return a studio song using every per-note field."""
    song = SongState(mode=Mode.STUDIO, speed_index=2, loop=True, beat_count=32, key_name="G Major")
    song.high_piano.add_note(0, "G", duration=2, velocity=1.0, octave=6)
    song.high_piano.add_note(4, "F#", duration=1, velocity=0.4, octave=4)
    song.high_piano.add_note(31, "B", duration=1)
    song.low_piano.add_note(0, "G", duration=8, velocity=0.6, octave=2)
    song.low_piano.add_note(8, "D", duration=4)
    song.percussion.add_note(0, "kick", velocity=1.0)
    song.percussion.add_note(2, "snare", velocity=0.2)
    song.percussion.add_note(3, "shaker", velocity=0.0)
    return song


@pytest.fixture
def song_dict(sample_song):
    """Return the sample song as a JSON-compatible dict."""
    return sample_song.to_dict()
