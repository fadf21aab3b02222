"""Tests for song validation."""

import pytest
import sys
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from musicbox.models.note import NoteEvent
from musicbox.models.song import SongState
from musicbox.utils.tables import get_allowed_pitches, lookup, index_of, strip_octave
from musicbox.utils.validation import (
    ValidationError,
    validate_beat_count,
    validate_bpm,
    validate_duration,
    validate_key_name,
    validate_octave,
    validate_speed_index,
    validate_velocity,
)


class TestValidators:
    """Test cases for single-value validators."""

    @pytest.mark.parametrize(
        "check, good, bad",
        [
            (validate_speed_index, 3, 4),
            (validate_bpm, 200, 201),
            (validate_beat_count, 48, 40),
            (validate_key_name, "Bb Major", "H Major"),
            (validate_duration, 8, 0),
            (validate_velocity, 1.0, 1.1),
            (validate_octave, 2, 7),
        ],
    )
    def test_ranges(self, check, good, bad):
        """Test the last good value passes and the first bad value raises."""
        check(good)
        with pytest.raises(ValidationError):
            check(bad)


class TestSongValidate:
    """Test cases for SongState.validate()."""

    def test_valid_song(self, sample_song):
        """Test a well-formed song has no errors."""
        assert sample_song.validate() == []

    def test_header_errors(self):
        """Test header range problems."""
        song = SongState(speed_index=7, beat_count=20, key_name="Z", bpm=10)
        assert len(song.validate()) == 4

    def test_overlap(self):
        """Test overlapping notes are reported."""
        song = SongState()
        song.high_piano.add_note(0, "C", duration=3)
        song.high_piano.add_note(1, "D")
        errors = song.validate()
        assert len(errors) == 1
        assert "overlaps" in errors[0]
        assert errors[0].startswith("Track 1")

    def test_percussion_duration(self):
        """Test percussion notes must last one beat."""
        song = SongState()
        song.percussion.set_note(NoteEvent(beat=0, pitch="tom", duration=2))
        errors = song.validate()
        assert any("percussion duration" in e for e in errors)

    def test_unknown_symbols(self):
        """Test pitches and sounds outside the tables."""
        song = SongState()
        song.high_piano.add_note(0, "H")
        song.percussion.add_note(0, "gong")
        errors = song.validate()
        assert any("unknown pitch 'H'" in e for e in errors)
        assert any("unknown sound 'gong'" in e for e in errors)

    def test_note_ranges(self):
        """Test note field ranges."""
        song = SongState(beat_count=16)
        song.high_piano.add_note(16, "C")
        song.low_piano.add_note(0, "C", velocity=2.0, octave=9)
        errors = song.validate()
        assert any("beat outside song length" in e for e in errors)
        assert any("Velocity" in e for e in errors)
        assert any("Octave" in e for e in errors)

    def test_missing_octave(self):
        """Test piano notes need an octave."""
        song = SongState()
        song.high_piano.set_note(NoteEvent(beat=0, pitch="C"))
        assert any("no octave" in e for e in song.validate())

    def test_cowbell_is_valid(self):
        """Test cowbell is a known sound even though it cannot be encoded."""
        song = SongState()
        song.percussion.add_note(0, "cowbell")
        assert song.validate() == []


class TestTables:
    """Test cases for table helpers."""

    def test_lookup(self):
        """Test empty and out-of-range indices."""
        table = ("", "a", "b")
        assert lookup(table, 0) is None
        assert lookup(table, 2) == "b"
        assert lookup(table, 3) is None
        assert lookup(table, -1) is None

    def test_index_of(self):
        """Test unknown symbols map to the empty index."""
        table = ("", "a", "b")
        assert index_of(table, "b") == 2
        assert index_of(table, "z") == 0
        assert index_of(table, None) == 0

    def test_strip_octave(self):
        """Test octave digits are removed."""
        assert strip_octave("C#4") == "C#"
        assert strip_octave("C5") == "C"
        assert strip_octave("A") == "A"

    def test_allowed_pitches(self):
        """Test key signature pitch sets."""
        assert get_allowed_pitches("C Major") == ("C", "D", "E", "F", "G", "A", "B")
        assert len(get_allowed_pitches("Freeform")) == 12
        assert "F#" in get_allowed_pitches("G Major")
