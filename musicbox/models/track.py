"""
Track data model for songs.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from musicbox.models.note import NoteEvent
from musicbox.utils.tables import (
    DEFAULT_OCTAVES,
    DEFAULT_VELOCITY,
    HIGH_PIANO_TRACK,
    PERC_NOTES,
    PERCUSSION_TRACK,
    PIANO_NOTES,
    TRACK_NUMBERS,
)


@dataclass
class Track:
    """
    One of the three song tracks.

    Songs always have 3 tracks:
    - Track 1: High piano (octave 5 by default)
    - Track 2: Low piano (octave 3 by default)
    - Track 3: Percussion

    Notes are stored sparsely by attack beat, so a track never holds two
    notes starting on the same beat. A note with duration > 1 sustains over
    the following beats without occupying them.

    Attributes:
        number: Track number (1-3)
        notes: Notes keyed by attack beat
    """

    number: int = HIGH_PIANO_TRACK
    notes: Dict[int, NoteEvent] = field(default_factory=dict)

    @property
    def is_percussion(self) -> bool:
        """Check if this is the percussion track."""
        return self.number == PERCUSSION_TRACK

    @property
    def is_piano(self) -> bool:
        """Check if this is one of the piano tracks."""
        return not self.is_percussion

    @property
    def symbols(self) -> Tuple[str, ...]:
        """Symbol table the track's pitches come from."""
        return PERC_NOTES if self.is_percussion else PIANO_NOTES

    @property
    def default_octave(self) -> Optional[int]:
        """Octave a piano track plays in when a note carries none."""
        return DEFAULT_OCTAVES.get(self.number)

    @property
    def has_data(self) -> bool:
        """Check if track has any notes."""
        return bool(self.notes)

    def add_note(
        self,
        beat: int,
        pitch: str,
        duration: int = 1,
        velocity: float = DEFAULT_VELOCITY,
        octave: Optional[int] = None,
    ) -> NoteEvent:
        """
        Create a note and place it at beat, replacing any note starting there.

        Piano notes without an octave get the track's default octave.
        """
        if octave is None and self.is_piano:
            octave = self.default_octave
        note = NoteEvent(beat=beat, pitch=pitch, duration=duration, velocity=velocity, octave=octave)
        self.set_note(note)
        return note

    def set_note(self, note: NoteEvent) -> None:
        """Place a note at its attack beat."""
        self.notes[note.beat] = note

    def note_at(self, beat: int) -> Optional[NoteEvent]:
        """Get the note attacking at beat, if any."""
        return self.notes.get(beat)

    def note_covering(self, beat: int) -> Optional[NoteEvent]:
        """
        Get the note sounding at beat.

        Returns the note attacking at beat, or an earlier note still
        sustaining over it.
        """
        note = self.notes.get(beat)
        if note is not None:
            return note
        for candidate in self.notes.values():
            if candidate.covers(beat):
                return candidate
        return None

    def is_sustained(self, beat: int) -> bool:
        """Check if beat is covered by a note that started earlier."""
        note = self.note_covering(beat)
        return note is not None and note.beat != beat

    def clear_note(self, beat: int) -> Optional[NoteEvent]:
        """Remove and return the note attacking at beat."""
        return self.notes.pop(beat, None)

    def clear(self) -> None:
        """Remove all notes."""
        self.notes.clear()

    def iter_notes(self) -> Iterator[NoteEvent]:
        """Iterate notes in beat order."""
        for beat in sorted(self.notes):
            yield self.notes[beat]

    def find_overlaps(self) -> List[Tuple[NoteEvent, NoteEvent]]:
        """
        Find pairs of notes whose coverage overlaps.

        Returns:
            List of (earlier, later) note pairs
        """
        overlaps = []
        ordered = list(self.iter_notes())
        for i, note in enumerate(ordered):
            for later in ordered[i + 1 :]:
                if later.beat >= note.end:
                    break
                overlaps.append((note, later))
        return overlaps

    def __repr__(self) -> str:
        kind = "percussion" if self.is_percussion else "piano"
        return f"Track(number={self.number}, {kind}, notes={len(self.notes)})"


def create_default_tracks() -> Dict[int, Track]:
    """
    Create the three empty song tracks.

    Returns:
        Tracks keyed by number 1-3
    """
    return {number: Track(number=number) for number in TRACK_NUMBERS}
