"""
Note event data model.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

from musicbox.utils.tables import DEFAULT_VELOCITY

NoteRow = List[Union[int, float, str, None]]


@dataclass
class NoteEvent:
    """
    A single note attacking at a beat.

    Attributes:
        beat: Attack beat (0-based)
        pitch: Pitch class ("C", "F#", ...) or percussion sound ("kick", ...)
        duration: Length in beats (1-8), always 1 for percussion
        velocity: Loudness 0.0-1.0
        octave: Octave 2-6 for piano notes, None for percussion
    """

    beat: int
    pitch: str
    duration: int = 1
    velocity: float = DEFAULT_VELOCITY
    octave: Optional[int] = None

    @property
    def end(self) -> int:
        """First beat after the note stops sounding."""
        return self.beat + self.duration

    def covers(self, beat: int) -> bool:
        """Check if the note sounds at beat (attack or sustain)."""
        return self.beat <= beat < self.end

    def overlaps(self, other: "NoteEvent") -> bool:
        """Check if two notes sound at the same time."""
        return self.beat < other.end and other.beat < self.end

    @property
    def label(self) -> str:
        """Display name, with octave for piano notes: 'C#5', 'kick'."""
        if self.octave is None:
            return self.pitch
        return f"{self.pitch}{self.octave}"

    def to_row(self) -> NoteRow:
        """Convert to a compact [beat, pitch, duration, velocity, octave] row."""
        return [self.beat, self.pitch, self.duration, self.velocity, self.octave]

    @classmethod
    def from_row(cls, row: Sequence) -> "NoteEvent":
        """
        Create a note from a compact row.

        Trailing fields are optional: [beat, pitch] is a one-beat note
        at the default velocity.

        Raises:
            ValueError: If the row has fewer than two fields
        """
        if len(row) < 2:
            raise ValueError(f"Note row needs at least beat and pitch, got {list(row)!r}")

        beat, pitch = int(row[0]), str(row[1])
        duration = int(row[2]) if len(row) > 2 and row[2] is not None else 1
        velocity = float(row[3]) if len(row) > 3 and row[3] is not None else DEFAULT_VELOCITY
        octave = int(row[4]) if len(row) > 4 and row[4] is not None else None
        return cls(beat=beat, pitch=pitch, duration=duration, velocity=velocity, octave=octave)
