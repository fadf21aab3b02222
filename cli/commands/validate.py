"""
Validate command - check a song before sharing it.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich import box

from musicbox.analysis.song_analyzer import SongAnalysis, analyze_encoded
from musicbox.formats.framing import DecodeError
from musicbox.formats.layouts import LATEST_VERSION
from musicbox.formats.reader import SongReader
from musicbox.formats.writer import SongWriter
from musicbox.models.song import Mode, SongState
from musicbox.share import extract_encoded
from musicbox.utils.tables import PERC_NOTES, get_allowed_pitches

console = Console()

# Percussion sounds that do not fit the 3-bit sound field
UNENCODABLE_SOUNDS = PERC_NOTES[8:]


@dataclass
class ValidationIssue:
    """A single validation issue."""

    severity: str  # "error", "warning", "info"
    area: str
    message: str


@dataclass
class ValidationResult:
    """Result of validating a song."""

    source: str
    valid: bool
    errors: List[ValidationIssue] = field(default_factory=list)
    warnings: List[ValidationIssue] = field(default_factory=list)
    info: List[ValidationIssue] = field(default_factory=list)


class SongValidator:
    """
    Validate a song and how it survives encoding.

    Errors are range and overlap problems reported by SongState.validate().
    Warnings are things the share string will silently lose.
    """

    def __init__(self, song: SongState, source: str, analysis: Optional[SongAnalysis] = None):
        self.song = song
        self.source = source
        self.analysis = analysis
        self.issues: List[ValidationIssue] = []

    def validate(self) -> ValidationResult:
        """Perform full validation and return result."""
        self.issues = []

        self._validate_song()
        self._validate_key()
        self._validate_sounds()
        self._validate_tempo()
        self._validate_encoding()
        if self.analysis is not None:
            self._validate_source()

        errors = [i for i in self.issues if i.severity == "error"]
        warnings = [i for i in self.issues if i.severity == "warning"]
        info = [i for i in self.issues if i.severity == "info"]

        return ValidationResult(
            source=self.source,
            valid=len(errors) == 0,
            errors=errors,
            warnings=warnings,
            info=info,
        )

    def _add_issue(self, severity: str, area: str, message: str) -> None:
        """Add a validation issue."""
        self.issues.append(ValidationIssue(severity=severity, area=area, message=message))

    def _validate_song(self) -> None:
        """Range and overlap checks."""
        problems = self.song.validate()
        for problem in problems:
            area, _, message = problem.partition(": ")
            if not message or not area.startswith("Track"):
                area, message = "Song", problem
            self._add_issue("error", area, message)

        if not problems:
            self._add_issue("info", "Song", f"{self.song.note_count} notes in range")

    def _validate_key(self) -> None:
        """Piano notes outside the key signature."""
        allowed = get_allowed_pitches(self.song.key_name)
        for track in (self.song.high_piano, self.song.low_piano):
            for note in track.iter_notes():
                if note.pitch not in allowed:
                    self._add_issue(
                        "warning",
                        f"Track {track.number} beat {note.beat}",
                        f"{note.pitch} is not in {self.song.key_name}",
                    )

    def _validate_sounds(self) -> None:
        """Percussion sounds the share string cannot hold."""
        for note in self.song.percussion.iter_notes():
            if note.pitch in UNENCODABLE_SOUNDS:
                self._add_issue(
                    "warning",
                    f"Track {self.song.percussion.number} beat {note.beat}",
                    f"{note.pitch} cannot be stored and is dropped when shared",
                )

    def _validate_tempo(self) -> None:
        """Studio tempo is not part of the share string."""
        if self.song.mode is Mode.STUDIO and self.song.use_bpm:
            self._add_issue(
                "warning",
                "Tempo",
                f"{self.song.bpm} BPM is not stored; shared song plays at the speed setting",
            )

    def _validate_encoding(self) -> None:
        """Encode the song and check the result reads back the same."""
        encoded = SongWriter.write(self.song)
        self._add_issue("info", "Encoding", f"v{LATEST_VERSION} string is {len(encoded)} chars")

        decoded = SongReader.read(encoded)
        if decoded is None or decoded.note_count != self.song.note_count:
            lost = self.song.note_count - (decoded.note_count if decoded else 0)
            self._add_issue("warning", "Encoding", f"{lost} notes do not survive encoding")

    def _validate_source(self) -> None:
        """Checks on the string the song was decoded from."""
        analysis = self.analysis
        if not analysis.tagged:
            self._add_issue("info", "Version", "Untagged string read as v1")
        elif analysis.version < LATEST_VERSION:
            self._add_issue(
                "info",
                "Version",
                f"Legacy v{analysis.version} string, re-encodes as v{LATEST_VERSION}",
            )

        if analysis.is_truncated:
            missing = analysis.expected_bits - analysis.available_bits
            self._add_issue(
                "warning", "Payload", f"Truncated by {missing} bits, missing fields read as 0"
            )


def display_validation(result: ValidationResult) -> None:
    """Display validation result with Rich formatting."""
    if result.valid:
        status = "[bold green]VALID[/bold green]"
        border = "green"
    else:
        status = "[bold red]INVALID[/bold red]"
        border = "red"

    console.print(
        Panel(
            f"[bold]Song:[/bold] {result.source}\n"
            f"[bold]Status:[/bold] {status}\n\n"
            f"Errors: [red]{len(result.errors)}[/red]  "
            f"Warnings: [yellow]{len(result.warnings)}[/yellow]  "
            f"Info: [blue]{len(result.info)}[/blue]",
            title="[bold]Validation Result[/bold]",
            border_style=border,
        )
    )

    if result.errors or result.warnings:
        table = Table(title="Issues", box=box.ROUNDED, show_header=True, header_style="bold cyan")
        table.add_column("Severity", width=10)
        table.add_column("Area", style="cyan", width=20)
        table.add_column("Message", width=50)

        for issue in result.errors:
            table.add_row("[red]ERROR[/red]", issue.area, issue.message)

        for issue in result.warnings:
            table.add_row("[yellow]WARN[/yellow]", issue.area, issue.message)

        console.print(table)

    if result.info and not result.errors:
        info_table = Table(title="Validation Checks", box=box.SIMPLE, show_header=False)
        info_table.add_column("", width=70)

        for issue in result.info:
            info_table.add_row(f"[green]OK[/green] {issue.area}: {issue.message}")

        console.print(info_table)


def load_source(source: str):
    """
    Load a song from a JSON file, share URL or encoded string.

    Returns:
        (song, analysis) - analysis is None for JSON files
    """
    path = Path(source)
    if path.suffix.lower() == ".json":
        if not path.exists():
            console.print(f"[red]Error: File not found: {source}[/red]")
            raise typer.Exit(1)
        try:
            with open(path, "r", encoding="utf-8") as f:
                return SongState.from_dict(json.load(f)), None
        except (ValueError, KeyError, TypeError) as e:
            console.print(f"[red]Error: Invalid song file {source}: {e}[/red]")
            raise typer.Exit(1)

    encoded = extract_encoded(source)
    if encoded is None:
        console.print("[red]Error: No song found in input[/red]")
        raise typer.Exit(1)

    try:
        analysis = analyze_encoded(encoded)
    except DecodeError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    return analysis.song, analysis


def validate(
    source: str = typer.Argument(..., help="Song JSON file, encoded song or share URL"),
    strict: bool = typer.Option(False, "--strict", "-s", help="Treat warnings as errors"),
) -> None:
    """
    Validate a song and what survives sharing it.

    Checks for:

    - Header ranges (speed, length, key, tempo)
    - Note ranges and overlapping notes
    - Notes outside the key signature
    - Sounds and settings the share string cannot hold
    - Truncated or legacy share strings

    Examples:

        musicbox validate song.json

        musicbox validate v5_AAAA... --strict
    """
    song, analysis = load_source(source)

    validator = SongValidator(song, source, analysis)
    result = validator.validate()

    if strict and result.warnings:
        result.valid = False

    display_validation(result)

    if not result.valid:
        raise typer.Exit(1)
