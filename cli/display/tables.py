"""
Rich table displays for song information.

Provides formatted output for decoded songs and encoded-string analysis.
"""

from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich import box

from musicbox.analysis.song_analyzer import SongAnalysis
from musicbox.models.song import Mode, SongState
from musicbox.utils.tables import SPEEDS

from cli.display.formatters import density_bar, format_bits, note_cell, value_bar


console = Console()

TRACK_NAMES = {1: "High Piano", 2: "Low Piano", 3: "Percussion"}


def speed_to_string(song: SongState) -> str:
    """Describe the playback tempo of a song."""
    if song.use_bpm and song.mode is Mode.STUDIO:
        return f"{song.bpm} BPM"
    index = min(max(song.speed_index, 0), len(SPEEDS) - 1)
    ms, label = SPEEDS[index]
    return f"{label} ({ms} ms/beat)"


def display_song_info(song: SongState, encoded: Optional[str] = None) -> None:
    """Display the song header panel."""
    loop = "[green]On[/green]" if song.loop else "[dim]Off[/dim]"

    content = f"""[bold]Mode:[/bold] {song.mode.value}
[bold]Key:[/bold] {song.key_name}
[bold]Speed:[/bold] {speed_to_string(song)}
[bold]Loop:[/bold] {loop}
[bold]Length:[/bold] {song.beat_count} beats
[bold]Notes:[/bold] {song.note_count}"""

    if encoded is not None:
        content += f"\n[bold]Encoded:[/bold] {len(encoded)} chars"

    console.print(
        Panel(
            content,
            title="[bold blue]Song Info[/bold blue]",
            border_style="blue",
            expand=False,
        )
    )


def display_timeline(song: SongState, beats_per_row: int = 16) -> None:
    """Display the three tracks as a beat grid, one table per row of beats."""
    for start in range(0, song.beat_count, beats_per_row):
        end = min(start + beats_per_row, song.beat_count)

        table = Table(box=box.SIMPLE, show_header=True, header_style="bold magenta")
        table.add_column("Track", style="cyan", width=11)
        for beat in range(start, end):
            table.add_column(str(beat + 1), justify="center", min_width=3)

        for number, track in sorted(song.tracks.items()):
            cells = [note_cell(track, beat) for beat in range(start, end)]
            table.add_row(TRACK_NAMES.get(number, str(number)), *cells)

        console.print(table)


def display_notes(song: SongState) -> None:
    """Display every note with its full field values."""
    table = Table(title="Notes", box=box.ROUNDED, show_header=True, header_style="bold magenta")
    table.add_column("Track", style="cyan", width=11)
    table.add_column("Beat", justify="right", width=5)
    table.add_column("Note", width=8)
    table.add_column("Dur", justify="right", width=4)
    table.add_column("Velocity", width=26)

    for number, track in sorted(song.tracks.items()):
        for note in track.iter_notes():
            table.add_row(
                TRACK_NAMES.get(number, str(number)),
                str(note.beat + 1),
                note.label,
                str(note.duration),
                value_bar(note.velocity),
            )

    if table.row_count:
        console.print(table)
    else:
        console.print("[dim]No notes[/dim]")


def display_song(song: SongState, encoded: Optional[str] = None, show_notes: bool = False) -> None:
    """Display complete decoded song."""
    display_song_info(song, encoded)
    display_timeline(song)
    if show_notes:
        display_notes(song)


def display_analysis_summary(analysis: SongAnalysis) -> None:
    """Display version, size and truncation status of an encoded string."""
    tag = f"v{analysis.version}" if analysis.tagged else f"v{analysis.version} (untagged)"
    if analysis.is_truncated:
        status = (
            f"[yellow]Truncated[/yellow] "
            f"({analysis.expected_bits - analysis.available_bits} bits missing, read as 0)"
        )
    else:
        status = "[green]Complete[/green]"

    content = f"""[bold]Version:[/bold] {tag}
[bold]Payload:[/bold] {len(analysis.payload)} bytes ({analysis.available_bits} bits)
[bold]Expected:[/bold] {analysis.expected_bits} bits
[bold]Padding:[/bold] {analysis.padding_bits} bits
[bold]Status:[/bold] {status}
[bold]Beats Used:[/bold] {density_bar(analysis.non_empty_beats, analysis.beat_count)}"""

    console.print(
        Panel(
            content,
            title="[bold blue]Encoded Song[/bold blue]",
            border_style="blue",
            expand=False,
        )
    )


def display_header_fields(analysis: SongAnalysis) -> None:
    """Display the header bit fields."""
    table = Table(title="Header", box=box.ROUNDED, show_header=True, header_style="bold magenta")
    table.add_column("Field", style="cyan", width=8)
    table.add_column("Offset", justify="right", style="dim", width=6)
    table.add_column("Bits", width=10)
    table.add_column("Raw", justify="right", width=4)
    table.add_column("Meaning")

    for bit_field in analysis.header:
        table.add_row(
            bit_field.name,
            str(bit_field.offset),
            format_bits(bit_field.bits_str, bit_field.truncated),
            str(bit_field.raw),
            bit_field.meaning,
        )

    console.print(table)


def display_beat_fields(
    analysis: SongAnalysis, max_beats: Optional[int] = None, non_empty_only: bool = False
) -> None:
    """Display the per-beat track fields."""
    table = Table(title="Beats", box=box.ROUNDED, show_header=True, header_style="bold magenta")
    table.add_column("Beat", justify="right", width=5)
    table.add_column("Offset", justify="right", style="dim", width=6)
    for track_layout in analysis.layout.tracks:
        table.add_column(TRACK_NAMES.get(track_layout.track, str(track_layout.track)))

    shown = 0
    for record in analysis.beats:
        if non_empty_only and record.is_empty:
            continue
        if max_beats is not None and shown >= max_beats:
            break

        cells = []
        for track_fields in record.tracks:
            if track_fields.is_empty:
                cells.append("[dim]-[/dim]")
                continue
            parts = []
            for f in track_fields.fields:
                text = f"{f.name[:3]}={f.meaning}"
                parts.append(f"[dim]{text}[/dim]" if f.truncated else text)
            cells.append(" ".join(parts))

        table.add_row(str(record.beat + 1), str(record.offset), *cells)
        shown += 1

    if shown:
        console.print(table)
    else:
        console.print("[dim]No beats to show[/dim]")
