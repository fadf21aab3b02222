"""
Dump command - annotated bit-field breakdown of an encoded song.
"""

from typing import List, Optional, Tuple

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text
from rich import box

from musicbox.analysis.song_analyzer import SongAnalysis, analyze_encoded
from musicbox.formats.framing import DecodeError
from musicbox.share import extract_encoded

from cli.display.hex_view import display_hex_dump
from cli.display.tables import (
    display_analysis_summary,
    display_beat_fields,
    display_header_fields,
)

console = Console()


# Bit regions with name, description, and color
FIELD_COLORS: List[Tuple[str, str, str]] = [
    ("mode", "Composer mode", "bright_blue"),
    ("speed", "Speed table index", "cyan"),
    ("loop", "Loop flag", "cyan"),
    ("length", "Beat length index", "green"),
    ("key", "Key signature index", "yellow"),
    ("pitch", "Pitch / sound index", "red"),
    ("duration", "Duration - 1", "magenta"),
    ("velocity", "Velocity level (0-15)", "blue"),
    ("octave", "Octave - 2", "bright_magenta"),
]


def get_field_color(name: str) -> str:
    """Get the display color for a field name."""
    for field_name, _, color in FIELD_COLORS:
        if field_name == name:
            return color
    return "white"


def format_bit_line(analysis: SongAnalysis, beat: Optional[int] = None) -> Text:
    """
    Format the header (or one beat record) as a colored bit string.

    Args:
        analysis: Song analysis
        beat: Beat index, or None for the header

    Returns:
        Rich Text with each field in its color, fields separated by spaces
    """
    if beat is None:
        fields = analysis.header
    else:
        fields = [f for track in analysis.beats[beat].tracks for f in track.fields]

    line = Text()
    for i, bit_field in enumerate(fields):
        if i:
            line.append(" ")
        style = "dim" if bit_field.truncated else get_field_color(bit_field.name)
        line.append(bit_field.bits_str, style=style)
    return line


def display_legend(analysis: SongAnalysis) -> None:
    """Display the field legend for the analysed version."""
    used = {spec.name for spec in analysis.layout.header}
    for track_layout in analysis.layout.tracks:
        used.update(spec.name for spec in track_layout.fields)

    table = Table(title="Legend", box=box.SIMPLE, show_header=False)
    table.add_column("Field", width=10)
    table.add_column("Description")

    for name, desc, color in FIELD_COLORS:
        if name in used:
            table.add_row(f"[{color}]{name}[/{color}]", desc)

    console.print(table)


def dump(
    source: str = typer.Argument(..., help="Encoded song or share URL"),
    beats: Optional[int] = typer.Option(None, "--beats", "-b", help="Show at most N beats"),
    non_empty: bool = typer.Option(False, "--non-empty", "-e", help="Only show beats with notes"),
    bits: bool = typer.Option(False, "--bits", help="Show colored raw bit strings"),
    hex: bool = typer.Option(False, "--hex", "-x", help="Show hex dump of the payload"),
) -> None:
    """
    Show the bit-level layout of an encoded song.

    Lists each header field and per-beat record with its bit offset,
    raw value and meaning. Fields past the end of a truncated payload
    are shown dimmed (they read as 0).

    Examples:

        musicbox dump v5_AAAA...

        musicbox dump v5_AAAA... --non-empty --beats 8

        musicbox dump v2_... --bits --hex
    """
    encoded = extract_encoded(source)
    if encoded is None:
        console.print("[red]Error: No song found in input[/red]")
        raise typer.Exit(1)

    try:
        analysis = analyze_encoded(encoded)
    except DecodeError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    display_analysis_summary(analysis)
    display_header_fields(analysis)
    display_beat_fields(analysis, max_beats=beats, non_empty_only=non_empty)

    if bits:
        console.print()
        console.print(Text("header ", style="bold") + format_bit_line(analysis))
        shown = 0
        for record in analysis.beats:
            if non_empty and record.is_empty:
                continue
            if beats is not None and shown >= beats:
                break
            shown += 1
            label = Text(f"{record.beat + 1:>6} ", style="bold")
            console.print(label + format_bit_line(analysis, record.beat))
        display_legend(analysis)

    if hex:
        display_hex_dump(analysis.payload, title=f"v{analysis.version} payload")
