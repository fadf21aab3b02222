"""
Decode command - show or export the song held by a share string or URL.
"""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from musicbox.formats.framing import DecodeError
from musicbox.formats.reader import SongReader
from musicbox.models.song import SongState
from musicbox.share import extract_encoded

from cli.display.tables import display_song

console = Console(stderr=True)


def parse_source(source: str) -> SongState:
    """
    Decode a share URL or encoded string for a command.

    Raises:
        typer.Exit: If there is no song or it cannot be decoded
    """
    encoded = extract_encoded(source)
    if encoded is None:
        console.print("[red]Error: No song found in input[/red]")
        raise typer.Exit(1)

    try:
        return SongReader().parse(encoded)
    except DecodeError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


def decode(
    source: str = typer.Argument(..., help="Encoded song or share URL"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
    notes: bool = typer.Option(False, "--notes", "-n", help="List every note"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write JSON to file"),
) -> None:
    """
    Decode a song string from any format version (v1-v5).

    Examples:

        musicbox decode v5_AAAA...

        musicbox decode "https://example.com/music-box/?c=v5_AAAA..."

        musicbox decode v3_... --json -o song.json
    """
    song = parse_source(source)

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        with open(output, "w", encoding="utf-8") as f:
            json.dump(song.to_dict(), f, indent=2)
        console.print(f"[green]Decoded:[/green] {song.note_count} notes -> {output}")
        return

    if json_output:
        typer.echo(json.dumps(song.to_dict(), indent=2))
        return

    display_song(song, extract_encoded(source), show_notes=notes)
