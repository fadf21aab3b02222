"""
Encode command - turn a song JSON file into a share string or URL.
"""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from musicbox.formats.writer import SongWriter
from musicbox.models.song import SongState
from musicbox.share import build_share_url

console = Console(stderr=True)


def load_song_file(file: Path) -> SongState:
    """
    Load a song from a JSON file written by "musicbox decode --json".

    Raises:
        typer.Exit: If the file is missing or does not hold a song
    """
    if not file.exists():
        console.print(f"[red]Error: File not found: {file}[/red]")
        raise typer.Exit(1)

    try:
        with open(file, "r", encoding="utf-8") as f:
            data = json.load(f)
        return SongState.from_dict(data)
    except (ValueError, KeyError, TypeError) as e:
        console.print(f"[red]Error: Invalid song file {file}: {e}[/red]")
        raise typer.Exit(1)


def encode(
    file: Path = typer.Argument(..., help="Song JSON file"),
    url: Optional[str] = typer.Option(
        None,
        "--url",
        "-u",
        envvar="MUSICBOX_BASE_URL",
        help="Composer page URL to build a share link for",
    ),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write result to file"),
) -> None:
    """
    Encode a song JSON file to the latest compact format.

    Examples:

        musicbox encode song.json

        musicbox encode song.json --url https://example.com/music-box/

        musicbox encode song.json -o song.txt
    """
    song = load_song_file(file)

    problems = song.validate()
    for problem in problems:
        console.print(f"[yellow]Warning: {problem}[/yellow]")

    encoded = SongWriter.write(song)
    result = build_share_url(encoded, url) if url else encoded

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        with open(output, "w", encoding="utf-8") as f:
            f.write(result + "\n")
        console.print(f"[green]Encoded:[/green] {file} -> {output}")
        console.print(f"[dim]{len(encoded)} chars, {song.note_count} notes[/dim]")
    else:
        typer.echo(result)
