"""
Music Box - encode, decode and inspect Music Box Composer share strings.

A CLI tool for the compact song format used in composer share URLs.
"""

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

from musicbox import __version__
from cli.commands.encode import encode
from cli.commands.decode import decode
from cli.commands.dump import dump
from cli.commands.validate import validate

console = Console()

# Main app
app = typer.Typer(
    name="musicbox",
    help="Encode, decode and inspect Music Box Composer songs.",
    add_completion=False,
    rich_markup_mode="rich",
)

# Add commands directly
app.command(name="encode")(encode)
app.command(name="decode")(decode)
app.command(name="dump")(dump)
app.command(name="validate")(validate)


def setup_logging(verbose: bool) -> None:
    """Route library log messages through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=verbose)],
        force=True,
    )


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]musicbox[/bold] version {__version__}")
    console.print("[dim]Compact song codec for Music Box Composer share URLs (v1-v5)[/dim]")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version_flag: bool = typer.Option(False, "--version", "-V", help="Show version"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug log messages"),
) -> None:
    """
    Music Box - work with Music Box Composer share strings.

    Songs are shared as [cyan]v<N>_<base64url>[/cyan] strings in the
    [cyan]c[/cyan] query parameter. All versions from v1 to v5 can be read;
    new strings are always written as v5.

    [bold]Quick Start:[/bold]

        musicbox decode v5_AAAA...            # Show the song
        musicbox decode v5_AAAA... --json     # Export as JSON

    [bold]Sharing:[/bold]

        musicbox encode song.json             # JSON to share string
        musicbox encode song.json -u URL      # JSON to share URL

    [bold]Analysis Commands:[/bold]

        musicbox dump v5_AAAA...              # Bit-level breakdown
        musicbox validate song.json           # Check before sharing

    Use --help with any command for more details.
    """
    setup_logging(verbose)

    if version_flag:
        version()
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


def run() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    run()
