"""
Hex dump display utilities.
"""

from rich.console import Console
from rich.panel import Panel

console = Console()


def format_hex_lines(data: bytes, start_offset: int = 0, bytes_per_line: int = 16, max_lines: int = 32):
    """Format bytes as hex dump lines with binary-friendly grouping."""
    lines = []
    end = min(len(data), max_lines * bytes_per_line)

    for offset in range(0, end, bytes_per_line):
        chunk = data[offset : offset + bytes_per_line]

        hex_parts = []
        for i, b in enumerate(chunk):
            if i == 8:
                hex_parts.append(" ")  # Extra space at midpoint
            hex_parts.append(f"{b:02X}")
        hex_str = " ".join(hex_parts)

        addr = start_offset + offset
        lines.append(f"[dim]{addr:04X}[/dim]  {hex_str}")

    if len(data) > end:
        remaining = len(data) - end
        lines.append(f"[dim]... {remaining} more bytes ...[/dim]")

    return lines


def display_hex_dump(
    data: bytes,
    title: str = "Payload",
    start_offset: int = 0,
    bytes_per_line: int = 16,
    max_lines: int = 32,
) -> None:
    """Display formatted hex dump of a decoded payload with Rich."""
    if not data:
        console.print(Panel("[dim]empty payload[/dim]", title=title, border_style="blue", expand=False))
        return

    content = "\n".join(format_hex_lines(data, start_offset, bytes_per_line, max_lines))
    console.print(Panel(content, title=title, border_style="blue", expand=False))
