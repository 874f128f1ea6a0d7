"""
Display helper functions for CLI commands.
"""

from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.table import Table

from mcp_router.core.models import EntryTable


def render_entry_table(console: Console, table: EntryTable, base_dir: Optional[Path] = None) -> None:
    """Print merged servers with the file each one came from."""
    if not table:
        console.print("[yellow]No MCP server configs found[/yellow]")
        return

    output = Table(
        title=f"MCP Servers ({len(table)} total)",
        show_header=True,
        header_style="bold cyan",
        title_style="bold cyan",
    )
    output.add_column("Name", style="green")
    output.add_column("Command", style="white")
    output.add_column("Args", style="dim")
    output.add_column("Source", style="blue")

    for name, entry in table.items():
        source = table.source_of(name)
        if source is not None and base_dir is not None:
            try:
                source = source.relative_to(base_dir.absolute())
            except ValueError:
                pass
        output.add_row(
            name,
            entry.command or "",
            " ".join(entry.args) if entry.args else "",
            str(source) if source is not None else "",
        )

    console.print(output)

    if table.overridden:
        names = ", ".join(sorted({record.name for record in table.overridden}))
        console.print(f"[dim]Defined in more than one file (last one wins): {names}[/dim]")
