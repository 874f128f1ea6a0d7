"""
Server selection and config materialization for MCP Router.

Presents merged servers for multi-select and writes the chosen subset to
a uniquely named ``{"mcpServers": {...}}`` file.
"""

import json
import os
import re
import tempfile
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt
from rich.table import Table

from mcp_router.core.exceptions import MaterializeError
from mcp_router.core.models import SERVERS_KEY, DisplayItem, EntryTable, Selection
from mcp_router.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_PREFIX = "mcp-servers"

_RANGE_RE = re.compile(r"^(\d+)\s*-\s*(\d+)$")


def build_display_items(table: EntryTable) -> List[DisplayItem]:
    """Build prompt descriptors in table order."""
    items = []
    for name, entry in table.items():
        detail = " ".join(entry.args) if entry.args else None
        items.append(DisplayItem(id=name, summary=entry.command or "", detail=detail))
    return items


class SelectionPrompt(ABC):
    """Multi-select prompt over display items."""

    @abstractmethod
    def choose(self, items: Sequence[DisplayItem]) -> Optional[List[str]]:
        """
        Ask for a subset of items.

        Returns:
            Chosen ids (possibly empty), or None if the prompt was dismissed
        """


class StaticSelectionPrompt(SelectionPrompt):
    """Non-interactive prompt that picks a preset list of names."""

    def __init__(self, names: Iterable[str]):
        self.names = list(names)

    def choose(self, items: Sequence[DisplayItem]) -> Optional[List[str]]:
        known = {item.id for item in items}
        for name in self.names:
            if name not in known:
                logger.warning(f"Server '{name}' not found, ignoring")
        return [name for name in self.names if name in known]


class RichSelectionPrompt(SelectionPrompt):
    """Interactive terminal prompt built on Rich."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def render(self, items: Sequence[DisplayItem]) -> None:
        """Print the numbered server table."""
        table = Table(
            title="Available MCP Servers",
            box=box.ROUNDED,
            show_header=True,
            header_style="bold cyan",
            title_style="bold cyan",
        )
        table.add_column("#", style="bold cyan", justify="right")
        table.add_column("Name", style="green")
        table.add_column("Command", style="white")
        table.add_column("Args", style="dim")

        for number, item in enumerate(items, start=1):
            table.add_row(str(number), item.id, item.summary, item.detail or "")

        self.console.print(table)

    def choose(self, items: Sequence[DisplayItem]) -> Optional[List[str]]:
        self.render(items)
        while True:
            try:
                answer = Prompt.ask(
                    "[bold cyan]Select servers[/bold cyan] "
                    "[dim](e.g. 1,3-4, names, 'all', #2 for a position; blank for none)[/dim]",
                    default="",
                    show_default=False,
                    console=self.console,
                )
            except (EOFError, KeyboardInterrupt):
                self.console.print("\n[yellow]Selection cancelled[/yellow]")
                return None

            try:
                return parse_selection(answer, items)
            except ValueError as e:
                self.console.print(f"[red]{escape(str(e))}[/red]")


def parse_selection(answer: str, items: Sequence[DisplayItem]) -> List[str]:
    """
    Parse a selection answer into item ids.

    Accepts 1-based numbers, ranges (``2-4``), item names and ``all``,
    separated by commas or whitespace. Duplicates are dropped and the
    result follows item order.

    A token that exactly matches an item name always selects that item,
    so a server called ``2`` or ``all`` stays reachable by name. Prefix a
    number or range with ``#`` (``#2``, ``#1-3``) to force the positional
    meaning, and ``all`` selects everything only when no item has that name.

    Raises:
        ValueError: If a token matches no item
    """
    ids = [item.id for item in items]
    chosen = set()

    for token in re.split(r"[,\s]+", answer.strip()):
        if not token:
            continue
        positional = token[1:] if token.startswith("#") else None
        if positional is None:
            if token in ids:
                chosen.add(token)
                continue
            if token.lower() == "all":
                chosen.update(ids)
                continue
            positional = token
        if positional.isdigit():
            start = end = int(positional)
        else:
            match = _RANGE_RE.match(positional)
            if not match:
                raise ValueError(f"Unknown selection: {token}")
            start, end = int(match.group(1)), int(match.group(2))
        if start < 1 or end > len(ids) or start > end:
            raise ValueError(f"Selection out of range: {token} (1-{len(ids)})")
        chosen.update(ids[start - 1:end])

    return [item_id for item_id in ids if item_id in chosen]


def select_entries(table: EntryTable, prompt: SelectionPrompt) -> Optional[Selection]:
    """
    Ask the user for a subset of the table.

    Returns:
        The chosen subset in table order, or None when the table is empty,
        nothing was chosen, or the prompt was dismissed
    """
    if not table:
        return None

    chosen = prompt.choose(build_display_items(table))
    if not chosen:
        logger.debug("No servers selected" if chosen is not None else "Selection dismissed")
        return None

    return table.subset(chosen)


def render_document(selection: Selection) -> str:
    """Serialize a selection as a pretty-printed ``mcpServers`` document."""
    return json.dumps({SERVERS_KEY: selection.to_config()}, indent=2, ensure_ascii=False) + "\n"


def materialize(
    selection: Selection,
    output_dir: Optional[Union[str, Path]] = None,
    prefix: str = DEFAULT_PREFIX,
) -> Path:
    """
    Write a selection to a new, uniquely named file.

    Args:
        selection: Servers to write
        output_dir: Target directory (defaults to the OS temp directory)
        prefix: File name prefix

    Returns:
        Path of the written file

    Raises:
        MaterializeError: If the file could not be written
    """
    content = render_document(selection)
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")

    try:
        if output_dir is not None:
            Path(output_dir).mkdir(parents=True, exist_ok=True)
        fd, name = tempfile.mkstemp(
            prefix=f"{prefix}-{stamp}-",
            suffix=".json",
            dir=str(output_dir) if output_dir is not None else None,
        )
    except OSError as e:
        raise MaterializeError(f"Failed to create config file: {e}", error_code="WRITE_FAILED")

    path = Path(name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
    except OSError as e:
        path.unlink(missing_ok=True)
        raise MaterializeError(f"Failed to write {path}: {e}", error_code="WRITE_FAILED")

    logger.info(f"Wrote {len(selection)} servers to {path}")
    return path
