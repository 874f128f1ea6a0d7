"""
Discover, merge, select and materialize in one call.
"""

from enum import Enum
from pathlib import Path
from typing import NamedTuple, Optional, Union

from rich.console import Console

from mcp_router.core.discovery import discover_sources
from mcp_router.core.exceptions import MaterializeError
from mcp_router.core.loader import load_entry_table
from mcp_router.core.models import EntryTable
from mcp_router.core.selector import SelectionPrompt, materialize, select_entries
from mcp_router.utils.config import Config
from mcp_router.utils.logging import get_logger

logger = get_logger(__name__)


class PipelineStatus(str, Enum):
    """How a pipeline run ended."""

    WRITTEN = "written"
    NOTHING_FOUND = "nothing_found"
    NO_SELECTION = "no_selection"
    WRITE_FAILED = "write_failed"


class PipelineResult(NamedTuple):
    """Outcome of one run; ``output_path`` is None unless a file was written."""

    status: PipelineStatus
    output_path: Optional[Path]
    table: EntryTable


class RouterPipeline:
    """Runs discovery through materialization for one project."""

    def __init__(
        self,
        config: Config,
        prompt: SelectionPrompt,
        console: Optional[Console] = None,
    ):
        self.config = config
        self.prompt = prompt
        self.console = console or Console(stderr=True)

    def load(self, base_dir: Union[str, Path]) -> EntryTable:
        """Discover and merge all sources beneath base_dir."""
        base_dir = Path(base_dir)
        discovery = self.config.discovery

        result = discover_sources(
            base_dir,
            directory=discovery.directory,
            suffix=discovery.suffix,
            override=self.config.get_override_path(base_dir),
        )
        for notice in result.notices:
            self.console.print(f"[blue]ℹ[/blue] {notice}")

        return load_entry_table(result.sources, max_workers=discovery.max_workers)

    def run(self, base_dir: Union[str, Path]) -> PipelineResult:
        """
        Build the merged table, ask for a selection and write it.

        Args:
            base_dir: Project root

        Returns:
            PipelineResult with the written path, or None as output_path
        """
        table = self.load(base_dir)

        if not table:
            self.console.print("[yellow]No MCP server configs found[/yellow]")
            return PipelineResult(PipelineStatus.NOTHING_FOUND, None, table)

        selection = select_entries(table, self.prompt)
        if selection is None:
            self.console.print("[dim]No servers selected[/dim]")
            return PipelineResult(PipelineStatus.NO_SELECTION, None, table)

        try:
            path = materialize(
                selection,
                output_dir=self.config.get_output_dir(),
                prefix=self.config.output.prefix,
            )
        except MaterializeError as e:
            logger.error(str(e))
            self.console.print(f"[red]✗[/red] {e.message}")
            return PipelineResult(PipelineStatus.WRITE_FAILED, None, table)

        return PipelineResult(PipelineStatus.WRITTEN, path, table)
