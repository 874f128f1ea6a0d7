"""
Main CLI interface for MCP Router.

Provides the command-line interface using Click with Rich output. The
generated config path is the only thing written to stdout so that it can
be captured by scripts; everything else goes to stderr.
"""

import json
import shlex
import sys
from pathlib import Path
from typing import Optional, Tuple

import click
from rich.console import Console

from mcp_router import __version__
from mcp_router.cli.helpers import handle_errors, render_entry_table
from mcp_router.core.launcher import build_launch_command, launch
from mcp_router.core.models import SERVERS_KEY
from mcp_router.core.pipeline import PipelineStatus, RouterPipeline
from mcp_router.core.selector import (
    RichSelectionPrompt, SelectionPrompt, StaticSelectionPrompt,
)
from mcp_router.utils.config import Config, load_config
from mcp_router.utils.logging import get_logger, setup_logging

console = Console()
err_console = Console(stderr=True)
logger = get_logger(__name__)


class CLIContext:
    """CLI context for passing state between commands."""

    def __init__(self):
        self.config: Optional[Config] = None

    def get_config(self) -> Config:
        """Get configuration instance."""
        if self.config is None:
            self.config = load_config()
        return self.config

    def get_config_for(self, config_file: Optional[str]) -> Config:
        """Get configuration with an optional single-source override applied."""
        config = self.get_config()
        if config_file:
            config = config.model_copy(deep=True)
            config.discovery.override_path = str(Path(config_file).absolute())
        return config

    def get_prompt(self, select: Tuple[str, ...]) -> SelectionPrompt:
        """Get the selection prompt for a command."""
        if select:
            return StaticSelectionPrompt(select)
        return RichSelectionPrompt(console=err_console)


# Global CLI context
cli_context = CLIContext()


project_dir_option = click.option(
    "--project-dir", "-p",
    type=click.Path(exists=True, file_okay=False, dir_okay=True, path_type=Path),
    default=".",
    show_default=True,
    help="Project root containing the .claude directory",
)
config_file_option = click.option(
    "--config-file", "-f",
    type=click.Path(dir_okay=False),
    help="Use this file as the only server config source",
)
select_option = click.option(
    "--select", "-s",
    multiple=True,
    help="Select a server by name without prompting (can be used multiple times)",
)


@click.group()
@click.option(
    "--debug", "-d",
    is_flag=True,
    help="Enable debug logging"
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose output"
)
@click.version_option(version=__version__, prog_name="MCP Router")
@handle_errors
def cli(debug: bool, verbose: bool):
    """
    Pick MCP servers from project config files and launch Claude.

    Server definitions are read from .claude/*mcpServers.json in the
    project directory. When several files define the same server the
    file that sorts last wins.
    """
    config = cli_context.get_config()
    log_config = config.logging
    if debug or config.debug:
        console_level = "DEBUG"
    elif verbose or config.verbose:
        console_level = "INFO"
    else:
        console_level = log_config.console_level

    setup_logging(
        enabled=log_config.enabled,
        level=log_config.level,
        console_level=console_level,
        log_file=config.get_log_file(),
        format_type=log_config.format_type,
        enable_rich=log_config.enable_rich,
        max_bytes=log_config.max_bytes,
        backup_count=log_config.backup_count,
    )


@cli.command("list")
@project_dir_option
@config_file_option
@click.option(
    "--output-format", "-o",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    help="Output format"
)
@handle_errors
def list_cmd(project_dir: Path, config_file: Optional[str], output_format: str):
    """List the merged MCP servers."""
    config = cli_context.get_config_for(config_file)
    pipeline = RouterPipeline(config, StaticSelectionPrompt(()), console=err_console)
    table = pipeline.load(project_dir)

    if output_format == "json":
        click.echo(json.dumps({SERVERS_KEY: table.to_config()}, indent=2))
    else:
        render_entry_table(console, table, project_dir)


@cli.command()
@project_dir_option
@config_file_option
@select_option
@handle_errors
def pick(project_dir: Path, config_file: Optional[str], select: Tuple[str, ...]):
    """Select servers and write them to a new config file.

    Prints the path of the generated file.
    """
    config = cli_context.get_config_for(config_file)
    pipeline = RouterPipeline(config, cli_context.get_prompt(select), console=err_console)
    result = pipeline.run(project_dir)

    if result.output_path is not None:
        click.echo(str(result.output_path))
    elif result.status == PipelineStatus.WRITE_FAILED:
        sys.exit(1)


@cli.command(context_settings={"ignore_unknown_options": True})
@project_dir_option
@config_file_option
@select_option
@click.option(
    "--dry-run",
    is_flag=True,
    help="Print the command instead of running it"
)
@click.argument("claude_args", nargs=-1, type=click.UNPROCESSED)
@handle_errors
def run(
    project_dir: Path,
    config_file: Optional[str],
    select: Tuple[str, ...],
    dry_run: bool,
    claude_args: Tuple[str, ...],
):
    """Select servers and launch Claude with them.

    Extra arguments are passed to Claude, e.g.
    `mcp-router run -- --dangerously-skip-permissions`.
    """
    config = cli_context.get_config_for(config_file)
    pipeline = RouterPipeline(config, cli_context.get_prompt(select), console=err_console)
    result = pipeline.run(project_dir)

    if result.status == PipelineStatus.WRITE_FAILED:
        sys.exit(1)

    command = build_launch_command(
        config.launch.cli_path,
        claude_args,
        result.output_path,
        config_flag=config.launch.mcp_config_flag,
    )

    if dry_run:
        click.echo(shlex.join(command))
        return

    sys.exit(launch(command, cwd=project_dir))


def main():
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    main()
