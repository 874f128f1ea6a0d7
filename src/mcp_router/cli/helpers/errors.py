"""
Error handling utilities for CLI commands.
"""

import functools
import sys

from rich.console import Console

from mcp_router.core.exceptions import MCPRouterError
from mcp_router.utils.logging import get_logger

logger = get_logger(__name__)


def handle_errors(func):
    """Decorator to handle common CLI errors."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        console = Console(stderr=True)
        try:
            return func(*args, **kwargs)
        except KeyboardInterrupt:
            console.print("\n[yellow]Operation cancelled by user[/yellow]")
            sys.exit(1)
        except MCPRouterError as e:
            logger.debug("Command failed", exc_info=True)
            console.print(f"[red]Error: {e.message}[/red]")
            sys.exit(1)
        except Exception as e:
            logger.exception("Unexpected error")
            console.print(f"[red]Error: {e}[/red]")
            console.print("[dim]Use --debug for more details[/dim]")
            sys.exit(1)

    return wrapper
