"""
MCP Router - pick MCP servers from project config files and launch Claude.

Collects ``.claude/*mcpServers.json`` files, merges their servers, lets
the user choose a subset and writes it as a single ``--mcp-config`` file.
"""

__version__ = "0.1.0"
__description__ = "Merge project MCP server configs and launch Claude with a selection"

# Public API
from mcp_router.core.exceptions import MCPRouterError
from mcp_router.core.models import Entry, EntryTable

__all__ = [
    "__version__",
    "__description__",
    "MCPRouterError",
    "Entry",
    "EntryTable",
]
