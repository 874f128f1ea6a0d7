"""Utility modules for MCP Router."""

from mcp_router.utils.logging import get_logger, setup_logging
from mcp_router.utils.config import Config, get_config, load_config, reload_config

__all__ = [
    "get_logger",
    "setup_logging",
    "Config",
    "get_config",
    "load_config",
    "reload_config",
]
