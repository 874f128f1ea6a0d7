"""Command-line interface for MCP Router."""
