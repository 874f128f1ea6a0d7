"""Core discovery, merge and selection logic for MCP Router."""
