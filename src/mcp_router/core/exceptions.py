"""
Exception classes for MCP Router.

Defines the exception hierarchy for errors that can occur while
discovering, loading, materializing and launching MCP server configs.
"""

from typing import Any, Dict, Optional


class MCPRouterError(Exception):
    """Base exception for all MCP Router errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize MCPRouterError.

        Args:
            message: Error message
            error_code: Optional error code for categorization
            details: Optional additional error details
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def __str__(self) -> str:
        """String representation of the error."""
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "details": self.details,
        }


class ConfigError(MCPRouterError):
    """Tool configuration errors."""
    pass


class MaterializeError(MCPRouterError):
    """Output document write errors."""
    pass


class LaunchError(MCPRouterError):
    """External process launch errors."""
    pass
