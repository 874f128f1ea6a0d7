"""
CLI helper functions and utilities.
"""

from .display import render_entry_table
from .errors import handle_errors

__all__ = [
    'render_entry_table',
    'handle_errors',
]
