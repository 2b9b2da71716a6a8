"""Utility functions and helpers.

Logging, scoped file handles, and array/tensor conversion.
"""

from .logging import setup_logger, get_logger

__all__ = ["setup_logger", "get_logger"]
