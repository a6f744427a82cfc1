"""Utility functions for the S3 Prober."""

from .errors import sanitize_error_message, sanitize_exception

__all__ = [
    "sanitize_error_message",
    "sanitize_exception",
]
