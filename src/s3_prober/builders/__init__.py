"""Builders for storage clients."""

from .client import create_client_from_config

__all__ = ["create_client_from_config"]
