"""Structured logging configuration for the S3 Prober."""

import json
import logging
import sys
from typing import Any


def setup_structured_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )


def log_probe_event(
    logger: logging.Logger,
    event: str,
    endpoint: str,
    message: str,
    level: int = logging.INFO,
    **kwargs: Any,
) -> None:
    """Log a structured probe event."""
    log_data = {
        "event": event,
        "endpoint": endpoint,
        "message": message,
    }
    log_data.update(kwargs)
    logger.log(level, json.dumps(sanitize_secrets(log_data), default=str))


def sanitize_secrets(log_data: dict[str, Any]) -> dict[str, Any]:
    """Remove secret fields from log data."""
    secret_fields = {"access_key", "secret_key", "accesskey", "secretkey", "session_token", "password"}
    sanitized = log_data.copy()
    for field in secret_fields:
        if field in sanitized:
            sanitized[field] = "***REDACTED***"
    return sanitized
