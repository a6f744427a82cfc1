"""Builder for storage client instances."""

from __future__ import annotations

from ..config import ProbeConfig
from ..services.aws.client import connect
from ..services.s3.base import StorageClient


def create_client_from_config(config: ProbeConfig) -> StorageClient:
    """Create a storage client from the probe configuration.

    Args:
        config: Probe configuration

    Returns:
        Storage client bound to the configured endpoint

    Raises:
        ConnectError: If the client cannot be constructed
    """
    return connect(
        endpoint_url=config.endpoint_url,
        access_key=config.access_key,
        secret_key=config.secret_key,
        region=config.region,
        timeout=config.timeout,
    )
