"""Base storage client interface."""

from __future__ import annotations

from typing import Any, Protocol


class StorageClient(Protocol):
    """Protocol defining the storage operations a probe run performs.

    Every method raises StorageError when the operation fails or times out.
    """

    def list_buckets(self) -> list[str]:
        """List the names of all buckets visible to the credentials."""
        ...

    def make_bucket(self, name: str) -> None:
        """Create a bucket."""
        ...

    def remove_bucket(self, name: str) -> None:
        """Remove an empty bucket."""
        ...

    def put_object(self, bucket: str, key: str, source_path: str) -> None:
        """Upload a local file as an object."""
        ...

    def get_object(self, bucket: str, key: str, dest_path: str) -> None:
        """Download an object into a local file."""
        ...

    def stat_object(self, bucket: str, key: str) -> dict[str, Any]:
        """Return object metadata."""
        ...

    def remove_object(self, bucket: str, key: str) -> None:
        """Remove an object."""
        ...
