"""boto3 storage client implementation."""

from __future__ import annotations

import logging
import threading
import time
from contextlib import closing
from typing import Any, Callable, TypeVar

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ...constants import (
    OP_CONNECT,
    OP_GET,
    OP_LIST_BUCKETS,
    OP_MAKE_BUCKET,
    OP_PUT,
    OP_REMOVE,
    OP_REMOVE_BUCKET,
    OP_STAT,
)
from ...exceptions import ConnectError, StorageError
from ...utils.errors import sanitize_exception

logger = logging.getLogger(__name__)

# Errors a single storage call can end with; socket timeouts are BotoCoreError subclasses
_STORAGE_ERRORS = (ClientError, BotoCoreError, OSError)

_T = TypeVar("_T")


def check_deadline(operation: str, deadline: float) -> None:
    """Raise StorageError once the operation deadline has passed."""
    if time.monotonic() >= deadline:
        raise StorageError(operation, "timeout")


class DeadlineReader:
    """File wrapper that fails reads once the upload deadline has passed."""

    def __init__(self, fileobj: Any, operation: str, deadline: float) -> None:
        self._fileobj = fileobj
        self._operation = operation
        self._deadline = deadline

    def read(self, size: int = -1) -> bytes:
        check_deadline(self._operation, self._deadline)
        return self._fileobj.read(size)

    def seek(self, offset: int, whence: int = 0) -> int:
        return self._fileobj.seek(offset, whence)

    def tell(self) -> int:
        return self._fileobj.tell()

    def close(self) -> None:
        self._fileobj.close()


class BotoStorageClient:
    """S3-compatible storage client backed by boto3.

    Every operation runs against a wall-clock deadline of ``timeout`` seconds.
    The botocore connect and read timeouts only bound single socket waits and
    stay as a backstop for calls abandoned at the deadline.
    """

    def __init__(
        self,
        endpoint_url: str,
        access_key: str,
        secret_key: str,
        region: str = "us-east-1",
        timeout: float = 10,
    ) -> None:
        """Initialize the storage client.

        Args:
            endpoint_url: S3 endpoint URL
            access_key: Access key ID
            secret_key: Secret access key
            region: Region used for request signing
            timeout: Deadline in seconds for every call
        """
        self.endpoint_url = endpoint_url
        self.region = region
        self.timeout = timeout

        # One attempt per call: a failed step is reported, never retried
        config = Config(
            signature_version="s3v4",
            s3={"addressing_style": "path"},
            connect_timeout=timeout,
            read_timeout=timeout,
            retries={"total_max_attempts": 1, "mode": "standard"},
        )

        self.client = boto3.client(
            "s3",
            endpoint_url=endpoint_url,
            region_name=region,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            config=config,
        )

    def _call(self, operation: str, func: Callable[[float], _T]) -> _T:
        """Run a storage call in a worker thread bounded by the deadline.

        A call still running at the deadline is abandoned to its daemon thread
        and reported as a timeout.
        """
        deadline = time.monotonic() + self.timeout
        outcome: dict[str, Any] = {}

        def target() -> None:
            try:
                outcome["value"] = func(deadline)
            except Exception as e:
                outcome["error"] = e

        thread = threading.Thread(target=target, name=f"storage-{operation}", daemon=True)
        thread.start()
        thread.join(max(0.0, deadline - time.monotonic()))

        if thread.is_alive():
            logger.warning(f"{operation} did not finish within {self.timeout}s")
            raise StorageError(operation, f"timeout after {self.timeout}s")

        error = outcome.get("error")
        if isinstance(error, StorageError):
            raise error
        if isinstance(error, _STORAGE_ERRORS):
            raise StorageError(operation, error) from error
        if error is not None:
            raise error
        return outcome.get("value")  # type: ignore[return-value]

    def list_buckets(self) -> list[str]:
        """List all buckets."""
        def call(deadline: float) -> list[str]:
            response = self.client.list_buckets()
            return [bucket["Name"] for bucket in response.get("Buckets", [])]

        return self._call(OP_LIST_BUCKETS, call)

    def make_bucket(self, name: str) -> None:
        """Create a bucket."""
        create_params: dict[str, Any] = {"Bucket": name}
        # us-east-1 rejects an explicit location constraint
        if self.region and self.region != "us-east-1":
            create_params["CreateBucketConfiguration"] = {"LocationConstraint": self.region}

        self._call(OP_MAKE_BUCKET, lambda deadline: self.client.create_bucket(**create_params))

    def remove_bucket(self, name: str) -> None:
        """Remove an empty bucket."""
        self._call(OP_REMOVE_BUCKET, lambda deadline: self.client.delete_bucket(Bucket=name))

    def put_object(self, bucket: str, key: str, source_path: str) -> None:
        """Upload a local file."""
        def call(deadline: float) -> None:
            with open(source_path, "rb") as f:
                self.client.put_object(Bucket=bucket, Key=key, Body=DeadlineReader(f, OP_PUT, deadline))

        self._call(OP_PUT, call)

    def get_object(self, bucket: str, key: str, dest_path: str) -> None:
        """Download an object into a local file."""
        def call(deadline: float) -> None:
            response = self.client.get_object(Bucket=bucket, Key=key)
            with closing(response["Body"]) as body, open(dest_path, "wb") as f:
                for chunk in body.iter_chunks():
                    check_deadline(OP_GET, deadline)
                    f.write(chunk)

        self._call(OP_GET, call)

    def stat_object(self, bucket: str, key: str) -> dict[str, Any]:
        """Return object metadata."""
        def call(deadline: float) -> dict[str, Any]:
            response = self.client.head_object(Bucket=bucket, Key=key)
            return {
                "size": response.get("ContentLength"),
                "etag": response.get("ETag"),
                "last_modified": response.get("LastModified"),
                "content_type": response.get("ContentType"),
            }

        return self._call(OP_STAT, call)

    def remove_object(self, bucket: str, key: str) -> None:
        """Remove an object."""
        self._call(OP_REMOVE, lambda deadline: self.client.delete_object(Bucket=bucket, Key=key))


def connect(
    endpoint_url: str,
    access_key: str,
    secret_key: str,
    region: str = "us-east-1",
    timeout: float = 10,
) -> BotoStorageClient:
    """Create a storage client for an endpoint.

    No request is sent; only the client construction is validated.

    Raises:
        ConnectError: If the client cannot be constructed
    """
    try:
        return BotoStorageClient(
            endpoint_url=endpoint_url,
            access_key=access_key,
            secret_key=secret_key,
            region=region,
            timeout=timeout,
        )
    except (BotoCoreError, ValueError) as e:
        logger.error(f"Could not create storage client for endpoint {endpoint_url}: {sanitize_exception(e)}")
        raise ConnectError(OP_CONNECT, e) from e
