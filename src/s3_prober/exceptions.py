"""Exception hierarchy for the S3 Prober."""

from __future__ import annotations


class ProberError(Exception):
    """Base exception for all prober errors."""

    pass


class ConfigError(ProberError):
    """Raised when the startup configuration is invalid."""

    pass


class StorageError(ProberError):
    """Raised by a storage client when an operation fails."""

    def __init__(self, operation: str, cause: BaseException | str) -> None:
        self.operation = operation
        self.cause = cause
        super().__init__(f"{operation} failed: {cause}")


class ProbeStepError(ProberError):
    """A failed probe step, classified by how it affects the rest of the run."""

    fatal = False

    def __init__(self, operation: str, cause: BaseException | str) -> None:
        self.operation = operation
        self.cause = cause
        super().__init__(f"{operation}: {cause}")


class ConnectError(ProbeStepError):
    """Storage client could not be constructed. Ends the run."""

    fatal = True


class DiscoveryError(ProbeStepError):
    """Buckets could not be listed. Ends the run after back-filling sentinels."""

    fatal = True


class LifecycleError(ProbeStepError):
    """Bucket could not be created. Ends the run without back-fill."""

    fatal = True


class OperationError(ProbeStepError):
    """Object or bucket removal step failed. The run continues."""

    pass
