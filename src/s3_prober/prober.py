"""Probe sequencer: runs the storage operation sequence and records outcomes."""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable

from . import metrics
from .builders.client import create_client_from_config
from .config import ProbeConfig
from .constants import (
    CANONICAL_SEQUENCE,
    EVENT_CONNECT_FAILED,
    EVENT_OPERATION_FAILED,
    EVENT_PROBE_COMPLETED,
    EVENT_PROBE_STARTED,
    LIFECYCLE_OPERATIONS,
    OBJECT_READ_OPERATIONS,
    OP_CONNECT,
    OP_GET,
    OP_LIST_BUCKETS,
    OP_MAKE_BUCKET,
    OP_PUT,
    OP_REMOVE,
    OP_REMOVE_BUCKET,
    OP_STAT,
)
from .exceptions import (
    ConnectError,
    DiscoveryError,
    LifecycleError,
    OperationError,
    ProbeStepError,
    StorageError,
)
from .logging import log_probe_event
from .models import OperationOutcome, OutcomeSink, ProbeRun
from .services.s3.base import StorageClient
from .tracing import set_span_status, trace_span
from .utils.errors import sanitize_exception

logger = logging.getLogger(__name__)

ClientFactory = Callable[[ProbeConfig], StorageClient]


def measure(
    run: ProbeRun,
    operation: str,
    func: Callable[[], Any],
) -> tuple[OperationOutcome, StorageError | None]:
    """Time one storage call and record its outcome on the run.

    Args:
        run: Probe run the outcome is recorded on
        operation: Operation name
        func: Storage call; failure is signalled by raising StorageError

    Returns:
        The recorded outcome and the storage error, if any
    """
    error: StorageError | None = None
    with trace_span(f"probe.{operation}", {"probe.operation": operation}) as span:
        start = time.monotonic()
        try:
            func()
        except StorageError as e:
            error = e
        elapsed = time.monotonic() - start
        set_span_status(span, error is None, str(error) if error else None)

    outcome = OperationOutcome(operation=operation, success=error is None, duration=elapsed)
    run.record(outcome)
    return outcome, error


class ProbeSequencer:
    """Runs the fixed probe sequence against a storage endpoint.

    Failures of connect, listbuckets and makebucket end the run. Failures of
    put, get, stat, remove and removebucket are recorded and the run goes on.
    Steps skipped because of an upstream failure are reported as sentinel
    failures whose duration is the operation timeout.
    """

    def __init__(self, config: ProbeConfig, client_factory: ClientFactory = create_client_from_config) -> None:
        self.config = config
        self.client_factory = client_factory

    def run(self, sink: OutcomeSink | None = None) -> ProbeRun:
        """Execute one probe run to completion."""
        config = self.config
        run = ProbeRun(config=config, sink=sink)

        try:
            run.client = self.client_factory(config)
        except ConnectError as e:
            run.record(OperationOutcome.connect_failure())
            self._fail(run, e)
            return run

        client = run.client

        # listbuckets
        buckets: list[str] = []
        _, error = measure(run, OP_LIST_BUCKETS, lambda: buckets.extend(client.list_buckets()))
        if error is not None:
            self._fail(run, DiscoveryError(OP_LIST_BUCKETS, error.cause))
            self._backfill(run, self._remaining_after_discovery())
            return run

        found = config.bucket in buckets

        # makebucket
        if not config.skip_bucket_lifecycle or not found:
            _, error = measure(run, OP_MAKE_BUCKET, lambda: client.make_bucket(config.bucket))
            if error is not None:
                self._fail(run, LifecycleError(OP_MAKE_BUCKET, error.cause))
                return run

        # put
        _, error = measure(
            run,
            OP_PUT,
            lambda: client.put_object(config.bucket, config.object_key, config.filename),
        )
        if error is not None:
            self._fail(run, OperationError(OP_PUT, error.cause))
            self._backfill(run, OBJECT_READ_OPERATIONS)
        else:
            # get, stat and remove are attempted independently of each other
            steps = (
                (OP_GET, lambda: client.get_object(config.bucket, config.object_key, config.download_path)),
                (OP_STAT, lambda: client.stat_object(config.bucket, config.object_key)),
                (OP_REMOVE, lambda: client.remove_object(config.bucket, config.object_key)),
            )
            for operation, func in steps:
                _, error = measure(run, operation, func)
                if error is not None:
                    self._fail(run, OperationError(operation, error.cause))

        # removebucket
        if not config.skip_bucket_lifecycle:
            _, error = measure(run, OP_REMOVE_BUCKET, lambda: client.remove_bucket(config.bucket))
            if error is not None:
                self._fail(run, OperationError(OP_REMOVE_BUCKET, error.cause))

        return run

    def _remaining_after_discovery(self) -> list[str]:
        remaining = list(CANONICAL_SEQUENCE[CANONICAL_SEQUENCE.index(OP_LIST_BUCKETS) + 1:])
        if self.config.skip_bucket_lifecycle:
            remaining = [op for op in remaining if op not in LIFECYCLE_OPERATIONS]
        return remaining

    def _backfill(self, run: ProbeRun, operations: list[str] | tuple[str, ...]) -> None:
        for operation in operations:
            run.record(OperationOutcome.sentinel(operation, self.config.timeout))

    def _fail(self, run: ProbeRun, error: ProbeStepError) -> None:
        run.add_error(error)
        kind = type(error).__name__
        metrics.operation_failures_total.labels(operation=error.operation, kind=kind).inc()
        log_probe_event(
            logger,
            EVENT_CONNECT_FAILED if error.operation == OP_CONNECT else EVENT_OPERATION_FAILED,
            self.config.endpoint,
            f"error during {error.operation}",
            level=logging.ERROR,
            operation=error.operation,
            kind=kind,
            fatal=error.fatal,
            bucket=self.config.bucket,
            error=sanitize_exception(error.cause),
        )


class Prober:
    """Serializes probe runs.

    A single lock is held for the whole run; concurrent runs would race on
    the same bucket and object.
    """

    def __init__(self, config: ProbeConfig, client_factory: ClientFactory = create_client_from_config) -> None:
        self.config = config
        self.sequencer = ProbeSequencer(config, client_factory)
        self._lock = threading.Lock()

    def probe(self, sink: OutcomeSink | None = None) -> ProbeRun:
        """Run one probe, blocking while another run is in progress."""
        with self._lock:
            attributes = {
                "probe.endpoint": self.config.endpoint,
                "probe.bucket": self.config.bucket,
            }
            with trace_span("probe.run", attributes) as span:
                log_probe_event(
                    logger,
                    EVENT_PROBE_STARTED,
                    self.config.endpoint,
                    "probe started",
                    level=logging.DEBUG,
                    bucket=self.config.bucket,
                )
                start = time.monotonic()
                run = self.sequencer.run(sink)
                duration = time.monotonic() - start

                result = "success" if run.success else "failure"
                metrics.probe_runs_total.labels(result=result).inc()
                metrics.probe_run_duration_seconds.observe(duration)
                set_span_status(span, run.success, "probe failed" if not run.success else None)

                log_probe_event(
                    logger,
                    EVENT_PROBE_COMPLETED,
                    self.config.endpoint,
                    f"probe completed: {result}",
                    bucket=self.config.bucket,
                    duration=round(duration, 6),
                    operations=run.operations,
                    failed=[o.operation for o in run.outcomes if not o.success],
                )
            return run
