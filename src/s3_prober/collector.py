"""Prometheus collector exposing the outcomes of one probe run."""

from __future__ import annotations

from typing import Iterator

from prometheus_client import CollectorRegistry, generate_latest
from prometheus_client.core import GaugeMetricFamily, Metric

from .constants import LABEL_ENDPOINT, LABEL_OPERATION, METRIC_PROBE_DURATION, METRIC_PROBE_SUCCESS
from .models import OperationOutcome
from .prober import Prober

_LABELS = [LABEL_OPERATION, LABEL_ENDPOINT]


def _families() -> tuple[GaugeMetricFamily, GaugeMetricFamily]:
    success = GaugeMetricFamily(
        METRIC_PROBE_SUCCESS,
        "Displays whether or not the probe was a success",
        labels=_LABELS,
    )
    duration = GaugeMetricFamily(
        METRIC_PROBE_DURATION,
        "Returns how long the probe took to complete in seconds",
        labels=_LABELS,
    )
    return success, duration


class ProbeCollector:
    """Runs a probe on every collect and reports success and duration per operation."""

    def __init__(self, prober: Prober) -> None:
        self.prober = prober
        self.endpoint = prober.config.endpoint

    def describe(self) -> Iterator[Metric]:
        # Declaring the families keeps registration from triggering a probe run
        yield from _families()

    def collect(self) -> Iterator[Metric]:
        success, duration = _families()

        def sink(outcome: OperationOutcome) -> None:
            labels = [outcome.operation, self.endpoint]
            success.add_metric(labels, 1.0 if outcome.success else 0.0)
            duration.add_metric(labels, outcome.duration)

        self.prober.probe(sink)
        yield success
        yield duration


def render_probe(prober: Prober) -> bytes:
    """Run a probe against a fresh registry and return the exposition text."""
    registry = CollectorRegistry()
    registry.register(ProbeCollector(prober))
    return generate_latest(registry)
