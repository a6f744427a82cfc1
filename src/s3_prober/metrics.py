"""Process-level Prometheus metrics for the S3 Prober.

Per-probe results are not kept here; each scrape of /probe builds its own
registry (see collector.py).
"""

from prometheus_client import Counter, Histogram, Info

from . import __version__

build_info = Info(
    "s3_prober_build",
    "Build information of the S3 Prober",
)
build_info.info({"version": __version__})

# Probe run metrics
probe_runs_total = Counter(
    "s3_prober_probe_runs_total",
    "Total number of probe runs",
    ["result"],
)

probe_run_duration_seconds = Histogram(
    "s3_prober_probe_run_duration_seconds",
    "Duration of complete probe runs in seconds",
    buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0],
)

# Failed steps by operation and error kind
operation_failures_total = Counter(
    "s3_prober_operation_failures_total",
    "Total number of failed probe steps",
    ["operation", "kind"],
)
