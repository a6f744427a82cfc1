"""S3 Prober: synthetic probe exporter for S3-compatible object storage."""

__version__ = "0.1.0"
