"""Main entry point for the S3 Prober."""

from __future__ import annotations

import logging
import sys
from typing import Optional

from . import logging as structured_logging
from . import server
from .config import create_config_from_args, parse_args
from .exceptions import ConfigError
from .prober import Prober
from .tracing import initialize_tracing

logger = logging.getLogger(__name__)


def start(argv: Optional[list[str]] = None) -> int:
    """Validate configuration and run the exporter.

    Returns:
        Process exit code
    """
    args = parse_args(argv)
    structured_logging.setup_structured_logging(args.log_level)

    try:
        config = create_config_from_args(args)
    except ConfigError as e:
        logger.error(f"Error starting daemon: {e}")
        return 1

    initialize_tracing()

    logger.info(
        f"Starting s3_prober (op timeout {config.timeout}s, "
        f"skipmakedeletebucket {config.skip_bucket_lifecycle})"
    )
    server.serve(Prober(config))
    return 0


def main() -> None:
    """Console script entry point."""
    try:
        sys.exit(start())
    except KeyboardInterrupt:
        sys.exit(0)


if __name__ == "__main__":
    main()
