"""Configuration loading for the S3 Prober.

Every command-line flag is bound to an environment variable, which supplies
the default when the flag is not given:

    --listen                LISTEN_ADDRESS         (default :2112)
    --timeout               OP_TIMEOUT             (default 10)
    --accesskey             ACCESSKEY              (required)
    --secretkey             SECRETKEY              (required)
    --endpoint              ENDPOINT               (required)
    --bucket                BUCKET                 (required)
    --filename              FILENAME               (required)
    --skipmakedeletebucket  SKIPMAKEDELETEBUCKET   (default false)
    --region                REGION                 (default us-east-1)
    --download-dir          DOWNLOAD_DIR           (default: temp dir)
    --log-level             LOG_LEVEL              (default INFO)
"""

from __future__ import annotations

import argparse
import os
import tempfile
from dataclasses import dataclass, field
from typing import Optional

from .constants import (
    DEFAULT_LISTEN_ADDRESS,
    DEFAULT_OP_TIMEOUT,
    DEFAULT_REGION,
    ENV_ACCESS_KEY,
    ENV_BUCKET,
    ENV_DOWNLOAD_DIR,
    ENV_ENDPOINT,
    ENV_FILENAME,
    ENV_LISTEN_ADDRESS,
    ENV_LOG_LEVEL,
    ENV_OP_TIMEOUT,
    ENV_REGION,
    ENV_SECRET_KEY,
    ENV_SKIP_MAKE_DELETE_BUCKET,
    SERVICE_NAME,
)
from .exceptions import ConfigError

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}

# Flags that must be non-empty, in the order they are checked
REQUIRED_FLAGS = ["bucket", "endpoint", "accesskey", "secretkey", "filename"]


@dataclass(frozen=True)
class ProbeConfig:
    """Immutable probe configuration, built once at startup."""

    endpoint: str
    bucket: str
    filename: str
    access_key: str
    secret_key: str = field(repr=False)
    timeout: int = DEFAULT_OP_TIMEOUT
    skip_bucket_lifecycle: bool = False
    listen_address: str = DEFAULT_LISTEN_ADDRESS
    region: str = DEFAULT_REGION
    download_dir: str = field(default_factory=tempfile.gettempdir)

    @property
    def object_key(self) -> str:
        """Object key used by the probe: the base name of the source file."""
        return os.path.basename(self.filename)

    @property
    def endpoint_url(self) -> str:
        """Endpoint as a URL. Bare host names are reached over HTTPS."""
        if "://" in self.endpoint:
            return self.endpoint
        return f"https://{self.endpoint}"

    @property
    def download_path(self) -> str:
        return os.path.join(self.download_dir, self.object_key)


def env_bool(name: str, default: bool = False) -> bool:
    """Read a boolean environment variable."""
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in _TRUE_VALUES


def parse_bool(value: str) -> bool:
    """Parse a boolean flag value such as `true` or `false`."""
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise argparse.ArgumentTypeError(f"invalid boolean value: {value!r}")


def parse_timeout(value: str | int) -> int:
    """Parse an operation timeout in seconds."""
    try:
        timeout = int(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"invalid timeout {value!r}: must be an integer number of seconds") from e
    if timeout <= 0:
        raise ConfigError(f"invalid timeout {timeout}: must be positive")
    return timeout


def parse_listen_address(address: str) -> tuple[str, int]:
    """Split a listen address such as ':2112' or '0.0.0.0:9000' into host and port."""
    host, sep, port = address.rpartition(":")
    if not sep:
        raise ConfigError(f"invalid listen address {address!r}: expected [host]:port")
    try:
        port_number = int(port)
    except ValueError as e:
        raise ConfigError(f"invalid listen address {address!r}: bad port") from e
    if not 0 <= port_number <= 65535:
        raise ConfigError(f"invalid listen address {address!r}: port out of range")
    return host.strip("[]"), port_number


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    parser = argparse.ArgumentParser(prog=SERVICE_NAME, description="S3 Prober")
    subparsers = parser.add_subparsers(dest="command", required=True)

    start = subparsers.add_parser("start", help="Start the probe exporter")
    start.add_argument(
        "--listen",
        default=os.getenv(ENV_LISTEN_ADDRESS, DEFAULT_LISTEN_ADDRESS),
        help="Optional. Specify listen address.",
    )
    start.add_argument(
        "--timeout",
        default=os.getenv(ENV_OP_TIMEOUT, str(DEFAULT_OP_TIMEOUT)),
        help="Optional. Timeout in seconds after which an operation is considered as failed.",
    )
    start.add_argument(
        "--accesskey",
        default=os.getenv(ENV_ACCESS_KEY, ""),
        help="Required. Specify s3 access key.",
    )
    start.add_argument(
        "--secretkey",
        default=os.getenv(ENV_SECRET_KEY, ""),
        help="Required. Specify s3 secret key.",
    )
    start.add_argument(
        "--endpoint",
        default=os.getenv(ENV_ENDPOINT, ""),
        help="Required. Specify s3 endpoint url.",
    )
    start.add_argument(
        "--bucket",
        default=os.getenv(ENV_BUCKET, ""),
        help="Required. Specify s3 bucket name.",
    )
    start.add_argument(
        "--filename",
        default=os.getenv(ENV_FILENAME, ""),
        help="Required. Specify filename.",
    )
    start.add_argument(
        "--skipmakedeletebucket",
        nargs="?",
        const=True,
        type=parse_bool,
        default=env_bool(ENV_SKIP_MAKE_DELETE_BUCKET),
        metavar="BOOL",
        help=(
            "Optional. Skip bucket creation and removal when the bucket already exists. "
            "Pass --skipmakedeletebucket=false to override the environment."
        ),
    )
    start.add_argument(
        "--region",
        default=os.getenv(ENV_REGION, DEFAULT_REGION),
        help="Optional. Region used to sign requests.",
    )
    start.add_argument(
        "--download-dir",
        default=os.getenv(ENV_DOWNLOAD_DIR, tempfile.gettempdir()),
        help="Optional. Directory the probe object is downloaded into.",
    )
    start.add_argument(
        "--log-level",
        default=os.getenv(ENV_LOG_LEVEL, "INFO"),
        help="Optional. Log level.",
    )
    return parser


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Environment variables are read when the parser is built, so they are
    picked up on every call.
    """
    return build_parser().parse_args(argv)


def create_config_from_args(args: argparse.Namespace) -> ProbeConfig:
    """Create a probe configuration from parsed arguments.

    Raises:
        ConfigError: If a required setting is empty or a value is invalid
    """
    for flag in REQUIRED_FLAGS:
        if not getattr(args, flag, ""):
            raise ConfigError(f"invalid empty flag {flag}")

    listen_address = args.listen or DEFAULT_LISTEN_ADDRESS
    parse_listen_address(listen_address)

    return ProbeConfig(
        endpoint=args.endpoint,
        bucket=args.bucket,
        filename=args.filename,
        access_key=args.accesskey,
        secret_key=args.secretkey,
        timeout=parse_timeout(args.timeout),
        skip_bucket_lifecycle=bool(args.skipmakedeletebucket),
        listen_address=listen_address,
        region=args.region or DEFAULT_REGION,
        download_dir=args.download_dir or tempfile.gettempdir(),
    )
