"""Constants for the S3 Prober."""

# Service name
SERVICE_NAME = "s3-prober"

# Operations
OP_CONNECT = "connect"
OP_LIST_BUCKETS = "listbuckets"
OP_MAKE_BUCKET = "makebucket"
OP_PUT = "put"
OP_GET = "get"
OP_STAT = "stat"
OP_REMOVE = "remove"
OP_REMOVE_BUCKET = "removebucket"

# Order in which a probe run reports its steps
CANONICAL_SEQUENCE = (
    OP_LIST_BUCKETS,
    OP_MAKE_BUCKET,
    OP_PUT,
    OP_GET,
    OP_STAT,
    OP_REMOVE,
    OP_REMOVE_BUCKET,
)

ALL_OPERATIONS = (OP_CONNECT,) + CANONICAL_SEQUENCE

# Steps that only run when the bucket lifecycle is managed by the probe
LIFECYCLE_OPERATIONS = (OP_MAKE_BUCKET, OP_REMOVE_BUCKET)

# Steps that depend on a successful put
OBJECT_READ_OPERATIONS = (OP_GET, OP_STAT, OP_REMOVE)

# Probe metrics
METRIC_PROBE_SUCCESS = "probe_success"
METRIC_PROBE_DURATION = "probe_duration_seconds"
LABEL_OPERATION = "operation"
LABEL_ENDPOINT = "s3_endpoint"

# Configuration defaults
DEFAULT_LISTEN_ADDRESS = ":2112"
DEFAULT_OP_TIMEOUT = 10
DEFAULT_REGION = "us-east-1"

# Environment variables
ENV_LISTEN_ADDRESS = "LISTEN_ADDRESS"
ENV_OP_TIMEOUT = "OP_TIMEOUT"
ENV_ACCESS_KEY = "ACCESSKEY"
ENV_SECRET_KEY = "SECRETKEY"
ENV_ENDPOINT = "ENDPOINT"
ENV_BUCKET = "BUCKET"
ENV_FILENAME = "FILENAME"
ENV_SKIP_MAKE_DELETE_BUCKET = "SKIPMAKEDELETEBUCKET"
ENV_REGION = "REGION"
ENV_DOWNLOAD_DIR = "DOWNLOAD_DIR"
ENV_LOG_LEVEL = "LOG_LEVEL"

# Event names for structured logs
EVENT_PROBE_STARTED = "ProbeStarted"
EVENT_PROBE_COMPLETED = "ProbeCompleted"
EVENT_OPERATION_FAILED = "OperationFailed"
EVENT_CONNECT_FAILED = "ConnectFailed"
EVENT_SERVER_STARTED = "ServerStarted"
