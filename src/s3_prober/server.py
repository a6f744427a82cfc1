"""HTTP endpoints of the S3 Prober."""

from __future__ import annotations

import logging
from typing import Any

from prometheus_client import CONTENT_TYPE_LATEST, make_wsgi_app
from werkzeug.serving import make_server
from werkzeug.wrappers import Request, Response

from .collector import render_probe
from .config import parse_listen_address
from .constants import EVENT_SERVER_STARTED
from .logging import log_probe_event
from .prober import Prober

logger = logging.getLogger(__name__)

LANDING_PAGE = """<html>
<head><title>S3 Prober</title></head>
<body>
<h1>S3 Prober</h1>
<p><a href='/probe'>Probe</a></p>
<p><a href='/metrics'>Metrics</a></p>
</body>
</html>"""


def create_wsgi_app(prober: Prober) -> Any:
    """Create the WSGI app serving probe, metrics and health endpoints.

    Args:
        prober: Prober shared by all requests

    Returns:
        WSGI application
    """
    metrics_app = make_wsgi_app()

    def app(environ: dict[str, Any], start_response: Any) -> Any:
        request = Request(environ)
        path = request.path

        if path == "/probe":
            # Storage failures are reported in the metrics, never as an HTTP error
            response = Response(render_probe(prober), content_type=CONTENT_TYPE_LATEST, status=200)
        elif path == "/metrics":
            return metrics_app(environ, start_response)
        elif path == "/healthz":
            response = Response('{"status":"ok"}', mimetype="application/json", status=200)
        elif path == "/readyz":
            response = Response('{"status":"ready"}', mimetype="application/json", status=200)
        elif path == "/":
            response = Response(LANDING_PAGE, mimetype="text/html", status=200)
        else:
            response = Response('{"error":"not found"}', mimetype="application/json", status=404)

        return response(environ, start_response)

    return app


def serve(prober: Prober) -> None:
    """Serve the WSGI app on the configured listen address until interrupted."""
    host, port = parse_listen_address(prober.config.listen_address)
    server = make_server(host or "0.0.0.0", port, create_wsgi_app(prober), threaded=True)
    log_probe_event(
        logger,
        EVENT_SERVER_STARTED,
        prober.config.endpoint,
        f"Listening on {prober.config.listen_address}",
        listen_address=prober.config.listen_address,
    )
    server.serve_forever()
