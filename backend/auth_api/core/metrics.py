"""Prometheus request metrics and the ``GET /metrics`` scrape endpoint.

Each application gets its own :class:`CollectorRegistry`, so building several
apps in one process (tests, CLI) never re-registers a metric name.
"""

from __future__ import annotations

import time

from flask import Blueprint, Flask, Response, current_app, g, request
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    GCCollector,
    Histogram,
    PlatformCollector,
    ProcessCollector,
    generate_latest,
)

METRICS_KEY = "metrics_registry"
LABELS = ("method", "path", "status")
DURATION_BUCKETS = (0.1, 0.5, 1, 2, 5)

bp = Blueprint("metrics", __name__)


class RequestMetrics:
    """Request counter and latency histogram bound to one registry."""

    def __init__(self, registry: CollectorRegistry) -> None:
        self.registry = registry
        self.requests_total = Counter(
            "http_requests_total",
            "Total number of HTTP requests",
            LABELS,
            registry=registry,
        )
        self.request_duration = Histogram(
            "http_request_duration_seconds",
            "Duration of HTTP requests in seconds",
            LABELS,
            buckets=DURATION_BUCKETS,
            registry=registry,
        )

    def observe(self, method: str, path: str, status: int, seconds: float) -> None:
        labels = {"method": method, "path": path, "status": str(status)}
        self.requests_total.labels(**labels).inc()
        self.request_duration.labels(**labels).observe(seconds)


def _route_label() -> str:
    # Label by URL rule so path parameters do not explode cardinality.
    rule = request.url_rule
    return rule.rule if rule is not None else "unmatched"


def get_metrics() -> RequestMetrics:
    return current_app.extensions[METRICS_KEY]


@bp.get("/metrics")
def scrape() -> Response:
    return Response(generate_latest(get_metrics().registry), mimetype=CONTENT_TYPE_LATEST)


def init_app(app: Flask) -> None:
    """Install the collectors and ``/metrics`` unless ``METRICS_ENABLED`` is false."""
    if not app.config.get("METRICS_ENABLED", True):
        return

    registry = CollectorRegistry()
    ProcessCollector(registry=registry)
    PlatformCollector(registry=registry)
    GCCollector(registry=registry)
    metrics = RequestMetrics(registry)
    app.extensions[METRICS_KEY] = metrics

    @app.before_request
    def _start_timer() -> None:
        g.metrics_started = time.perf_counter()

    @app.after_request
    def _record(response: Response) -> Response:
        started = g.pop("metrics_started", None)
        if started is not None:
            metrics.observe(
                request.method,
                _route_label(),
                response.status_code,
                time.perf_counter() - started,
            )
        return response

    app.register_blueprint(bp)
