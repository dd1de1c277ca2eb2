"""Prometheus metrics helpers for the gateway."""
from __future__ import annotations

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

_proxy_request_counter = Counter(
    "gateway_proxy_requests_total",
    "Proxied exchange requests grouped by outcome",
    labelnames=("exchange", "outcome"),
)

_upstream_latency = Histogram(
    "gateway_upstream_request_duration_seconds",
    "Time spent waiting for the exchange to answer",
    labelnames=("exchange",),
    buckets=(0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, 10, 30),
)


def record_proxy_outcome(exchange: str, outcome: str) -> None:
    """Increment the request counter.

    ``outcome`` is either an upstream status code or one of
    ``missing_credentials``, ``signing_error``, ``connection_error``.
    """

    _proxy_request_counter.labels(exchange=exchange, outcome=outcome).inc()


def observe_upstream_latency(exchange: str, duration: float) -> None:
    _upstream_latency.labels(exchange=exchange).observe(duration)


def render_latest() -> tuple[bytes, str]:
    return generate_latest(), CONTENT_TYPE_LATEST


__all__ = ["observe_upstream_latency", "record_proxy_outcome", "render_latest"]
