"""Prometheus metrics and monitoring utilities."""

from __future__ import annotations

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

from affiliate_resolver.resolver import Resolution

RESOLUTIONS_TOTAL = Counter(
    "affiliate_resolver_resolutions_total",
    "Resolutions by outcome and platform",
    ["outcome", "platform"],
)
REDIRECTS_FOLLOWED_TOTAL = Counter(
    "affiliate_resolver_redirects_followed_total",
    "Redirects followed, by how they were detected",
    ["source"],
)
HOPS_PER_RESOLUTION = Histogram(
    "affiliate_resolver_hops_per_resolution",
    "Fetches spent on a successful resolution",
    buckets=(1, 2, 3, 4, 5, 6, 7, 8, 9, 10),
)
RESOLUTION_LATENCY = Histogram("affiliate_resolver_resolution_latency_seconds", "Wall time of a resolution")

metrics_router = APIRouter()


@metrics_router.get("/metrics", include_in_schema=False)
def metrics() -> Response:
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


def record_success(resolution: Resolution, elapsed_seconds: float) -> None:
    RESOLUTIONS_TOTAL.labels(outcome="resolved", platform=resolution.platform.value).inc()
    HOPS_PER_RESOLUTION.observe(resolution.hops)
    RESOLUTION_LATENCY.observe(elapsed_seconds)
    for candidate in resolution.chain:
        REDIRECTS_FOLLOWED_TOTAL.labels(source=candidate.source.value).inc()


def record_failure(error: Exception, elapsed_seconds: float) -> None:
    RESOLUTIONS_TOTAL.labels(outcome=type(error).__name__, platform="").inc()
    RESOLUTION_LATENCY.observe(elapsed_seconds)


__all__ = [
    "RESOLUTIONS_TOTAL",
    "REDIRECTS_FOLLOWED_TOTAL",
    "HOPS_PER_RESOLUTION",
    "RESOLUTION_LATENCY",
    "metrics_router",
    "record_success",
    "record_failure",
]
