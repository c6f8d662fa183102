"""Monitoring helpers."""

from .metrics import (
    HOPS_PER_RESOLUTION,
    REDIRECTS_FOLLOWED_TOTAL,
    RESOLUTION_LATENCY,
    RESOLUTIONS_TOTAL,
    metrics_router,
    record_failure,
    record_success,
)

__all__ = [
    "HOPS_PER_RESOLUTION",
    "REDIRECTS_FOLLOWED_TOTAL",
    "RESOLUTION_LATENCY",
    "RESOLUTIONS_TOTAL",
    "metrics_router",
    "record_failure",
    "record_success",
]
