"""Prometheus metrics for quote fetching."""

from functools import lru_cache
from typing import Optional

from fastapi import APIRouter, Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    REGISTRY,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)


class QuoteMetrics:
    """
    Counters, gauge and histogram describing quote fetches.

    Each instance registers its collectors on one registry. The app uses a
    single instance on the default registry; tests pass a fresh
    CollectorRegistry so every test starts from zero.
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry if registry is not None else REGISTRY

        self.quotes_fetched = Counter(
            "quotes_fetched_total",
            "Total number of quotes fetched",
            registry=self.registry,
        )

        self.quotes_by_tag = Counter(
            "quotes_by_tag",
            "Quotes fetched per tag",
            ["tag"],
            registry=self.registry,
        )

        self.fetch_errors = Counter(
            "quote_fetch_errors_total",
            "Total number of failed quote fetches",
            registry=self.registry,
        )

        self.openrouter_up = Gauge(
            "openrouter_up",
            "Whether the last OpenRouter call succeeded (1) or failed (0)",
            registry=self.registry,
        )
        # None until the first fetch finishes
        self.last_openrouter_status: Optional[bool] = None

        self.fetch_latency = Histogram(
            "quote_fetch_latency_seconds",
            "Quote fetch latency in seconds",
            registry=self.registry,
        )

    def record_quote_fetched(self, tag: str) -> None:
        """Record a successful fetch for a tag."""
        self.quotes_fetched.inc()
        self.quotes_by_tag.labels(tag=tag).inc()

    def record_quote_error(self) -> None:
        """Record a failed fetch."""
        self.fetch_errors.inc()

    def record_latency(self, seconds: float) -> None:
        """Record the latency of one fetch."""
        self.fetch_latency.observe(seconds)

    def set_openrouter_status(self, up: bool) -> None:
        """Set the upstream health gauge (1=up, 0=down)."""
        self.last_openrouter_status = up
        self.openrouter_up.set(1 if up else 0)

    def render(self) -> bytes:
        """Render the registry in Prometheus text format."""
        return generate_latest(self.registry)


@lru_cache
def get_metrics() -> QuoteMetrics:
    """Get the process-wide metrics on the default registry."""
    return QuoteMetrics()


# Metrics endpoint
router = APIRouter(tags=["Metrics"])


@router.get("/metrics")
async def metrics():
    """Prometheus metrics endpoint."""
    return Response(
        content=get_metrics().render(),
        media_type=CONTENT_TYPE_LATEST
    )
