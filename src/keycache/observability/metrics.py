"""Prometheus metrics for keycache.

Provides metrics collection:
- Cache hits and misses per entity
- Data misses (keys absent from the backing store) per entity
- Batch round-trip latency per operation

Usage:
    from keycache.observability.metrics import get_metrics

    metrics = get_metrics()
    metrics.cache_hits_total.labels(entity="Entry").inc()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram

from keycache.config import settings

logger = logging.getLogger(__name__)


@dataclass
class MetricsRegistry:
    """Registry for Prometheus metrics."""

    cache_hits_total: Any = None
    cache_misses_total: Any = None
    data_misses_total: Any = None
    cache_batch_duration_seconds: Any = None

    # Internal state
    _initialized: bool = field(default=False, repr=False)
    _registry: CollectorRegistry | None = field(default=None, repr=False)

    def initialize(self, registry: CollectorRegistry = REGISTRY) -> None:
        """Initialize Prometheus metrics."""
        if self._initialized:
            return

        if not settings.enable_metrics:
            logger.info("Metrics are disabled")
            self._initialized = True
            return

        self._registry = registry

        self.cache_hits_total = Counter(
            "keycache_cache_hits_total",
            "Keys served from the cache",
            ["entity"],
            registry=registry,
        )

        self.cache_misses_total = Counter(
            "keycache_cache_misses_total",
            "Keys not found in the cache",
            ["entity"],
            registry=registry,
        )

        self.data_misses_total = Counter(
            "keycache_data_misses_total",
            "Keys not found in the backing store",
            ["entity"],
            registry=registry,
        )

        self.cache_batch_duration_seconds = Histogram(
            "keycache_cache_batch_duration_seconds",
            "Cache batch round-trip latency in seconds",
            ["operation", "entity"],
            buckets=(0.0001, 0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1),
            registry=registry,
        )

        self._initialized = True
        logger.info("Prometheus metrics initialized")


# Global metrics registry
metrics_registry = MetricsRegistry()


def get_metrics() -> MetricsRegistry:
    """Get the global metrics registry.

    Initializes metrics on first access.
    """
    if not metrics_registry._initialized:
        metrics_registry.initialize()
    return metrics_registry


def record_cache_hits(entity: str, count: int) -> None:
    """Record keys served from the cache."""
    metrics = get_metrics()
    if metrics.cache_hits_total and count:
        metrics.cache_hits_total.labels(entity=entity).inc(count)


def record_cache_miss(entity: str) -> None:
    """Record a cache miss."""
    metrics = get_metrics()
    if metrics.cache_misses_total:
        metrics.cache_misses_total.labels(entity=entity).inc()


def record_data_miss(entity: str) -> None:
    """Record a key absent from the backing store."""
    metrics = get_metrics()
    if metrics.data_misses_total:
        metrics.data_misses_total.labels(entity=entity).inc()


def record_cache_batch(operation: str, entity: str, duration: float) -> None:
    """Record cache batch duration.

    Args:
        operation: Batch kind (get, set, del)
        entity: Entity type name
        duration: Round-trip duration in seconds
    """
    metrics = get_metrics()
    if metrics.cache_batch_duration_seconds:
        metrics.cache_batch_duration_seconds.labels(
            operation=operation,
            entity=entity,
        ).observe(duration)
