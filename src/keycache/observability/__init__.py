"""Observability module for keycache.

Provides structured logging and Prometheus metrics.
"""

from keycache.observability.logging import LogContext, configure_logging, entity_var
from keycache.observability.metrics import get_metrics, metrics_registry

__all__ = [
    # Logging
    "configure_logging",
    "LogContext",
    "entity_var",
    # Metrics
    "metrics_registry",
    "get_metrics",
]
