"""Prometheus metrics for the change notification bus."""

from prometheus_client import Counter, Gauge

from catalog.utils.metrics.registry import register

subscriptions_active = register(
    Gauge,
    "subscriptions_active",
    "Number of live subscriptions",
    ["topic"],
)

notifications_published_total = register(
    Counter,
    "notifications_published",
    "Total events published",
    ["topic"],
)

notifications_dropped_total = register(
    Counter,
    "notifications_dropped",
    "Total events dropped because a subscriber queue was full",
    ["topic"],
)
