"""
Prometheus metrics definitions and utilities.

Metrics are organized into submodules by subsystem (GraphQL, notification
bus, auth) and re-exported here:

    from catalog.utils.metrics import graphql_operations_total

Every metric is exposed under the `catalog_` namespace, for example
`catalog_graphql_operations_total`.

Code outside this package records metrics through the facade:

    from catalog.utils.metrics import MetricsCollector
    MetricsCollector.record_notification_published("BOOK_ADDED")
"""

from prometheus_client import Gauge

from catalog.utils.metrics.auth import (
    auth_attempts_total,
    auth_token_validations_total,
)
from catalog.utils.metrics.collector import MetricsCollector
from catalog.utils.metrics.graphql import (
    graphql_errors_total,
    graphql_operation_duration_seconds,
    graphql_operations_total,
)
from catalog.utils.metrics.notifications import (
    notifications_dropped_total,
    notifications_published_total,
    subscriptions_active,
)
from catalog.utils.metrics.registry import register

app_info = register(
    Gauge,
    "app_info",
    "Application information",
    ["version", "python_version", "environment"],
)

__all__ = [
    "MetricsCollector",
    # GraphQL metrics
    "graphql_operations_total",
    "graphql_operation_duration_seconds",
    "graphql_errors_total",
    # Notification metrics
    "subscriptions_active",
    "notifications_published_total",
    "notifications_dropped_total",
    # Authentication metrics
    "auth_attempts_total",
    "auth_token_validations_total",
    # Application metrics
    "app_info",
]
