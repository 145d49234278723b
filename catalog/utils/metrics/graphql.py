"""Prometheus metrics for GraphQL operation monitoring."""

from prometheus_client import Counter, Histogram

from catalog.utils.metrics.registry import register

# Exposed as catalog_graphql_operations_total
graphql_operations_total = register(
    Counter,
    "graphql_operations",
    "Total GraphQL operations executed",
    ["operation_type", "status"],  # status: success, error
)

graphql_operation_duration_seconds = register(
    Histogram,
    "graphql_operation_duration_seconds",
    "GraphQL operation duration in seconds",
    ["operation_type"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)

graphql_errors_total = register(
    Counter,
    "graphql_errors",
    "Total client-visible GraphQL errors",
    ["field", "code"],
)
