"""Prometheus metrics for authentication monitoring."""

from prometheus_client import Counter

from catalog.utils.metrics.registry import register

auth_attempts_total = register(
    Counter,
    "auth_attempts",
    "Total login attempts",
    ["status"],  # success, failure
)

auth_token_validations_total = register(
    Counter,
    "auth_token_validations",
    "Total bearer token validations",
    ["status"],  # valid, invalid
)
